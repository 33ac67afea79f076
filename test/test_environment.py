"""
Tests for the Ember environment
"""

import pytest
from environment import Environment
from error_handling import EmberRuntimeError
from lexing import Token, TokenKind
from stdlib import NULL, make_number


def name_token(name, line=1):
  return Token(TokenKind.IDENTIFIER, name, None, line)


class TestEnvironment:
  """Test define/get/assign"""

  def test_define_then_get(self):
    env = Environment()
    env.define("x", make_number(1))
    assert env.get("x") == make_number(1)
    assert "x" in env
    assert len(env) == 1

  def test_redefine_overwrites(self):
    env = Environment()
    env.define("x", make_number(1))
    env.define("x", NULL)
    assert env.get("x") == NULL

  def test_assign_updates_existing(self):
    env = Environment({"x": make_number(1)})
    env.assign(name_token("x"), make_number(2))
    assert env.get(name_token("x")) == make_number(2)

  def test_assign_never_declares(self):
    env = Environment()
    with pytest.raises(EmberRuntimeError) as excinfo:
      env.assign(name_token("y", line=4), make_number(2))
    assert excinfo.value.message == "Undefined variable 'y'"
    assert excinfo.value.line == 4
    assert "y" not in env

  def test_get_undefined(self):
    with pytest.raises(EmberRuntimeError) as excinfo:
      Environment().get("missing")
    assert str(excinfo.value) == "Undefined variable 'missing'"
    assert excinfo.value.token is None

  def test_snapshot_is_a_copy(self):
    env = Environment()
    env.define("a", NULL)
    snapshot = env.snapshot()
    snapshot["b"] = NULL
    assert env.names() == ["a"]
