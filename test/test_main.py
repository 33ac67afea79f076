"""
Command line and REPL tests for Ember
"""

import pytest
from interpreter import create_interpreter
from main import VERSION, handle_repl_line, main
from stdlib import make_number


@pytest.fixture
def script(tmp_path):
  def _script(source):
    path = tmp_path / "prog.ember"
    path.write_text(source, encoding="utf-8")
    return str(path)
  return _script


class TestScripts:
  """Test running script files"""

  def test_runs_script(self, script, capsys):
    main([script("let x = 2;\nprint x * 21;\n")])
    assert capsys.readouterr().out == "42\n"

  def test_missing_script(self, tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
      main([str(tmp_path / "nope.ember")])
    assert excinfo.value.code == 1
    assert "does not exist" in capsys.readouterr().out

  def test_parse_errors_are_all_reported(self, script, capsys):
    with pytest.raises(SystemExit):
      main([script("print ;\nlet ok = 1;\nlet = 2;\n")])
    out = capsys.readouterr().out
    assert "2 errors" in out
    assert "Expected expression" in out
    assert "Expected variable name" in out

  def test_nothing_runs_after_parse_error(self, script, capsys):
    with pytest.raises(SystemExit):
      main([script("print 1;\nprint ;\n")])
    assert not capsys.readouterr().out.startswith("1\n")

  def test_runtime_error_stops_script(self, script, capsys):
    with pytest.raises(SystemExit) as excinfo:
      main([script("print 1;\nprint 1 / 0;\nprint 2;\n")])
    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert out.startswith("1\n")
    assert "Division by zero" in out
    assert "line 2" in out
    assert "\n2\n" not in out

  def test_tokenizer_error(self, script, capsys):
    with pytest.raises(SystemExit):
      main([script("let a = #;")])
    assert "Unexpected character '#'" in capsys.readouterr().out


class TestDebugModes:
  """Test --tokens, --parse and --max-depth"""

  def test_tokens(self, script, capsys):
    main(["--tokens", script("let x;")])
    out = capsys.readouterr().out
    assert out.startswith("4 tokens:")
    assert "IDENTIFIER" in out

  def test_parse(self, script, capsys):
    main(["--parse", script("print 1 + 2;")])
    out = capsys.readouterr().out
    assert "Parsed 1 statements:" in out
    assert "(print (+ 1 2))" in out
    assert "PrintStmt\n  Binary(+)\n    Literal(1)\n    Literal(2)\n" in out

  def test_long_chain_script_runs(self, script, capsys):
    main([script("print " + " + ".join(["2"] * 2000) + ";\n")])
    assert capsys.readouterr().out == "4000\n"

  def test_max_depth(self, script, capsys):
    with pytest.raises(SystemExit):
      main(["--max-depth", "2", script("print ((((1))));")])
    assert "Expression nesting too deep" in capsys.readouterr().out

  def test_max_depth_must_be_positive(self, script):
    with pytest.raises(SystemExit) as excinfo:
      main(["--max-depth", "0", script("print 1;")])
    assert excinfo.value.code == 2

  def test_version(self, capsys):
    with pytest.raises(SystemExit):
      main(["--version"])
    assert VERSION in capsys.readouterr().out


class TestRepl:
  """Test single REPL lines"""

  def test_expression_echoes_value(self, capsys):
    interpreter = create_interpreter()
    assert handle_repl_line("1 + 2", interpreter)
    assert capsys.readouterr().out == "=> 3\n"

  def test_strings_are_shown_quoted(self, capsys):
    handle_repl_line('"a" + "b"', create_interpreter())
    assert capsys.readouterr().out == '=> "ab"\n'

  def test_bindings_persist(self, capsys):
    interpreter = create_interpreter()
    handle_repl_line("let x = 4;", interpreter)
    handle_repl_line("print x;", interpreter)
    assert capsys.readouterr().out == "4\n"
    assert interpreter.environment.get("x") == make_number(4)

  def test_errors_do_not_end_session(self, capsys):
    interpreter = create_interpreter()
    assert handle_repl_line("print y;", interpreter)
    assert handle_repl_line("print ;", interpreter)
    assert handle_repl_line("@", interpreter)
    out = capsys.readouterr().out
    assert "Runtime error: Undefined variable 'y'" in out
    assert "Parse error: Expected expression" in out
    assert "Syntax error: Unexpected character '@'" in out

  def test_env_command(self, capsys):
    interpreter = create_interpreter()
    handle_repl_line("let name = \"ember\";", interpreter)
    handle_repl_line(":env", interpreter)
    assert 'name = "ember"' in capsys.readouterr().out

  def test_parse_command(self, capsys):
    handle_repl_line(":parse 1 * (2 + 3)", create_interpreter())
    assert "(* 1 (group (+ 2 3)))" in capsys.readouterr().out

  @pytest.mark.parametrize("line", ["exit", "exit;", "quit"])
  def test_exit(self, line):
    assert not handle_repl_line(line, create_interpreter())
