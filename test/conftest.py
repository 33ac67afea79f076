"""
Test configuration for Ember tests
"""

import io
import sys
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from interpreter import Interpreter
from parsing import parse_source


@pytest.fixture
def output():
  """Captured program output"""
  return io.StringIO()


@pytest.fixture
def interpreter(output):
  """Fresh interpreter writing to the captured output"""
  return Interpreter(output=output)


@pytest.fixture
def run(interpreter, output):
  """Parse and run source, returning everything it printed"""
  def _run(source: str) -> str:
    interpreter.interpret(parse_source(source))
    return output.getvalue()
  return _run
