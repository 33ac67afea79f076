"""
Ember Interpreter
Walks the statement list in order, evaluating expressions against one environment
"""

from typing import Any, List, Optional, TextIO
import sys

from ast_nodes import (
  Assign, Binary, Expr, ExpressionStmt, Grouping, LetStmt, Literal, PrintStmt,
  Stmt, Unary, Variable, left_spine,
)
from environment import Environment
from error_handling import EmberRuntimeError
from parsing import parse_source
from stdlib import EmberValue, get_binary_operator, get_unary_operator, stringify


class Interpreter:
  """Tree-walking interpreter owning a single global environment"""

  def __init__(self, environment: Optional[Environment] = None,
               output: Optional[TextIO] = None, debug: bool = False):
    self.environment = environment if environment is not None else Environment()
    self.output = output
    self.debug = debug

  # ==========================================================================
  # STATEMENTS
  # ==========================================================================

  def interpret(self, statements: List[Stmt]) -> None:
    """Execute statements in order, stopping at the first runtime error"""
    for stmt in statements:
      self.execute(stmt)

  def execute(self, stmt: Stmt) -> None:
    if self.debug:
      print(f"Executing: {type(stmt).__name__}")

    if isinstance(stmt, ExpressionStmt):
      self.evaluate(stmt.expression)
    elif isinstance(stmt, PrintStmt):
      value = self.evaluate(stmt.expression)
      print(stringify(value), file=self.output or sys.stdout)
    elif isinstance(stmt, LetStmt):
      value = self.evaluate(stmt.initializer)
      self.environment.define(stmt.name, value)
    else:
      raise EmberRuntimeError(f"Unknown statement type: {type(stmt).__name__}")

  # ==========================================================================
  # EXPRESSIONS
  # ==========================================================================

  def evaluate(self, expr: Expr) -> EmberValue:
    """Evaluate an expression; children are evaluated before their parent"""
    if self.debug:
      print(f"Evaluating: {type(expr).__name__}")

    if isinstance(expr, Literal):
      return expr.value
    elif isinstance(expr, Grouping):
      return self.evaluate(expr.expression)
    elif isinstance(expr, Unary):
      return self.eval_unary(expr)
    elif isinstance(expr, Binary):
      return self.eval_binary(expr)
    elif isinstance(expr, Variable):
      return self.environment.get(expr.name)
    elif isinstance(expr, Assign):
      return self.eval_assign(expr)
    raise EmberRuntimeError(f"Unknown expression type: {type(expr).__name__}")

  def eval_unary(self, expr: Unary) -> EmberValue:
    right = self.evaluate(expr.right)
    op_func = get_unary_operator(expr.operator.lexeme)
    return self._apply(expr.operator, op_func, right)

  def eval_binary(self, expr: Binary) -> EmberValue:
    """Fold a left-associative chain from its innermost operand outwards"""
    spine = left_spine(expr)
    left = self.evaluate(spine[-1].left)
    for node in reversed(spine):
      right = self.evaluate(node.right)
      op_func = get_binary_operator(node.operator.lexeme)
      left = self._apply(node.operator, op_func, left, right)
    return left

  def eval_assign(self, expr: Assign) -> EmberValue:
    value = self.evaluate(expr.value)
    self.environment.assign(expr.name, value)
    return value

  def _apply(self, operator: Any, op_func, *operands: EmberValue) -> EmberValue:
    """Run a built-in operator, attaching the operator token to any failure"""
    try:
      return op_func(*operands)
    except EmberRuntimeError as e:
      if e.token is not None:
        raise
      raise EmberRuntimeError(e.message, operator) from e


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

def create_interpreter(debug: bool = False, output: Optional[TextIO] = None) -> Interpreter:
  """Factory function returning an interpreter"""
  return Interpreter(output=output, debug=debug)


def create_debug_interpreter(output: Optional[TextIO] = None) -> Interpreter:
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True, output=output)


def run_source(text: str, interpreter: Optional[Interpreter] = None,
               filename: str = "<input>") -> Interpreter:
  """Tokenize, parse and run Ember source; returns the interpreter used"""
  if interpreter is None:
    interpreter = create_interpreter()
  interpreter.interpret(parse_source(text, filename, debug=interpreter.debug))
  return interpreter
