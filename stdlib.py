"""
Ember Standard Library
Runtime values, their display forms, and the built-in operators
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List
import operator

from error_handling import EmberRuntimeError
from utilities import (
  binary_arithmetic_op,
  binary_comparison_op,
  division_by_zero_error,
  operation_error,
)


# ============================================================================
# VALUES
# ============================================================================

class ValueType(Enum):
  NUMBER = "Num"
  TEXT = "String"
  BOOL = "Bool"
  NULL = "Null"


@dataclass(frozen=True)
class EmberValue:
  """Tagged runtime value; equal only when both tag and payload match"""
  type: ValueType
  value: Any = None

  def __str__(self) -> str:
    return stringify(self)


def make_number(value: Any) -> EmberValue:
  return EmberValue(ValueType.NUMBER, float(value))


def make_text(value: str) -> EmberValue:
  return EmberValue(ValueType.TEXT, value)


def make_bool(value: bool) -> EmberValue:
  return EmberValue(ValueType.BOOL, bool(value))


def make_null() -> EmberValue:
  return NULL


NULL = EmberValue(ValueType.NULL)
TRUE = EmberValue(ValueType.BOOL, True)
FALSE = EmberValue(ValueType.BOOL, False)


def is_number(value: EmberValue) -> bool:
  return value.type is ValueType.NUMBER


def is_text(value: EmberValue) -> bool:
  return value.type is ValueType.TEXT


def is_truthy(value: EmberValue) -> bool:
  """Only null and false are falsy; 0 and "" are truthy"""
  if value.type is ValueType.NULL:
    return False
  if value.type is ValueType.BOOL:
    return value.value
  return True


# ============================================================================
# DISPLAY FUNCTIONS
# ============================================================================

def format_number(number: float) -> str:
  """Integral numbers print without a fractional part"""
  if number.is_integer():
    return str(int(number))
  return repr(number)


def stringify(value: EmberValue) -> str:
  """Canonical representation, as written by print"""
  if value.type is ValueType.NUMBER:
    return format_number(value.value)
  elif value.type is ValueType.TEXT:
    return value.value
  elif value.type is ValueType.BOOL:
    return "true" if value.value else "false"
  return "null"


def show(value: EmberValue) -> str:
  """Convert value to its source-like representation (strings quoted)"""
  if value.type is ValueType.TEXT:
    escaped = value.value.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'
  return stringify(value)


# ============================================================================
# UNARY OPERATORS
# ============================================================================

def ember_negate(x: EmberValue) -> EmberValue:
  if not is_number(x):
    raise operation_error("-", "number", x)
  return make_number(-x.value)


def ember_not(x: EmberValue) -> EmberValue:
  return make_bool(not is_truthy(x))


# ============================================================================
# ARITHMETIC
# ============================================================================

def ember_add(x: EmberValue, y: EmberValue) -> EmberValue:
  """Add two numbers or concatenate two strings"""
  if is_number(x) and is_number(y):
    return make_number(x.value + y.value)
  elif is_text(x) and is_text(y):
    return make_text(x.value + y.value)
  raise operation_error("+", "two numbers or two strings", x, y)


ember_sub = binary_arithmetic_op(operator.sub, "-", make_number, [ValueType.NUMBER])
ember_mul = binary_arithmetic_op(operator.mul, "*", make_number, [ValueType.NUMBER])
_divide = binary_arithmetic_op(operator.truediv, "/", make_number, [ValueType.NUMBER])


def ember_div(x: EmberValue, y: EmberValue) -> EmberValue:
  """Divide two numbers; dividing by zero is an error, never inf or nan"""
  if is_number(x) and is_number(y) and y.value == 0:
    raise division_by_zero_error()
  return _divide(x, y)


# ============================================================================
# COMPARISON
# ============================================================================

def ember_eq(x: EmberValue, y: EmberValue) -> EmberValue:
  """Equality over any pair of values; different types are simply unequal"""
  return make_bool(x == y)


def ember_ne(x: EmberValue, y: EmberValue) -> EmberValue:
  return make_bool(x != y)


ember_lt = binary_comparison_op(operator.lt, "<", make_bool, [ValueType.NUMBER])
ember_le = binary_comparison_op(operator.le, "<=", make_bool, [ValueType.NUMBER])
ember_gt = binary_comparison_op(operator.gt, ">", make_bool, [ValueType.NUMBER])
ember_ge = binary_comparison_op(operator.ge, ">=", make_bool, [ValueType.NUMBER])


# ============================================================================
# OPERATOR REGISTRY
# ============================================================================

UNARY_OPERATORS: Dict[str, Callable[[EmberValue], EmberValue]] = {
    '-': ember_negate,
    '!': ember_not,
}

BINARY_OPERATORS: Dict[str, Callable[[EmberValue, EmberValue], EmberValue]] = {
    '+': ember_add,
    '-': ember_sub,
    '*': ember_mul,
    '/': ember_div,
    '==': ember_eq,
    '!=': ember_ne,
    '<': ember_lt,
    '<=': ember_le,
    '>': ember_gt,
    '>=': ember_ge,
}


def get_binary_operator(op: str) -> Callable[[EmberValue, EmberValue], EmberValue]:
  """Get a built-in binary operator by lexeme"""
  if op in BINARY_OPERATORS:
    return BINARY_OPERATORS[op]
  raise EmberRuntimeError(f"Unknown binary operator: {op}")


def get_unary_operator(op: str) -> Callable[[EmberValue], EmberValue]:
  """Get a built-in unary operator by lexeme"""
  if op in UNARY_OPERATORS:
    return UNARY_OPERATORS[op]
  raise EmberRuntimeError(f"Unknown unary operator: {op}")


def list_operators() -> List[str]:
  """List all available operators"""
  return sorted(set(UNARY_OPERATORS) | set(BINARY_OPERATORS))
