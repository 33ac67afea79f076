"""
Utilities module for the Ember interpreter
Operator factories and error message builders shared by the standard library
"""

from typing import Any, Callable, Iterable, Optional

from error_handling import EmberRuntimeError


# ==================== ERROR MESSAGE BUILDERS ====================

def type_name(value: Any) -> str:
  """
  Display name of a runtime value's type

  Args:
    value: Runtime value (anything with a ``type`` enum attribute)

  Returns:
    Type name such as "Num" or "String"
  """
  value_type = getattr(value, 'type', None)
  return getattr(value_type, 'value', 'Unknown')


def operation_error(op: str, expected: str, *operands: Any) -> EmberRuntimeError:
  """
  Generate operation error naming the operator and the operand types

  Args:
    op: Operator lexeme
    expected: Description of what the operator accepts
    *operands: Offending runtime values

  Returns:
    EmberRuntimeError with formatted message

  Examples:
    operation_error("-", "numbers", text, num)
      -> "Operands of '-' must be numbers, got String and Num"
  """
  got = " and ".join(type_name(operand) for operand in operands)
  noun = "Operand" if len(operands) == 1 else "Operands"
  verb = "must be a" if len(operands) == 1 else "must be"
  return EmberRuntimeError(f"{noun} of '{op}' {verb} {expected}, got {got}")


def division_by_zero_error() -> EmberRuntimeError:
  return EmberRuntimeError("Division by zero")


def undefined_variable_error(name: str, token: Optional[Any] = None) -> EmberRuntimeError:
  return EmberRuntimeError(f"Undefined variable '{name}'", token)


# ==================== BINARY OPERATION FACTORIES ====================

def binary_arithmetic_op(
  op: Callable[[Any, Any], Any],
  op_name: str,
  make_result: Callable[[Any], Any],
  allowed_types: Iterable[Any],
) -> Callable[[Any, Any], Any]:
  """
  Factory for binary arithmetic operations

  Args:
    op: Python operator function (e.g., operator.sub)
    op_name: Operator lexeme for error messages
    make_result: Constructor for the result value
    allowed_types: Value types that support this operation

  Returns:
    Function that performs the arithmetic operation

  Examples:
    ember_sub = binary_arithmetic_op(operator.sub, "-", make_number, [ValueType.NUMBER])
    result = ember_sub(make_number(3), make_number(1))
  """
  allowed = tuple(allowed_types)

  def arithmetic(x: Any, y: Any) -> Any:
    if x.type != y.type or x.type not in allowed:
      raise operation_error(op_name, "numbers", x, y)
    return make_result(op(x.value, y.value))

  return arithmetic


def binary_comparison_op(
  op: Callable[[Any, Any], bool],
  op_name: str,
  make_result: Callable[[bool], Any],
  allowed_types: Iterable[Any],
) -> Callable[[Any, Any], Any]:
  """
  Factory for binary comparison operations

  Args:
    op: Python operator function (e.g., operator.lt)
    op_name: Operator lexeme for error messages
    make_result: Constructor for the boolean result
    allowed_types: Value types that support this comparison

  Returns:
    Function that performs the comparison
  """
  allowed = tuple(allowed_types)

  def comparison(x: Any, y: Any) -> Any:
    if x.type != y.type or x.type not in allowed:
      raise operation_error(op_name, "numbers", x, y)
    return make_result(op(x.value, y.value))

  return comparison
