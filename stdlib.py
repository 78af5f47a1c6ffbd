"""
Tern Standard Library
Runtime values and the builtin arithmetic operators
Pure functional style using immutable dictionaries
"""

from typing import Any, Callable, Dict
import operator

from error_handling import DivisionByZero, OperandTypeMismatch


# ============================================================================
# VALUES
# ============================================================================

def make_value(value: Any, type_name: str = "Number") -> Dict:
  """Create an immutable runtime value"""
  return {
      'value': value,
      'type': type_name
  }


def make_number(n: int) -> Dict:
  return make_value(n, "Number")


def format_value(value: Dict) -> str:
  """Convert a value to its display form"""
  if value['type'] == "Number":
    return str(value['value'])
  return f"<{value['type']}>"


# ============================================================================
# ARITHMETIC
# ============================================================================

def truncating_div(x: int, y: int) -> int:
  """Integer division rounding toward zero rather than toward negative infinity"""
  quotient = abs(x) // abs(y)
  return quotient if (x < 0) == (y < 0) else -quotient


def binary_arithmetic_op(op: Callable[[int, int], int], symbol: str) -> Callable[[Dict, Dict], Dict]:
  """
  Factory for binary arithmetic operations over numbers

  Examples:
    tern_add = binary_arithmetic_op(operator.add, "+")
    tern_add(make_number(1), make_number(2)) -> {'value': 3, 'type': 'Number'}
  """
  def arithmetic(x: Dict, y: Dict) -> Dict:
    if x['type'] != "Number" or y['type'] != "Number":
      raise OperandTypeMismatch(symbol, x['type'], y['type'])
    return make_number(op(x['value'], y['value']))

  return arithmetic


tern_add = binary_arithmetic_op(operator.add, "+")
tern_sub = binary_arithmetic_op(operator.sub, "-")
tern_mul = binary_arithmetic_op(operator.mul, "*")
_tern_div_impl = binary_arithmetic_op(truncating_div, "/")


def tern_div(x: Dict, y: Dict) -> Dict:
  """Division, truncating toward zero"""
  if y['type'] == "Number" and y['value'] == 0:
    raise DivisionByZero()
  return _tern_div_impl(x, y)


BUILTIN_OPERATORS = {
    '+': tern_add,
    '-': tern_sub,
    '*': tern_mul,
    '/': tern_div,
}
