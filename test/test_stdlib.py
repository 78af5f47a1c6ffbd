"""
Tests for runtime values and the builtin operators
"""

import pytest
from stdlib import (
  make_value,
  make_number,
  format_value,
  truncating_div,
  BUILTIN_OPERATORS
)
from error_handling import DivisionByZero, OperandTypeMismatch


class TestArithmetic:

  @pytest.mark.parametrize("op, left, right, expected", [
      ('+', 2, 2, 4),
      ('-', 2, 5, -3),
      ('*', 6, 7, 42),
      ('/', 7, 2, 3),
  ])
  def test_operators(self, op, left, right, expected):
    result = BUILTIN_OPERATORS[op](make_number(left), make_number(right))
    assert result == make_number(expected)

  @pytest.mark.parametrize("x, y, expected", [
      (7, 2, 3),
      (-7, 2, -3),
      (7, -2, -3),
      (-7, -2, 3),
      (1, 3, 0),
  ])
  def test_division_truncates_toward_zero(self, x, y, expected):
    assert truncating_div(x, y) == expected

  def test_division_by_zero(self):
    with pytest.raises(DivisionByZero):
      BUILTIN_OPERATORS['/'](make_number(1), make_number(0))

  def test_large_numbers_do_not_overflow(self):
    big = make_number(2 ** 62)
    assert BUILTIN_OPERATORS['*'](big, big) == make_number(2 ** 124)

  def test_non_number_operand(self):
    with pytest.raises(OperandTypeMismatch) as exc_info:
      BUILTIN_OPERATORS['+'](make_value(None, "Unit"), make_number(1))
    assert exc_info.value.left == "Unit"
    assert exc_info.value.right == "Number"


class TestValues:

  def test_make_number(self):
    assert make_number(4) == {'value': 4, 'type': 'Number'}

  def test_format_value(self):
    assert format_value(make_number(-12)) == "-12"
    assert format_value(make_value(None, "Unit")) == "<Unit>"
