"""
Primitive parser combinators for Tern
Every combinator takes the remaining input and returns (remainder, extracted),
raising a TernParseError when it cannot match
"""

from typing import Any, Callable, List, Sequence, Tuple, TypeVar

from error_handling import (
  TernParseError,
  ExpectedToken,
  ExpectedIdentifier,
  ExpectedDigits,
  EmptySequence,
  NoAlternative
)


T = TypeVar('T')

Parser = Callable[[str], Tuple[str, T]]

WHITESPACE = (' ', '\n')


# ==================== CHARACTER CLASS SCANNING ====================

def take_while(accept: Callable[[str], bool], text: str) -> Tuple[str, str]:
  """
  Consume the longest prefix whose characters all satisfy `accept`

  Never fails; the extraction is empty when the first character is rejected.

  Examples:
    take_while(str.isdigit, "123abc") -> ("abc", "123")
    take_while(str.isdigit, "abc") -> ("abc", "")
  """
  end = 0
  for char in text:
    if not accept(char):
      break
    end += 1
  return text[end:], text[:end]


def take_while1(
  accept: Callable[[str], bool],
  text: str,
  error: Callable[[str], TernParseError]
) -> Tuple[str, str]:
  """
  Like take_while, but at least one character has to match

  Args:
    accept: Character predicate
    text: Remaining input
    error: Factory called with the remaining input when nothing matched
  """
  remainder, extracted = take_while(accept, text)
  if not extracted:
    raise error(text)
  return remainder, extracted


def _is_digit(char: str) -> bool:
  return '0' <= char <= '9'


def _is_ident_start(char: str) -> bool:
  return char.isascii() and char.isalpha()


def _is_ident_char(char: str) -> bool:
  return char.isascii() and (char.isalnum() or char == '_')


def extract_digits(text: str) -> Tuple[str, str]:
  return take_while1(_is_digit, text, ExpectedDigits)


def extract_whitespace(text: str) -> Tuple[str, str]:
  return take_while(lambda c: c in WHITESPACE, text)


def extract_whitespace1(text: str) -> Tuple[str, str]:
  return take_while1(lambda c: c in WHITESPACE, text, lambda s: ExpectedToken(" ", s))


def extract_spaces(text: str) -> Tuple[str, str]:
  """Single spaces only; newlines are left in place"""
  return take_while(lambda c: c == ' ', text)


def extract_spaces1(text: str) -> Tuple[str, str]:
  return take_while1(lambda c: c == ' ', text, lambda s: ExpectedToken(" ", s))


# ==================== TOKENS ====================

def extract_identifier(text: str) -> Tuple[str, str]:
  """
  Extract an identifier: an ASCII letter followed by letters, digits or '_'

  Raises:
    ExpectedIdentifier on empty input or an invalid leading character
  """
  if not text or not _is_ident_start(text[0]):
    raise ExpectedIdentifier(text)
  return take_while(_is_ident_char, text)


def tag(literal: str, text: str) -> str:
  """
  Match `literal` at the start of the input and return what follows it

  Raises:
    ExpectedToken(literal) if the input does not start with it
  """
  if text.startswith(literal):
    return text[len(literal):]
  raise ExpectedToken(literal, text)


# ==================== COMPOSITION ====================

def sequence(
  parser: Parser,
  separator_parser: Callable[[str], Tuple[str, Any]],
  text: str
) -> Tuple[str, List[Any]]:
  """
  Greedily apply `parser`, consuming a separator after each item

  Stops without failing on the first item that does not parse, so the
  result may be empty. The separator parser is expected to always succeed.

  Examples:
    sequence(extract_identifier, extract_spaces, "x y => x") -> ("=> x", ["x", "y"])
  """
  items = []
  while True:
    try:
      new_text, item = parser(text)
    except TernParseError:
      break
    items.append(item)
    text, _ = separator_parser(new_text)
  return text, items


def sequence1(
  parser: Parser,
  separator_parser: Callable[[str], Tuple[str, Any]],
  text: str
) -> Tuple[str, List[Any]]:
  """Like sequence, but raises EmptySequence if no item was collected"""
  remainder, items = sequence(parser, separator_parser, text)
  if not items:
    raise EmptySequence(text)
  return remainder, items


def alternatives(rule: str, parsers: Sequence[Parser], text: str) -> Tuple[str, Any]:
  """
  Ordered choice: the first parser to succeed wins

  Each parser receives the same input, so a failed attempt needs no rewind.

  Raises:
    NoAlternative(rule) carrying every individual failure
  """
  attempts = []
  for parser in parsers:
    try:
      return parser(text)
    except TernParseError as e:
      attempts.append(e)
  raise NoAlternative(rule, text, attempts)
