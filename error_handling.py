"""
Error taxonomy for the Tern parser and evaluator
Closed exception families with structured fields; formatting lives here too
so presentation stays at the boundary
"""

from typing import List, Optional, Sequence

try:
    from pyparsing import col, line, lineno
except ImportError:
    raise ImportError("pyparsing library not found. Install with: pip install pyparsing")


# ============================================================================
# PARSE ERRORS
# ============================================================================

class TernParseError(Exception):
    """Base class for everything the parser can raise.

    `remaining` is the unconsumed input at the point of failure, which is
    enough for the boundary to work out the offset in the original source.
    """

    def __init__(self, message: str, remaining: str = ""):
        self.message = message
        self.remaining = remaining
        super().__init__(message)

    def offset_in(self, source: str) -> int:
        """Offset of the failure inside `source`"""
        return max(0, len(source) - len(self.remaining))


class ExpectedToken(TernParseError):
    def __init__(self, token: str, remaining: str = ""):
        self.token = token
        super().__init__(f"expected {token!r}", remaining)


class ExpectedIdentifier(TernParseError):
    def __init__(self, remaining: str = ""):
        super().__init__("expected identifier", remaining)


class ExpectedDigits(TernParseError):
    def __init__(self, remaining: str = ""):
        super().__init__("expected digits", remaining)


class EmptySequence(TernParseError):
    def __init__(self, remaining: str = ""):
        super().__init__("expected a sequence with at least one item", remaining)


class NoAlternative(TernParseError):
    """Every alternative of a grammar rule failed at the same position"""

    def __init__(self, rule: str, remaining: str = "",
                 attempts: Optional[Sequence[TernParseError]] = None):
        self.rule = rule
        self.attempts = list(attempts or [])
        super().__init__(f"could not parse {rule}", remaining)


class TrailingInput(TernParseError):
    def __init__(self, remaining: str):
        super().__init__(f"input was not consumed fully by parser: {remaining.strip()!r}", remaining)


class NestingTooDeep(TernParseError):
    """The input nests deeper than the parser's stack allows"""

    def __init__(self, remaining: str):
        super().__init__("statement is nested too deeply to parse", remaining)


# ============================================================================
# RUNTIME ERRORS
# ============================================================================

class TernRuntimeError(Exception):
    """Base class for everything the evaluator can raise"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UndefinedBinding(TernRuntimeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"binding with name '{name}' does not exist")


class UndefinedFunction(TernRuntimeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"function with name '{name}' does not exist")


class ArityMismatch(TernRuntimeError):
    def __init__(self, expected: int, actual: int, name: str = ""):
        self.expected = expected
        self.actual = actual
        self.name = name
        callee = f"'{name}' " if name else ""
        super().__init__(f"function {callee}expected {expected} parameters, got {actual}")


class EmptyOrNonExpressionBlock(TernRuntimeError):
    def __init__(self):
        super().__init__("block must end with an expression")


class NonExpressionBody(TernRuntimeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"body of function '{name}' is a definition and has no value")


class DivisionByZero(TernRuntimeError):
    def __init__(self):
        super().__init__("division by zero")


class OperandTypeMismatch(TernRuntimeError):
    def __init__(self, op: str, left: str, right: str):
        self.op = op
        self.left = left
        self.right = right
        super().__init__(f"cannot apply '{op}' to {left} and {right}")


class RecursionDepthExceeded(TernRuntimeError):
    def __init__(self):
        super().__init__("maximum recursion depth exceeded")


# ============================================================================
# FORMATTING (boundary side)
# ============================================================================

def get_context_line(source_text: str, loc: int) -> str:
    """Render the source line containing `loc` with a caret under it"""
    line_num = lineno(loc, source_text)
    col_num = col(loc, source_text)
    text = line(loc, source_text)
    prefix = f"{line_num:4d}: "
    return f"{prefix}{text}\n{' ' * (len(prefix) + col_num - 1)}^"


def describe_attempts(error: TernParseError) -> List[str]:
    """Flatten the alternatives tried by a failed rule into short messages"""
    if not isinstance(error, NoAlternative):
        return []
    return [attempt.message for attempt in error.attempts]


def format_parse_error(error: TernParseError, source_text: str) -> str:
    """Format a parse error against the source it came from"""
    loc = error.offset_in(source_text)
    error_msg = f"Parse error at line {lineno(loc, source_text)}, column {col(loc, source_text)}:\n"
    error_msg += f"  {error.message}\n"

    attempts = describe_attempts(error)
    if attempts:
        error_msg += f"  Tried: {', '.join(attempts)}\n"

    error_msg += get_context_line(source_text, loc)
    return error_msg


def format_runtime_error(error: TernRuntimeError) -> str:
    """Format a runtime error for display"""
    return f"Runtime error: {error.message}"
