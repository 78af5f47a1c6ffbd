"""
Tern Programming Language Parser
Combinator parser working directly on raw text: no tokenizer, no source spans.
Every rule returns (remainder, node) and leaves the input untouched on failure.
"""

from typing import List, Tuple, Union
from dataclasses import dataclass, fields
from functools import partial

from combinators import (
    alternatives,
    extract_digits,
    extract_identifier,
    extract_spaces,
    extract_spaces1,
    extract_whitespace,
    extract_whitespace1,
    sequence,
    sequence1,
    tag,
)
from error_handling import NestingTooDeep, NoAlternative, TernParseError, TrailingInput


# ============================================================================
# AST
# ============================================================================

@dataclass(frozen=True)
class Number:
    value: int


@dataclass(frozen=True)
class Operation:
    """Binary operation; operands are never operations themselves"""
    lhs: 'Expression'
    rhs: 'Expression'
    op: str


@dataclass(frozen=True)
class FunctionCall:
    callee: str
    params: Tuple['Expression', ...]


@dataclass(frozen=True)
class BindingUsage:
    name: str


@dataclass(frozen=True)
class Block:
    statements: Tuple['Statement', ...]


@dataclass(frozen=True)
class BindingDefinition:
    name: str
    value: 'Expression'


@dataclass(frozen=True)
class FunctionDefinition:
    name: str
    params: Tuple[str, ...]
    body: 'Statement'


@dataclass(frozen=True)
class ExpressionStatement:
    expr: 'Expression'


Expression = Union[Number, Operation, FunctionCall, BindingUsage, Block]
Statement = Union[BindingDefinition, FunctionDefinition, ExpressionStatement]

EXPRESSION_TYPES = (Number, Operation, FunctionCall, BindingUsage, Block)
STATEMENT_TYPES = (BindingDefinition, FunctionDefinition, ExpressionStatement)
AST_NODE_TYPES = EXPRESSION_TYPES + STATEMENT_TYPES

OPERATORS = ('+', '-', '*', '/')


# ============================================================================
# EXPRESSION GRAMMAR
# ============================================================================

def parse_number(text: str) -> Tuple[str, Number]:
    text, digits = extract_digits(text)
    return text, Number(int(digits))


def parse_binding_usage(text: str) -> Tuple[str, BindingUsage]:
    text, name = extract_identifier(text)
    return text, BindingUsage(name)


def _parse_operator_symbol(symbol: str, text: str) -> Tuple[str, str]:
    return tag(symbol, text), symbol


def parse_operator(text: str) -> Tuple[str, str]:
    return alternatives(
        "operator",
        [partial(_parse_operator_symbol, symbol) for symbol in OPERATORS],
        text,
    )


def parse_argument(text: str) -> Tuple[str, Expression]:
    """A function call argument: a literal, a binding usage or a block.

    Calls and operations have to be wrapped in a block to be passed as an
    argument, otherwise `f g x` would be ambiguous.
    """
    return alternatives("argument", [parse_number, parse_binding_usage, parse_block], text)


def parse_function_call(text: str) -> Tuple[str, FunctionCall]:
    """`callee arg arg ...` with at least one argument.

    Only spaces separate the callee from its arguments, so an identifier
    at the end of a line is never merged with whatever follows the newline.
    Arguments are operands rather than full expressions, so a call binds
    tighter than an operator: `f 1 + 2` is `(f 1) + 2`, and `f { 1 + 2 }`
    passes the sum.
    """
    text, callee = extract_identifier(text)
    text, _ = extract_spaces1(text)
    text, params = sequence1(parse_argument, extract_spaces, text)
    return text, FunctionCall(callee, tuple(params))


def parse_block(text: str) -> Tuple[str, Block]:
    text = tag("{", text)
    text, _ = extract_whitespace(text)
    text, statements = sequence(parse_statement, extract_whitespace, text)
    text, _ = extract_whitespace(text)
    text = tag("}", text)
    return text, Block(tuple(statements))


def parse_non_operation(text: str) -> Tuple[str, Expression]:
    return alternatives(
        "operand",
        [parse_number, parse_function_call, parse_binding_usage, parse_block],
        text,
    )


def parse_operation_rest(lhs: Expression, text: str) -> Tuple[str, Operation]:
    """Parse `op rhs` after an already parsed left operand"""
    text, _ = extract_whitespace(text)
    text, op = parse_operator(text)
    text, _ = extract_whitespace(text)
    text, rhs = parse_non_operation(text)
    return text, Operation(lhs, rhs, op)


def parse_expression(text: str) -> Tuple[str, Expression]:
    """Parse one expression from the start of `text`.

    An operation wins over a bare operand, so `1 + 2` is not read as the
    literal `1`; among operands a call comes before a binding usage so that
    `name arg` is a call. The left operand is parsed once and shared by both
    readings, which keeps nested blocks linear in their depth.
    """
    try:
        rest, lhs = parse_non_operation(text)
    except NoAlternative as e:
        raise NoAlternative("expression", text, e.attempts) from e

    try:
        return parse_operation_rest(lhs, rest)
    except TernParseError:
        return rest, lhs


# ============================================================================
# STATEMENT GRAMMAR
# ============================================================================

def parse_binding_definition(text: str) -> Tuple[str, BindingDefinition]:
    text = tag("let", text)
    text, _ = extract_whitespace1(text)
    text, name = extract_identifier(text)
    text, _ = extract_whitespace(text)
    text = tag("=", text)
    text, _ = extract_whitespace(text)
    text, value = parse_expression(text)
    return text, BindingDefinition(name, value)


def parse_function_definition(text: str) -> Tuple[str, FunctionDefinition]:
    text = tag("fn", text)
    text, _ = extract_whitespace1(text)
    text, name = extract_identifier(text)
    text, _ = extract_whitespace(text)
    text, params = sequence(extract_identifier, extract_spaces, text)
    text = tag("=>", text)
    text, _ = extract_whitespace(text)
    text, body = parse_statement(text)
    return text, FunctionDefinition(name, tuple(params), body)


def parse_expression_statement(text: str) -> Tuple[str, ExpressionStatement]:
    text, expr = parse_expression(text)
    return text, ExpressionStatement(expr)


def parse_statement(text: str) -> Tuple[str, Statement]:
    """Parse one statement from the start of `text`, returning the remainder"""
    return alternatives(
        "statement",
        [parse_binding_definition, parse_function_definition, parse_expression_statement],
        text,
    )


# ============================================================================
# ENTRY POINTS
# ============================================================================

def parse(text: str) -> Statement:
    """Parse a single statement that must cover the whole input.

    Surrounding spaces and newlines are allowed.

    Raises:
        TernParseError: on the first failure, TrailingInput when the
            statement ends before the input does, or NestingTooDeep when
            the statement nests deeper than the host stack allows
    """
    text, _ = extract_whitespace(text)
    try:
        remainder, statement = parse_statement(text)
    except RecursionError as e:
        raise NestingTooDeep(text) from e
    remainder, _ = extract_whitespace(remainder)
    if remainder:
        raise TrailingInput(remainder)
    return statement


def parse_program(text: str) -> List[Statement]:
    """Parse whitespace or newline separated statements covering the whole input"""
    text, _ = extract_whitespace(text)
    try:
        text, statements = sequence(parse_statement, extract_whitespace, text)
        if text:
            # the sequence stopped here, so this re-raises the reason why
            parse_statement(text)
    except RecursionError as e:
        raise NestingTooDeep(text) from e
    if text:
        raise TrailingInput(text)
    return statements


# ============================================================================
# DEBUGGING
# ============================================================================

def pretty_print_ast(node: Union[Expression, Statement], indent: int = 0) -> str:
    """Pretty print an AST node for debugging"""
    attrs = []
    children = []
    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(value, AST_NODE_TYPES):
            children.append(value)
        elif isinstance(value, tuple) and value and all(isinstance(v, AST_NODE_TYPES) for v in value):
            children.extend(value)
        else:
            attrs.append(f"{f.name}={value!r}")

    result = "  " * indent + type(node).__name__
    if attrs:
        result += f"({', '.join(attrs)})"
    result += "\n"

    for child in children:
        result += pretty_print_ast(child, indent + 1)

    return result

