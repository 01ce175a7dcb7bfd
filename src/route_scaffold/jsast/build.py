"""Helpers that construct syntax tree nodes directly from Python values."""

from collections.abc import Mapping
from datetime import date

from route_scaffold.jsast.nodes import (
    ArrayLiteral,
    Call,
    Comment,
    ExpressionStatement,
    Literal,
    Member,
    Node,
    ObjectLiteral,
    Property,
    VariableDeclaration,
    VariableDeclarator,
)


def literal(value) -> Node:
    """Build the literal node for a JSON-like value.

    Mappings become object literals (keys stringified, order kept), lists and
    tuples become array literals and scalars become Literal nodes.
    """
    if isinstance(value, Mapping):
        return ObjectLiteral([Property(str(k), literal(v)) for k, v in value.items()])
    if isinstance(value, (list, tuple)):
        return ArrayLiteral([literal(v) for v in value])
    if isinstance(value, date):
        return Literal(value.isoformat())
    if value is None or isinstance(value, (str, int, float, bool)):
        return Literal(value)
    raise TypeError(f"cannot build a literal from {type(value).__name__}")


def line_comments(text: str) -> list[Comment]:
    """One `// ...` comment per line of `text`."""
    return [Comment(" " + line) for line in text.split("\n")]


def const(name: str, init: Node) -> VariableDeclaration:
    return VariableDeclaration("const", [VariableDeclarator(name, init)])


def call(callee: Node, *args: Node) -> Call:
    return Call(callee, list(args))


def method_call(obj: Node, method: str, *args: Node) -> Call:
    return Call(Member(obj, method), list(args))


def statement(expression: Node, comment: str | None = None) -> ExpressionStatement:
    node = ExpressionStatement(expression)
    if comment:
        node.comments = line_comments(comment)
    return node