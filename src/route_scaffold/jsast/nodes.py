"""Syntax tree node kinds for the JavaScript modules the generator manages.

The vocabulary is closed: everything the parser does not recognise is kept as
a Raw node holding the exact source text, so hand-written code survives a
parse/print cycle untouched.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class Node:
    """Base for every node. Nodes compare by identity."""

    comments: list["Comment"] = field(default_factory=list, kw_only=True)
    trailing: "Comment | None" = field(default=None, kw_only=True)
    # None means "let the printer decide"; parsed nodes record the source layout
    blank_before: bool | None = field(default=None, kw_only=True)


@dataclass(eq=False)
class Comment(Node):
    text: str  # without the // or /* */ delimiters
    block: bool = False


@dataclass(eq=False)
class Raw(Node):
    """Source text outside the managed vocabulary, printed as written."""

    text: str
    # leading whitespace of the source line the text starts on; None keeps
    # continuation lines exactly as written
    indent: int | None = None


# ---- expressions ----------------------------------------------------------


@dataclass(eq=False)
class Identifier(Node):
    name: str


@dataclass(eq=False)
class Literal(Node):
    value: Any  # str, int, float, bool or None
    raw: str | None = None


@dataclass(eq=False)
class Member(Node):
    object: Node
    property: str
    computed: bool = False  # obj['prop'] instead of obj.prop


@dataclass(eq=False)
class Call(Node):
    callee: Node
    arguments: list[Node] = field(default_factory=list)


@dataclass(eq=False)
class Assignment(Node):
    target: Node
    value: Node


@dataclass(eq=False)
class Property(Node):
    key: str
    value: Node
    shorthand: bool = False


@dataclass(eq=False)
class ObjectLiteral(Node):
    properties: list[Node] = field(default_factory=list)  # Property, Comment or Raw
    inline: bool = False  # written on one line in the source


@dataclass(eq=False)
class ArrayLiteral(Node):
    elements: list[Node] = field(default_factory=list)
    inline: bool = False


# request attribute holding each member-style parameter location
REQUEST_COLLECTIONS = {
    "query": "query",
    "path": "params",
    "formData": "body",
}


@dataclass(eq=False)
class ParameterAccess(Node):
    """Reads one request parameter; `source` is the parameter's `in` value.

    Printed as a member/call expression on the request object, e.g.
    `req.query.limit` or `req.get('x-token')`.
    """

    request: str
    source: str
    name: str


# ---- statements -----------------------------------------------------------


@dataclass(eq=False)
class FunctionDeclaration(Node):
    name: str | None
    params: list[str] = field(default_factory=list)
    body: list[Node] = field(default_factory=list)
    is_async: bool = False


@dataclass(eq=False)
class VariableDeclarator(Node):
    name: str
    init: Node | None = None


@dataclass(eq=False)
class VariableDeclaration(Node):
    kind: str  # const, let or var
    declarations: list[VariableDeclarator] = field(default_factory=list)


@dataclass(eq=False)
class ExpressionStatement(Node):
    expression: Node


@dataclass(eq=False)
class ReturnStatement(Node):
    argument: Node | None = None


@dataclass(eq=False)
class ImportDeclaration(Node):
    """`import <local> from <source>;` (default imports only)."""

    local: str
    source: Literal


@dataclass(eq=False)
class ExportDefault(Node):
    declaration: Node  # FunctionDeclaration or any expression


@dataclass(eq=False)
class Program(Node):
    body: list[Node] = field(default_factory=list)
