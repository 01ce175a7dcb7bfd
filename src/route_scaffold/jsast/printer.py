"""Syntax tree -> JavaScript source.

Output style: 4-space indentation, single quotes, semicolons, one property
or element per line in object/array literals with trailing commas, unless
the literal was written on a single line.
Parsed literals keep their original spelling and Raw nodes keep their text
(multi-line ones are re-indented as a block), so printing a freshly parsed
tree of printer output reproduces it.
"""

import math
import re

from route_scaffold.jsast.nodes import (
    REQUEST_COLLECTIONS,
    ArrayLiteral,
    Assignment,
    Call,
    Comment,
    ExportDefault,
    ExpressionStatement,
    FunctionDeclaration,
    Identifier,
    ImportDeclaration,
    Literal,
    Member,
    Node,
    ObjectLiteral,
    ParameterAccess,
    Program,
    Property,
    Raw,
    ReturnStatement,
    VariableDeclaration,
)

INDENT = "    "

IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# never emitted as bare property names or member accesses
RESERVED_WORDS = frozenset(
    "break case catch class const continue debugger default delete do else enum export extends "
    "false finally for function if import in instanceof new null return super switch this throw "
    "true try typeof var void while with yield let static await implements interface package "
    "private protected public".split()
)

_QUOTE_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
    "\0": "\\0",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def print_module(program: Program) -> str:
    """Render a Program as module source text ending in a newline."""
    chunks = _block(program.body, 0)
    return "\n".join(chunks) + "\n" if chunks else ""


def quote(value: str) -> str:
    """Single-quoted JavaScript string literal for `value`."""
    out = []
    for ch in value:
        if ch in _QUOTE_ESCAPES:
            out.append(_QUOTE_ESCAPES[ch])
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return "'" + "".join(out) + "'"


def format_value(value) -> str:
    """JavaScript spelling of a scalar Python value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    if isinstance(value, str):
        return quote(value)
    raise TypeError(f"no literal spelling for {type(value).__name__}")


def is_identifier(name: str) -> bool:
    return bool(IDENTIFIER.match(name)) and name not in RESERVED_WORDS


def property_key(name: str) -> str:
    return name if is_identifier(name) else quote(name)


def member(obj: str, name: str) -> str:
    return f"{obj}.{name}" if is_identifier(name) else f"{obj}[{quote(name)}]"


# ---- statements -----------------------------------------------------------


def _block(nodes: list[Node], level: int) -> list[str]:
    chunks: list[str] = []
    prev = None
    for node in nodes:
        if prev is not None and _blank_between(prev, node):
            chunks.append("")
        chunks.extend(_statement(node, level))
        prev = node
    return chunks


def _blank_between(prev: Node, node: Node) -> bool:
    if node.blank_before is not None:
        return node.blank_before
    if isinstance(prev, ImportDeclaration):
        return not isinstance(node, ImportDeclaration)
    if node.comments or isinstance(node, ReturnStatement):
        return True
    return isinstance(prev, (FunctionDeclaration, ExportDefault)) or isinstance(
        node, (FunctionDeclaration, ExportDefault)
    )


def _statement(node: Node, level: int) -> list[str]:
    pad = INDENT * level
    chunks = [pad + _comment(c) for c in node.comments]
    text = _statement_text(node, level)
    if node.trailing is not None:
        text += " " + _comment(node.trailing)
    chunks.append(pad + text)
    return chunks


def _statement_text(node: Node, level: int) -> str:
    if isinstance(node, FunctionDeclaration):
        return _function(node, level)
    if isinstance(node, VariableDeclaration):
        parts = []
        for d in node.declarations:
            parts.append(d.name if d.init is None else f"{d.name} = {_expr(d.init, level)}")
        return f"{node.kind} {', '.join(parts)};"
    if isinstance(node, ExpressionStatement):
        return _expr(node.expression, level) + ";"
    if isinstance(node, ReturnStatement):
        if node.argument is None:
            return "return;"
        return f"return {_expr(node.argument, level)};"
    if isinstance(node, ImportDeclaration):
        return f"import {node.local} from {_expr(node.source, level)};"
    if isinstance(node, ExportDefault):
        if isinstance(node.declaration, FunctionDeclaration):
            return "export default " + _function(node.declaration, level)
        return f"export default {_expr(node.declaration, level)};"
    if isinstance(node, Comment):
        return _comment(node)
    if isinstance(node, Raw):
        return _raw(node, level)
    raise TypeError(f"cannot print {type(node).__name__} as a statement")


def _function(node: FunctionDeclaration, level: int) -> str:
    name = f" {node.name}" if node.name else " "
    head = f"{'async ' if node.is_async else ''}function{name}({', '.join(node.params)})"
    if not node.body:
        return head + " {}"
    body = "\n".join(_block(node.body, level + 1))
    return f"{head} {{\n{body}\n{INDENT * level}}}"


def _raw(node: Raw, level: int) -> str:
    """Raw text with its continuation lines moved to the current indentation."""
    lines = node.text.split("\n")
    shift = len(INDENT * level) - node.indent if node.indent is not None else 0
    if shift == 0 or len(lines) == 1:
        return node.text
    moved = [lines[0]]
    for line in lines[1:]:
        if not line.strip():
            moved.append(line)
        elif shift > 0:
            moved.append(" " * shift + line)
        else:
            body = line.lstrip(" \t")
            moved.append(line[: max(len(line) - len(body) + shift, 0)] + body)
    return "\n".join(moved)


def _comment(node: Comment) -> str:
    if node.block:
        return f"/*{node.text}*/"
    return f"//{node.text}"


# ---- expressions ----------------------------------------------------------


def _expr(node: Node, level: int) -> str:
    if isinstance(node, Identifier):
        return node.name
    if isinstance(node, Literal):
        return node.raw if node.raw is not None else format_value(node.value)
    if isinstance(node, Member):
        obj = _expr(node.object, level)
        if node.computed:
            return f"{obj}[{quote(node.property)}]"
        return f"{obj}.{node.property}"
    if isinstance(node, Call):
        args = ", ".join(_expr(a, level) for a in node.arguments)
        return f"{_expr(node.callee, level)}({args})"
    if isinstance(node, Assignment):
        return f"{_expr(node.target, level)} = {_expr(node.value, level)}"
    if isinstance(node, ObjectLiteral):
        return _items("{", "}", node.properties, level, _property, node.inline)
    if isinstance(node, ArrayLiteral):
        return _items("[", "]", node.elements, level, _expr, node.inline)
    if isinstance(node, ParameterAccess):
        return _access(node)
    if isinstance(node, FunctionDeclaration):
        return _function(node, level)
    if isinstance(node, Raw):
        return _raw(node, level)
    raise TypeError(f"cannot print {type(node).__name__} as an expression")


def _items(open_: str, close: str, items: list[Node], level: int, render, inline: bool = False) -> str:
    if not items:
        return open_ + close
    if inline and not any(isinstance(i, Comment) or i.comments or i.trailing for i in items):
        parts = [render(item, level) for item in items]
        # a literal only stays on one line while everything inside it fits there
        if not any("\n" in p for p in parts):
            pad = " " if open_ == "{" else ""
            return f"{open_}{pad}{', '.join(parts)}{pad}{close}"
    pad = INDENT * (level + 1)
    lines = [open_]
    for item in items:
        lines.extend(pad + _comment(c) for c in item.comments)
        if isinstance(item, Comment):
            line = pad + _comment(item)
        else:
            line = pad + render(item, level + 1) + ","
        if item.trailing is not None:
            line += " " + _comment(item.trailing)
        lines.append(line)
    lines.append(INDENT * level + close)
    return "\n".join(lines)


def _property(node: Node, level: int) -> str:
    if isinstance(node, Property):
        if node.shorthand:
            return node.key
        return f"{property_key(node.key)}: {_expr(node.value, level)}"
    return _expr(node, level)


def _access(node: ParameterAccess) -> str:
    if node.source in REQUEST_COLLECTIONS:
        return member(f"{node.request}.{REQUEST_COLLECTIONS[node.source]}", node.name)
    if node.source == "header":
        return f"{node.request}.get({quote(node.name)})"
    if node.source == "body":
        return f"{node.request}.body"
    raise ValueError(f"no accessor for parameter location {node.source!r}")
