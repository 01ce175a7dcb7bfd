"""JavaScript source -> syntax tree, using tree-sitter.

tree-sitter produces a concrete syntax tree; the converter below maps the
small set of shapes the generator manages onto the node classes in
`jsast.nodes` and keeps everything else as Raw source text.
"""

import re

import tree_sitter_javascript
from tree_sitter import Language, Parser

from route_scaffold.errors import MalformedSourceError
from route_scaffold.jsast.nodes import (
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
    Program,
    Property,
    Raw,
    ReturnStatement,
    VariableDeclaration,
    VariableDeclarator,
)

JS_LANGUAGE = Language(tree_sitter_javascript.language())

_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_UNICODE_ESCAPE = re.compile(r"\\u\{([0-9a-fA-F]+)\}|\\u([0-9a-fA-F]{4})|\\x([0-9a-fA-F]{2})")


class _Unstructured(Exception):
    """Raised when a node falls outside the managed vocabulary."""


def parse_module(text: str, path: str | None = None) -> Program:
    """Parse JavaScript module source into a Program.

    Raises MalformedSourceError when tree-sitter reports a syntax error.
    """
    source = text.encode("utf-8")
    parser = Parser(JS_LANGUAGE)
    tree = parser.parse(source)
    root = tree.root_node
    if root.has_error:
        error = _first_error(root)
        line = error.start_point[0] + 1 if error is not None else None
        raise MalformedSourceError("syntax error", path=path, line=line)
    return _Converter(source, path).program(root)


def _first_error(node):
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def _has_multiline_template(node) -> bool:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "template_string" and current.start_point[0] != current.end_point[0]:
            return True
        stack.extend(current.children)
    return False


def unescape_string(raw: str) -> str:
    """Decode the value of a quoted JavaScript string literal."""
    body = raw[1:-1]
    out = []
    i = 0
    while i < len(body):
        ch = body[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        match = _UNICODE_ESCAPE.match(body, i)
        if match:
            digits = match.group(1) or match.group(2) or match.group(3)
            out.append(chr(int(digits, 16)))
            i = match.end()
            continue
        nxt = body[i + 1] if i + 1 < len(body) else ""
        if nxt == "\n":
            pass  # line continuation
        else:
            out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _number_value(text: str):
    cleaned = text.replace("_", "")
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        raise _Unstructured(text)


class _Converter:
    def __init__(self, source: bytes, path: str | None = None):
        self.source = source
        self.path = path

    def text(self, node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8")

    # ---- sequences -------------------------------------------------------

    def program(self, root) -> Program:
        return Program(body=self.sequence(root.named_children, self.statement))

    def sequence(self, children, convert) -> list[Node]:
        """Convert a list of sibling nodes, attaching comments and blank lines.

        Comments directly above a node become its leading comments, a comment
        on the same line as the previous node becomes that node's trailing
        comment, and comments separated by a blank line stay standalone.
        """
        items: list[Node] = []
        pending = []
        prev_end = None

        def emit(node: Node, first_row: int, last_row: int):
            nonlocal prev_end
            # the first node of a block leaves the choice to the printer
            node.blank_before = None if prev_end is None else first_row - prev_end > 1
            items.append(node)
            prev_end = last_row

        def flush(next_start: int | None):
            # the contiguous run of comments right above the next node attaches to it
            attached = []
            if next_start is not None:
                row = next_start
                while pending and row - pending[-1].end_point[0] <= 1:
                    attached.insert(0, pending.pop())
                    row = attached[0].start_point[0]
            for c in pending:
                emit(self.comment(c), c.start_point[0], c.end_point[0])
            pending.clear()
            return attached

        for child in children:
            if child.type == "comment":
                if (
                    items
                    and not pending
                    and prev_end == child.start_point[0]
                    and items[-1].trailing is None
                    and "\n" not in self.text(child)
                ):
                    items[-1].trailing = self.comment(child)
                    continue
                pending.append(child)
                continue
            attached = flush(child.start_point[0])
            node = convert(child)
            node.comments = [self.comment(c) for c in attached]
            first_row = attached[0].start_point[0] if attached else child.start_point[0]
            emit(node, first_row, child.end_point[0])
        flush(None)
        return items

    def comment(self, node) -> Comment:
        text = self.text(node)
        if text.startswith("//"):
            return Comment(text[2:])
        return Comment(text[2:-2], block=True)

    def raw(self, node) -> Raw:
        """Raw text plus the indentation of the line it starts on.

        The indentation lets the printer move continuation lines along with
        the first one. Text holding a multi-line template string is pinned,
        since shifting its lines would change the string.
        """
        line_start = self.source.rfind(b"\n", 0, node.start_byte) + 1
        line = self.source[line_start:node.start_byte]
        indent = len(line) - len(line.lstrip(b" \t"))
        return Raw(self.text(node), indent=None if _has_multiline_template(node) else indent)

    # ---- statements ------------------------------------------------------

    def statement(self, node) -> Node:
        try:
            return self._statement(node)
        except _Unstructured:
            return self.raw(node)

    def _statement(self, node) -> Node:
        kind = node.type
        if kind == "function_declaration":
            return self.function(node)
        if kind in ("lexical_declaration", "variable_declaration"):
            return self.variables(node)
        if kind == "expression_statement":
            expressions = self._named(node)
            if len(expressions) != 1:
                raise _Unstructured(kind)
            return ExpressionStatement(self.expression(expressions[0]))
        if kind == "return_statement":
            values = self._named(node)
            if len(values) > 1:
                raise _Unstructured(kind)
            return ReturnStatement(self.expression(values[0]) if values else None)
        if kind == "import_statement":
            return self.import_(node)
        if kind == "export_statement":
            return self.export(node)
        raise _Unstructured(kind)

    def _named(self, node) -> list:
        children = node.named_children
        if any(c.type == "comment" for c in children):
            raise _Unstructured("comment")
        return children

    def function(self, node) -> FunctionDeclaration:
        name = node.child_by_field_name("name")
        params = node.child_by_field_name("parameters")
        body = node.child_by_field_name("body")
        return FunctionDeclaration(
            name=self.text(name) if name is not None else None,
            params=[self.text(p) for p in self._named(params)],
            body=self.sequence(body.named_children, self.statement),
            is_async=any(c.type == "async" for c in node.children),
        )

    def variables(self, node) -> VariableDeclaration:
        declarations = []
        for child in self._named(node):
            if child.type != "variable_declarator":
                raise _Unstructured(child.type)
            value = child.child_by_field_name("value")
            declarations.append(
                VariableDeclarator(
                    self.text(child.child_by_field_name("name")),
                    self.expression(value) if value is not None else None,
                )
            )
        return VariableDeclaration(node.children[0].type, declarations)

    def import_(self, node) -> ImportDeclaration:
        source = node.child_by_field_name("source")
        clauses = [c for c in self._named(node) if c.type == "import_clause"]
        if source is None or len(clauses) != 1:
            raise _Unstructured("import")
        specifiers = self._named(clauses[0])
        if len(specifiers) != 1 or specifiers[0].type != "identifier":
            raise _Unstructured("import")
        return ImportDeclaration(self.text(specifiers[0]), self._string(source))

    def export(self, node) -> ExportDefault:
        if not any(c.type == "default" for c in node.children):
            raise _Unstructured("export")
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            if declaration.type != "function_declaration":
                raise _Unstructured(declaration.type)
            return ExportDefault(self.function(declaration))
        value = node.child_by_field_name("value")
        if value is None:
            raise _Unstructured("export")
        if value.type in ("function", "function_expression"):
            return ExportDefault(self.function(value))
        return ExportDefault(self.expression(value))

    # ---- expressions -----------------------------------------------------

    def expression(self, node) -> Node:
        try:
            return self._expression(node)
        except _Unstructured:
            return self.raw(node)

    def _expression(self, node) -> Node:
        kind = node.type
        if kind in ("identifier", "undefined"):
            return Identifier(self.text(node))
        if kind == "string":
            return self._string(node)
        if kind == "number":
            raw = self.text(node)
            return Literal(_number_value(raw), raw=raw)
        if kind in ("true", "false"):
            return Literal(kind == "true", raw=kind)
        if kind == "null":
            return Literal(None, raw="null")
        if kind == "member_expression":
            if any(c.type == "optional_chain" for c in node.children):
                raise _Unstructured(kind)
            prop = node.child_by_field_name("property")
            if prop.type != "property_identifier":
                raise _Unstructured(kind)
            return Member(self.expression(node.child_by_field_name("object")), self.text(prop))
        if kind == "subscript_expression":
            index = node.child_by_field_name("index")
            if index is None or index.type != "string" or any(c.type == "optional_chain" for c in node.children):
                raise _Unstructured(kind)
            return Member(
                self.expression(node.child_by_field_name("object")),
                self._string(index).value,
                computed=True,
            )
        if kind == "call_expression":
            args = node.child_by_field_name("arguments")
            if args.type != "arguments" or any(c.type == "optional_chain" for c in node.children):
                raise _Unstructured(kind)
            return Call(
                self.expression(node.child_by_field_name("function")),
                [self.expression(a) for a in self._named(args)],
            )
        if kind == "assignment_expression":
            return Assignment(
                self.expression(node.child_by_field_name("left")),
                self.expression(node.child_by_field_name("right")),
            )
        if kind == "object":
            return ObjectLiteral(self.sequence(node.named_children, self.property), inline=self._one_line(node))
        if kind == "array":
            if self._has_holes(node):
                raise _Unstructured(kind)
            return ArrayLiteral(self.sequence(node.named_children, self.expression), inline=self._one_line(node))
        raise _Unstructured(kind)

    def _one_line(self, node) -> bool:
        return node.start_point[0] == node.end_point[0] and not any(c.type == "comment" for c in node.children)

    def _has_holes(self, node) -> bool:
        # array elisions ([a, , b]) show up as a comma right after [ or another comma
        tokens = [c.type for c in node.children if c.type != "comment"]
        return any(t in ("[", ",") and n == "," for t, n in zip(tokens, tokens[1:]))

    def _string(self, node) -> Literal:
        if node.type != "string":
            raise _Unstructured(node.type)
        raw = self.text(node)
        try:
            value = unescape_string(raw)
        except (ValueError, OverflowError) as e:
            raise MalformedSourceError(f"bad string escape: {e}", path=self.path, line=node.start_point[0] + 1) from e
        return Literal(value, raw=raw)

    def property(self, node) -> Node:
        try:
            return self._property(node)
        except _Unstructured:
            return self.raw(node)

    def _property(self, node) -> Property:
        if node.type == "shorthand_property_identifier":
            name = self.text(node)
            return Property(name, Identifier(name), shorthand=True)
        if node.type != "pair":
            raise _Unstructured(node.type)
        key = node.child_by_field_name("key")
        if key.type == "property_identifier":
            name = self.text(key)
        elif key.type == "string":
            name = self._string(key).value
        elif key.type == "number":
            name = self.text(key)
        else:
            raise _Unstructured(key.type)
        return Property(name, self.expression(node.child_by_field_name("value")))
