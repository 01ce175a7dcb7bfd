"""The endpoint's export surface: the return statement listing its handlers."""

from route_scaffold.jsast import locate
from route_scaffold.jsast.build import line_comments
from route_scaffold.jsast.nodes import (
    FunctionDeclaration,
    Identifier,
    Node,
    ObjectLiteral,
    Property,
    ReturnStatement,
)

EXPORT_COMMENT = "Export supported endpoint HTTP methods"


def insert_before_exports(body: list[Node], node: Node) -> None:
    """Insert `node` ahead of the export surface, or at the end when there is none."""
    index = locate.find_index(body, locate.RETURN)
    if index < 0:
        body.append(node)
    else:
        body.insert(index, node)


def finalize_exports(export_fn: FunctionDeclaration, verbs: list[str]) -> ReturnStatement:
    """Rebuild the return statement so it advertises exactly `verbs`."""
    statement = locate.find(export_fn.body, locate.RETURN)
    if statement is None:
        statement = ReturnStatement()
        statement.comments = line_comments(EXPORT_COMMENT)
        export_fn.body.append(statement)
    statement.argument = ObjectLiteral([Property(verb, Identifier(verb)) for verb in verbs])
    return statement
