"""`VERB.apiDoc = {...}` documentation assignments.

Documentation is derived from the API document only, so it is always
replaced as a whole rather than merged.
"""

from route_scaffold.generator.exports import insert_before_exports
from route_scaffold.jsast import locate
from route_scaffold.jsast.build import literal, statement
from route_scaffold.jsast.nodes import (
    Assignment,
    ExpressionStatement,
    FunctionDeclaration,
    Identifier,
    Member,
)
from route_scaffold.parser.base import Operation


def documentation_statement(verb: str, operation: Operation) -> ExpressionStatement:
    target = Member(Identifier(verb), locate.DOC_PROPERTY)
    return statement(
        Assignment(target, literal(operation.documentation())),
        comment=f"Documentation for method {verb}",
    )


def attach_documentation(export_fn: FunctionDeclaration, verb: str, operation: Operation) -> ExpressionStatement:
    node = documentation_statement(verb, operation)
    body = export_fn.body
    index = locate.find_index(body, locate.DOCUMENTATION, verb)
    if index < 0:
        insert_before_exports(body, node)
    else:
        node.blank_before = body[index].blank_before
        body[index] = node
    return node
