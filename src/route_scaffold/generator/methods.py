"""Per-method handler functions inside the endpoint's default export."""

import logging

from route_scaffold.generator.exports import insert_before_exports
from route_scaffold.generator.parameters import (
    DEFAULT_REQUEST,
    PARAMETERS_VARIABLE,
    merge_method_parameters,
)
from route_scaffold.jsast import locate
from route_scaffold.jsast.build import const, line_comments, method_call, statement
from route_scaffold.jsast.nodes import FunctionDeclaration, Identifier, Literal, ObjectLiteral
from route_scaffold.parser.base import Operation

logger = logging.getLogger(__name__)

DEFAULT_RESPONSE = "res"
NOT_IMPLEMENTED_STATUS = 501
NOT_IMPLEMENTED_TEXT = "Not Implemented"


def new_handler(verb: str, endpoint: str) -> FunctionDeclaration:
    """`async function VERB(req, res)` answering 501 until someone implements it."""
    fallback = method_call(
        method_call(Identifier(DEFAULT_RESPONSE), "status", Literal(NOT_IMPLEMENTED_STATUS)),
        "send",
        Literal(NOT_IMPLEMENTED_TEXT),
    )
    handler = FunctionDeclaration(
        verb,
        [DEFAULT_REQUEST, DEFAULT_RESPONSE],
        [const(PARAMETERS_VARIABLE, ObjectLiteral()), statement(fallback)],
        is_async=True,
    )
    handler.comments = line_comments(f'{verb} on "{endpoint}"')
    return handler


def ensure_method_handler(
    export_fn: FunctionDeclaration,
    verb: str,
    endpoint: str,
    operation: Operation,
) -> FunctionDeclaration:
    """Find or create the handler for `verb` and merge its parameters.

    An existing handler is only touched through its parameters object; the
    rest of its body belongs to whoever implemented it.
    """
    handler = locate.find(export_fn.body, locate.FUNCTION, verb)
    if handler is None:
        logger.debug("creating %s handler for %s", verb, endpoint)
        handler = new_handler(verb, endpoint)
        insert_before_exports(export_fn.body, handler)
    merge_method_parameters(handler, operation.parameters)
    return handler
