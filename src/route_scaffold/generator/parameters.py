"""Upsert parameter collections.

Two collections are managed, both held in a `const parameters` declaration:

- the endpoint-wide array in the default export, one object literal per
  parameter, identified by its (in, name) fields;
- the per-method object in each handler, one property per parameter whose
  value reads the parameter from the request.
"""

import logging

from route_scaffold.errors import UnsupportedParameterLocation
from route_scaffold.jsast import locate
from route_scaffold.jsast.build import const, literal
from route_scaffold.jsast.nodes import (
    REQUEST_COLLECTIONS,
    ArrayLiteral,
    Call,
    FunctionDeclaration,
    Identifier,
    Literal,
    Member,
    Node,
    ObjectLiteral,
    ParameterAccess,
    Property,
)
from route_scaffold.jsast.printer import is_identifier
from route_scaffold.parser.base import ParameterSpec

logger = logging.getLogger(__name__)

PARAMETERS_VARIABLE = "parameters"
DEFAULT_REQUEST = "req"
HEADER_ACCESSOR = "get"

ACCESS_LOCATIONS = ("query", "path", "header", "body", "formData")


def ensure_collection(body: list[Node], kind: type[ArrayLiteral] | type[ObjectLiteral]):
    """Return the `parameters` literal of `body`, creating it first in the body if needed."""
    declaration = locate.find(body, locate.VARIABLE, PARAMETERS_VARIABLE)
    if declaration is None:
        collection = kind()
        body.insert(0, const(PARAMETERS_VARIABLE, collection))
        return collection
    declarator = locate.declarator(declaration, PARAMETERS_VARIABLE)
    if not isinstance(declarator.init, kind):
        logger.info("rewriting parameters declaration as %s", kind.__name__)
        declarator.init = kind()
    return declarator.init


def merge_endpoint_parameters(body: list[Node], specs: list[ParameterSpec]) -> ArrayLiteral:
    """Upsert endpoint-wide parameters into the `parameters` array of `body`.

    A matching entry is merged field by field: every field of the spec
    overwrites or extends the entry, fields it does not mention are kept.
    """
    collection = ensure_collection(body, ArrayLiteral)
    for spec in specs:
        fields = spec.fields()
        entry = locate.find(collection.elements, locate.PARAMETER_ENTRY, (spec.location, spec.name))
        if entry is None:
            collection.elements.append(literal(fields))
            continue
        for key, value in fields.items():
            prop = locate.find(entry.properties, locate.PROPERTY, key)
            if prop is None:
                entry.properties.append(Property(key, literal(value)))
            else:
                prop.value = literal(value)
    return collection


def parameter_access(spec: ParameterSpec, request: str = DEFAULT_REQUEST) -> ParameterAccess:
    """The request accessor for a parameter.

    Raises UnsupportedParameterLocation for locations without an accessor.
    """
    if spec.location not in ACCESS_LOCATIONS:
        raise UnsupportedParameterLocation(spec.location, spec.name)
    return ParameterAccess(request, spec.location, spec.name)


def tag_access(expr: Node, name: str) -> ParameterAccess | None:
    """Recognise a request accessor written in a previous run.

    Returns the equivalent tagged ParameterAccess, or None when `expr` is not
    one of the accessor shapes.
    """
    if isinstance(expr, ParameterAccess):
        return expr
    if isinstance(expr, Call):
        callee = expr.callee
        if (
            isinstance(callee, Member)
            and not callee.computed
            and callee.property == HEADER_ACCESSOR
            and isinstance(callee.object, Identifier)
            and len(expr.arguments) == 1
            and isinstance(expr.arguments[0], Literal)
            and isinstance(expr.arguments[0].value, str)
        ):
            return ParameterAccess(callee.object.name, "header", expr.arguments[0].value)
        return None
    if not isinstance(expr, Member):
        return None
    obj = expr.object
    if isinstance(obj, Identifier) and expr.property == "body" and not expr.computed:
        return ParameterAccess(obj.name, "body", name)
    if isinstance(obj, Member) and isinstance(obj.object, Identifier) and not obj.computed:
        for location, collection in REQUEST_COLLECTIONS.items():
            if obj.property == collection:
                return ParameterAccess(obj.object.name, location, expr.property)
    return None


def request_name(function: FunctionDeclaration) -> str:
    if function.params and is_identifier(function.params[0]):
        return function.params[0]
    return DEFAULT_REQUEST


def merge_method_parameters(function: FunctionDeclaration, specs: list[ParameterSpec]) -> ObjectLiteral:
    """Upsert a handler's `parameters` object.

    A property matches when it has the parameter's name and reads from the
    same location; its value is replaced. Other properties are left alone.
    """
    request = request_name(function)
    accesses = [parameter_access(spec, request) for spec in specs]
    collection = ensure_collection(function.body, ObjectLiteral)

    for prop in collection.properties:
        if isinstance(prop, Property) and not prop.shorthand:
            tagged = tag_access(prop.value, prop.key)
            if tagged is not None:
                prop.value = tagged

    for spec, access in zip(specs, accesses):
        prop = locate.find(collection.properties, locate.PARAMETER_ACCESS, (spec.location, spec.name))
        if prop is None:
            collection.properties.append(Property(spec.name, access))
        else:
            prop.value = access
    return collection
