"""Find managed declarations in a scope by (kind, name).

Every merger looks nodes up through this module so that "which node is the
GET handler" or "which statement documents POST" is decided in one place.
"""

from collections.abc import Callable

from route_scaffold.jsast.nodes import (
    Assignment,
    Call,
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
    Property,
    ReturnStatement,
    VariableDeclaration,
)

FUNCTION = "function"
VARIABLE = "variable"
DEFAULT_EXPORT = "default-export"
RETURN = "return"
DOCUMENTATION = "documentation"
IMPORT = "import"
INVOCATION = "invocation"
PROPERTY = "property"
PARAMETER_ENTRY = "parameter-entry"
PARAMETER_ACCESS = "parameter-access"

DOC_PROPERTY = "apiDoc"


def _function(node: Node, name) -> bool:
    return isinstance(node, FunctionDeclaration) and node.name == name


def _variable(node: Node, name) -> bool:
    return isinstance(node, VariableDeclaration) and any(d.name == name for d in node.declarations)


def _default_export(node: Node, name) -> bool:
    return isinstance(node, ExportDefault)


def _return(node: Node, name) -> bool:
    return isinstance(node, ReturnStatement)


def _documentation(node: Node, name) -> bool:
    if not (isinstance(node, ExpressionStatement) and isinstance(node.expression, Assignment)):
        return False
    target = node.expression.target
    return (
        isinstance(target, Member)
        and target.property == DOC_PROPERTY
        and isinstance(target.object, Identifier)
        and target.object.name == name
    )


def _import(node: Node, name) -> bool:
    return isinstance(node, ImportDeclaration) and node.local == name


def _invocation(node: Node, name) -> bool:
    return (
        isinstance(node, ExpressionStatement)
        and isinstance(node.expression, Call)
        and isinstance(node.expression.callee, Identifier)
        and node.expression.callee.name == name
    )


def _property(node: Node, name) -> bool:
    return isinstance(node, Property) and node.key == name


def _parameter_entry(node: Node, name) -> bool:
    """`name` is an (in, name) pair matched against an object literal's fields."""
    if not isinstance(node, ObjectLiteral):
        return False
    location, param = name
    return property_value(node, "in") == location and property_value(node, "name") == param


def _parameter_access(node: Node, name) -> bool:
    """`name` is an (in, name) pair matched against a tagged property value."""
    location, param = name
    return (
        isinstance(node, Property)
        and node.key == param
        and isinstance(node.value, ParameterAccess)
        and node.value.source == location
    )


MATCHERS: dict[str, Callable[[Node, object], bool]] = {
    FUNCTION: _function,
    VARIABLE: _variable,
    DEFAULT_EXPORT: _default_export,
    RETURN: _return,
    DOCUMENTATION: _documentation,
    IMPORT: _import,
    INVOCATION: _invocation,
    PROPERTY: _property,
    PARAMETER_ENTRY: _parameter_entry,
    PARAMETER_ACCESS: _parameter_access,
}


def find_index(scope: list[Node], kind: str, name=None) -> int:
    """Index of the first node in `scope` matching (kind, name), or -1."""
    try:
        matcher = MATCHERS[kind]
    except KeyError:
        raise ValueError(f"unknown declaration kind {kind!r}") from None
    for i, node in enumerate(scope):
        if matcher(node, name):
            return i
    return -1


def find(scope: list[Node], kind: str, name=None) -> Node | None:
    """First node in `scope` matching (kind, name), or None."""
    index = find_index(scope, kind, name)
    return scope[index] if index >= 0 else None


def property_value(obj: ObjectLiteral, key: str):
    """Scalar value of a literal property, or None when absent or not a literal."""
    prop = find(obj.properties, PROPERTY, key)
    if prop is not None and isinstance(prop.value, Literal):
        return prop.value.value
    return None


def declarator(declaration: VariableDeclaration, name: str):
    for d in declaration.declarations:
        if d.name == name:
            return d
    return None
