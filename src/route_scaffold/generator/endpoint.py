"""Merge one endpoint of the API document into its route module.

The route module's default export is a function whose body holds the
endpoint parameters, one handler per HTTP method, their documentation and a
final return statement listing the handlers:

    export default function endpoint() {
        const parameters = [...];

        // GET on "/pets"
        async function GET(req, res) { ... }

        // Documentation for method GET
        GET.apiDoc = {...};

        // Export supported endpoint HTTP methods
        return {
            GET: GET,
        };
    }
"""

import logging

from route_scaffold.errors import InvalidSpecification, MalformedSourceError
from route_scaffold.generator.docs import attach_documentation
from route_scaffold.generator.exports import finalize_exports
from route_scaffold.generator.methods import ensure_method_handler
from route_scaffold.generator.parameters import merge_endpoint_parameters
from route_scaffold.jsast import locate
from route_scaffold.jsast.nodes import ExportDefault, FunctionDeclaration, Program
from route_scaffold.jsast.parse import parse_module
from route_scaffold.jsast.printer import print_module
from route_scaffold.parser.base import Endpoint

logger = logging.getLogger(__name__)

ENDPOINT_FUNCTION = "endpoint"


def endpoint_file(tag: str, path: str) -> str:
    """Module path, relative to the project root, for an endpoint template.

    Dot segments are refused so every module stays under the paths folder.
    """
    name = path.strip("/") or "index"
    if any(segment in (".", "..") for segment in name.replace("\\", "/").split("/")):
        raise InvalidSpecification(f"endpoint {path!r}: dot segments are not allowed in a route path")
    return f"src/api/{tag}/paths/{name}.js"


def ensure_default_export(program: Program, path: str | None = None) -> FunctionDeclaration:
    """Return the default-exported function, appending an empty one if missing."""
    export = locate.find(program.body, locate.DEFAULT_EXPORT)
    if export is None:
        export = ExportDefault(FunctionDeclaration(ENDPOINT_FUNCTION))
        program.body.append(export)
    if not isinstance(export.declaration, FunctionDeclaration):
        raise MalformedSourceError("default export is not a function declaration", path=path)
    return export.declaration


def merge_endpoint(program: Program, endpoint: Endpoint, path: str | None = None) -> Program:
    """Apply `endpoint` to `program` in place."""
    export_fn = ensure_default_export(program, path)
    if endpoint.parameters is not None:
        merge_endpoint_parameters(export_fn.body, endpoint.parameters)
    for verb, operation in endpoint.operations.items():
        logger.info('Processing "%s %s" %s', verb, endpoint.path, operation.summary)
        ensure_method_handler(export_fn, verb, endpoint.path, operation)
        attach_documentation(export_fn, verb, operation)
    finalize_exports(export_fn, endpoint.verbs)
    return program


def render_endpoint(existing: str | None, endpoint: Endpoint, path: str | None = None) -> str:
    """New module source for `endpoint`, merged into `existing` source if given."""
    program = parse_module(existing, path=path) if existing is not None else Program()
    merge_endpoint(program, endpoint, path)
    return print_module(program)
