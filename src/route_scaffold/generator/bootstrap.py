"""Register a generated API version in the app's bootstrap module.

The bootstrap module (src/index.js) declares an initialization hook; every
API version is imported at the top of the file and called from the hook with
the app instance:

    import v1 from './api/v1';
    ...
    function initializeApiVersions() {
        v1(app);
    }
"""

import logging

from route_scaffold.jsast import locate
from route_scaffold.jsast.build import call, statement
from route_scaffold.jsast.nodes import Comment, Identifier, ImportDeclaration, Literal, Program
from route_scaffold.jsast.parse import parse_module
from route_scaffold.jsast.printer import print_module

logger = logging.getLogger(__name__)

DEFAULT_HOOK = "initializeApiVersions"
DEFAULT_APP = "app"


def version_module(tag: str) -> str:
    return f"./api/{tag}"


def _import_position(program: Program) -> int:
    """Right after the first statement; detached header comments do not count."""
    for i, node in enumerate(program.body):
        if not isinstance(node, Comment):
            return i + 1
    return len(program.body)


def patch_bootstrap(
    text: str,
    tag: str,
    hook: str = DEFAULT_HOOK,
    app: str = DEFAULT_APP,
    path: str | None = None,
) -> str | None:
    """Return the patched bootstrap source, or None when nothing has to change.

    The version counts as registered as soon as the hook calls `<tag>(...)`;
    the file is then left exactly as it is.
    """
    program = parse_module(text, path=path)
    init = locate.find(program.body, locate.FUNCTION, hook)
    if init is None:
        logger.warning("%s: no %s() function, api version %s not registered", path or "bootstrap", hook, tag)
        return None
    if locate.find(init.body, locate.INVOCATION, tag) is not None:
        return None

    logger.info("adding version %s to %s", tag, path or "bootstrap")
    if locate.find(program.body, locate.IMPORT, tag) is None:
        program.body.insert(_import_position(program), ImportDeclaration(tag, Literal(version_module(tag))))
    init.body.append(statement(call(Identifier(tag), Identifier(app))))
    return print_module(program)
