"""API version -> short version tag (`v` + major version)."""

from route_scaffold.parser.base import ApiDoc

DEFAULT_VERSION = "1.0.0"


def major_tag(version: str) -> str:
    return "v" + str(version).split(".")[0]


def resolve_version_tag(apidoc: ApiDoc | None) -> str:
    """Tag used to namespace generated files, e.g. "2.3.1" -> "v2"."""
    version = apidoc.version if apidoc is not None else None
    return major_tag(version or DEFAULT_VERSION)
