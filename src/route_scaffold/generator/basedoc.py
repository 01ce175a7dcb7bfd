"""The base API document served by each version: the API document without its paths."""

import logging
from pathlib import Path

import yaml

from route_scaffold.parser.base import ApiDoc

logger = logging.getLogger(__name__)


def base_document_file(tag: str) -> str:
    return f"src/api/{tag}/base-api-doc.yml"


def render_base_document(apidoc: ApiDoc) -> str:
    return yaml.safe_dump(apidoc.base_document(), sort_keys=False, allow_unicode=True)


def build_base_document(apidoc: ApiDoc, tag: str, target: Path) -> tuple[str, str]:
    """(relative path, content) of the base document; it is always regenerated."""
    rel = base_document_file(tag)
    if (target / rel).exists():
        logger.warning("Will overwrite %s", rel)
    return rel, render_base_document(apidoc)
