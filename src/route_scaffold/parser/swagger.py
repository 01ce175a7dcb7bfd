"""OpenAPI v2 / Swagger document loader.

Reads a YAML or JSON document from disk into an ApiDoc model.
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from route_scaffold.errors import InvalidSpecification, SpecificationUnavailable

from .base import ApiDoc

URL_SCHEMES = ("http://", "https://")


def load_apidoc(source: str | Path) -> ApiDoc:
    """Load and validate the API document at `source` (a file path)."""
    if str(source).startswith(URL_SCHEMES):
        raise SpecificationUnavailable(f"{source}: loading an API document from a URL is not supported")

    file_path = Path(source)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SpecificationUnavailable(f"{file_path}: {e.strerror or e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SpecificationUnavailable(f"{file_path}: not valid YAML/JSON: {e}") from e

    return parse_apidoc(data, origin=str(file_path))


def parse_apidoc(data, origin: str = "<document>") -> ApiDoc:
    """Validate an already-decoded document."""
    if not isinstance(data, dict):
        raise InvalidSpecification(f"{origin}: expected a mapping at the top level")
    try:
        doc = ApiDoc.from_document(data)
    except ValidationError as e:
        raise InvalidSpecification(f"{origin}: {e}") from e
    # validate every path item up front so errors surface before any file is touched
    doc.endpoints()
    return doc
