"""Merge the generated app's default dependencies into package.json."""

import copy
import json
import logging
from pathlib import Path

from route_scaffold.errors import MalformedSourceError
from route_scaffold.fileio import read_text, write_text_atomic
from route_scaffold.generator.templates import MANIFEST_TEMPLATE, TEMPLATES_DIR

logger = logging.getLogger(__name__)

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


def default_manifest() -> dict:
    return json.loads((TEMPLATES_DIR / MANIFEST_TEMPLATE).read_text(encoding="utf-8"))


def ensure_dependencies(defaults: dict, existing: dict | None) -> dict:
    """Add missing modules from `defaults`; pinned versions are never changed."""
    merged = dict(existing or {})
    for module, version in defaults.items():
        merged.setdefault(module, version)
    return merged


def merge_manifest(existing: dict | None, defaults: dict) -> dict:
    if existing is None:
        return copy.deepcopy(defaults)
    merged = dict(existing)
    for section in DEPENDENCY_SECTIONS:
        if section in defaults or section in existing:
            merged[section] = ensure_dependencies(defaults.get(section, {}), existing.get(section))
    return merged


def update_manifest(path: Path) -> bool:
    """Merge the defaults into the manifest at `path`; True if the file changed."""
    text = read_text(path)
    try:
        existing = json.loads(text) if text is not None else None
    except json.JSONDecodeError as e:
        raise MalformedSourceError(e.msg, path=str(path), line=e.lineno) from e

    merged = merge_manifest(existing, default_manifest())
    if merged == existing:
        return False
    write_text_atomic(path, json.dumps(merged, indent=4) + "\n")
    logger.info("Updated %s", path.name)
    return True
