"""Copy the project skeleton into the target folder."""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"
VERSION_PLACEHOLDER = "__version__"
# merged into an existing manifest instead of being copied
MANIFEST_TEMPLATE = "package.json"


def template_files() -> list[tuple[Path, str]]:
    """(source, relative target path with the version placeholder) pairs."""
    files = []
    for source in sorted(TEMPLATES_DIR.rglob("*")):
        rel = source.relative_to(TEMPLATES_DIR).as_posix()
        if source.is_file() and rel != MANIFEST_TEMPLATE:
            files.append((source, rel))
    return files


def stage_templates(target: Path, tag: str, dry_run: bool = False) -> list[str]:
    """Copy skeleton files that do not exist yet; never overwrite.

    Returns the relative paths of the files created (or that would be).
    """
    created = []
    for source, rel in template_files():
        rel = rel.replace(VERSION_PLACEHOLDER, tag)
        dest = target / rel
        if dest.exists():
            continue
        created.append(rel)
        if dry_run:
            continue
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, dest)
        logger.info("Created %s", rel)
    return created


def template_text(rel: str, tag: str) -> str | None:
    """Contents of the skeleton file that would be staged at `rel`."""
    for source, template_rel in template_files():
        if template_rel.replace(VERSION_PLACEHOLDER, tag) == rel:
            return source.read_text(encoding="utf-8")
    return None
