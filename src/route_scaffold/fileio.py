"""File helpers: reads that tolerate missing files, atomic writes."""

import os
import tempfile
from pathlib import Path

DEFAULT_MODE = 0o644


def read_text(path: Path) -> str | None:
    """File content, or None when the file does not exist."""
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def write_text_atomic(path: Path, content: str) -> None:
    """Write through a temporary file in the same folder, then rename over `path`.

    An interrupted run leaves either the old or the new file, never a partial one.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = path.stat().st_mode & 0o777 if path.exists() else DEFAULT_MODE
    fd, tmp = tempfile.mkstemp(prefix=".tmp.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.unlink(tmp)
