"""Validates generated files before they are written.

Each check looks only at the files whose suffix it knows and maps the
offending file names to a one-line reason.
"""

import json
from collections.abc import Callable

import yaml

from route_scaffold.errors import MalformedSourceError
from route_scaffold.jsast.parse import parse_module


def _collect(files: dict[str, str], suffixes: tuple[str, ...], check: Callable[[str, str], str | None]) -> dict[str, str]:
    errors = {}
    for filename, content in files.items():
        if not filename.endswith(suffixes):
            continue
        reason = check(filename, content)
        if reason is not None:
            errors[filename] = reason
    return errors


def _javascript_error(filename: str, content: str) -> str | None:
    try:
        parse_module(content, path=filename)
    except MalformedSourceError as e:
        return str(e)
    return None


def _yaml_error(filename: str, content: str) -> str | None:
    try:
        yaml.safe_load(content)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        where = f" (line {mark.line + 1})" if mark is not None else ""
        return f"not loadable as YAML{where}: {getattr(e, 'problem', None) or e}"
    return None


def _json_error(filename: str, content: str) -> str | None:
    try:
        json.loads(content)
    except json.JSONDecodeError as e:
        return f"JSON syntax error (line {e.lineno}): {e.msg}"
    return None


def validate_javascript(files: dict[str, str]) -> dict[str, str]:
    """Route modules that tree-sitter cannot parse."""
    return _collect(files, (".js",), _javascript_error)


def validate_yaml(files: dict[str, str]) -> dict[str, str]:
    return _collect(files, (".yaml", ".yml"), _yaml_error)


def validate_json(files: dict[str, str]) -> dict[str, str]:
    return _collect(files, (".json",), _json_error)


def validate_files(files: dict[str, str]) -> dict[str, str]:
    """Every file that would be written broken, whatever its format."""
    errors = {}
    for validate in (validate_javascript, validate_yaml, validate_json):
        errors.update(validate(files))
    return errors
