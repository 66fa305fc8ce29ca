"""
data.py

Responsibility: Load the data payload templates are rendered against.

Accepted inputs:
- A YAML (or JSON) file whose top level is a mapping.
- A markdown file with YAML frontmatter delimited by '---'.
- `key=value` overrides; dotted keys create nested mappings and values are
  parsed as YAML scalars (`port=8080` -> int, `debug=true` -> bool).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable

import yaml

from gitscaffold.errors import DataError


def _parse_yaml_frontmatter(text: str) -> tuple[dict[str, Any] | None, str]:
    """
    If the markdown begins with YAML frontmatter delimited by '---', parse it.
    Returns (frontmatter_dict_or_none, remaining_markdown_text).
    """
    if not text.startswith("---\n"):
        return None, text

    end = text.find("\n---\n", 4)
    if end == -1:
        raise DataError("YAML frontmatter starts with '---' but no closing '---' was found.")

    fm_text = text[4:end]
    rest = text[end + len("\n---\n") :]
    return _as_mapping(_safe_load(fm_text), "YAML frontmatter"), rest


def _safe_load(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DataError(f"Invalid YAML: {e}") from e


def _as_mapping(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DataError(f"{what} must be a mapping/object at the top level.")
    return value


def load_data_file(path: str | Path) -> dict[str, Any]:
    """Parse a data file into a mapping."""
    p = Path(path)
    if not p.is_file():
        raise DataError(f"Data file does not exist: {p}")
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DataError(f"Cannot read data file {p}: {e}") from e

    if p.suffix.lower() in (".md", ".markdown"):
        frontmatter, _rest = _parse_yaml_frontmatter(text)
        return frontmatter or {}
    return _as_mapping(_safe_load(text), f"Data file {p}")


def apply_override(data: dict[str, Any], assignment: str) -> None:
    """Apply one `dotted.key=value` assignment to `data` in place."""
    if "=" not in assignment:
        raise DataError(f"Expected key=value, got {assignment!r}")
    key, raw = assignment.split("=", 1)
    parts = [k.strip() for k in key.split(".")]
    if not all(parts):
        raise DataError(f"Invalid key in {assignment!r}")

    try:
        value = yaml.safe_load(raw) if raw.strip() else ""
    except yaml.YAMLError:
        value = raw
    if isinstance(value, (dict, list)):
        # Only scalars are interpreted; anything structured stays a literal string.
        value = raw

    node = data
    for k in parts[:-1]:
        child = node.get(k)
        if not isinstance(child, dict):
            child = {}
            node[k] = child
        node = child
    node[parts[-1]] = value


def load_data(path: str | Path | None = None, overrides: Iterable[str] = ()) -> dict[str, Any]:
    """Load the payload from `path` (optional) and apply `overrides` in order."""
    data = load_data_file(path) if path is not None else {}
    for assignment in overrides:
        apply_override(data, assignment)
    return data
