"""Minimal frontmatter reader for post bodies.

Only the flat ``key: value`` subset is understood: one key per line, values
either plain strings or ``[a, b, c]`` inline lists. Nested mappings, block
lists, multi-line strings and typed scalars are not YAML-parsed; they come
through as plain strings (or are ignored when the line has no colon).
"""

from __future__ import annotations

import re

from .types import PostBody

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n(.*))?\Z", re.DOTALL
)
_QUOTES = "\"'"


def parse_frontmatter(text: str) -> PostBody:
    """Split ``text`` into a frontmatter mapping and the remaining body.

    Text that does not start with a ``---`` delimited block is returned
    untouched as the body with an empty mapping.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return PostBody(frontmatter={}, body=text)

    header, body = match.group(1), match.group(2) or ""
    frontmatter: dict[str, str | list[str]] = {}
    for line in header.splitlines():
        key, sep, raw_value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        frontmatter[key] = _parse_value(raw_value.strip())
    return PostBody(frontmatter=frontmatter, body=body)


def _parse_value(value: str) -> str | list[str]:
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1]
        if not inner.strip():
            return []
        return [item.strip().replace('"', "").replace("'", "") for item in inner.split(",")]
    return _strip_quotes(value)


def _strip_quotes(value: str) -> str:
    if value and value[0] in _QUOTES:
        value = value[1:]
    if value and value[-1] in _QUOTES:
        value = value[:-1]
    return value
