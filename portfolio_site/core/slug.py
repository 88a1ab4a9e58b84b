"""Title to URL slug conversion shared by every collection view."""

from __future__ import annotations

import re

# Word characters are ASCII only so accented titles keep the slugs (and post
# file names) the site has always used; whitespace stays Unicode-aware.
_STRIP_RE = re.compile(r"[^A-Za-z0-9_\s-]")
_SPACE_RE = re.compile(r"\s+")
_DASH_RE = re.compile(r"-+")


def slugify(title: str) -> str:
    """Convert a title to a URL-safe slug.

    Lowercases the title, drops anything that is not an ASCII letter, digit,
    underscore, whitespace or hyphen, turns whitespace runs into a single
    hyphen and collapses repeated hyphens. Leading and trailing hyphens are
    trimmed.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'
        >>> slugify("  RAG -- in  practice ")
        'rag-in-practice'
        >>> slugify("Café au lait")
        'caf-au-lait'
    """
    slug = _STRIP_RE.sub("", title.lower())
    slug = _SPACE_RE.sub("-", slug)
    slug = _DASH_RE.sub("-", slug)
    return slug.strip("-")
