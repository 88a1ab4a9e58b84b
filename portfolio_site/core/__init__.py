"""
Core domain models and text utilities.

This package contains data types and pure helpers that are
independent of fetching and rendering.
"""

from .types import Collection, Entry, PageState, PostBody
from .slug import slugify
from .frontmatter import parse_frontmatter
from .dates import format_date, format_rfc822, parse_date, parse_year

__all__ = [
    "Collection",
    "Entry",
    "PageState",
    "PostBody",
    "slugify",
    "parse_frontmatter",
    "format_date",
    "format_rfc822",
    "parse_date",
    "parse_year",
]
