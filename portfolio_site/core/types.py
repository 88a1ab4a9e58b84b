"""
Core data types for the portfolio site pipeline.

This module defines the structures that flow between the loader and the
renderers:
- Entry: One content record (blog post, project or publication)
- Collection: The sorted entries of one manifest, held for one page build
- PostBody: A Markdown body split into frontmatter and text
- PageState: Pagination state owned by a list renderer
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
import math
from typing import Any

from .slug import slugify

# JSON keys that differ from the attribute name.
_JSON_ALIASES = {"readTime": "read_time"}


@dataclass
class Entry:
    """A single content item from a manifest.

    Attributes:
        title: Display title, the only required field
        date: Publication date as written in the manifest (blog, publications)
        year: Year as written in the manifest (projects)
        description: Short description used on cards and in feeds
        excerpt: Alternative short text used when description is missing
        tags: Ordered tag list
        slug: Explicit slug; derived from the title when absent
        category: Filter category ("web", "ml", "vision", ...)
        extra: Manifest keys this type does not model, kept verbatim
    """
    title: str
    date: str | None = None
    year: int | str | None = None
    description: str | None = None
    excerpt: str | None = None
    tags: list[str] = field(default_factory=list)
    slug: str | None = None
    category: str | None = None
    read_time: str | None = None
    tools: str | None = None
    authors: str | None = None
    venue: str | None = None
    abstract: str | None = None
    pdf: str | None = None
    doi: str | None = None
    code: str | None = None
    dataset: str | None = None
    github: str | None = None
    deployment: str | None = None
    demo: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        """The explicit slug, or the slug derived from the title."""
        return self.slug or slugify(self.title)

    def matches_slug(self, slug: str) -> bool:
        return self.slug == slug or slugify(self.title) == slug

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Entry":
        """Build an Entry from one manifest object.

        Raises:
            ValueError: If the record has no usable title
        """
        title = record.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError("entry is missing a title")
        return cls(title=title).merged(record)

    def merged(self, overrides: dict[str, Any]) -> "Entry":
        """Return a copy with ``overrides`` applied, later values winning."""
        known = {f.name for f in fields(self)} - {"extra"}
        changes: dict[str, Any] = {}
        extra = dict(self.extra)
        for raw_key, value in overrides.items():
            key = _JSON_ALIASES.get(raw_key, raw_key)
            if key == "tags":
                changes[key] = _as_tag_list(value)
            elif key in known:
                changes[key] = value
            else:
                extra[raw_key] = value
        return replace(self, **changes, extra=extra)


def _as_tag_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    if isinstance(value, (list, tuple)):
        return [str(tag) for tag in value if tag]
    return [str(value)]


@dataclass
class Collection:
    """Entries of one manifest, sorted newest first.

    Attributes:
        name: Collection name ("blog", "projects", "publications")
        entries: Sorted entries
        sort_by: Field the entries were sorted on, "date" or "year"
    """
    name: str
    entries: list[Entry] = field(default_factory=list)
    sort_by: str = "date"

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def index_of(self, slug: str) -> int:
        for index, entry in enumerate(self.entries):
            if entry.matches_slug(slug):
                return index
        return -1


@dataclass
class PostBody:
    """A fetched post split into its frontmatter mapping and Markdown body."""
    frontmatter: dict[str, str | list[str]] = field(default_factory=dict)
    body: str = ""


@dataclass
class PageState:
    """Pagination state of one list renderer.

    Attributes:
        current_page: 1-indexed page currently shown
        page_size: Entries per page
        total_pages: ceil(visible entries / page_size)
        active_filter: Category or tag currently narrowing the collection
    """
    current_page: int = 1
    page_size: int = 9
    total_pages: int = 0
    active_filter: str | None = None

    def recompute(self, count: int) -> None:
        self.total_pages = math.ceil(count / self.page_size) if count else 0

    def clamp(self, page: int) -> int:
        return min(max(page, 1), max(self.total_pages, 1))
