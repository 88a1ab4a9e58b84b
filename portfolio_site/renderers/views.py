"""
View models handed to the templates.

Templates never see raw manifest records: each entry is turned into a
small view object here, and Jinja autoescaping takes care of every
interpolated string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import hashlib

from ..core.dates import format_date
from ..core.slug import slugify
from ..core.types import Entry

DEFAULT_READ_TIME = "5 min read"
DESCRIPTION_PLACEHOLDER = "Click to read more about this topic..."
PROJECT_DESCRIPTION_LIMIT = 100
CATEGORY_NAMES = {
    "web": "Web App",
    "ml": "Machine Learning",
    "api": "API",
    "data": "Data Science",
    "mobile": "Mobile App",
}


@dataclass
class LinkView:
    label: str
    href: str
    css_class: str
    icon: str


@dataclass
class TagView:
    name: str
    href: str


@dataclass
class EntryView:
    """Everything a card/list template needs for one entry.

    Attributes:
        index: Absolute position of the entry in the listing
        animation_delay: Delay (ms) for the entrance animation attribute
        href: Link to the entry's own page, if it has one
    """
    index: int
    title: str
    slug: str
    animation_delay: int
    href: str | None = None
    date_label: str = ""
    read_time: str = DEFAULT_READ_TIME
    description: str = ""
    tags: list[TagView] = field(default_factory=list)
    year: str = ""
    category: str = ""
    category_label: str = ""
    tools: str = ""
    venue: str = ""
    authors: str = ""
    abstract: str = ""
    links: list[LinkView] = field(default_factory=list)


def animation_delay(index: int) -> int:
    return (index % 3) * 100


def category_name(category: str | None) -> str:
    if not category:
        return ""
    return CATEGORY_NAMES.get(category, category)


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].strip() + "..."


def _tag_views(entry: Entry, tag_href) -> list[TagView]:
    return [TagView(name=tag, href=tag_href(tag)) for tag in entry.tags]


def blog_card_view(entry: Entry, index: int, base_path: str, tag_href) -> EntryView:
    slug = entry.key
    return EntryView(
        index=index,
        title=entry.title,
        slug=slug,
        animation_delay=animation_delay(index),
        href=f"{base_path.rstrip('/')}/{slug}.html",
        date_label=format_date(entry.date, "short"),
        read_time=entry.read_time or DEFAULT_READ_TIME,
        description=entry.description or entry.excerpt or DESCRIPTION_PLACEHOLDER,
        tags=_tag_views(entry, tag_href),
    )


def project_card_view(entry: Entry, index: int, base_path: str, tag_href) -> EntryView:
    links = []
    if entry.github:
        links.append(LinkView("View Code", entry.github, "github", "fab fa-github"))
    if entry.deployment:
        links.append(LinkView("Live Demo", entry.deployment, "live", "fas fa-external-link-alt"))
    if entry.demo:
        links.append(LinkView("Video Demo", entry.demo, "demo", "fas fa-play"))
    return EntryView(
        index=index,
        title=entry.title,
        slug=entry.key,
        animation_delay=animation_delay(index),
        year="" if entry.year is None else str(entry.year),
        category=entry.category or "",
        category_label=category_name(entry.category),
        description=truncate(entry.description or "", PROJECT_DESCRIPTION_LIMIT),
        tools=entry.tools or "",
        tags=_tag_views(entry, tag_href),
        links=links,
    )


def publication_view(entry: Entry, index: int, base_path: str, tag_href) -> EntryView:
    links = []
    if entry.pdf:
        links.append(LinkView("PDF", entry.pdf, "link-pdf", "fas fa-file-pdf"))
    if entry.doi:
        links.append(LinkView("DOI", entry.doi, "link-doi", "fas fa-external-link-alt"))
    if entry.dataset:
        links.append(LinkView("Dataset", entry.dataset, "link-dataset", "fas fa-database"))
    if entry.code:
        links.append(LinkView("Code", entry.code, "link-code", "fab fa-github"))
    category = (entry.category or "").replace("filter-", "")
    return EntryView(
        index=index,
        title=entry.title,
        slug=entry.key,
        animation_delay=animation_delay(index),
        date_label="" if entry.date is None else str(entry.date),
        category=category,
        category_label=category.upper(),
        venue=entry.venue or "",
        authors=entry.authors or "",
        abstract=entry.abstract or "",
        tags=_tag_views(entry, tag_href),
        links=links,
    )


VIEW_BUILDERS = {
    "blog": blog_card_view,
    "projects": project_card_view,
    "publications": publication_view,
}

CARD_TEMPLATES = {
    "blog": "blog_card.html",
    "projects": "project_card.html",
    "publications": "publication_item.html",
}


def filter_slug(value: str) -> str:
    return slugify(value) or "all"


def assign_filter_slugs(values: list[str]) -> dict[str, str]:
    """Give every filter value its own path segment.

    Values are taken in the given order; the first to claim a slug keeps it
    and later values with the same slug ("C" and "C++") get a short digest
    of the value appended.
    """
    issued: dict[str, str] = {}
    taken: set[str] = set()
    for value in values:
        if value in issued:
            continue
        slug = filter_slug(value)
        if slug in taken:
            digest = hashlib.sha1(value.encode("utf-8")).hexdigest()[:8]
            slug = f"{slug}-{digest}"
        issued[value] = slug
        taken.add(slug)
    return issued
