"""
Paginated, filterable listings (blog grid, projects gallery, publications).

Filtering has a single contract for every collection: a filter value keeps
the entries whose ``category`` equals it or whose ``tags`` contain it, and
pagination is recomputed from the narrowed count.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import logging
import re

from jinja2 import Environment
from markupsafe import Markup

from ..core.types import Collection, Entry, PageState
from .views import CARD_TEMPLATES, VIEW_BUILDERS, EntryView, assign_filter_slugs, filter_slug

logger = logging.getLogger(__name__)

WINDOW_RADIUS = 2
ALL_FILTER = "*"
# Listing file names under a base path; an entry page may not take them.
RESERVED_PAGE_RE = re.compile(r"index|page-\d+")

ERROR_TITLES = {
    "blog": "Unable to load blog posts",
    "projects": "Unable to load projects",
    "publications": "Unable to load publications",
}


@dataclass
class PageLink:
    """One control in the pagination bar.

    ``kind`` is "prev", "next", "page", "current" or "ellipsis".
    """
    kind: str
    label: str
    page: int | None = None
    href: str | None = None


@dataclass
class ListPage:
    """A rendered listing page and the state it was rendered with."""
    entries: list[Entry]
    views: list[EntryView]
    state: PageState
    pagination: list[PageLink] = field(default_factory=list)
    items_html: Markup = Markup("")
    pagination_html: Markup = Markup("")
    html: Markup = Markup("")


def pagination_window(current: int, total: int, radius: int = WINDOW_RADIUS) -> list[int | None]:
    """Page numbers to show around ``current``; None marks an ellipsis.

    The first and last pages are always present. An ellipsis is only used
    when it stands for at least one hidden page.

    Examples:
        >>> pagination_window(5, 10)
        [1, None, 3, 4, 5, 6, 7, None, 10]
        >>> pagination_window(1, 4)
        [1, 2, 3, 4]
    """
    if total < 1:
        return []
    start = max(1, current - radius)
    end = min(total, current + radius)
    pages: list[int | None] = []
    if start > 1:
        pages.append(1)
        if start > 2:
            pages.append(None)
    pages.extend(range(start, end + 1))
    if end < total:
        if end < total - 1:
            pages.append(None)
        pages.append(total)
    return pages


def _normalize_filter(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value or value == ALL_FILTER:
        return None
    return value


def matches_filter(entry: Entry, value: str) -> bool:
    category = entry.category or ""
    if value == category or value == category.removeprefix("filter-"):
        return True
    return value in entry.tags


def is_reserved_page_name(slug: str) -> bool:
    """True when ``slug.html`` would overwrite a listing page."""
    return RESERVED_PAGE_RE.fullmatch(slug) is not None


class ListRenderer:
    """Renders one collection as paginated cards.

    One instance is created per page build and keeps the collection and
    ``PageState`` of the last render so that ``go_to_page`` and
    ``filter_by`` can re-render without fetching again.
    """

    def __init__(self, env: Environment, kind: str, page_size: int = 9, base_path: str = "/"):
        if kind not in VIEW_BUILDERS:
            raise ValueError(f"Unsupported listing kind: {kind}")
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.env = env
        self.kind = kind
        self.base_path = base_path.rstrip("/")
        self.state = PageState(page_size=page_size)
        self._collection: Collection | None = None
        self.filter_slugs: dict[str, str] = {}

    def page_href(self, page: int, filter_value: str | None = None) -> str:
        prefix = self.base_path
        if filter_value:
            segment = self.filter_slugs.get(filter_value) or filter_slug(filter_value)
            prefix = f"{prefix}/filter/{segment}"
        if page <= 1:
            return f"{prefix}/index.html"
        return f"{prefix}/page-{page}.html"

    def register_filters(self, values: list[str]) -> dict[str, str]:
        """Fix the path segment of each filter value before any page links to it."""
        self.filter_slugs = assign_filter_slugs(values)
        for value, segment in self.filter_slugs.items():
            if segment != filter_slug(value):
                logger.warning("Filter %r shares a slug with another value, listed under %s", value, segment)
        return self.filter_slugs

    def narrow(self, collection: Collection, filter_value: str | None) -> list[Entry]:
        value = _normalize_filter(filter_value)
        if value is None:
            return list(collection.entries)
        return [entry for entry in collection.entries if matches_filter(entry, value)]

    def render_page(
        self,
        collection: Collection,
        page: int,
        filter_value: str | None = None,
    ) -> ListPage:
        """Render one page of ``collection``.

        Pages outside ``[1, total_pages]`` are clamped to the nearest
        boundary rather than rejected.
        """
        self._collection = collection
        active = _normalize_filter(filter_value)
        visible = self.narrow(collection, active)

        state = self.state
        state.active_filter = active
        state.recompute(len(visible))
        state.current_page = state.clamp(page)

        start = (state.current_page - 1) * state.page_size
        chunk = visible[start : start + state.page_size]
        build_view = VIEW_BUILDERS[self.kind]
        views = [
            build_view(entry, start + offset, self.base_path, self._tag_href)
            for offset, entry in enumerate(chunk)
        ]
        pagination = self.pagination_links()

        card = self.env.get_template(CARD_TEMPLATES[self.kind])
        items_html = Markup("").join(Markup(card.render(item=view)) for view in views)
        pagination_html = Markup(
            self.env.get_template("pagination.html").render(links=pagination)
        )
        html = Markup(
            self.env.get_template("listing.html").render(
                kind=self.kind,
                items_html=items_html,
                pagination_html=pagination_html,
                active_filter=active,
                all_href=self.page_href(1),
                empty=not views,
            )
        )
        logger.debug(
            "Rendered %s page %d/%d (%d items, filter=%s)",
            self.kind,
            state.current_page,
            state.total_pages,
            len(views),
            active,
        )
        return ListPage(
            entries=chunk,
            views=views,
            state=replace(state),
            pagination=pagination,
            items_html=items_html,
            pagination_html=pagination_html,
            html=html,
        )

    def go_to_page(self, page: int) -> ListPage | None:
        """Re-render the held collection at ``page``; out-of-range is ignored."""
        if self._collection is None:
            return None
        if not 1 <= page <= self.state.total_pages:
            return None
        return self.render_page(self._collection, page, self.state.active_filter)

    def filter_by(self, value: str | None) -> ListPage | None:
        """Re-render the held collection narrowed to ``value``, from page 1."""
        if self._collection is None:
            return None
        return self.render_page(self._collection, 1, value)

    def pagination_links(self) -> list[PageLink]:
        state = self.state
        if state.total_pages <= 1:
            return []

        current, active = state.current_page, state.active_filter
        links: list[PageLink] = []
        if current > 1:
            links.append(PageLink("prev", "Previous", current - 1, self.page_href(current - 1, active)))
        for number in pagination_window(current, state.total_pages):
            if number is None:
                links.append(PageLink("ellipsis", "..."))
            elif number == current:
                links.append(PageLink("current", str(number), number))
            else:
                links.append(PageLink("page", str(number), number, self.page_href(number, active)))
        if current < state.total_pages:
            links.append(PageLink("next", "Next", current + 1, self.page_href(current + 1, active)))
        return links

    def render_error(self) -> Markup:
        title = ERROR_TITLES.get(self.kind, "Unable to load content")
        return Markup(self.env.get_template("error.html").render(title=title))

    def _tag_href(self, tag: str) -> str:
        return self.page_href(1, tag)
