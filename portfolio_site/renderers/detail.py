"""
Single-entry article pages.

An entry is resolved from the already-loaded collection by slug. Its
Markdown body is fetched separately; when that fetch fails the page is still
rendered, from the manifest metadata alone, as a short preview.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from urllib.parse import quote

from jinja2 import Environment
import markdown
from markupsafe import Markup

from ..core.dates import format_date
from ..core.frontmatter import parse_frontmatter
from ..core.types import Collection, Entry, PostBody
from ..errors import NotFoundError
from ..fetcher import Fetcher, join_url
from .views import DEFAULT_READ_TIME

logger = logging.getLogger(__name__)

RELATED_LIMIT = 4
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "nl2br", "sane_lists"]


@dataclass
class NavLink:
    title: str
    slug: str
    href: str
    date_label: str = ""


@dataclass
class PageMeta:
    title: str
    description: str
    keywords: str


@dataclass
class DetailView:
    """A rendered article and the pieces it was assembled from.

    Attributes:
        entry: The resolved entry with body frontmatter merged over it
        body_html: Converted Markdown body, or the preview panel on fallback
        fallback: True when the body could not be fetched or parsed
        prev: Newer neighbour in collection order
        next: Older neighbour in collection order
        related: Up to four other entries, in collection order
    """
    entry: Entry
    body_html: Markup
    fallback: bool
    prev: NavLink | None
    next: NavLink | None
    related: list[NavLink] = field(default_factory=list)
    meta: PageMeta | None = None
    discussion_url: str | None = None
    html: Markup = Markup("")


def markdown_to_html(text: str) -> Markup:
    """Convert a post body to HTML.

    Raw HTML inside the Markdown is passed through; post bodies are
    authored content, unlike manifest fields which are always escaped.
    """
    return Markup(markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS))


def neighbours(collection: Collection, index: int) -> tuple[Entry | None, Entry | None]:
    """Return the (newer, older) entries around ``index``."""
    entries = collection.entries
    newer = entries[index - 1] if index > 0 else None
    older = entries[index + 1] if index < len(entries) - 1 else None
    return newer, older


def related_entries(collection: Collection, index: int, limit: int = RELATED_LIMIT) -> list[Entry]:
    return [entry for pos, entry in enumerate(collection.entries) if pos != index][:limit]


class DetailRenderer:
    """Renders one entry of a collection as a full article.

    Like the loader, it ignores a render requested while a body fetch for
    a previous one is still outstanding.
    """

    def __init__(
        self,
        env: Environment,
        fetcher: Fetcher,
        posts_url: str,
        base_path: str = "/blog",
        site_name: str = "",
        site_url: str = "",
        discussion_repo: str | None = None,
    ):
        self.env = env
        self.fetcher = fetcher
        self.posts_url = posts_url
        self.base_path = base_path.rstrip("/")
        self.site_name = site_name
        self.site_url = site_url.rstrip("/")
        self.discussion_repo = discussion_repo
        self._in_flight = False

    @property
    def busy(self) -> bool:
        return self._in_flight

    def entry_href(self, entry: Entry) -> str:
        return f"{self.base_path}/{entry.key}.html"

    def resolve(self, collection: Collection, slug: str) -> int:
        index = collection.index_of(slug)
        if index < 0:
            raise NotFoundError(slug, collection.name)
        return index

    async def render_detail(self, collection: Collection, slug: str) -> DetailView | None:
        """Render the entry matching ``slug``.

        Raises:
            NotFoundError: If no entry in the collection matches the slug
        """
        if self._in_flight:
            logger.debug("Ignoring render of %s: another render is in flight", slug)
            return None

        index = self.resolve(collection, slug)
        entry = collection.entries[index]

        self._in_flight = True
        try:
            post = await self.fetch_body(slug)
        finally:
            self._in_flight = False

        body_html: Markup | None = None
        if post is not None:
            try:
                entry = entry.merged(post.frontmatter)
                body_html = markdown_to_html(post.body)
            except (TypeError, ValueError) as exc:
                logger.warning("Could not render body of %s, showing preview: %s", slug, exc)
                entry = collection.entries[index]
                body_html = None

        fallback = body_html is None
        if fallback:
            body_html = Markup(
                self.env.get_template("preview.html").render(description=entry.description or "")
            )

        newer, older = neighbours(collection, index)
        view = DetailView(
            entry=entry,
            body_html=body_html,
            fallback=fallback,
            prev=self._nav(newer),
            next=self._nav(older),
            related=[self._nav(item) for item in related_entries(collection, index)],
            meta=self._meta(entry),
            discussion_url=self._discussion_url(entry, slug),
        )
        view.html = Markup(
            self.env.get_template("article.html").render(
                view=view,
                entry=entry,
                date_label=format_date(entry.date, "long"),
                read_time=entry.read_time or DEFAULT_READ_TIME,
                tag_href=f"{self.base_path}/index.html",
            )
        )
        return view

    async def fetch_body(self, slug: str) -> PostBody | None:
        url = join_url(self.posts_url, f"{slug}.md")
        result = await self.fetcher.fetch_text(url)
        if not result.ok:
            logger.info("No body for %s (%s), rendering from metadata", slug, result.error)
            return None
        return parse_frontmatter(result.text)

    def render_error(self, message: str = "Post not found") -> Markup:
        return Markup(self.env.get_template("error.html").render(title=message))

    def _nav(self, entry: Entry | None) -> NavLink | None:
        if entry is None:
            return None
        return NavLink(
            title=entry.title,
            slug=entry.key,
            href=self.entry_href(entry),
            date_label=format_date(entry.date, "long"),
        )

    def _meta(self, entry: Entry) -> PageMeta:
        title = f"{entry.title} - {self.site_name}" if self.site_name else entry.title
        return PageMeta(
            title=title,
            description=entry.description or "",
            keywords=", ".join(entry.tags),
        )

    def _discussion_url(self, entry: Entry, slug: str) -> str | None:
        if not self.discussion_repo:
            return None
        page_url = f"{self.site_url}{self.base_path}/{slug}.html"
        title = quote(f"Discussion: {entry.title}", safe="")
        body = quote(
            f"Let's discuss the blog post: {entry.title}\n\nRead the full post: {page_url}",
            safe="",
        )
        return (
            f"https://github.com/{self.discussion_repo}/discussions/new"
            f"?category=blog&title={title}&body={body}"
        )
