"""
Site build orchestration.

This module plays the role of one page load per collection:
1. Fetch the shared header/footer partials
2. Load and sort each collection's manifest
3. Render every listing page (unfiltered and per filter value)
4. Render an article page per entry for collections with detail pages
5. Export the RSS feed

Collections are built independently: a failed manifest produces that
collection's error panel and the build moves on to the next one.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
import logging
from pathlib import Path

from jinja2 import Environment
from markupsafe import Markup

from .config import AppConfig, CollectionConfig
from .core.types import Collection
from .errors import FetchError, NotFoundError
from .feed import FeedExporter
from .fetcher import Fetcher, join_url
from .loader import ContentLoader
from .logging_utils import log_event, setup_logging
from .renderers import DetailRenderer, ListRenderer, build_environment, is_reserved_page_name

logger = logging.getLogger(__name__)


@dataclass
class BuildStats:
    """Counters collected during a build.

    Attributes:
        pages: Listing pages written
        posts: Article pages written
        fallbacks: Article pages rendered from metadata only
        failed: Collections whose manifest could not be loaded
        skipped: Entry slugs whose page name is taken by a listing page
        feed_path: Where the RSS feed was written, if it was
    """
    pages: int = 0
    posts: int = 0
    fallbacks: int = 0
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    feed_path: Path | None = None


@dataclass
class Chrome:
    header: Markup = Markup("")
    footer: Markup = Markup("")


def manifest_url(cfg: AppConfig, coll_cfg: CollectionConfig) -> str:
    return join_url(cfg.site.source, "data", f"{coll_cfg.manifest}.json")


def filter_values(collection: Collection, kind: str) -> list[str]:
    """Values worth a filtered listing: tags for posts, categories otherwise."""
    values: set[str] = set()
    for entry in collection.entries:
        if kind == "blog":
            values.update(entry.tags)
        elif entry.category:
            values.add(entry.category.removeprefix("filter-"))
    return sorted(values)


async def load_chrome(fetcher: Fetcher, cfg: AppConfig) -> Chrome:
    parts = {}
    for name in ("header", "footer"):
        url = join_url(cfg.site.source, cfg.site.partials_path, f"{name}.html")
        result = await fetcher.fetch_text(url)
        if not result.ok:
            logger.warning("Partial %s unavailable: %s", name, result.error)
            parts[name] = Markup("")
        else:
            parts[name] = Markup(result.text)
    return Chrome(**parts)


class SiteBuilder:
    """Writes the rendered site for one configuration into ``output_dir``."""

    def __init__(self, cfg: AppConfig, output_dir: Path, fetcher: Fetcher, env: Environment | None = None):
        self.cfg = cfg
        self.output_dir = output_dir
        self.fetcher = fetcher
        self.env = env or build_environment()
        self.chrome = Chrome()
        self.stats = BuildStats()

    async def build(self, now: datetime | None = None) -> BuildStats:
        self.chrome = await load_chrome(self.fetcher, self.cfg)
        for name, coll_cfg in self.cfg.collections.items():
            await self.build_collection(name, coll_cfg, now=now)
        return self.stats

    async def build_collection(self, name: str, coll_cfg: CollectionConfig, now: datetime | None = None) -> None:
        loader = ContentLoader(self.fetcher, name, coll_cfg.sort_by)
        listing = ListRenderer(self.env, coll_cfg.kind, coll_cfg.page_size, coll_cfg.base_path)
        url = manifest_url(self.cfg, coll_cfg)

        try:
            collection = await loader.load(url)
        except FetchError as exc:
            logger.error("Could not load %s: %s", name, exc)
            self.stats.failed.append(name)
            self.write_page(listing.page_href(1), listing.render_error(), title=name.title())
            return
        if collection is None:
            return

        log_event(logger, "Collection loaded", event="collection_loaded", collection=name, count=len(collection))
        values = filter_values(collection, coll_cfg.kind)
        listing.register_filters(values)
        self.write_listing(listing, collection, None)
        for value in values:
            self.write_listing(listing, collection, value)

        if coll_cfg.detail:
            await self.write_details(collection, coll_cfg)

        if name == self.cfg.feed.collection:
            exporter = FeedExporter(self.env, self.cfg.site, self.cfg.feed, coll_cfg.base_path)
            self.stats.feed_path = exporter.write(collection, self.output_dir / self.cfg.feed.path, now=now)

    def write_listing(self, listing: ListRenderer, collection: Collection, filter_value: str | None) -> None:
        page = listing.render_page(collection, 1, filter_value)
        title = f"{collection.name.title()} - {self.cfg.site.name}"
        self.write_page(listing.page_href(1, filter_value), page.html, title=title)
        for number in range(2, page.state.total_pages + 1):
            page = listing.go_to_page(number)
            self.write_page(listing.page_href(number, filter_value), page.html, title=title)

    async def write_details(self, collection: Collection, coll_cfg: CollectionConfig) -> None:
        renderer = DetailRenderer(
            self.env,
            self.fetcher,
            posts_url=join_url(self.cfg.site.source, self.cfg.site.posts_path),
            base_path=coll_cfg.base_path,
            site_name=self.cfg.site.name,
            site_url=self.cfg.site.site_url,
            discussion_repo=self.cfg.site.discussion_repo,
        )
        for entry in collection.entries:
            if is_reserved_page_name(entry.key):
                logger.warning(
                    "Skipping page for %r in %s: %s.html is a listing page", entry.title, collection.name, entry.key
                )
                self.stats.skipped.append(entry.key)
                continue
            try:
                view = await renderer.render_detail(collection, entry.key)
            except NotFoundError as exc:
                logger.error("%s", exc)
                self.write_page(f"{coll_cfg.base_path}/{entry.key}.html", renderer.render_error(), title="Post not found")
                continue
            if view is None:
                continue
            if view.fallback:
                self.stats.fallbacks += 1
            self.stats.posts += 1
            self.write_page(
                renderer.entry_href(entry),
                view.html,
                title=view.meta.title,
                description=view.meta.description,
                keywords=view.meta.keywords,
                count_as_listing=False,
            )

    def write_page(
        self,
        href: str,
        content: Markup,
        *,
        title: str,
        description: str = "",
        keywords: str = "",
        count_as_listing: bool = True,
    ) -> Path:
        path = self.output_dir / href.lstrip("/")
        path.parent.mkdir(parents=True, exist_ok=True)
        html = self.env.get_template("page.html").render(
            title=title,
            description=description,
            keywords=keywords,
            header=self.chrome.header,
            footer=self.chrome.footer,
            content=content,
        )
        path.write_text(html, encoding="utf-8")
        if count_as_listing:
            self.stats.pages += 1
        logger.debug("Wrote %s", path)
        return path


async def build_site(
    cfg: AppConfig,
    output_dir: Path,
    fetcher: Fetcher | None = None,
    now: datetime | None = None,
) -> BuildStats:
    """Build the whole site into ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    own_fetcher = fetcher is None
    fetcher = fetcher or Fetcher(cfg.fetch)
    try:
        builder = SiteBuilder(cfg, output_dir, fetcher)
        return await builder.build(now=now)
    finally:
        if own_fetcher:
            await fetcher.aclose()


async def export_feed(
    cfg: AppConfig,
    output_path: Path,
    fetcher: Fetcher | None = None,
    now: datetime | None = None,
) -> Path:
    """Load the feed collection and write only the RSS document.

    Raises:
        FetchError: If the feed collection's manifest cannot be loaded
        ValueError: If no feed collection is configured
    """
    coll_cfg = cfg.collections.get(cfg.feed.collection) if cfg.feed.collection else None
    if coll_cfg is None:
        raise ValueError(f"feed.collection {cfg.feed.collection!r} is not a configured collection")
    own_fetcher = fetcher is None
    fetcher = fetcher or Fetcher(cfg.fetch)
    try:
        loader = ContentLoader(fetcher, cfg.feed.collection, coll_cfg.sort_by)
        collection = await loader.load(manifest_url(cfg, coll_cfg))
    finally:
        if own_fetcher:
            await fetcher.aclose()
    exporter = FeedExporter(build_environment(), cfg.site, cfg.feed, coll_cfg.base_path)
    return exporter.write(collection, output_path, now=now)


def run_build(cfg: AppConfig, output_dir: Path) -> BuildStats:
    """Synchronous entry point used by the CLI."""
    setup_logging(cfg.logging, output_dir)
    log_event(logger, "Build start", event="build_start", source=cfg.site.source, output=str(output_dir))
    stats = asyncio.run(build_site(cfg, output_dir))
    log_event(
        logger,
        "Build finished",
        event="build_finished",
        pages=stats.pages,
        posts=stats.posts,
        fallbacks=stats.fallbacks,
        failed=stats.failed,
        skipped=stats.skipped,
    )
    return stats
