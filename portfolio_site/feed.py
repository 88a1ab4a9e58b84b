"""
RSS 2.0 export of a collection.

The document is rendered from ``templates/rss.xml`` with autoescaping, so
titles and descriptions containing ``&`` or ``<`` still yield well-formed XML.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from pathlib import Path

from jinja2 import Environment

from .config import FeedConfig, SiteConfig
from .core.dates import format_rfc822
from .core.types import Collection

logger = logging.getLogger(__name__)

FEED_MEDIA_TYPE = "application/rss+xml"


@dataclass
class FeedItem:
    title: str
    link: str
    description: str
    pub_date: str | None
    categories: list[str] = field(default_factory=list)


class FeedExporter:
    """Serializes a collection into an RSS channel."""

    def __init__(self, env: Environment, site: SiteConfig, feed: FeedConfig, base_path: str = "/blog"):
        self.env = env
        self.site = site
        self.feed = feed
        self.base_path = base_path.rstrip("/")

    @property
    def channel_link(self) -> str:
        return f"{self.site.site_url.rstrip('/')}{self.base_path}"

    @property
    def self_link(self) -> str:
        return f"{self.site.site_url.rstrip('/')}/{self.feed.path.lstrip('/')}"

    def items(self, collection: Collection) -> list[FeedItem]:
        return [
            FeedItem(
                title=entry.title,
                link=f"{self.channel_link}/{entry.key}.html",
                description=entry.description or "",
                pub_date=format_rfc822(entry.date),
                categories=list(entry.tags),
            )
            for entry in collection.entries
        ]

    def export(self, collection: Collection, now: datetime | None = None) -> str:
        """Render ``collection`` as an RSS document."""
        now = now or datetime.now(timezone.utc)
        author = f"{self.site.author_email} ({self.site.author})"
        template = self.env.get_template("rss.xml")
        return template.render(
            feed=self.feed,
            link=self.channel_link,
            self_link=self.self_link,
            last_build_date=format_rfc822(now),
            author=author,
            items=self.items(collection),
        )

    def write(self, collection: Collection, path: Path, now: datetime | None = None) -> Path:
        """Write the feed to ``path`` and return it."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export(collection, now=now), encoding="utf-8")
        logger.info("Wrote RSS feed with %d items to %s", len(collection), path)
        return path
