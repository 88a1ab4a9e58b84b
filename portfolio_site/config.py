"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- SiteConfig: Where content is read from and how the site is addressed
- FetchConfig: HTTP fetching settings
- CollectionConfig: One manifest and how it is listed
- FeedConfig: RSS channel metadata
- OutputConfig: Output directory
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

import yaml

COLLECTION_KINDS = ("blog", "projects", "publications")
SORT_FIELDS = ("date", "year")


@dataclass
class SiteConfig:
    """Configuration for the site being rendered.

    Attributes:
        name: Site/author name appended to page titles
        source: Base URL (http/https) or local directory holding data/ and posts
        site_url: Canonical public URL used in feed links
        author: Author display name
        author_email: Author email used in the feed
        posts_path: Path under source where post Markdown files live
        partials_path: Path under source holding header.html and footer.html
        discussion_repo: GitHub "owner/repo" for post discussion links, or None
    """

    name: str = "Taufiq"
    source: str = "."
    site_url: str = "https://taufiq-ai.github.io"
    author: str = "Taufiq Khan Tusar"
    author_email: str = "taufiqkhantusar@gmail.com"
    posts_path: str = "blog/posts"
    partials_path: str = "templates/partial"
    discussion_repo: str | None = "taufiq-ai/portfolio"


@dataclass
class FetchConfig:
    """Configuration for content fetching.

    Attributes:
        timeout_seconds: HTTP request timeout
        trust_env: Whether to respect system proxy settings
        user_agent: HTTP User-Agent header string
    """

    timeout_seconds: float = 20.0
    trust_env: bool = True
    user_agent: str = "portfolio-site/0.1"


@dataclass
class CollectionConfig:
    """Configuration for one content collection.

    Attributes:
        manifest: Manifest file name under data/ (without .json)
        kind: Card template family: "blog", "projects" or "publications"
        sort_by: "date" or "year"
        page_size: Entries per listing page
        base_path: Public path of the listing, also the base of detail links
        detail: Whether entries get their own page rendered from a Markdown body
    """

    manifest: str
    kind: str
    sort_by: str = "date"
    page_size: int = 9
    base_path: str = "/"
    detail: bool = False


def _default_collections() -> dict[str, CollectionConfig]:
    return {
        "blog": CollectionConfig(
            manifest="blog", kind="blog", sort_by="date", base_path="/blog", detail=True
        ),
        "projects": CollectionConfig(
            manifest="projects", kind="projects", sort_by="year", base_path="/projects"
        ),
        "publications": CollectionConfig(
            manifest="research", kind="publications", sort_by="date", base_path="/publications"
        ),
    }


@dataclass
class FeedConfig:
    """Configuration for the RSS feed.

    Attributes:
        collection: Collection the feed is built from, or None for no feed
        title: Channel title
        description: Channel description
        language: Channel language code
        categories: Channel-level category list
        path: Output path of the feed, relative to the output directory
    """

    collection: str | None = "blog"
    title: str = "Taufiq's Tech Blog"
    description: str = (
        "Insights on AI, machine learning, software development, and technology trends"
    )
    language: str = "en-us"
    categories: list[str] = field(
        default_factory=lambda: [
            "Technology",
            "Artificial Intelligence",
            "Machine Learning",
            "Programming",
        ]
    )
    path: str = "blog/rss.xml"


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        directory: Directory the rendered site is written to
    """

    directory: str = "out"


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to a file in the output directory
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "build.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    site: SiteConfig = field(default_factory=SiteConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    collections: dict[str, CollectionConfig] = field(default_factory=_default_collections)
    feed: FeedConfig = field(default_factory=FeedConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: top level must be a mapping")

    cfg = _merge_config(AppConfig(), raw)
    validate_config(cfg)
    return cfg


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig.

    Sections are merged key by key. Collections are merged per name, so a
    file can tweak ``collections.blog.page_size`` or add a new collection
    without restating the defaults.
    """
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if key == "collections" and isinstance(value, dict):
            for name, coll in value.items():
                if coll is None:
                    data["collections"].pop(name, None)
                elif name in data["collections"]:
                    data["collections"][name].update(coll)
                else:
                    data["collections"][name] = dict(coll)
        elif isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        site=SiteConfig(**data["site"]),
        fetch=FetchConfig(**data["fetch"]),
        collections={
            name: CollectionConfig(**coll) for name, coll in data["collections"].items()
        },
        feed=FeedConfig(**data["feed"]),
        output=OutputConfig(**data["output"]),
        logging=LoggingConfig(**data["logging"]),
    )


def validate_config(cfg: AppConfig) -> None:
    """Reject settings that would only fail halfway through a build.

    Raises:
        ValueError: If a collection or the feed is misconfigured
    """
    for name, coll in cfg.collections.items():
        if coll.kind not in COLLECTION_KINDS:
            raise ValueError(f"collections.{name}.kind must be one of {', '.join(COLLECTION_KINDS)}, got {coll.kind!r}")
        if coll.sort_by not in SORT_FIELDS:
            raise ValueError(f"collections.{name}.sort_by must be one of {', '.join(SORT_FIELDS)}, got {coll.sort_by!r}")
        if coll.page_size < 1:
            raise ValueError(f"collections.{name}.page_size must be at least 1")
    if cfg.feed.collection is not None and cfg.feed.collection not in cfg.collections:
        raise ValueError(f"feed.collection {cfg.feed.collection!r} is not a configured collection")
