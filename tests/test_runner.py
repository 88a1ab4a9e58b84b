import asyncio
from datetime import datetime, timezone
import json
import logging

import pytest

from portfolio_site.config import AppConfig
from portfolio_site.core.types import Collection, Entry
from portfolio_site.errors import FetchError
from portfolio_site.runner import build_site, export_feed, filter_values, run_build
from tests.conftest import write_json

NOW = datetime(2024, 3, 2, tzinfo=timezone.utc)

BLOG = [
    {"title": "Second Post", "date": "2024-02-01", "description": "Two", "tags": ["ml"]},
    {"title": "First Post", "date": "2024-03-01", "description": "One", "tags": ["python"]},
    {"title": "Third", "date": "2024-01-01", "excerpt": "Three"},
]
PROJECTS = [
    {"title": "Site", "year": 2022, "category": "web", "description": "A site"},
    {"title": "Model", "year": "2023", "category": "ml", "description": "A model"},
]


@pytest.fixture
def site(tmp_path):
    root = tmp_path / "site"
    write_json(root / "data" / "blog.json", BLOG)
    write_json(root / "data" / "projects.json", PROJECTS)
    posts = root / "blog" / "posts"
    posts.mkdir(parents=True)
    (posts / "first-post.md").write_text(
        "---\nreadTime: 2 min read\n---\nHello **world**\n", encoding="utf-8"
    )
    partials = root / "templates" / "partial"
    partials.mkdir(parents=True)
    (partials / "header.html").write_text('<nav id="site-header">Menu</nav>', encoding="utf-8")
    return root


def _config(site):
    cfg = AppConfig()
    cfg.site.source = str(site)
    cfg.logging.console = False
    return cfg


def test_build_writes_listings_articles_and_feed(site, tmp_path):
    out = tmp_path / "out"

    stats = asyncio.run(build_site(_config(site), out, now=NOW))

    assert stats.posts == 3
    assert stats.fallbacks == 2
    assert stats.failed == ["publications"]
    # blog: all + python + ml, projects: all + web + ml, publications: error panel
    assert stats.pages == 7
    assert stats.feed_path == out / "blog" / "rss.xml"

    index = (out / "blog" / "index.html").read_text(encoding="utf-8")
    assert '<nav id="site-header">Menu</nav>' in index
    assert index.index("First Post") < index.index("Second Post") < index.index("Third")

    article = (out / "blog" / "first-post.html").read_text(encoding="utf-8")
    assert "<strong>world</strong>" in article
    assert "2 min read" in article
    assert "Content Preview" in (out / "blog" / "third.html").read_text(encoding="utf-8")

    python_only = (out / "blog" / "filter" / "python" / "index.html").read_text(encoding="utf-8")
    assert "First Post" in python_only
    assert "Second Post" not in python_only

    projects = (out / "projects" / "index.html").read_text(encoding="utf-8")
    assert projects.index("Model") < projects.index("Site")
    assert (out / "projects" / "filter" / "web" / "index.html").exists()

    failed = (out / "publications" / "index.html").read_text(encoding="utf-8")
    assert "Unable to load publications" in failed


def test_build_paginates_large_collections(tmp_path):
    root = tmp_path / "site"
    posts = [{"title": f"Post {i}", "date": f"2024-01-{i:02d}"} for i in range(1, 21)]
    write_json(root / "data" / "blog.json", posts)
    cfg = _config(root)
    del cfg.collections["projects"]
    del cfg.collections["publications"]
    out = tmp_path / "out"

    stats = asyncio.run(build_site(cfg, out, now=NOW))

    assert (out / "blog" / "page-2.html").exists()
    assert (out / "blog" / "page-3.html").exists()
    assert not (out / "blog" / "page-4.html").exists()
    assert stats.pages == 3
    assert stats.posts == 20
    assert stats.fallbacks == 20


def test_export_feed_only_writes_rss(site, tmp_path):
    path = asyncio.run(export_feed(_config(site), tmp_path / "feed.xml", now=NOW))

    xml = path.read_text(encoding="utf-8")
    assert "<title>First Post</title>" in xml
    assert not (tmp_path / "blog").exists()


def test_export_feed_raises_when_manifest_is_missing(tmp_path):
    cfg = _config(tmp_path / "nowhere")

    with pytest.raises(FetchError):
        asyncio.run(export_feed(cfg, tmp_path / "feed.xml"))


def test_run_build_writes_jsonl_log(site, tmp_path):
    cfg = _config(site)
    cfg.logging.file = True
    out = tmp_path / "out"

    stats = run_build(cfg, out)

    lines = [json.loads(line) for line in (out / "build.jsonl").read_text(encoding="utf-8").splitlines()]
    events = {line.get("event") for line in lines}
    assert {"build_start", "collection_loaded", "build_finished"} <= events
    finished = next(line for line in lines if line.get("event") == "build_finished")
    assert finished["posts"] == stats.posts == 3
    assert finished["failed"] == ["publications"]


def test_filter_values_uses_tags_for_posts_and_categories_otherwise():
    posts = Collection(
        name="blog",
        entries=[Entry(title="a", tags=["b", "a"]), Entry(title="b", tags=["a"])],
    )
    papers = Collection(
        name="publications",
        entries=[Entry(title="x", category="filter-nlp"), Entry(title="y", category="vision"), Entry(title="z")],
    )

    assert filter_values(posts, "blog") == ["a", "b"]
    assert filter_values(papers, "publications") == ["nlp", "vision"]


def _blog_only(tmp_path, posts):
    root = tmp_path / "site"
    write_json(root / "data" / "blog.json", posts)
    cfg = _config(root)
    del cfg.collections["projects"]
    del cfg.collections["publications"]
    return cfg


def test_filters_sharing_a_slug_get_separate_pages(tmp_path):
    cfg = _blog_only(
        tmp_path,
        [
            {"title": "Plain C", "date": "2024-01-02", "tags": ["C"]},
            {"title": "Modern C++", "date": "2024-01-01", "tags": ["C++"]},
        ],
    )
    out = tmp_path / "out"

    asyncio.run(build_site(cfg, out, now=NOW))

    filter_dir = out / "blog" / "filter"
    plain = (filter_dir / "c" / "index.html").read_text(encoding="utf-8")
    assert "Plain C" in plain
    assert "Modern C++" not in plain

    others = [path for path in filter_dir.iterdir() if path.name != "c"]
    assert len(others) == 1
    modern = (others[0] / "index.html").read_text(encoding="utf-8")
    assert "Modern C++" in modern
    assert "Plain C" not in modern

    index = (out / "blog" / "index.html").read_text(encoding="utf-8")
    assert f'href="/blog/filter/{others[0].name}/index.html"' in index


def test_entry_named_like_a_listing_page_does_not_overwrite_it(tmp_path, caplog):
    cfg = _blog_only(
        tmp_path,
        [
            {"title": "Index", "date": "2024-01-03"},
            {"title": "Regular", "date": "2024-01-02"},
            {"title": "Whatever", "slug": "page-2", "date": "2024-01-01"},
        ],
    )
    cfg.collections["blog"].page_size = 1
    out = tmp_path / "out"

    with caplog.at_level(logging.WARNING, logger="portfolio_site.runner"):
        stats = asyncio.run(build_site(cfg, out, now=NOW))

    assert stats.skipped == ["index", "page-2"]
    assert stats.posts == 1
    assert (out / "blog" / "regular.html").exists()
    assert "blog-listing" in (out / "blog" / "index.html").read_text(encoding="utf-8")
    assert "blog-listing" in (out / "blog" / "page-2.html").read_text(encoding="utf-8")
    assert "index.html is a listing page" in caplog.text


def test_export_feed_without_feed_collection_is_a_config_error(site, tmp_path):
    cfg = _config(site)
    cfg.feed.collection = None

    with pytest.raises(ValueError):
        asyncio.run(export_feed(cfg, tmp_path / "feed.xml"))


def test_build_without_feed_collection_writes_no_feed(site, tmp_path):
    cfg = _config(site)
    cfg.feed.collection = None
    out = tmp_path / "out"

    stats = asyncio.run(build_site(cfg, out, now=NOW))

    assert stats.feed_path is None
    assert not (out / "blog" / "rss.xml").exists()
    assert stats.posts == 3
