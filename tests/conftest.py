from __future__ import annotations

import json
import logging
from pathlib import Path

import httpx
import pytest

from portfolio_site.core.types import Collection, Entry
from portfolio_site.fetcher import Fetcher

BASE = "https://site.test"


def make_fetcher(routes: dict[str, object]) -> Fetcher:
    """Fetcher over an in-memory site.

    ``routes`` maps absolute URLs to a response body, an HTTP status code,
    or an exception instance to raise.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        body = routes.get(str(request.url))
        if body is None:
            return httpx.Response(404, text="not found")
        if isinstance(body, Exception):
            raise body
        if isinstance(body, int):
            return httpx.Response(body, text="")
        return httpx.Response(200, text=body)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Fetcher(client=client)


def make_collection(count: int, name: str = "blog", **extra) -> Collection:
    """Collection of ``count`` posts titled "Post 1".."Post N", newest first."""
    entries = [
        Entry(
            title=f"Post {i}",
            date=f"2024-01-{31 - i:02d}",
            description=f"Description {i}",
            **extra,
        )
        for i in range(1, count + 1)
    ]
    return Collection(name=name, entries=entries, sort_by="date")


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("portfolio_site")
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
