"""Exceptions raised by the content pipeline."""

from __future__ import annotations


class PortfolioError(Exception):
    """Base class for pipeline errors shown to the reader as an error panel."""


class FetchError(PortfolioError):
    """A manifest could not be fetched or is not a valid entry list."""

    def __init__(self, url: str, reason: str, status_code: int | None = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to load {url}: {reason}")


class NotFoundError(PortfolioError):
    """No entry in the collection matches the requested slug."""

    def __init__(self, slug: str, collection: str):
        self.slug = slug
        self.collection = collection
        super().__init__(f"No entry '{slug}' in {collection}")
