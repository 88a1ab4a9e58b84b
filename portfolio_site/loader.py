"""
Manifest loading and ordering.

A manifest is a JSON array of entry objects. Loading fetches it, validates
each record into an ``Entry`` and sorts newest first. Nothing is cached:
every ``load`` re-fetches and re-sorts.
"""

from __future__ import annotations

from collections import Counter
import json
import logging

from .core.dates import date_sort_key, year_sort_key
from .core.slug import slugify
from .core.types import Collection, Entry
from .errors import FetchError
from .fetcher import Fetcher

logger = logging.getLogger(__name__)

SORT_KEYS = {
    "date": lambda entry: date_sort_key(entry.date),
    "year": lambda entry: year_sort_key(entry.year),
}


def parse_manifest(text: str, url: str) -> list[Entry]:
    """Parse manifest JSON into entries.

    Raises:
        FetchError: If the text is not a JSON array of objects with titles
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FetchError(url, f"invalid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise FetchError(url, "manifest is not a list of entries")

    entries = []
    for position, record in enumerate(data):
        if not isinstance(record, dict):
            raise FetchError(url, f"entry {position} is not an object")
        try:
            entries.append(Entry.from_record(record))
        except ValueError as exc:
            raise FetchError(url, f"entry {position}: {exc}") from exc
    return entries


def sort_entries(entries: list[Entry], sort_by: str) -> list[Entry]:
    """Sort entries newest first.

    Entries whose date/year does not parse go last, in manifest order.
    """
    try:
        key = SORT_KEYS[sort_by]
    except KeyError:
        raise ValueError(f"Unsupported sort field: {sort_by}") from None
    # sorted() is stable and reverse=True keeps ties in their original order.
    return sorted(entries, key=key, reverse=True)


def _warn_duplicate_slugs(name: str, entries: list[Entry]) -> None:
    # Lookup accepts both the explicit and the title-derived slug.
    counts = Counter(slug for entry in entries for slug in {entry.key, slugify(entry.title)})
    duplicates = sorted(slug for slug, count in counts.items() if count > 1)
    if duplicates:
        logger.warning("Duplicate slugs in %s: %s", name, ", ".join(duplicates))


class ContentLoader:
    """Fetches and sorts one collection's manifest.

    Only one load runs at a time; a load requested while another is still
    awaiting its fetch is ignored and returns None.
    """

    def __init__(self, fetcher: Fetcher, name: str, sort_by: str = "date"):
        if sort_by not in SORT_KEYS:
            raise ValueError(f"Unsupported sort field: {sort_by}")
        self.fetcher = fetcher
        self.name = name
        self.sort_by = sort_by
        self._in_flight = False

    @property
    def busy(self) -> bool:
        return self._in_flight

    async def load(self, manifest_url: str) -> Collection | None:
        if self._in_flight:
            logger.debug("Ignoring load of %s: another load is in flight", manifest_url)
            return None

        self._in_flight = True
        try:
            result = await self.fetcher.fetch_text(manifest_url)
        finally:
            self._in_flight = False

        if not result.ok:
            raise FetchError(manifest_url, result.error or "empty response", result.status_code)

        entries = parse_manifest(result.text, manifest_url)
        _warn_duplicate_slugs(self.name, entries)
        collection = Collection(
            name=self.name,
            entries=sort_entries(entries, self.sort_by),
            sort_by=self.sort_by,
        )
        logger.debug("Loaded %d entries for %s", len(collection), self.name)
        return collection
