"""
Content fetching for manifests, post bodies and page partials.

Content lives either behind an HTTP(S) base URL (the deployed static site)
or in a local checkout of it. Both are read through ``Fetcher.fetch_text``,
which never raises for a failed request: the outcome is reported in a
``FetchResult``. There is no retry; a failed fetch is reported once.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import httpx

from .config import FetchConfig


@dataclass
class FetchResult:
    """Result of a fetch operation.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL or path that was fetched
        status_code: HTTP status code, or None if the request failed before a response
        text: The response body text, or None on error
        error: Error message if the fetch failed, None on success
    """
    url: str
    status_code: int | None
    text: str | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None and self.text is not None


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def join_url(base: str, *parts: str) -> str:
    """Join path segments onto an URL or directory without doubling slashes."""
    pieces = [base.rstrip("/")] + [p.strip("/") for p in parts if p and p.strip("/")]
    return "/".join(pieces)


class Fetcher:
    """Reads text from HTTP(S) URLs or local paths.

    A single ``httpx.AsyncClient`` is shared for the fetcher's lifetime.
    Pass ``client`` to supply one (tests use ``httpx.MockTransport``).
    """

    def __init__(self, cfg: FetchConfig | None = None, client: httpx.AsyncClient | None = None):
        self._cfg = cfg or FetchConfig()
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._cfg.timeout_seconds,
                headers={"User-Agent": self._cfg.user_agent},
                follow_redirects=True,
                trust_env=self._cfg.trust_env,
            )
        return self._client

    async def fetch_text(self, url: str) -> FetchResult:
        if not is_remote(url):
            return _read_local(url)

        try:
            resp = await self._get_client().get(url)
        except httpx.HTTPError as exc:
            return FetchResult(url=url, status_code=None, text=None, error=f"{type(exc).__name__}: {exc}")

        if not resp.is_success:
            return FetchResult(
                url=url,
                status_code=resp.status_code,
                text=None,
                error=f"HTTP {resp.status_code}",
            )
        return FetchResult(url=url, status_code=resp.status_code, text=resp.text, error=None)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "Fetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def _read_local(path: str) -> FetchResult:
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return FetchResult(url=path, status_code=None, text=None, error=f"{type(exc).__name__}: {exc}")
    return FetchResult(url=path, status_code=200, text=text, error=None)
