import logging
from dataclasses import dataclass

import httpx

from .config import BASE_URL, HTTP_TIMEOUT, SCRAPER_HTTP2, USER_AGENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageResponse:
    status: int
    ok: bool
    body: str
    final_url: str


def profile_url(username: str) -> str:
    return f"{BASE_URL}/{username}/"


def diary_url(username: str, year: int, page: int = 1) -> str:
    """Year-scoped diary listing; page 1 has no /page/ suffix."""
    url = f"{BASE_URL}/{username}/films/diary/for/{year}/"
    if page > 1:
        url += f"page/{page}/"
    return url


class LetterboxdClient:
    """
    Async page fetcher for Letterboxd.

    Follows redirects and reports HTTP error statuses as data. Transport
    failures (DNS, connection, timeouts) propagate as httpx exceptions.

    Use as an async context manager so the underlying client is closed:

        async with LetterboxdClient() as client:
            page = await client.fetch_page(url)
    """

    def __init__(self, client: httpx.AsyncClient | None = None):
        self.client = client
        self._owns_client = client is None

    async def __aenter__(self):
        """Async context manager entry."""
        if self.client is None:
            self.client = httpx.AsyncClient(
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
                timeout=HTTP_TIMEOUT,
                http2=SCRAPER_HTTP2,
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.client and self._owns_client:
            await self.client.aclose()
            self.client = None
        return False

    async def fetch_page(self, url: str) -> PageResponse:
        if not self.client:
            raise RuntimeError("LetterboxdClient must be used as an async context manager")

        resp = await self.client.get(url)
        status = resp.status_code
        logger.debug(f"GET {url} -> {status} ({resp.url})")
        return PageResponse(
            status=status,
            ok=200 <= status < 400,
            body=resp.text,
            final_url=str(resp.url),
        )
