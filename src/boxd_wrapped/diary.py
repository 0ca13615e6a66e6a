import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from selectolax.parser import HTMLParser
from tqdm import tqdm

from .config import (
    FILM_PATH_SEGMENT,
    MAX_PAGES,
    SNIPPET_LENGTH,
    STOP_MAX_PAGES,
    STOP_NO_ENTRIES_COLLECTED,
    STOP_NO_ENTRIES_ON_PAGE,
    STOP_NOT_FOUND,
    stop_http_status,
)
from .parser import parse_diary_page
from .scraper import PageResponse, diary_url

logger = logging.getLogger(__name__)

FetchPage = Callable[[str], Awaitable[PageResponse]]


@dataclass(frozen=True)
class DiaryEntry:
    date: str
    title: str | None
    film_url: str

    def to_dict(self) -> dict:
        return {"date": self.date, "title": self.title, "filmUrl": self.film_url}


@dataclass(frozen=True)
class DiaryDiagnostics:
    """
    What the paginator last saw, for debugging markup drift.

    The two link counts are independent heuristics: one from the parsed tree,
    one from a plain substring search over the raw HTML.
    """
    last_url: str | None = None
    last_final_url: str | None = None
    page_title: str | None = None
    film_link_count: int = 0
    raw_film_path_count: int = 0
    feed_url: str | None = None
    html_snippet: str = ""

    @classmethod
    def from_page(cls, url: str, page: PageResponse) -> "DiaryDiagnostics":
        body = page.body or ""
        tree = HTMLParser(body)
        title_el = tree.css_first("title")
        feed_el = tree.css_first("link[type='application/rss+xml']")

        return cls(
            last_url=url,
            last_final_url=page.final_url,
            page_title=title_el.text(strip=True) if title_el else None,
            film_link_count=len(tree.css(f"a[href*='{FILM_PATH_SEGMENT}']")),
            raw_film_path_count=body.count(FILM_PATH_SEGMENT),
            feed_url=feed_el.attributes.get("href") if feed_el else None,
            html_snippet=body[:SNIPPET_LENGTH],
        )

    def to_dict(self) -> dict:
        return {
            "lastUrl": self.last_url,
            "lastFinalUrl": self.last_final_url,
            "pageTitle": self.page_title,
            "filmLinkCount": self.film_link_count,
            "rawFilmPathCount": self.raw_film_path_count,
            "feedUrl": self.feed_url,
            "htmlSnippet": self.html_snippet,
        }


@dataclass(frozen=True)
class DiaryFetchResult:
    year: int
    pages_fetched: int
    entries: tuple[DiaryEntry, ...]
    stopped_because: str
    diagnostics: DiaryDiagnostics = field(default_factory=DiaryDiagnostics)

    def to_dict(self) -> dict:
        return {
            "pagesFetched": self.pages_fetched,
            "entriesCount": len(self.entries),
            "stoppedBecause": self.stopped_because,
            "debug": self.diagnostics.to_dict(),
        }


class DiaryPaginator:
    """
    Walks a user's year-scoped diary one page at a time.

    Pages are fetched strictly in order because the page count is unknown up
    front; the first empty page ends the walk. Any HTTP failure stops
    immediately (no retries). Transport errors raised by ``fetch_page`` are not
    caught here.
    """

    def __init__(self, fetch_page: FetchPage, max_pages: int = MAX_PAGES, show_progress: bool = False):
        if max_pages < 1:
            raise ValueError(f"max_pages must be at least 1, got {max_pages}")
        self.fetch_page = fetch_page
        self.max_pages = max_pages
        self.show_progress = show_progress

    async def fetch_year(self, username: str, year: int) -> DiaryFetchResult:
        entries: list[DiaryEntry] = []
        diagnostics = DiaryDiagnostics()
        stopped_because = STOP_MAX_PAGES
        pages_fetched = 0

        logger.info(f"Fetching {username}'s {year} diary...")
        progress = tqdm(total=self.max_pages, desc=f"Diary {year}", unit="page", disable=not self.show_progress)
        try:
            for page_num in range(1, self.max_pages + 1):
                url = diary_url(username, year, page_num)
                page = await self.fetch_page(url)
                pages_fetched += 1
                progress.update(1)
                diagnostics = DiaryDiagnostics.from_page(url, page)

                if page.status == 404:
                    stopped_because = STOP_NOT_FOUND
                    break
                if not page.ok:
                    logger.warning(f"Diary page {page_num} for {username} returned HTTP {page.status}")
                    stopped_because = stop_http_status(page.status)
                    break

                raw_entries = parse_diary_page(page.body)
                if not raw_entries:
                    stopped_because = STOP_NO_ENTRIES_ON_PAGE
                    break

                kept = 0
                for raw in raw_entries:
                    if raw.date and raw.film_url:
                        entries.append(DiaryEntry(date=raw.date[:10], title=raw.title, film_url=raw.film_url))
                        kept += 1
                logger.debug(f"  Diary page {page_num}: {kept}/{len(raw_entries)} entries kept")
        finally:
            progress.close()

        if not entries and stopped_because == STOP_MAX_PAGES:
            stopped_because = STOP_NO_ENTRIES_COLLECTED

        logger.info(
            f"Diary {username}/{year}: {len(entries)} entries over {pages_fetched} pages "
            f"(stopped: {stopped_because})"
        )
        return DiaryFetchResult(
            year=year,
            pages_fetched=pages_fetched,
            entries=tuple(entries),
            stopped_because=stopped_because,
            diagnostics=diagnostics,
        )
