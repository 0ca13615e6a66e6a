import logging
import re
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urljoin

from selectolax.parser import HTMLParser, Node

from .config import BASE_URL, FILM_PATH_SEGMENT

logger = logging.getLogger(__name__)

# Day links look like /alice/films/diary/for/2025/01/03/ on the live site;
# older markup used /diary/films/for/ instead.
DAY_LINK_RE = re.compile(r"/(?:films/diary|diary/films)/for/(\d{4})/(\d{2})/(\d{2})/")

DATE_ATTRIBUTES = ("data-viewing-date", "data-date")
CONTAINER_TAGS = {"li", "tr", "article"}
HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}


@dataclass(frozen=True)
class RawEntry:
    """One diary row as found in the page. Any field may be missing."""
    date: str | None
    title: str | None
    film_url: str | None


def normalize_film_url(href: str | None) -> str | None:
    """Resolve a site-relative film link against the Letterboxd origin."""
    if not href:
        return None
    href = href.strip()
    if href.startswith(("http://", "https://")):
        return href
    return urljoin(BASE_URL + "/", href)


def _normalize_date(value: str | None) -> str | None:
    if not value:
        return None
    value = value.strip()
    return value[:10] or None


def _date_from_attributes(node: Node) -> str | None:
    for name in DATE_ATTRIBUTES:
        value = _normalize_date(node.attributes.get(name))
        if value:
            return value
    return None


def _date_from_time(node: Node) -> str | None:
    time_el = node.css_first("time[datetime]")
    if time_el is None:
        return None
    return _normalize_date(time_el.attributes.get("datetime"))


def _date_from_day_link(node: Node) -> str | None:
    for link in node.css("a[href]"):
        match = DAY_LINK_RE.search(link.attributes.get("href") or "")
        if match:
            return "-".join(match.groups())
    return None


def _row_date(row: Node) -> str | None:
    return _date_from_attributes(row) or _date_from_time(row) or _date_from_day_link(row)


def _in_heading(node: Node) -> bool:
    """True if a heading sits between ``node`` and its enclosing row."""
    parent = node.parent
    while parent is not None and parent.tag not in CONTAINER_TAGS:
        if parent.tag in HEADING_TAGS:
            return True
        parent = parent.parent
    return False


def _first_heading_link(row: Node) -> Node | None:
    # A selector group like "h2 a, h3 a" matches per selector, not in document order.
    for link in row.css("a"):
        if _in_heading(link):
            return link
    return None


def _parse_row(row: Node) -> RawEntry | None:
    link = _first_heading_link(row)
    if link is None:
        return None
    film_url = normalize_film_url(link.attributes.get("href"))
    if not film_url:
        return None
    title = link.text(strip=True) or None
    return RawEntry(date=_row_date(row), title=title, film_url=film_url)


def parse_diary_rows(tree: HTMLParser) -> list[RawEntry]:
    """
    Primary strategy: one entry per diary table row.

    Rows tagged `diary-entry-row` are preferred; when the page has none, every
    table row is treated as a candidate.
    """
    rows = tree.css("tr.diary-entry-row")
    if not rows:
        rows = tree.css("tr")

    entries = []
    for row in rows:
        entry = _parse_row(row)
        if entry is not None:
            entries.append(entry)
    return entries


def _closest_container(node: Node) -> Node | None:
    parent = node.parent
    while parent is not None:
        if parent.tag in CONTAINER_TAGS:
            return parent
        parent = parent.parent
    return None


def parse_film_links(tree: HTMLParser) -> list[RawEntry]:
    """
    Fallback strategy: every film link in the document.

    The date comes from the nearest enclosing container, so links outside any
    dated container surface with a null date.
    """
    entries = []
    for link in tree.css(f"a[href*='{FILM_PATH_SEGMENT}']"):
        container = _closest_container(link)
        date = None
        if container is not None:
            date = _date_from_attributes(container) or _date_from_time(container)
        entries.append(RawEntry(
            date=date,
            title=link.text(strip=True) or None,
            film_url=normalize_film_url(link.attributes.get("href")),
        ))
    return entries


# Tried in order; a later strategy only runs when every earlier one found nothing.
STRATEGIES: tuple[Callable[[HTMLParser], list[RawEntry]], ...] = (
    parse_diary_rows,
    parse_film_links,
)


def parse_diary_page(html: str) -> list[RawEntry]:
    """
    Extract raw diary entries from one diary page.

    Never raises on odd markup: missing fields come back as None and are
    filtered by the caller.
    """
    tree = HTMLParser(html or "")
    for strategy in STRATEGIES:
        entries = strategy(tree)
        if entries:
            logger.debug(f"{strategy.__name__} found {len(entries)} entries")
            return entries
    return []
