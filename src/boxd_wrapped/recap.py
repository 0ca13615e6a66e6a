import logging
import re
from datetime import datetime, timezone

from .config import MAX_PAGES
from .diary import DiaryPaginator, FetchPage
from .scraper import diary_url, profile_url
from .stats import compute_stats

logger = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class BoxdWrappedError(Exception):
    """Base error for recap requests."""


class InvalidUsernameError(BoxdWrappedError):
    """Username contains characters Letterboxd never allows."""


class ProfileNotFoundError(BoxdWrappedError):
    """The user's profile page returned 404."""


class UpstreamError(BoxdWrappedError):
    """Letterboxd answered the profile check with a non-ok status."""

    def __init__(self, status: int, url: str):
        super().__init__(f"Letterboxd returned HTTP {status} for {url}")
        self.status = status
        self.url = url


def validate_username(username: str | None) -> str:
    """
    Strip and check a Letterboxd username.
    Raises InvalidUsernameError for empty or malformed names.
    """
    cleaned = (username or "").strip()
    if not USERNAME_RE.match(cleaned):
        raise InvalidUsernameError(f"Invalid username: {username!r}")
    return cleaned


def current_year() -> int:
    return datetime.now(timezone.utc).year


async def build_recap(
    fetch_page: FetchPage,
    username: str,
    year: int | None = None,
    max_pages: int = MAX_PAGES,
    show_progress: bool = False,
) -> dict:
    """
    Build the yearly recap payload for one user.

    Checks the profile exists, walks the year's diary, then aggregates.
    Transport errors from ``fetch_page`` propagate to the caller.
    """
    username = validate_username(username)
    year = year or current_year()

    url = profile_url(username)
    profile = await fetch_page(url)
    if profile.status == 404:
        raise ProfileNotFoundError(f"Letterboxd user '{username}' not found")
    if not profile.ok:
        raise UpstreamError(profile.status, url)

    paginator = DiaryPaginator(fetch_page, max_pages=max_pages, show_progress=show_progress)
    diary = await paginator.fetch_year(username, year)
    stats = compute_stats(diary.entries)

    logger.info(
        f"Recap {username}/{year}: {stats.total_entries} films, {stats.active_days} active days, "
        f"longest streak {stats.longest_streak.length}"
    )
    return {
        "user": username,
        "year": year,
        "profileUrl": url,
        "diaryUrl": diary_url(username, year),
        "diary": diary.to_dict(),
        "stats": stats.to_dict(),
    }
