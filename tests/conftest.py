import importlib
import sys
from pathlib import Path

import pytest

# Ensure the package under test is importable without installation
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from boxd_wrapped.scraper import PageResponse  # noqa: E402


@pytest.fixture
def fresh_config(monkeypatch):
    """
    Hand back the config module for reloading under patched env vars, and
    restore the pristine module afterwards.
    """
    import boxd_wrapped.config as config

    yield config
    monkeypatch.undo()
    importlib.reload(config)


def diary_row(date: str | None, slug: str, title: str, day_link: bool = True) -> str:
    """One row shaped like Letterboxd's diary table markup."""
    date_attr = f' data-viewing-date="{date}"' if date and not day_link else ""
    day_cell = ""
    if date and day_link:
        y, m, d = date.split("-")
        day_cell = f'<td class="td-day"><a href="/alice/films/diary/for/{y}/{m}/{d}/">{d}</a></td>'
    return (
        f'<tr class="diary-entry-row"{date_attr}>{day_cell}'
        f'<td class="td-film-details"><h2 class="name"><a href="/alice/film/{slug}/">{title}</a></h2></td>'
        f"</tr>"
    )


def diary_page(*rows: str, title: str = "Alice's film diary") -> str:
    return (
        f"<html><head><title>{title}</title>"
        '<link rel="alternate" type="application/rss+xml" href="https://letterboxd.com/alice/rss/">'
        "</head><body><table id=\"diary-table\"><tbody>"
        + "".join(rows)
        + "</tbody></table></body></html>"
    )


class FakeFetcher:
    """Serves canned PageResponses by URL and records every request."""

    def __init__(self, pages: dict[str, PageResponse] | None = None, default: PageResponse | None = None):
        self.pages = pages or {}
        self.default = default or PageResponse(status=404, ok=False, body="", final_url="")
        self.requested: list[str] = []

    async def __call__(self, url: str) -> PageResponse:
        self.requested.append(url)
        return self.pages.get(url, self.default)


def ok_page(body: str, url: str = "https://letterboxd.com/") -> PageResponse:
    return PageResponse(status=200, ok=True, body=body, final_url=url)
