import argparse
import asyncio
import json
import logging
import sys

import httpx

from .config import MAX_PAGES
from .recap import BoxdWrappedError, build_recap, current_year
from .scraper import LetterboxdClient

logger = logging.getLogger(__name__)


def _page_limit(value: str) -> int:
    """argparse type for --max-pages: 1..MAX_PAGES."""
    try:
        pages = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid page count: '{value}'")
    if not 1 <= pages <= MAX_PAGES:
        raise argparse.ArgumentTypeError(f"must be between 1 and {MAX_PAGES}, got {pages}")
    return pages


async def _run_recap(username: str, year: int, max_pages: int, show_progress: bool) -> dict:
    async with LetterboxdClient() as client:
        return await build_recap(
            client.fetch_page,
            username,
            year,
            max_pages=max_pages,
            show_progress=show_progress,
        )


def _log_summary(payload: dict) -> None:
    diary = payload["diary"]
    stats = payload["stats"]
    streak = stats["longestStreak"]

    logger.info(f"\n{payload['user']}'s {payload['year']} in film:")
    logger.info(f"  Films logged: {stats['filmsLogged']}")
    logger.info(f"  Active days: {stats['activeDays']}")
    if streak["length"]:
        logger.info(f"  Longest streak: {streak['length']} days ({streak['start']} to {streak['end']})")
    else:
        logger.info("  Longest streak: none")

    if stats["topMonths"]:
        logger.info("\nBusiest months:")
        for item in stats["topMonths"]:
            logger.info(f"  {item['month']}: {item['count']} films")

    if stats["topDays"]:
        logger.info("\nBusiest days:")
        for item in stats["topDays"]:
            logger.info(f"  {item['date']}: {item['count']} films")

    logger.info(f"\n({diary['pagesFetched']} pages fetched, stopped: {diary['stoppedBecause']})")


def cmd_recap(args: argparse.Namespace) -> None:
    """Fetch a user's diary for one year and show the recap."""
    year = args.year or current_year()
    try:
        payload = asyncio.run(_run_recap(args.username, year, args.max_pages, not args.no_progress))
    except BoxdWrappedError as exc:
        logger.error(str(exc))
        sys.exit(1)
    except httpx.HTTPError as exc:
        logger.error(f"Could not reach Letterboxd: {type(exc).__name__}: {exc}")
        sys.exit(1)

    if args.json:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        _log_summary(payload)


def cmd_serve(args: argparse.Namespace) -> None:
    """Run the recap API."""
    import uvicorn

    uvicorn.run("boxd_wrapped.server:app", host=args.host, port=args.port)


def main():
    parser = argparse.ArgumentParser(description="BoxdWrapped: yearly Letterboxd diary recap")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    recap_parser = subparsers.add_parser("recap", help="Build a user's yearly recap")
    recap_parser.add_argument("username", help="Letterboxd username")
    recap_parser.add_argument("--year", type=int, help="Diary year (default: current year)")
    recap_parser.add_argument("--max-pages", type=_page_limit, default=MAX_PAGES, help="Diary page ceiling")
    recap_parser.add_argument("--json", action="store_true", help="Print the raw JSON payload")
    recap_parser.add_argument("--no-progress", action="store_true", help="Hide the page progress bar")
    recap_parser.set_defaults(func=cmd_recap)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args()

    # Configure logging based on verbosity
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    args.func(args)


if __name__ == "__main__":
    main()
