"""
Configuration constants for the BoxdWrapped diary recap service.

This module centralizes the scraper limits and aggregation parameters.
Values can be overridden via environment variables.
"""
import os
import logging

logger = logging.getLogger(__name__)


def _get_float_env(key: str, default: float, min_val: float = 0) -> float:
    """
    Safely parse float from environment variable with validation.

    Args:
        key: Environment variable name
        default: Default value if not set or invalid
        min_val: Minimum allowed value

    Returns:
        Validated float value
    """
    try:
        val = float(os.environ.get(key, default))
        if val < min_val:
            logger.warning(f"{key}={val} is below minimum {min_val}, using {min_val}")
            return min_val
        return val
    except ValueError:
        logger.warning(f"Invalid {key}='{os.environ.get(key)}', using default {default}")
        return default


def _get_int_env(key: str, default: int, min_val: int = 1) -> int:
    """
    Safely parse integer from environment variable with validation.

    Args:
        key: Environment variable name
        default: Default value if not set or invalid
        min_val: Minimum allowed value

    Returns:
        Validated integer value
    """
    try:
        val = int(os.environ.get(key, default))
        if val < min_val:
            logger.warning(f"{key}={val} is below minimum {min_val}, using {min_val}")
            return min_val
        return val
    except ValueError:
        logger.warning(f"Invalid {key}='{os.environ.get(key)}', using default {default}")
        return default


# Site
BASE_URL = os.environ.get("LETTERBOXD_BASE_URL", "https://letterboxd.com").rstrip("/")
FILM_PATH_SEGMENT = "/film/"
USER_AGENT = "Mozilla/5.0 (compatible; boxd-wrapped/0.1)"

# HTTP client
HTTP_TIMEOUT = _get_float_env("BOXD_HTTP_TIMEOUT", 30.0, min_val=1.0)
SCRAPER_HTTP2 = os.environ.get("BOXD_HTTP2", "0") == "1"

# Pagination
MAX_PAGES = _get_int_env("BOXD_MAX_PAGES", 30, min_val=1)  # Hard ceiling, hitting it is a stop reason
SNIPPET_LENGTH = _get_int_env("BOXD_SNIPPET_LENGTH", 500, min_val=0)

# Aggregation
TOP_N = _get_int_env("BOXD_TOP_N", 5, min_val=1)

# Stop reasons reported by the diary paginator
STOP_NOT_FOUND = "diary_not_found_or_private"
STOP_NO_ENTRIES_ON_PAGE = "no_entries_on_page"
STOP_NO_ENTRIES_COLLECTED = "no_entries_collected"
STOP_MAX_PAGES = "max_pages_reached"


def stop_http_status(status: int) -> str:
    """Stop reason for a non-ok, non-404 diary page."""
    return f"diary_http_{status}"


# API
CORS_ALLOW_ORIGINS = os.environ.get("CORS_ALLOW_ORIGINS", "*")
