"""Yearly Letterboxd diary recaps: diary scraping, streaks and monthly/daily counts."""

__version__ = "0.1.0"
