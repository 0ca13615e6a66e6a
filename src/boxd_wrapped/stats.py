"""
Calendar aggregates over diary entries.

Everything here is pure: the same entries in the same order always give the
same result. Dates are ISO ``YYYY-MM-DD`` strings, so lexicographic order is
chronological order.
"""
from collections import Counter
from dataclasses import dataclass
from datetime import date
from typing import Iterable

from .config import TOP_N
from .diary import DiaryEntry


@dataclass(frozen=True)
class StreakResult:
    length: int = 0
    start: str | None = None
    end: str | None = None

    def to_dict(self) -> dict:
        return {"length": self.length, "start": self.start, "end": self.end}


@dataclass(frozen=True)
class StatsResult:
    total_entries: int
    active_days: int
    top_months: list[tuple[str, int]]
    top_days: list[tuple[str, int]]
    longest_streak: StreakResult

    def to_dict(self) -> dict:
        return {
            "filmsLogged": self.total_entries,
            "activeDays": self.active_days,
            "topMonths": [{"month": month, "count": count} for month, count in self.top_months],
            "topDays": [{"date": day, "count": count} for day, count in self.top_days],
            "longestStreak": self.longest_streak.to_dict(),
        }


def _top(counts: Counter, n: int) -> list[tuple[str, int]]:
    # Equal counts keep chronological order so results are reproducible.
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:n]


def _day_number(value: str) -> int | None:
    try:
        return date.fromisoformat(value).toordinal()
    except ValueError:
        return None


def compute_longest_streak(dates: Iterable[str]) -> StreakResult:
    """
    Longest run of consecutive calendar days in ``dates``.

    Duplicates collapse. When two runs have the same length the earlier one
    wins. A date that does not parse never extends a run.
    """
    days = sorted(set(dates))
    if not days:
        return StreakResult()

    best = StreakResult(length=1, start=days[0], end=days[0])
    current_len = 1
    current_start = days[0]

    for prev, day in zip(days, days[1:]):
        prev_num = _day_number(prev)
        day_num = _day_number(day)
        if prev_num is not None and day_num is not None and day_num - prev_num == 1:
            current_len += 1
        else:
            current_len = 1
            current_start = day

        if current_len > best.length:
            best = StreakResult(length=current_len, start=current_start, end=day)

    return best


def compute_stats(entries: Iterable[DiaryEntry], top_n: int = TOP_N) -> StatsResult:
    entries = list(entries)
    dates = [entry.date for entry in entries]

    month_counts = Counter(d[:7] for d in dates)
    day_counts = Counter(dates)

    return StatsResult(
        total_entries=len(entries),
        active_days=len(day_counts),
        top_months=_top(month_counts, top_n),
        top_days=_top(day_counts, top_n),
        longest_streak=compute_longest_streak(dates),
    )
