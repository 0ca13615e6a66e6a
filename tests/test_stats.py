from datetime import date, timedelta

from boxd_wrapped.diary import DiaryEntry
from boxd_wrapped.stats import StreakResult, compute_longest_streak, compute_stats


def _entries(*dates: str) -> list[DiaryEntry]:
    return [DiaryEntry(date=d, title=f"Film {i}", film_url=f"https://letterboxd.com/film/f{i}/") for i, d in enumerate(dates)]


def test_empty_streak():
    assert compute_longest_streak([]) == StreakResult(length=0, start=None, end=None)


def test_consecutive_days_form_one_streak():
    result = compute_longest_streak(["2025-01-01", "2025-01-02", "2025-01-03"])
    assert result == StreakResult(length=3, start="2025-01-01", end="2025-01-03")


def test_gap_keeps_first_single_day_streak():
    result = compute_longest_streak(["2025-01-01", "2025-01-03"])
    assert result == StreakResult(length=1, start="2025-01-01", end="2025-01-01")


def test_duplicate_dates_collapse():
    assert compute_longest_streak(["2025-01-01", "2025-01-01", "2025-01-02"]).length == 2


def test_input_order_does_not_matter():
    result = compute_longest_streak(["2025-03-05", "2025-03-03", "2025-03-04", "2025-01-01"])
    assert result == StreakResult(length=3, start="2025-03-03", end="2025-03-05")


def test_later_longer_run_wins_and_equal_run_does_not_replace():
    dates = [
        "2025-01-01", "2025-01-02",
        "2025-02-10", "2025-02-11", "2025-02-12",
        "2025-03-01", "2025-03-02", "2025-03-03",
    ]
    result = compute_longest_streak(dates)
    assert result == StreakResult(length=3, start="2025-02-10", end="2025-02-12")


def test_streak_crosses_month_year_and_leap_day():
    assert compute_longest_streak(["2024-12-31", "2025-01-01"]).length == 2
    assert compute_longest_streak(["2024-02-28", "2024-02-29", "2024-03-01"]).length == 3
    # 2025 is not a leap year: Feb 28 -> Mar 1 is consecutive
    assert compute_longest_streak(["2025-02-28", "2025-03-01"]).length == 2
    # Spring-forward weekend still counts as whole days
    assert compute_longest_streak(["2025-03-29", "2025-03-30", "2025-03-31"]).length == 3


def test_streak_end_matches_start_plus_length():
    dates = ["2025-07-01", "2025-07-02", "2025-07-04", "2025-07-05", "2025-07-06", "2025-07-07", "2025-07-09"]
    result = compute_longest_streak(dates)

    assert result.length == 4
    start = date.fromisoformat(result.start)
    assert date.fromisoformat(result.end) == start + timedelta(days=result.length - 1)
    assert result.start in dates and result.end in dates


def test_unparseable_dates_break_runs_without_raising():
    result = compute_longest_streak(["2025-01-01", "2025-01-02", "2025-01-xx"])
    assert result == StreakResult(length=2, start="2025-01-01", end="2025-01-02")


def test_compute_stats_counts_and_active_days():
    entries = _entries(
        "2025-01-05", "2025-01-05", "2025-01-05",
        "2025-01-06",
        "2025-02-14", "2025-02-14",
        "2025-03-01",
    )

    stats = compute_stats(entries)

    assert stats.total_entries == 7
    assert stats.active_days == 4
    assert stats.top_months == [("2025-01", 4), ("2025-02", 2), ("2025-03", 1)]
    assert stats.top_days[0] == ("2025-01-05", 3)
    assert stats.top_days[1] == ("2025-02-14", 2)
    assert stats.longest_streak == StreakResult(length=2, start="2025-01-05", end="2025-01-06")


def test_top_lists_capped_and_sorted_by_count():
    dates = []
    for month in range(1, 13):
        dates += [f"2025-{month:02d}-{day:02d}" for day in range(1, month + 1)]

    stats = compute_stats(_entries(*dates))

    assert len(stats.top_months) == 5
    assert len(stats.top_days) == 5
    month_counts = [count for _, count in stats.top_months]
    assert month_counts == sorted(month_counts, reverse=True)
    assert stats.top_months[0] == ("2025-12", 12)
    assert stats.active_days == len(set(dates))


def test_equal_counts_are_ordered_chronologically():
    stats = compute_stats(_entries("2025-05-02", "2025-05-01", "2025-04-30"))

    assert stats.top_days == [("2025-04-30", 1), ("2025-05-01", 1), ("2025-05-02", 1)]
    assert stats.top_months == [("2025-05", 2), ("2025-04", 1)]


def test_compute_stats_empty():
    stats = compute_stats([])

    assert stats.to_dict() == {
        "filmsLogged": 0,
        "activeDays": 0,
        "topMonths": [],
        "topDays": [],
        "longestStreak": {"length": 0, "start": None, "end": None},
    }


def test_stats_to_dict_shape():
    stats = compute_stats(_entries("2025-01-01", "2025-01-02"))
    payload = stats.to_dict()

    assert payload["topMonths"] == [{"month": "2025-01", "count": 2}]
    assert payload["topDays"] == [{"date": "2025-01-01", "count": 1}, {"date": "2025-01-02", "count": 1}]
    assert payload["longestStreak"] == {"length": 2, "start": "2025-01-01", "end": "2025-01-02"}
