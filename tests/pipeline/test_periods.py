"""
Tests for calendar boundary generators
"""
from datetime import date, datetime

from charts.periods import (
    DEFAULT_SEASONS,
    day_boundaries,
    day_floor,
    month_boundaries,
    offset_months,
    season_windows,
    week_boundaries,
    year_boundaries,
)


def test_week_boundaries_are_sundays():
    """2016-01-01 is a Friday; the first Sunday is 01-03."""
    weeks = week_boundaries(date(2016, 1, 1), date(2016, 1, 31))

    assert weeks == [date(2016, 1, 3), date(2016, 1, 10), date(2016, 1, 17), date(2016, 1, 24)]
    assert all(w.weekday() == 6 for w in weeks)


def test_week_boundaries_include_start_exclude_stop():
    weeks = week_boundaries(date(2016, 1, 3), date(2016, 1, 10))

    assert weeks == [date(2016, 1, 3)]


def test_week_boundaries_for_full_year():
    weeks = week_boundaries(date(2016, 1, 1), date(2016, 12, 31))

    assert len(weeks) == 52
    assert weeks[-1] == date(2016, 12, 25)


def test_month_boundaries_full_year():
    months = month_boundaries(date(2016, 1, 1), date(2016, 12, 31))

    assert months == [date(2016, m, 1) for m in range(1, 13)]


def test_month_boundaries_start_mid_month():
    months = month_boundaries(date(2016, 1, 15), date(2016, 4, 1))

    assert months == [date(2016, 2, 1), date(2016, 3, 1)]


def test_year_boundaries():
    years = year_boundaries(date(2014, 12, 1), date(2016, 12, 31))

    assert years == [date(2015, 1, 1), date(2016, 1, 1)]


def test_offset_months():
    assert offset_months(date(2016, 1, 1), -13) == date(2014, 12, 1)
    assert offset_months(date(2016, 3, 31), -1) == date(2016, 2, 29)
    assert offset_months(date(2016, 11, 30), 2) == date(2017, 1, 30)


def test_season_windows_include_previous_year():
    windows = season_windows(date(2016, 1, 1), date(2016, 12, 31))

    assert len(windows) == 2 * len(DEFAULT_SEASONS)
    assert windows[0].season.name == "Spring"
    assert windows[0].start == date(2015, 3, 20)
    assert windows[0].end == date(2015, 6, 21)


def test_winter_runs_into_next_year():
    windows = season_windows(date(2016, 1, 1), date(2016, 12, 31))

    winter_2015 = windows[3]
    assert winter_2015.season.name == "Winter"
    assert winter_2015.start == date(2015, 12, 21)
    assert winter_2015.end == date(2016, 3, 20)


def test_season_windows_are_contiguous():
    windows = season_windows(date(2016, 1, 1), date(2016, 12, 31))

    for current, following in zip(windows, windows[1:]):
        assert current.end == following.start


def test_day_floor():
    assert day_floor(datetime(2016, 7, 4, 23, 59)) == date(2016, 7, 4)
    assert day_floor(date(2016, 7, 4)) == date(2016, 7, 4)


def test_day_boundaries():
    days = day_boundaries(date(2016, 2, 27), date(2016, 3, 2))

    assert days == [date(2016, 2, 27), date(2016, 2, 28), date(2016, 2, 29), date(2016, 3, 1)]
    assert day_boundaries(date(2016, 3, 2), date(2016, 3, 1)) == []
