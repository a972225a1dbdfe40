"""
Calendar boundary generators.

Boundaries are dates at local midnight. Generators return every
boundary in [ceil(start), stop), so a boundary equal to start is
included and one equal to stop is not.
"""
import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Sequence, Union


@dataclass(frozen=True)
class Season:
    """A named season starting on a fixed month/day each year."""
    name: str
    month: int
    day: int
    color: str

    def starts_in(self, year: int) -> date:
        return date(year, self.month, self.day)


@dataclass(frozen=True)
class SeasonWindow:
    season: Season
    start: date
    end: date


DEFAULT_SEASONS = (
    Season("Spring", 3, 20, "#fff"),
    Season("Summer", 6, 21, "#10ac84"),
    Season("Fall", 9, 21, "#fff"),
    Season("Winter", 12, 21, "#2e86de"),
)


def offset_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def day_floor(value: Union[date, datetime]) -> date:
    """Calendar day of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def day_boundaries(start: date, stop: date) -> List[date]:
    """Every day in [start, stop)."""
    return [start + timedelta(days=i) for i in range(max(0, (stop - start).days))]


def week_boundaries(start: date, stop: date) -> List[date]:
    """Sundays in [start, stop)."""
    # date.weekday(): Monday is 0, Sunday is 6
    current = start + timedelta(days=(6 - start.weekday()) % 7)
    boundaries = []
    while current < stop:
        boundaries.append(current)
        current += timedelta(days=7)
    return boundaries


def month_boundaries(start: date, stop: date) -> List[date]:
    """First days of month in [start, stop)."""
    current = start.replace(day=1)
    if current < start:
        current = offset_months(current, 1)
    boundaries = []
    while current < stop:
        boundaries.append(current)
        current = offset_months(current, 1)
    return boundaries


def year_boundaries(start: date, stop: date) -> List[date]:
    """January firsts in [start, stop)."""
    current = date(start.year, 1, 1)
    if current < start:
        current = date(start.year + 1, 1, 1)
    boundaries = []
    while current < stop:
        boundaries.append(current)
        current = date(current.year + 1, 1, 1)
    return boundaries


def season_windows(
    start: date,
    end: date,
    seasons: Sequence[Season] = DEFAULT_SEASONS,
) -> List[SeasonWindow]:
    """
    One window per season per year covering a date range.

    Years run from 13 months before start up to end, so the season that
    began in the previous year (e.g. a winter crossing New Year) is
    included. Each season ends where the next one starts; the last
    season of a year ends at the first season of the following year.

    Args:
        start: First observation date
        end: Last observation date
        seasons: Seasons in calendar order

    Returns:
        Contiguous, ascending season windows
    """
    if not seasons:
        raise ValueError("At least one season is required")

    years = [boundary.year for boundary in year_boundaries(offset_months(start, -13), end)]

    windows = []
    for year in years:
        for index, season in enumerate(seasons):
            if index + 1 < len(seasons):
                season_end = seasons[index + 1].starts_in(year)
            else:
                season_end = seasons[0].starts_in(year + 1)
            windows.append(SeasonWindow(season, season.starts_in(year), season_end))
    return windows
