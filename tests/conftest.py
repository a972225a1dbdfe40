"""
Shared fixtures: a deterministic year of daily observations.
"""
import json
from datetime import date, datetime, timedelta

import pytest

from charts.config import ChartsConfig
from charts.models import Observation


def daily_records(year=2016):
    """One record per day of a year, shaped like the source dataset."""
    records = []
    day = date(year, 1, 1)
    while day.year == year:
        doy = day.timetuple().tm_yday
        records.append({
            "date": day.isoformat(),
            "summary": "Clear throughout the day.",
            "icon": "clear-day",
            "temperatureMax": 40.0 + day.month * 3 + (doy % 7),
            "temperatureMin": 25.0 + day.month * 3 + (doy % 5),
            "humidity": round(0.45 + (doy % 40) / 100, 2),
            "windSpeed": round((doy % 13) * 1.1, 2),
            "uvIndex": doy % 10,
            "moonPhase": round((doy % 30) / 30, 2),
        })
        day += timedelta(days=1)
    return records


@pytest.fixture
def sample_records():
    """Daily records for 2016 (a leap year, 366 days)."""
    return daily_records(2016)


@pytest.fixture
def sample_observations(sample_records):
    """Observations built from the 2016 records, sorted by date."""
    return [Observation.from_record(record) for record in sample_records]


@pytest.fixture
def make_observation():
    """Factory for single observations: make_observation("2016-01-05", humidity=0.5)."""
    def _make(day, **metrics):
        if isinstance(day, str):
            day = datetime.strptime(day, "%Y-%m-%d").date()
        return Observation(date=day, metrics={k: float(v) for k, v in metrics.items()})
    return _make


@pytest.fixture
def dataset_file(tmp_path, sample_records):
    """The 2016 records written to a JSON file."""
    path = tmp_path / "weather.json"
    path.write_text(json.dumps(sample_records))
    return path


@pytest.fixture
def charts_config(dataset_file, tmp_path):
    """Charts configuration pointing at the sample dataset file."""
    return ChartsConfig(
        dataset_source=str(dataset_file),
        output_dir=str(tmp_path / "output"),
        max_retries=0,
    )
