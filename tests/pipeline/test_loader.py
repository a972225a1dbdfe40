"""
Tests for the dataset loader
"""
import json
from unittest.mock import Mock

import pytest
import requests

from charts.errors import DatasetLoadError
from charts.loader import create_loader, is_remote, parse_observations


@pytest.fixture
def loader(charts_config):
    return create_loader(charts_config)


def test_is_remote():
    assert is_remote("https://example.org/weather.json")
    assert is_remote("http://localhost:8080/data.json")
    assert not is_remote("data/nyc_weather_data.json")


class TestLocalSource:

    def test_load_file(self, loader):
        observations = loader.load()

        assert len(observations) == 366
        assert observations[0].date.isoformat() == "2016-01-01"
        assert "summary" not in observations[0].metrics
        assert observations[0].value("windSpeed") == pytest.approx(1.1)

    def test_observations_sorted_by_date(self, loader, tmp_path, sample_records):
        path = tmp_path / "shuffled.json"
        path.write_text(json.dumps(list(reversed(sample_records))))

        observations = loader.load(str(path))

        dates = [o.date for o in observations]
        assert dates == sorted(dates)

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(DatasetLoadError) as exc_info:
            loader.load(str(tmp_path / "missing.json"))

        assert exc_info.value.source.endswith("missing.json")

    def test_invalid_json(self, loader, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{\"date\": ")

        with pytest.raises(DatasetLoadError, match="invalid JSON"):
            loader.load(str(path))

    def test_empty_array(self, loader, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("[]")

        assert loader.load(str(path)) == []


class TestParseObservations:

    def test_rejects_non_array(self):
        with pytest.raises(DatasetLoadError, match="JSON array"):
            parse_observations({"date": "2016-01-01"})

    def test_rejects_record_without_date(self):
        with pytest.raises(DatasetLoadError, match="record 1 is malformed"):
            parse_observations([{"date": "2016-01-01"}, {"humidity": 0.5}])

    def test_rejects_bad_date(self):
        with pytest.raises(DatasetLoadError, match="record 0 is malformed"):
            parse_observations([{"date": "01/02/2016"}])

    def test_non_numeric_fields_dropped(self):
        observations = parse_observations([{
            "date": "2016-01-01",
            "humidity": 0.5,
            "precipType": "rain",
            "ozone": None,
            "flag": True,
        }])

        assert observations[0].metrics == {"humidity": 0.5}


class TestRemoteSource:

    URL = "https://example.org/nyc_weather_data.json"

    def test_fetch_remote(self, loader, sample_records):
        response = Mock()
        response.json.return_value = sample_records
        loader.session.get = Mock(return_value=response)

        observations = loader.load(self.URL)

        assert len(observations) == 366
        loader.session.get.assert_called_once_with(self.URL, timeout=30)
        response.raise_for_status.assert_called_once()

    def test_http_error(self, loader):
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        loader.session.get = Mock(return_value=response)

        with pytest.raises(DatasetLoadError, match="404"):
            loader.load(self.URL)

    def test_connection_error(self, loader):
        loader.session.get = Mock(side_effect=requests.ConnectionError("refused"))

        with pytest.raises(DatasetLoadError) as exc_info:
            loader.load(self.URL)

        assert exc_info.value.source == self.URL

    def test_invalid_json_response(self, loader):
        response = Mock()
        response.json.side_effect = ValueError("Expecting value")
        loader.session.get = Mock(return_value=response)

        with pytest.raises(DatasetLoadError, match="invalid JSON"):
            loader.load(self.URL)

    def test_session_retries_configured(self, loader, charts_config):
        adapter = loader.session.get_adapter(self.URL)

        assert adapter.max_retries.total == charts_config.max_retries
