"""API test configuration and fixtures."""

import os

# The dataset is provided per test through dependency overrides
os.environ.setdefault("API_PRELOAD_DATASET", "false")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import app.dataset as dataset_module  # noqa: E402
from app.dataset import get_dataset, reset_dataset  # noqa: E402
from app.main import app  # noqa: E402
from charts.config import ChartsConfig  # noqa: E402


def _client_for(observations):
    def override_get_dataset():
        return observations

    app.dependency_overrides[get_dataset] = override_get_dataset
    return TestClient(app)


@pytest.fixture(scope="function")
def client(sample_observations):
    """Test client serving the 2016 sample observations."""
    with _client_for(sample_observations) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def empty_client():
    """Test client serving an empty dataset."""
    with _client_for([]) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def unavailable_client(monkeypatch, tmp_path):
    """Test client whose dataset source does not exist."""
    missing = ChartsConfig(dataset_source=str(tmp_path / "missing.json"), max_retries=0)
    monkeypatch.setattr(dataset_module, "get_charts_config", lambda: missing)
    reset_dataset()

    with TestClient(app) as test_client:
        yield test_client

    reset_dataset()


@pytest.fixture(scope="function")
def file_client(monkeypatch, charts_config):
    """Test client loading the sample dataset file on first request."""
    monkeypatch.setattr(dataset_module, "get_charts_config", lambda: charts_config)
    reset_dataset()

    with TestClient(app) as test_client:
        yield test_client

    reset_dataset()
