"""Tests for health check and service endpoints."""

from fastapi import status


def test_health_check(client):
    """Test health check endpoint returns healthy status."""
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()

    assert data["status"] == "healthy"
    assert data["dataset"] == "loaded"
    assert data["observation_count"] == 366
    assert "message" in data


def test_health_check_dataset_unavailable(unavailable_client):
    """Test health check reports 503 when the dataset cannot be loaded."""
    response = unavailable_client.get("/health")

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["detail"].startswith("Dataset unavailable")


def test_dataset_loaded_on_first_request(file_client):
    """Test the dataset is read from its source when not preloaded."""
    response = file_client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["observation_count"] == 366


def test_root_endpoint(client):
    """Test root endpoint returns API information."""
    response = client.get("/")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()

    assert data["service"] == "WeatherInsight Charts API"
    assert data["version"] == "1.0.0"
    assert "/docs" in data["documentation"]
    assert "/health" in data["health_check"]


def test_api_info_endpoint(client):
    """Test API info endpoint returns configuration."""
    response = client.get("/api/v1/info")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()

    assert "api" in data
    assert "endpoints" in data
    assert data["charts"] == ["histogram", "timeline", "boxplot"]
    assert data["histogram"]["max_thresholds"] == 100


def test_metrics_endpoint(client):
    """Test Prometheus metrics endpoint."""
    client.get("/api/v1/charts/metrics")
    response = client.get("/metrics")

    assert response.status_code == status.HTTP_200_OK
    assert "text/plain" in response.headers["content-type"]
    assert "weatherinsight_charts_requests_total" in response.text
    assert "weatherinsight_charts_request_duration_seconds" in response.text


def test_response_headers(client):
    """Test tracked requests carry request id and timing headers."""
    response = client.get("/api/v1/charts/metrics")

    assert "X-Request-ID" in response.headers
    assert response.headers["X-Response-Time"].endswith("s")
