"""FastAPI application entry point for the charts service."""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Tuple, Type

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from app.config import get_config
from app.dataset import check_dataset, load_dataset
from app.routers import charts as chart_routes, health, stats
from charts.builders import BUILDERS
from charts.errors import ChartsError, DatasetLoadError, NoDataError, UnknownMetricError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

config = get_config()

# Prometheus metrics, labelled by route template so per-metric paths share a series
REQUEST_COUNT = Counter(
    "weatherinsight_charts_requests_total",
    "Chart API requests",
    ["method", "route", "status"]
)
REQUEST_DURATION = Histogram(
    "weatherinsight_charts_request_duration_seconds",
    "Chart API request duration in seconds",
    ["method", "route"]
)

UNTRACKED_PATHS = ("/health", "/metrics")

# Pipeline error -> (HTTP status, error type)
ERROR_RESPONSES: Dict[Type[ChartsError], Tuple[int, str]] = {
    UnknownMetricError: (status.HTTP_404_NOT_FOUND, "unknown_metric"),
    NoDataError: (status.HTTP_422_UNPROCESSABLE_ENTITY, "no_data"),
    DatasetLoadError: (status.HTTP_503_SERVICE_UNAVAILABLE, "dataset_unavailable"),
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Load the dataset at startup when preloading is enabled.

    A failed load is not fatal: the dataset is retried on the first
    request and chart endpoints answer 503 until it succeeds.
    """
    logger.info(f"Starting {config.api_title} {config.api_version}")

    if config.preload_dataset and not check_dataset():
        try:
            observations = load_dataset()
            logger.info(f"Dataset preloaded: {len(observations)} observations")
        except DatasetLoadError as e:
            logger.warning(f"Dataset preload failed, will retry on first request: {e}")

    yield

    logger.info(f"Shutting down {config.api_title}")


app = FastAPI(
    title=config.api_title,
    version=config.api_version,
    description=config.api_description,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=config.cors_allow_credentials,
    allow_methods=config.cors_allow_methods,
    allow_headers=config.cors_allow_headers,
)


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


@app.middleware("http")
async def track_requests(request: Request, call_next):
    """Log chart requests and record their count and latency."""
    if request.url.path in UNTRACKED_PATHS:
        return await call_next(request)

    started = time.perf_counter()
    request_id = f"{int(time.time() * 1000)}-{id(request)}"
    logger.info(f"{request.method} {request.url.path} [{request_id}]")

    response = await call_next(request)

    elapsed = time.perf_counter() - started
    route = _route_label(request)
    REQUEST_COUNT.labels(request.method, route, response.status_code).inc()
    REQUEST_DURATION.labels(request.method, route).observe(elapsed)

    logger.info(
        f"{request.method} {request.url.path} [{request_id}] "
        f"-> {response.status_code} in {elapsed:.3f}s"
    )

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Response-Time"] = f"{elapsed:.3f}s"
    return response


@app.exception_handler(ChartsError)
async def charts_error_handler(request: Request, exc: ChartsError):
    """
    Map pipeline errors to HTTP responses.

    Unknown metrics are 404 and list the available metrics, charts over
    no observations are 422, and an unloadable dataset is 503.
    """
    status_code, error_type = status.HTTP_500_INTERNAL_SERVER_ERROR, "charts_error"
    for error_class, response in ERROR_RESPONSES.items():
        if isinstance(exc, error_class):
            status_code, error_type = response
            break

    content = {"detail": str(exc), "type": error_type}
    if isinstance(exc, UnknownMetricError):
        content["available_metrics"] = exc.available
    if isinstance(exc, DatasetLoadError):
        content["detail"] = f"Dataset unavailable: {exc.reason}"

    logger.warning(f"{request.method} {request.url.path} -> {status_code}: {exc}")
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Anything else is a 500 without internals in the body."""
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "type": "internal_error",
            "path": request.url.path
        }
    )


@app.get("/metrics")
async def metrics():
    """Prometheus exposition of the request metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


app.include_router(health.router)
app.include_router(chart_routes.router)
app.include_router(stats.router)


@app.get("/api/v1/info")
async def api_info():
    """
    Service metadata, endpoint map and chart options.

    Returns:
        API description, endpoints, chart kinds and histogram limits
    """
    return {
        "api": {
            "title": config.api_title,
            "version": config.api_version,
            "description": config.api_description
        },
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "metrics": "/metrics",
            "charts": chart_routes.router.prefix,
            "stats": stats.router.prefix
        },
        "charts": list(BUILDERS.keys()),
        "histogram": {
            "max_thresholds": config.max_histogram_thresholds
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=config.log_level.lower()
    )
