"""
Configuration for the charts pipeline.
"""
from typing import Optional, Tuple

from pydantic_settings import BaseSettings

from .scales import Dimensions


class ChartsConfig(BaseSettings):
    """Charts pipeline configuration."""

    # Dataset source: local path or http(s) URL
    dataset_source: str = "data/nyc_weather_data.json"
    request_timeout: int = 30
    max_retries: int = 3
    retry_backoff: float = 0.5

    # Histogram
    histogram_metric: str = "windSpeed"
    histogram_thresholds: int = 12
    histogram_bar_padding: float = 4.0
    histogram_width: int = 400
    histogram_height: int = 350
    histogram_margin: Tuple[int, int, int, int] = (30, 15, 50, 25)

    # Seasonal timeline
    timeline_metric: str = "humidity"
    timeline_width: int = 900
    timeline_height: int = 300
    timeline_margin: Tuple[int, int, int, int] = (10, 10, 30, 80)

    # Monthly box plot
    boxplot_metric: str = "temperatureMax"
    boxplot_width: int = 600
    boxplot_height: int = 400
    boxplot_margin: Tuple[int, int, int, int] = (40, 10, 10, 60)
    outlier_iqr_factor: float = 1.5

    # Rendering
    output_dir: str = "output"

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "CHARTS_"

    def dimensions(self, kind: str) -> Dimensions:
        """Chart dimensions for one chart kind (margins are top, right, bottom, left)."""
        if kind not in ("histogram", "timeline", "boxplot"):
            raise ValueError(f"Unknown chart kind: {kind}")
        return Dimensions.from_margin(
            getattr(self, f"{kind}_width"),
            getattr(self, f"{kind}_height"),
            getattr(self, f"{kind}_margin"),
        )

    def default_metric(self, kind: str) -> str:
        """Metric plotted by a chart kind when none is requested."""
        if kind not in ("histogram", "timeline", "boxplot"):
            raise ValueError(f"Unknown chart kind: {kind}")
        return getattr(self, f"{kind}_metric")


_config: Optional[ChartsConfig] = None


def get_config() -> ChartsConfig:
    """Get or create the global charts configuration."""
    global _config
    if _config is None:
        _config = ChartsConfig()
    return _config
