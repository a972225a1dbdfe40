"""Configuration management for WeatherInsight Charts API."""

from typing import Optional
from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration."""
    
    # API settings
    api_title: str = "WeatherInsight Charts API"
    api_version: str = "1.0.0"
    api_description: str = "REST API serving histogram, seasonal timeline and box plot payloads for a daily weather dataset"
    
    # CORS settings
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["GET"]
    cors_allow_headers: list[str] = ["*"]
    
    # Histogram limits
    max_histogram_thresholds: int = 100
    
    # Load the dataset at startup instead of on first request
    preload_dataset: bool = True
    
    # Logging
    log_level: str = "INFO"
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "API_"
        case_sensitive = False


# Global config instance
_config: Optional[APIConfig] = None


def get_config() -> APIConfig:
    """Get or create global configuration instance."""
    global _config
    if _config is None:
        _config = APIConfig()
    return _config
