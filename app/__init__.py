"""WeatherInsight Charts API."""
