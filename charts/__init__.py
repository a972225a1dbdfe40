"""
WeatherInsight Charts

Descriptive-statistics pipeline for a daily weather dataset.
Bins, windows and summarizes observations into chart payloads
for a histogram, a seasonal timeline and a monthly box plot.
"""

__version__ = "1.0.0"
