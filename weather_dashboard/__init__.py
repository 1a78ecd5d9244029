"""Weather Dashboard - current, hourly and daily weather in the terminal."""

__version__ = "0.1.0"
