"""Services for fetching weather, tracking location and storing history."""

from .aggregator import WeatherAggregator
from .history_store import HistoryLog, HistoryStore
from .location import AuthorizationState, IPLocationSource, LocationTracker
from .openweather_client import OpenWeatherClient

__all__ = [
    "AuthorizationState",
    "HistoryLog",
    "HistoryStore",
    "IPLocationSource",
    "LocationTracker",
    "OpenWeatherClient",
    "WeatherAggregator",
]
