"""Data models for the weather dashboard."""

from .config import Config, HistoryConfig, LocationConfig, ProviderConfig, Settings
from .history import HistoryEntry
from .weather import (
    Coordinate,
    CurrentConditions,
    DailySample,
    HourlySample,
    Location,
    WeatherBundle,
    WeatherCondition,
    condition_from_icon,
)

__all__ = [
    "Config",
    "Coordinate",
    "CurrentConditions",
    "DailySample",
    "HistoryConfig",
    "HistoryEntry",
    "HourlySample",
    "Location",
    "LocationConfig",
    "ProviderConfig",
    "Settings",
    "WeatherBundle",
    "WeatherCondition",
    "condition_from_icon",
]
