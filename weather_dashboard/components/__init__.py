"""UI components for the dashboard."""

from .history_panel import HistoryPanel
from .permission_screen import LocationPermissionScreen
from .status_bar import StatusBar
from .weather_panel import WeatherPanel

__all__ = ["HistoryPanel", "LocationPermissionScreen", "StatusBar", "WeatherPanel"]
