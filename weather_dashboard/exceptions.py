"""Application exception classes."""


class WeatherDashboardError(Exception):
    """Base class for all weather dashboard errors."""


class ConfigError(WeatherDashboardError):
    """Raised when configuration is invalid or incomplete."""


class ProviderError(WeatherDashboardError):
    """Raised when a weather provider request fails."""


class ProviderTransportError(ProviderError):
    """Raised when the provider cannot be reached or the request times out."""


class ProviderHTTPError(ProviderError):
    """Raised for responses with a status outside the 2xx range."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderDecodeError(ProviderError):
    """Raised when a provider response is not valid JSON or has an unexpected shape."""


class GeocodeError(WeatherDashboardError):
    """Raised when reverse geocoding fails. Callers treat this as non-fatal."""


class LocationError(WeatherDashboardError):
    """Raised when the device location cannot be determined."""


class StorageError(WeatherDashboardError):
    """Raised when the history file cannot be read or written."""
