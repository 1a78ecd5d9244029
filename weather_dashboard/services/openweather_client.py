"""Client for the OpenWeather current, forecast and reverse geocoding endpoints."""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from ..exceptions import (
    GeocodeError,
    ProviderDecodeError,
    ProviderError,
    ProviderHTTPError,
    ProviderTransportError,
)
from ..models.config import ProviderConfig
from ..models.openweather import CurrentResponse, ForecastResponse, PlaceResponse
from ..models.weather import Coordinate

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_PLACES_ADAPTER = TypeAdapter(list[PlaceResponse])


class OpenWeatherClient:
    """Typed access to the OpenWeather API.

    Every request is a single attempt with the configured timeout. Failures
    are raised as ProviderError subclasses, never retried.
    """

    def __init__(
        self,
        config: ProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.timeout = config.timeout_seconds
        self._transport = transport

    async def fetch_current_by_city(self, city: str) -> CurrentResponse:
        """Current conditions for a city name query."""
        data = await self._get(f"{self.config.base_url}/weather", {"q": city})
        return self._decode(CurrentResponse, data)

    async def fetch_current_by_coordinate(self, coordinate: Coordinate) -> CurrentResponse:
        """Current conditions at a coordinate."""
        data = await self._get(
            f"{self.config.base_url}/weather",
            {"lat": coordinate.latitude, "lon": coordinate.longitude},
        )
        return self._decode(CurrentResponse, data)

    async def fetch_forecast(self, coordinate: Coordinate) -> ForecastResponse:
        """Hourly and daily forecast at a coordinate."""
        data = await self._get(
            f"{self.config.base_url}/onecall",
            {
                "lat": coordinate.latitude,
                "lon": coordinate.longitude,
                "exclude": "minutely,alerts",
            },
        )
        return self._decode(ForecastResponse, data)

    async def reverse_geocode(self, coordinate: Coordinate) -> PlaceResponse | None:
        """Look up the place at a coordinate.

        Returns None when the provider knows no place there. Any failure is
        raised as GeocodeError, which callers treat as non-fatal.
        """
        try:
            data = await self._get(
                f"{self.config.geocoding_url}/reverse",
                {"lat": coordinate.latitude, "lon": coordinate.longitude, "limit": 1},
            )
            places = _PLACES_ADAPTER.validate_python(data)
        except ProviderError as e:
            raise GeocodeError(f"Reverse geocoding failed: {e}") from e
        except ValidationError as e:
            raise GeocodeError(f"Unexpected reverse geocoding response: {e}") from e

        return places[0] if places else None

    def _params(self, extra: dict[str, Any]) -> dict[str, Any]:
        return {
            **extra,
            "appid": self.config.api_key,
            "units": self.config.units,
            "lang": self.config.language,
        }

    async def _get(self, url: str, params: dict[str, Any]) -> Any:
        """Perform one GET request and return the decoded JSON body."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=self._params(params))
        except httpx.TimeoutException as e:
            logger.warning(f"Timeout requesting {url}")
            raise ProviderTransportError("Request timed out") from e
        except httpx.RequestError as e:
            logger.error(f"Connection error requesting {url}: {e}")
            raise ProviderTransportError("Could not connect to the weather service") from e

        status = response.status_code
        if not 200 <= status < 300:
            logger.error(f"HTTP error from {url}: {status}")
            raise ProviderHTTPError(self._error_message(response), status_code=status)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise ProviderDecodeError("Weather service returned invalid data") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Human readable message for a failed response, using the provider's text if any."""
        detail = ""
        try:
            body = response.json()
            if isinstance(body, dict):
                detail = str(body.get("message") or "")
        except ValueError:
            pass

        message = f"Request failed ({response.status_code})"
        if detail:
            message = f"{message}: {detail}"
        return message

    @staticmethod
    def _decode(model: type[ModelT], data: Any) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected {model.__name__} shape: {e}")
            raise ProviderDecodeError(
                f"Weather service returned unexpected data ({e.error_count()} errors)"
            ) from e
