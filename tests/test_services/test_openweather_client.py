"""Tests for the OpenWeather client."""

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from weather_dashboard.exceptions import (
    GeocodeError,
    ProviderDecodeError,
    ProviderHTTPError,
    ProviderTransportError,
)
from weather_dashboard.models.config import ProviderConfig
from weather_dashboard.models.weather import Coordinate
from weather_dashboard.services.openweather_client import OpenWeatherClient

LONDON = Coordinate(latitude=51.5085, longitude=-0.1257)


@pytest.fixture
def provider_config():
    return ProviderConfig(
        api_key="test-key",
        base_url="https://weather.test/data/2.5",
        geocoding_url="https://weather.test/geo/1.0",
        language="ru",
    )


@pytest.fixture
def make_client(provider_config, make_transport):
    def factory(routes: dict):
        transport = make_transport(routes)
        return OpenWeatherClient(provider_config, transport=transport), transport

    return factory


class TestRequests:
    """Tests for the request shape."""

    def test_current_by_city_params(self, make_client, current_payload):
        """Test city lookups send the query and common parameters."""
        client, transport = make_client({"/weather": current_payload})
        asyncio.run(client.fetch_current_by_city("London"))

        request = transport.requests[0]
        assert request.url.path == "/data/2.5/weather"
        assert request.url.params["q"] == "London"
        assert request.url.params["appid"] == "test-key"
        assert request.url.params["units"] == "metric"
        assert request.url.params["lang"] == "ru"

    def test_current_by_coordinate_params(self, make_client, current_payload):
        client, transport = make_client({"/weather": current_payload})
        asyncio.run(client.fetch_current_by_coordinate(LONDON))

        params = transport.requests[0].url.params
        assert float(params["lat"]) == pytest.approx(51.5085)
        assert float(params["lon"]) == pytest.approx(-0.1257)
        assert "q" not in params

    def test_forecast_excludes_minutely_and_alerts(self, make_client, forecast_payload):
        client, transport = make_client({"/onecall": forecast_payload})
        asyncio.run(client.fetch_forecast(LONDON))

        request = transport.requests[0]
        assert request.url.path == "/data/2.5/onecall"
        assert request.url.params["exclude"] == "minutely,alerts"
        assert request.url.params["appid"] == "test-key"

    def test_reverse_geocode_url(self, make_client, place_payload):
        client, transport = make_client({"/reverse": place_payload})
        asyncio.run(client.reverse_geocode(LONDON))

        request = transport.requests[0]
        assert request.url.path == "/geo/1.0/reverse"
        assert request.url.params["limit"] == "1"

    def test_timeout_from_config(self, provider_config):
        assert OpenWeatherClient(provider_config).timeout == 20.0


class TestDecoding:
    """Tests for response decoding."""

    def test_current_response(self, make_client, current_payload):
        client, _ = make_client({"/weather": current_payload})
        current = asyncio.run(client.fetch_current_by_city("London"))

        assert current.name == "London"
        assert current.sys.country == "GB"
        assert current.main.temp == 15.2
        assert current.main.pressure == 1012
        assert current.primary_weather.icon == "10d"

    def test_empty_weather_list_is_valid(self, make_client, current_payload):
        """Test that a missing descriptor is not a decode error."""
        current_payload["weather"] = []
        client, _ = make_client({"/weather": current_payload})
        current = asyncio.run(client.fetch_current_by_city("London"))
        assert current.primary_weather is None

    def test_forecast_timestamps_are_utc(self, make_client, forecast_payload):
        client, _ = make_client({"/onecall": forecast_payload})
        forecast = asyncio.run(client.fetch_forecast(LONDON))

        assert forecast.current.feels_like == 13.9
        assert forecast.hourly[0].dt == datetime(2024, 5, 1, 12, tzinfo=timezone.utc)
        assert len(forecast.hourly) == 48
        assert len(forecast.daily) == 8

    def test_missing_required_field(self, make_client, current_payload):
        """Test that a shape mismatch raises ProviderDecodeError."""
        del current_payload["main"]
        client, _ = make_client({"/weather": current_payload})
        with pytest.raises(ProviderDecodeError):
            asyncio.run(client.fetch_current_by_city("London"))

    def test_invalid_json(self, make_client):
        client, _ = make_client({"/weather": httpx.Response(200, content=b"<html>oops")})
        with pytest.raises(ProviderDecodeError):
            asyncio.run(client.fetch_current_by_city("London"))


class TestErrors:
    """Tests for transport and HTTP failures."""

    def test_not_found(self, make_client):
        """Test a 404 carries the status code and the provider message."""
        client, _ = make_client(
            {"/weather": httpx.Response(404, json={"cod": "404", "message": "city not found"})}
        )
        with pytest.raises(ProviderHTTPError) as exc_info:
            asyncio.run(client.fetch_current_by_city("Atlantis"))

        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "Request failed (404): city not found"

    def test_server_error_without_body(self, make_client):
        client, _ = make_client({"/onecall": httpx.Response(503, content=b"")})
        with pytest.raises(ProviderHTTPError) as exc_info:
            asyncio.run(client.fetch_forecast(LONDON))
        assert str(exc_info.value) == "Request failed (503)"

    def test_redirect_is_an_error(self, make_client):
        """Test that statuses outside 2xx fail, not only 4xx/5xx."""
        client, _ = make_client({"/weather": httpx.Response(304)})
        with pytest.raises(ProviderHTTPError):
            asyncio.run(client.fetch_current_by_city("London"))

    def test_timeout(self, make_client):
        client, _ = make_client({"/weather": httpx.ReadTimeout("timed out")})
        with pytest.raises(ProviderTransportError):
            asyncio.run(client.fetch_current_by_city("London"))

    def test_connection_error(self, make_client):
        client, _ = make_client({"/weather": httpx.ConnectError("unreachable")})
        with pytest.raises(ProviderTransportError):
            asyncio.run(client.fetch_current_by_city("London"))

    def test_no_retry(self, make_client):
        """Test a failed request is attempted exactly once."""
        client, transport = make_client({"/weather": httpx.Response(500)})
        with pytest.raises(ProviderHTTPError):
            asyncio.run(client.fetch_current_by_city("London"))
        assert len(transport.requests) == 1


class TestReverseGeocode:
    """Tests for reverse geocoding."""

    def test_place_found(self, make_client, place_payload):
        client, _ = make_client({"/reverse": place_payload})
        place = asyncio.run(client.reverse_geocode(LONDON))
        assert place.name == "London"
        assert place.state == "England"
        assert place.country == "GB"

    def test_no_place(self, make_client):
        client, _ = make_client({"/reverse": []})
        assert asyncio.run(client.reverse_geocode(LONDON)) is None

    def test_http_failure_is_geocode_error(self, make_client):
        client, _ = make_client({"/reverse": httpx.Response(500)})
        with pytest.raises(GeocodeError):
            asyncio.run(client.reverse_geocode(LONDON))

    def test_transport_failure_is_geocode_error(self, make_client):
        client, _ = make_client({"/reverse": httpx.ConnectError("unreachable")})
        with pytest.raises(GeocodeError):
            asyncio.run(client.reverse_geocode(LONDON))

    def test_unexpected_shape_is_geocode_error(self, make_client):
        client, _ = make_client({"/reverse": {"name": "not a list"}})
        with pytest.raises(GeocodeError):
            asyncio.run(client.reverse_geocode(LONDON))
