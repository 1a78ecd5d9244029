"""Pytest configuration and fixtures."""

import json
import tempfile
from pathlib import Path

import httpx
import pytest

# 2024-05-01 12:00:00 UTC
BASE_TS = 1714564800


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def current_payload():
    """Current-conditions response for London."""
    return {
        "coord": {"lon": -0.1257, "lat": 51.5085},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        "main": {"temp": 15.2, "feels_like": 14.8, "pressure": 1012, "humidity": 82},
        "wind": {"speed": 4.1, "deg": 240},
        "name": "London",
        "sys": {"country": "GB"},
    }


def _forecast(hours: int, days: int) -> dict:
    return {
        "timezone": "Europe/London",
        "current": {
            "dt": BASE_TS,
            "sunrise": BASE_TS - 6 * 3600,
            "sunset": BASE_TS + 8 * 3600,
            "temp": 15.0,
            "feels_like": 13.9,
            "pressure": 1012,
            "humidity": 80,
            "wind_speed": 4.0,
            "wind_deg": 240,
            "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        },
        "hourly": [
            {
                "dt": BASE_TS + i * 3600,
                "temp": 15.0 + i * 0.1,
                "pop": 0.2,
                "weather": [{"id": 803, "main": "Clouds", "description": "clouds", "icon": "04d"}],
            }
            for i in range(hours)
        ],
        "daily": [
            {
                "dt": BASE_TS + i * 86400,
                "sunrise": BASE_TS + i * 86400 - 6 * 3600,
                "sunset": BASE_TS + i * 86400 + 8 * 3600,
                "temp": {"min": 9.0 + i, "max": 17.0 + i},
                "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
            }
            for i in range(days)
        ],
    }


@pytest.fixture
def forecast_payload():
    """Forecast response with more entries than the dashboard keeps."""
    return _forecast(hours=48, days=8)


@pytest.fixture
def short_forecast_payload():
    """Forecast response with fewer entries than the dashboard keeps."""
    return _forecast(hours=5, days=3)


@pytest.fixture
def place_payload():
    """Reverse geocoding response with one place."""
    return [{"name": "London", "state": "England", "country": "GB", "lat": 51.5085, "lon": -0.1257}]


@pytest.fixture
def make_transport():
    """Build an httpx.MockTransport that answers by URL path suffix.

    Routes map a path suffix ("/weather", "/onecall", "/reverse") to either a
    JSON-serialisable body, an httpx.Response, or an exception to raise.
    Every request is appended to the returned transport's `requests` list.
    """

    def factory(routes: dict) -> httpx.MockTransport:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            for suffix, answer in routes.items():
                if request.url.path.endswith(suffix):
                    if isinstance(answer, Exception):
                        raise answer
                    if isinstance(answer, httpx.Response):
                        return answer
                    return httpx.Response(200, content=json.dumps(answer))
            return httpx.Response(404, json={"cod": "404", "message": "not routed"})

        transport = httpx.MockTransport(handler)
        transport.requests = requests
        return transport

    return factory
