"""Combines provider calls into a single WeatherBundle."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from pydantic import ValidationError

from ..exceptions import GeocodeError, ProviderDecodeError
from ..models.openweather import CurrentResponse, ForecastResponse, PlaceResponse, first_icon
from ..models.weather import (
    DAILY_LIMIT,
    HOURLY_LIMIT,
    HPA_TO_MMHG,
    Coordinate,
    CurrentConditions,
    DailySample,
    HourlySample,
    Location,
    WeatherBundle,
    condition_from_icon,
)
from .openweather_client import OpenWeatherClient

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_location(
    coordinate: Coordinate,
    place: PlaceResponse | None,
    current: CurrentResponse,
) -> Location:
    """Pick the place name for a coordinate.

    The geocoded place wins; without one the current-conditions response's own
    name and country are used, and as a last resort the coordinate itself.
    """
    city = (place.name if place else "") or current.name or str(coordinate)
    region = place.state if place else None
    country = (place.country if place else None) or current.sys.country
    return Location(city=city, region=region or None, country=country, coordinate=coordinate)


def _coordinate_of(current: CurrentResponse) -> Coordinate:
    try:
        return Coordinate(latitude=current.coord.lat, longitude=current.coord.lon)
    except ValidationError as e:
        raise ProviderDecodeError(f"Invalid coordinate in provider response: {e}") from e


def merge_bundle(
    current: CurrentResponse,
    forecast: ForecastResponse,
    location: Location,
    fetched_at: datetime,
) -> WeatherBundle:
    """Merge provider responses into a WeatherBundle.

    Pure: identical inputs give identical bundles. Feels-like comes from the
    forecast endpoint, everything else about "now" from the current endpoint.
    """
    primary = current.primary_weather
    conditions = CurrentConditions(
        temperature=current.main.temp,
        description=primary.description.title() if primary else "",
        condition=condition_from_icon(primary.icon if primary else ""),
        humidity=current.main.humidity,
        pressure=current.main.pressure * HPA_TO_MMHG,
        wind_speed=current.wind.speed,
        wind_direction=current.wind.deg,
        feels_like=forecast.current.feels_like,
    )

    hourly = tuple(
        HourlySample(
            time=hour.dt,
            temperature=hour.temp,
            condition=condition_from_icon(first_icon(hour.weather)),
            pop=hour.pop,
        )
        for hour in forecast.hourly[:HOURLY_LIMIT]
    )

    daily = tuple(
        DailySample(
            date=day.dt,
            temp_min=day.temp.min,
            temp_max=day.temp.max,
            condition=condition_from_icon(first_icon(day.weather)),
            sunrise=day.sunrise,
            sunset=day.sunset,
        )
        for day in forecast.daily[:DAILY_LIMIT]
    )

    return WeatherBundle(
        location=location,
        current=conditions,
        hourly=hourly,
        daily=daily,
        fetched_at=fetched_at,
    )


class WeatherAggregator:
    """Resolves a city name or coordinate into a WeatherBundle."""

    def __init__(
        self,
        client: OpenWeatherClient,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.client = client
        self._clock = clock

    async def resolve(self, target: str | Coordinate) -> WeatherBundle:
        """Resolve either a city name or a coordinate."""
        if isinstance(target, Coordinate):
            return await self.resolve_coordinate(target)
        return await self.resolve_city(target)

    async def resolve_city(self, city: str) -> WeatherBundle:
        """Resolve a city name.

        The calls run one after another: the current-conditions response
        carries the coordinate that the forecast and geocoding calls need.
        """
        current = await self.client.fetch_current_by_city(city)
        coordinate = _coordinate_of(current)
        forecast = await self.client.fetch_forecast(coordinate)
        place = await self._lookup_place(coordinate)

        bundle = self._merge(coordinate, place, current, forecast)
        logger.info(f"Resolved '{city}' to {bundle.location.display_name} ({coordinate})")
        return bundle

    async def resolve_coordinate(self, coordinate: Coordinate) -> WeatherBundle:
        """Resolve a coordinate.

        The three calls are independent and run concurrently. The first
        failure is raised and the remaining calls are cancelled, so no
        partial bundle is ever built.
        """
        tasks = [
            asyncio.ensure_future(self.client.fetch_current_by_coordinate(coordinate)),
            asyncio.ensure_future(self.client.fetch_forecast(coordinate)),
            asyncio.ensure_future(self._lookup_place(coordinate)),
        ]
        try:
            current, forecast, place = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        bundle = self._merge(coordinate, place, current, forecast)
        logger.info(f"Resolved {coordinate} to {bundle.location.display_name}")
        return bundle

    async def _lookup_place(self, coordinate: Coordinate) -> PlaceResponse | None:
        """Reverse geocode, degrading to None on failure."""
        try:
            return await self.client.reverse_geocode(coordinate)
        except GeocodeError as e:
            logger.warning(f"{e}; falling back to provider location name")
            return None

    def _merge(
        self,
        coordinate: Coordinate,
        place: PlaceResponse | None,
        current: CurrentResponse,
        forecast: ForecastResponse,
    ) -> WeatherBundle:
        # Values that parse but break domain invariants are a decode failure
        try:
            location = resolve_location(coordinate, place, current)
            return merge_bundle(current, forecast, location, self._clock())
        except ValidationError as e:
            raise ProviderDecodeError(f"Unexpected values in provider response: {e}") from e
