"""Weather domain models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Provider pressure is in hPa, the dashboard shows mmHg
HPA_TO_MMHG = 0.750062

HOURLY_LIMIT = 24
DAILY_LIMIT = 7

_COMPASS_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


class WeatherCondition(str, Enum):
    """Coarse weather condition used for icons and history."""

    CLEAR = "clear"
    CLOUDS = "clouds"
    RAIN = "rain"
    DRIZZLE = "drizzle"
    THUNDERSTORM = "thunderstorm"
    SNOW = "snow"
    ATMOSPHERE = "atmosphere"
    UNKNOWN = "unknown"


_ICON_PREFIXES: dict[str, WeatherCondition] = {
    "01": WeatherCondition.CLEAR,
    "02": WeatherCondition.CLOUDS,
    "03": WeatherCondition.CLOUDS,
    "04": WeatherCondition.CLOUDS,
    "09": WeatherCondition.DRIZZLE,
    "10": WeatherCondition.RAIN,
    "11": WeatherCondition.THUNDERSTORM,
    "13": WeatherCondition.SNOW,
    "50": WeatherCondition.ATMOSPHERE,
}


def condition_from_icon(icon: str) -> WeatherCondition:
    """Map an OpenWeather icon code (e.g. '10d') to a WeatherCondition.

    Only the first two characters matter, so day and night variants of the
    same icon map to the same condition. Unrecognised codes map to UNKNOWN.
    """
    return _ICON_PREFIXES.get(icon[:2], WeatherCondition.UNKNOWN)


class Coordinate(BaseModel):
    """A point on the globe in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float

    @field_validator("latitude")
    @classmethod
    def validate_latitude(cls, v: float) -> float:
        """Validate latitude is in valid range."""
        if not -90 <= v <= 90:
            raise ValueError(f"Latitude must be between -90 and 90, got {v}")
        return v

    @field_validator("longitude")
    @classmethod
    def validate_longitude(cls, v: float) -> float:
        """Validate longitude is in valid range."""
        if not -180 <= v <= 180:
            raise ValueError(f"Longitude must be between -180 and 180, got {v}")
        return v

    def __str__(self) -> str:
        return f"{self.latitude:.2f}, {self.longitude:.2f}"


class Location(BaseModel):
    """A resolved place name for a coordinate."""

    model_config = ConfigDict(frozen=True)

    city: str = Field(..., min_length=1)
    region: str | None = None
    country: str | None = None
    coordinate: Coordinate

    @property
    def display_name(self) -> str:
        """City with region when one is known."""
        if self.region:
            return f"{self.city}, {self.region}"
        return self.city


class CurrentConditions(BaseModel):
    """Current weather at a location. Pressure is in mmHg."""

    model_config = ConfigDict(frozen=True)

    temperature: float
    description: str = ""
    condition: WeatherCondition = WeatherCondition.UNKNOWN
    humidity: float
    pressure: float
    wind_speed: float
    wind_direction: float
    feels_like: float

    @property
    def wind_compass(self) -> str:
        """Eight-point compass label for the wind direction."""
        index = int(((self.wind_direction % 360) + 22.5) // 45) % 8
        return _COMPASS_POINTS[index]


class HourlySample(BaseModel):
    """Forecast for a single hour."""

    model_config = ConfigDict(frozen=True)

    time: datetime
    temperature: float
    condition: WeatherCondition = WeatherCondition.UNKNOWN
    pop: float = Field(default=0.0, ge=0.0, le=1.0)


class DailySample(BaseModel):
    """Forecast for a single day."""

    model_config = ConfigDict(frozen=True)

    date: datetime
    temp_min: float
    temp_max: float
    condition: WeatherCondition = WeatherCondition.UNKNOWN
    sunrise: datetime
    sunset: datetime


class WeatherBundle(BaseModel):
    """Immutable snapshot of everything shown for one location."""

    model_config = ConfigDict(frozen=True)

    location: Location
    current: CurrentConditions
    hourly: tuple[HourlySample, ...] = ()
    daily: tuple[DailySample, ...] = ()
    fetched_at: datetime
