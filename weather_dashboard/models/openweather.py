"""Response schemas for the OpenWeather endpoints.

These mirror the JSON the provider returns and are validated strictly:
missing required fields are a decode error. Unknown fields are ignored.
Timestamps arrive as epoch seconds and decode to UTC datetimes.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class WeatherDescriptor(BaseModel):
    """One entry of the provider's `weather` list."""

    id: int | None = None
    main: str = ""
    description: str = ""
    icon: str = ""


class CurrentCoord(BaseModel):
    lon: float
    lat: float


class CurrentMain(BaseModel):
    temp: float
    feels_like: float | None = None
    pressure: float
    humidity: float


class CurrentWind(BaseModel):
    speed: float
    deg: float = 0.0


class CurrentSys(BaseModel):
    country: str | None = None


class CurrentResponse(BaseModel):
    """Response of the current-conditions endpoint (`/weather`)."""

    coord: CurrentCoord
    weather: list[WeatherDescriptor] = Field(default_factory=list)
    main: CurrentMain
    wind: CurrentWind
    name: str = ""
    sys: CurrentSys = Field(default_factory=CurrentSys)

    @property
    def primary_weather(self) -> WeatherDescriptor | None:
        """First weather descriptor, if the provider sent any."""
        return self.weather[0] if self.weather else None


class ForecastCurrent(BaseModel):
    dt: datetime
    sunrise: datetime | None = None
    sunset: datetime | None = None
    temp: float
    feels_like: float
    pressure: float
    humidity: float
    wind_speed: float
    wind_deg: float = 0.0
    weather: list[WeatherDescriptor] = Field(default_factory=list)


class ForecastHourly(BaseModel):
    dt: datetime
    temp: float
    pop: float = 0.0
    weather: list[WeatherDescriptor] = Field(default_factory=list)


class DailyTemp(BaseModel):
    min: float
    max: float


class ForecastDaily(BaseModel):
    dt: datetime
    sunrise: datetime
    sunset: datetime
    temp: DailyTemp
    weather: list[WeatherDescriptor] = Field(default_factory=list)


class ForecastResponse(BaseModel):
    """Response of the forecast endpoint (`/onecall`)."""

    timezone: str = "UTC"
    current: ForecastCurrent
    hourly: list[ForecastHourly] = Field(default_factory=list)
    daily: list[ForecastDaily] = Field(default_factory=list)


class PlaceResponse(BaseModel):
    """One entry of the reverse geocoding response."""

    name: str = ""
    state: str | None = None
    country: str | None = None
    lat: float | None = None
    lon: float | None = None


def first_icon(weather: list[WeatherDescriptor]) -> str:
    """Icon code of the first descriptor, or an empty string."""
    return weather[0].icon if weather else ""
