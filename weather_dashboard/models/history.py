"""History entry model."""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .weather import WeatherBundle, WeatherCondition


class HistoryEntry(BaseModel):
    """A past successful lookup, as stored in the history file."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    date: datetime
    city: str
    temperature: float
    condition: WeatherCondition = WeatherCondition.UNKNOWN

    @field_validator("date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Treat dates without a timezone as UTC so entries stay comparable."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_bundle(cls, bundle: WeatherBundle) -> "HistoryEntry":
        """Build an entry describing a freshly loaded bundle."""
        return cls(
            date=bundle.fetched_at,
            city=bundle.location.display_name,
            temperature=bundle.current.temperature,
            condition=bundle.current.condition,
        )
