"""Weather panel component for displaying the current bundle."""

from textual.app import ComposeResult
from textual.widgets import Label, Static

from ..models.weather import WeatherBundle, WeatherCondition

CONDITION_SYMBOLS = {
    WeatherCondition.CLEAR: "☀",
    WeatherCondition.CLOUDS: "☁",
    WeatherCondition.RAIN: "☂",
    WeatherCondition.DRIZZLE: "☔",
    WeatherCondition.THUNDERSTORM: "⚡",
    WeatherCondition.SNOW: "❄",
    WeatherCondition.ATMOSPHERE: "≋",
    WeatherCondition.UNKNOWN: "?",
}


def temp_color(temp: float) -> str:
    """Get color for temperature value."""
    if temp <= 0:
        return "blue"
    elif temp <= 10:
        return "cyan"
    elif temp <= 20:
        return "green"
    elif temp <= 30:
        return "yellow"
    return "red"


class WeatherPanel(Static):
    """Panel displaying current conditions, the next 24 hours and the week."""

    DEFAULT_CSS = """
    WeatherPanel {
        height: auto;
        border: solid $primary;
        padding: 0 1;
    }

    WeatherPanel #weather-error {
        color: $error;
        display: none;
    }

    WeatherPanel #weather-error.visible {
        display: block;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._weather: WeatherBundle | None = None

    def compose(self) -> ComposeResult:
        yield Static("[dim]Search for a city or press ctrl+l to use your location[/dim]", id="weather-header")
        yield Label("", id="weather-error")
        yield Static("", id="weather-details")
        yield Static("", id="weather-hourly")
        yield Static("", id="weather-daily")

    def set_loading(self) -> None:
        """Show the loading placeholder unless a bundle is already displayed."""
        if self._weather is None:
            self.query_one("#weather-header", Static).update("[dim]Loading...[/dim]")
        self.query_one("#weather-error", Label).remove_class("visible")

    def set_error(self, error: str | None) -> None:
        """Display an error message above whatever bundle is shown."""
        error_label = self.query_one("#weather-error", Label)
        if error:
            error_label.update(f"[red]{error}[/red]")
            error_label.add_class("visible")
        else:
            error_label.remove_class("visible")

    def update_weather(self, weather: WeatherBundle) -> None:
        """Update panel with a new bundle."""
        if weather is self._weather:
            return
        self._weather = weather

        current = weather.current
        tc = temp_color(current.temperature)
        symbol = CONDITION_SYMBOLS[current.condition]
        updated = weather.fetched_at.astimezone().strftime("%H:%M")

        self.query_one("#weather-header", Static).update(
            f"[bold]{weather.location.display_name}[/bold]  "
            f"{symbol} [{tc}]{current.temperature:.1f}°C[/{tc}] {current.description}  "
            f"[dim]updated {updated}[/dim]"
        )
        self.query_one("#weather-details", Static).update(
            f"Feels like {current.feels_like:.0f}°  "
            f"Humidity {current.humidity:.0f}%  "
            f"Pressure {current.pressure:.0f} mmHg  "
            f"Wind {current.wind_speed:.1f} m/s {current.wind_compass}"
        )

        hours = []
        for hour in weather.hourly:
            hc = temp_color(hour.temperature)
            rain = f" {hour.pop * 100:.0f}%" if hour.pop > 0 else ""
            hours.append(
                f"{hour.time.astimezone().strftime('%H')}h "
                f"{CONDITION_SYMBOLS[hour.condition]}[{hc}]{hour.temperature:.0f}°[/{hc}]{rain}"
            )
        self.query_one("#weather-hourly", Static).update(
            "  ".join(hours) if hours else "[dim]No hourly forecast[/dim]"
        )

        days = []
        for day in weather.daily:
            mc, xc = temp_color(day.temp_min), temp_color(day.temp_max)
            days.append(
                f"{day.date.astimezone().strftime('%a')} {CONDITION_SYMBOLS[day.condition]} "
                f"[{mc}]{day.temp_min:.0f}[/{mc}]/[{xc}]{day.temp_max:.0f}°[/{xc}]"
            )
        self.query_one("#weather-daily", Static).update(
            "  ".join(days) if days else "[dim]No forecast[/dim]"
        )
