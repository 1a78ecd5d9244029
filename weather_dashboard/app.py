"""Textual application rendering the dashboard state."""

import asyncio
import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Input

from .components import HistoryPanel, LocationPermissionScreen, StatusBar, WeatherPanel
from .controller import DashboardController, DashboardState
from .models.config import Config
from .services.aggregator import WeatherAggregator
from .services.history_store import HistoryLog, HistoryStore
from .services.location import IPLocationSource, LocationTracker, PermissionPrompt
from .services.openweather_client import OpenWeatherClient

logger = logging.getLogger(__name__)


def create_controller(config: Config, prompt: PermissionPrompt | None = None) -> DashboardController:
    """Wire the services described by `config` into a controller."""
    client = OpenWeatherClient(config.provider)
    tracker = LocationTracker(IPLocationSource(config.location, prompt=prompt))
    history_log = HistoryLog(HistoryStore(config.history.path))
    return DashboardController(
        WeatherAggregator(client),
        history_log,
        tracker,
        history_limit=config.history.limit,
    )


class WeatherDashboardApp(App):
    """Terminal weather dashboard."""

    TITLE = "Weather Dashboard"

    CSS = """
    #search {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+l", "use_location", "Use my location"),
        Binding("ctrl+r", "refresh", "Refresh"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, config: Config, initial_city: str | None = None):
        super().__init__()
        self.config = config
        self.initial_city = initial_city or self.config.settings.default_city
        self.controller = create_controller(self.config, prompt=self._ask_location_permission)
        self._mounted = False
        self._unsubscribe = self.controller.subscribe(self._render_state)

    def compose(self) -> ComposeResult:
        yield Header()
        yield Input(placeholder="City name, e.g. London", id="search")
        with VerticalScroll():
            yield WeatherPanel()
            yield HistoryPanel()
        yield StatusBar()
        yield Footer()

    def on_mount(self) -> None:
        self._mounted = True
        if not self.config.provider.api_key:
            self.notify("No OpenWeather API key configured", severity="error", timeout=10)
        self.run_worker(self._startup(), exclusive=False)

    def on_unmount(self) -> None:
        self._unsubscribe()

    async def _startup(self) -> None:
        await self.controller.on_appear()
        self._render_state(self.controller.state)
        if self.initial_city:
            self.controller.set_search_query(self.initial_city)
            self.query_one("#search", Input).value = self.initial_city
            await self.controller.search()

    def on_input_changed(self, event: Input.Changed) -> None:
        self.controller.set_search_query(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.controller.set_search_query(event.value)
        self.run_worker(self.controller.search())

    def action_use_location(self) -> None:
        self.run_worker(self.controller.use_current_location())

    def action_refresh(self) -> None:
        self.run_worker(self.controller.refresh())

    async def _ask_location_permission(self) -> bool:
        answer: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
        self.push_screen(LocationPermissionScreen(), callback=answer.set_result)
        return await answer

    def _render_state(self, state: DashboardState) -> None:
        if not self._mounted:
            return

        weather_panel = self.query_one(WeatherPanel)
        status_bar = self.query_one(StatusBar)

        if state.is_loading:
            weather_panel.set_loading()
            status_bar.set_activity("Loading weather...")
        else:
            status_bar.set_activity("")
            weather_panel.set_error(state.error_message)

        if state.weather is not None:
            weather_panel.update_weather(state.weather)
            status_bar.set_last_refresh(state.weather.fetched_at)

        self.query_one(HistoryPanel).update_history(state.history)
        status_bar.set_authorization(state.authorization_state)
