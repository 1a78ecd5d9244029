"""Dashboard state and the controller that drives it.

State changes go through `reduce`, a pure function over immutable
`DashboardState` values. The controller owns the current state, performs the
side effects (network, history file, location) and notifies subscribers after
every change. All mutation happens on the event loop that runs the
controller's coroutines.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict

from .exceptions import ProviderError
from .models.history import HistoryEntry
from .models.weather import Coordinate, WeatherBundle
from .services.aggregator import WeatherAggregator
from .services.history_store import HISTORY_LIMIT, HistoryLog, record_entry
from .services.location import AuthorizationState, LocationTracker

logger = logging.getLogger(__name__)

StateListener = Callable[["DashboardState"], None]


class LoadPhase(str, Enum):
    """What the weather area should show."""

    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


class DashboardState(BaseModel):
    """Everything the rendering layer observes."""

    model_config = ConfigDict(frozen=True)

    search_query: str = ""
    is_loading: bool = False
    error_message: str | None = None
    weather: WeatherBundle | None = None
    history: tuple[HistoryEntry, ...] = ()
    authorization_state: AuthorizationState = AuthorizationState.NOT_DETERMINED
    # Token of the most recently started load; older results are discarded
    load_token: int = 0

    @property
    def phase(self) -> LoadPhase:
        """Single load state derived from the stored fields.

        A failed load keeps the previous bundle around, so an error wins over
        a bundle here while the bundle stays available for stale display.
        """
        if self.is_loading:
            return LoadPhase.LOADING
        if self.error_message is not None:
            return LoadPhase.ERROR
        if self.weather is not None:
            return LoadPhase.SUCCESS
        return LoadPhase.IDLE


@dataclass(frozen=True)
class QueryChanged:
    text: str


@dataclass(frozen=True)
class HistoryLoaded:
    entries: tuple[HistoryEntry, ...]


@dataclass(frozen=True)
class HistoryRecorded:
    entries: tuple[HistoryEntry, ...]


@dataclass(frozen=True)
class AuthorizationChanged:
    state: AuthorizationState


@dataclass(frozen=True)
class LoadStarted:
    token: int


@dataclass(frozen=True)
class LoadSucceeded:
    token: int
    bundle: WeatherBundle


@dataclass(frozen=True)
class LoadFailed:
    token: int
    message: str


Action = (
    QueryChanged
    | HistoryLoaded
    | HistoryRecorded
    | AuthorizationChanged
    | LoadStarted
    | LoadSucceeded
    | LoadFailed
)


def reduce(state: DashboardState, action: Action) -> DashboardState:
    """Return the state that follows `action`. Never mutates `state`."""
    match action:
        case QueryChanged(text=text):
            return state.model_copy(update={"search_query": text})
        case HistoryLoaded(entries=entries) | HistoryRecorded(entries=entries):
            return state.model_copy(update={"history": tuple(entries)})
        case AuthorizationChanged(state=auth):
            return state.model_copy(update={"authorization_state": auth})
        case LoadStarted(token=token):
            return state.model_copy(
                update={"is_loading": True, "error_message": None, "load_token": token}
            )
        case LoadSucceeded(token=token, bundle=bundle):
            if token != state.load_token:
                return state
            return state.model_copy(
                update={"is_loading": False, "error_message": None, "weather": bundle}
            )
        case LoadFailed(token=token, message=message):
            if token != state.load_token:
                return state
            return state.model_copy(update={"is_loading": False, "error_message": message})
    raise TypeError(f"Unknown action: {action!r}")


class DashboardController:
    """Orchestrates loads, history and location for the dashboard."""

    def __init__(
        self,
        aggregator: WeatherAggregator,
        history_log: HistoryLog,
        tracker: LocationTracker,
        history_limit: int = HISTORY_LIMIT,
    ):
        self.aggregator = aggregator
        self.history_log = history_log
        self.tracker = tracker
        self.history_limit = history_limit

        self._state = DashboardState(authorization_state=tracker.state)
        self._listeners: list[StateListener] = []
        self._issued_tokens = 0
        self._awaiting_location = False

        tracker.subscribe_state(self._on_authorization_changed)
        tracker.subscribe_coordinates(self._on_coordinate)

    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def awaiting_location(self) -> bool:
        """True between use_current_location() and the coordinate it waits for."""
        return self._awaiting_location

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call `listener` with the new state after every change."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, action: Action) -> None:
        new_state = reduce(self._state, action)
        if new_state is self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    def set_search_query(self, text: str) -> None:
        self.dispatch(QueryChanged(text))

    async def on_appear(self) -> None:
        """Load the stored history and pick up the current permission state."""
        entries = await self.history_log.load()
        self.dispatch(HistoryLoaded(tuple(entries)))
        self.dispatch(AuthorizationChanged(self.tracker.state))

    async def search(self) -> None:
        """Load weather for the current search query."""
        query = self._state.search_query.strip()
        if not query:
            return
        await self._load(query, record_history=True)

    async def use_current_location(self) -> None:
        """Load weather for the device location, asking for permission if needed.

        The load happens when the tracker delivers the next coordinate, which
        may be during this call or later if permission arrives afterwards.
        """
        self._awaiting_location = True
        await self.tracker.request_authorization()

    async def refresh(self) -> None:
        """Reload the displayed location. Never touches history."""
        bundle = self._state.weather
        if bundle is None:
            return
        await self._load(bundle.location.coordinate, record_history=False)

    def _on_authorization_changed(self, state: AuthorizationState) -> None:
        self.dispatch(AuthorizationChanged(state))

    async def _on_coordinate(self, coordinate: Coordinate) -> None:
        if not self._awaiting_location:
            return
        self._awaiting_location = False
        await self._load(coordinate, record_history=True)

    async def _load(self, target: str | Coordinate, record_history: bool) -> None:
        self._issued_tokens += 1
        token = self._issued_tokens
        self.dispatch(LoadStarted(token))

        try:
            bundle = await self.aggregator.resolve(target)
        except ProviderError as e:
            logger.warning(f"Weather load for {target} failed: {e}")
            self.dispatch(LoadFailed(token, str(e)))
            return

        if token != self._state.load_token:
            logger.debug(f"Discarding result of superseded load {token}")
            return

        self.dispatch(LoadSucceeded(token, bundle))
        if record_history:
            await self._record_history(bundle)

    async def _record_history(self, bundle: WeatherBundle) -> None:
        entries = record_entry(
            self._state.history, HistoryEntry.from_bundle(bundle), self.history_limit
        )
        self.dispatch(HistoryRecorded(tuple(entries)))
        # A failed write is logged by the history log; memory keeps the entry
        await self.history_log.save(entries)
