"""Device location permission and coordinate delivery."""

import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Protocol

import httpx

from ..exceptions import LocationError
from ..models.config import LocationConfig
from ..models.weather import Coordinate

logger = logging.getLogger(__name__)

StateCallback = Callable[["AuthorizationState"], None]
CoordinateCallback = Callable[[Coordinate], Awaitable[None]]
PermissionPrompt = Callable[[], Awaitable[bool]]


class AuthorizationState(str, Enum):
    """Whether the user allows the dashboard to use their location."""

    NOT_DETERMINED = "not_determined"
    ALLOWED = "allowed"
    DENIED = "denied"


class LocationSource(Protocol):
    """Permission store plus coordinate provider for the device."""

    def authorization_status(self) -> AuthorizationState: ...

    async def request_authorization(self) -> AuthorizationState: ...

    async def current_coordinate(self) -> Coordinate: ...


class IPLocationSource:
    """Approximate device location from an IP geolocation service.

    The configured permission policy stands in for the OS permission store.
    With the `prompt` policy the user is asked once through `prompt`; the
    answer is remembered for the lifetime of the source.
    """

    _POLICIES = {
        "prompt": AuthorizationState.NOT_DETERMINED,
        "allow": AuthorizationState.ALLOWED,
        "deny": AuthorizationState.DENIED,
    }

    def __init__(
        self,
        config: LocationConfig,
        prompt: PermissionPrompt | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.prompt = prompt
        self._status = self._POLICIES[config.permission]
        self._transport = transport

    def authorization_status(self) -> AuthorizationState:
        return self._status

    async def request_authorization(self) -> AuthorizationState:
        if self._status is not AuthorizationState.NOT_DETERMINED:
            return self._status

        if self.prompt is None:
            logger.warning("Location permission requested but no prompt is available")
            return self._status

        granted = await self.prompt()
        self._status = AuthorizationState.ALLOWED if granted else AuthorizationState.DENIED
        logger.info(f"Location permission {self._status.value}")
        return self._status

    async def current_coordinate(self) -> Coordinate:
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.get(self.config.ip_lookup_url)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise LocationError("Location lookup timed out") from e
        except httpx.HTTPStatusError as e:
            raise LocationError(f"Location lookup failed: HTTP {e.response.status_code}") from e
        except (httpx.RequestError, ValueError) as e:
            raise LocationError(f"Location lookup failed: {e}") from e

        return self._parse_coordinate(data)

    @staticmethod
    def _parse_coordinate(data: object) -> Coordinate:
        """Accept both `{"loc": "lat,lon"}` and `{"latitude": .., "longitude": ..}` payloads."""
        if not isinstance(data, dict):
            raise LocationError("Unexpected location response")

        try:
            if "loc" in data:
                lat, lon = str(data["loc"]).split(",", 1)
                return Coordinate(latitude=float(lat), longitude=float(lon))
            return Coordinate(latitude=float(data["latitude"]), longitude=float(data["longitude"]))
        except (KeyError, TypeError, ValueError) as e:
            raise LocationError(f"Unexpected location response: {e}") from e


class LocationTracker:
    """State machine over location permission with one-shot coordinate updates.

    The tracker only observes the permission store: a denial is never
    overridden here. Every location request that succeeds emits its
    coordinate exactly once to the coordinate subscribers; a failed request
    is logged and emits nothing.
    """

    def __init__(self, source: LocationSource):
        self.source = source
        self._state = source.authorization_status()
        self._state_callbacks: list[StateCallback] = []
        self._coordinate_callbacks: list[CoordinateCallback] = []

    @property
    def state(self) -> AuthorizationState:
        return self._state

    def subscribe_state(self, callback: StateCallback) -> Callable[[], None]:
        """Call `callback` on every permission state change."""
        self._state_callbacks.append(callback)
        return lambda: self._state_callbacks.remove(callback)

    def subscribe_coordinates(self, callback: CoordinateCallback) -> Callable[[], None]:
        """Await `callback` for every coordinate the tracker obtains."""
        self._coordinate_callbacks.append(callback)
        return lambda: self._coordinate_callbacks.remove(callback)

    async def request_authorization(self) -> Coordinate | None:
        """Ask for permission if undecided; fetch a location once allowed.

        Returns the coordinate delivered for this request, if any.
        """
        if self._state is AuthorizationState.NOT_DETERMINED:
            new_state = await self.source.request_authorization()
            return await self.authorization_changed(new_state)

        if self._state is AuthorizationState.DENIED:
            # Observe the store in case the user changed their mind elsewhere
            return await self.authorization_changed(self.source.authorization_status())

        return await self._request_location()

    async def authorization_changed(self, state: AuthorizationState) -> Coordinate | None:
        """Apply a permission change reported by the permission store."""
        if state is self._state:
            return None

        previous, self._state = self._state, state
        logger.info(f"Location authorization {previous.value} -> {state.value}")
        for callback in list(self._state_callbacks):
            callback(state)

        if state is AuthorizationState.ALLOWED:
            return await self._request_location()
        return None

    async def refresh_location(self) -> Coordinate | None:
        """Request a fresh location. Does nothing unless permission is granted."""
        if self._state is not AuthorizationState.ALLOWED:
            return None
        return await self._request_location()

    async def _request_location(self) -> Coordinate | None:
        try:
            coordinate = await self.source.current_coordinate()
        except LocationError as e:
            logger.warning(f"Location error: {e}")
            return None

        logger.debug(f"Location update {coordinate}")
        for callback in list(self._coordinate_callbacks):
            await callback(coordinate)
        return coordinate
