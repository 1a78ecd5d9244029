"""Status bar component showing activity, location permission and keyboard hints."""

from datetime import datetime

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Static

from ..services.location import AuthorizationState

_AUTHORIZATION_LABELS = {
    AuthorizationState.NOT_DETERMINED: "Location: not set",
    AuthorizationState.ALLOWED: "Location: allowed",
    AuthorizationState.DENIED: "Location: denied",
}


class StatusBar(Horizontal):
    """Bottom status bar with time, last update, activity and keyboard hints."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        background: $surface-darken-1;
        color: $text-muted;
        padding: 0 1;
        width: 100%;
    }

    StatusBar #status-time {
        width: auto;
    }

    StatusBar #status-refresh {
        width: auto;
        padding-left: 2;
    }

    StatusBar #status-location {
        width: auto;
        padding-left: 2;
    }

    StatusBar #status-activity {
        width: auto;
        padding-left: 2;
        color: $warning;
    }

    StatusBar #status-spacer {
        width: 1fr;
    }

    StatusBar #status-hints {
        width: auto;
        text-align: right;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self._last_refresh: datetime | None = None

    def compose(self) -> ComposeResult:
        yield Static("", id="status-time")
        yield Static("", id="status-refresh")
        yield Static("", id="status-location")
        yield Static("", id="status-activity")
        yield Static("", id="status-spacer")
        yield Static(
            "[dim]enter[/dim] Search  [dim]^l[/dim] Location  [dim]^r[/dim] Refresh  [dim]^q[/dim] Quit",
            id="status-hints",
        )

    def on_mount(self) -> None:
        """Start clock update timer."""
        self.set_interval(1, self._update_time)

    def _update_time(self) -> None:
        """Update the current time and relative refresh display."""
        now = datetime.now().astimezone()
        self.query_one("#status-time", Static).update(f"[bold]{now.strftime('%H:%M:%S')}[/bold]")

        if self._last_refresh:
            minutes = int((now - self._last_refresh).total_seconds() // 60)
            if minutes <= 0:
                refresh_text = "Updated just now"
            elif minutes == 1:
                refresh_text = "Updated 1 min ago"
            else:
                refresh_text = f"Updated {minutes} mins ago"
            self.query_one("#status-refresh", Static).update(f"[dim]{refresh_text}[/dim]")

    def set_last_refresh(self, time: datetime) -> None:
        """Update the last refresh timestamp."""
        if time == self._last_refresh:
            return
        self._last_refresh = time.astimezone()
        self._update_time()

    def set_authorization(self, state: AuthorizationState) -> None:
        """Show the location permission state."""
        self.query_one("#status-location", Static).update(
            f"[dim]{_AUTHORIZATION_LABELS[state]}[/dim]"
        )

    def set_activity(self, activity: str) -> None:
        """Set current activity message (e.g., 'Loading weather...')."""
        self.query_one("#status-activity", Static).update(
            f"[yellow]{activity}[/yellow]" if activity else ""
        )
