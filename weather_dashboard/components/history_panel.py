"""History panel listing past lookups."""

from textual.app import ComposeResult
from textual.widgets import Static

from ..models.history import HistoryEntry
from .weather_panel import CONDITION_SYMBOLS, temp_color


class HistoryPanel(Static):
    """Panel with the most recent lookups, newest first."""

    DEFAULT_CSS = """
    HistoryPanel {
        height: auto;
        border: solid $secondary;
        padding: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Static("[bold]History[/bold]", id="history-header")
        yield Static("[dim]No lookups yet[/dim]", id="history-list")

    def update_history(self, entries: tuple[HistoryEntry, ...]) -> None:
        """Render entries in the order given."""
        if not entries:
            self.query_one("#history-list", Static).update("[dim]No lookups yet[/dim]")
            return

        lines = []
        for entry in entries:
            tc = temp_color(entry.temperature)
            when = entry.date.astimezone().strftime("%d %b %H:%M")
            lines.append(
                f"{CONDITION_SYMBOLS[entry.condition]} [bold]{entry.city}[/bold] "
                f"[{tc}]{entry.temperature:.0f}°[/{tc}] [dim]{when}[/dim]"
            )
        self.query_one("#history-list", Static).update("\n".join(lines))
