"""Modal asking whether the dashboard may use the device location."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static


class LocationPermissionScreen(ModalScreen[bool]):
    """Yes/no prompt. Dismisses with True when the user allows location access."""

    DEFAULT_CSS = """
    LocationPermissionScreen {
        align: center middle;
    }

    LocationPermissionScreen > Vertical {
        width: 60;
        height: auto;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    LocationPermissionScreen Horizontal {
        height: auto;
        align: center middle;
        padding-top: 1;
    }

    LocationPermissionScreen Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("y", "allow", "Allow", show=False),
        Binding("n,escape", "deny", "Deny", show=False),
    ]

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static(
                "Allow Weather Dashboard to use your approximate location?\n"
                "[dim]Your IP address is sent to a geolocation service.[/dim]"
            )
            with Horizontal():
                yield Button("Allow", variant="primary", id="allow")
                yield Button("Don't allow", id="deny")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "allow")

    def action_allow(self) -> None:
        self.dismiss(True)

    def action_deny(self) -> None:
        self.dismiss(False)
