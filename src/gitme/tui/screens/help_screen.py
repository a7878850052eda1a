"""Modal screen showing keyboard shortcuts."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label

_SECTIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "Navigation",
        (
            "↑/k     Move cursor up",
            "↓/j     Move cursor down",
            "u/d     Page up / page down",
            "p/n     Previous / next repository",
            "Tab     Next view (1/2 to pick one)",
        ),
    ),
    (
        "Groups",
        (
            "Enter   Expand or collapse repository",
            "e       Expand all repositories",
            "c       Collapse all repositories",
            "s       Toggle sort order",
            "/       Search (Esc clears)",
        ),
    ),
    (
        "Actions",
        (
            "o       Open pull request in browser",
            "r       Run review command (Review Requested view)",
            "^d/^u   Scroll pull request description",
        ),
    ),
    (
        "General",
        (
            "f       Refresh now",
            "R       Reload configuration",
            "?       Show this help",
            "q       Quit",
        ),
    ),
)


class HelpScreen(ModalScreen):
    """Modal screen showing keyboard shortcuts."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("q", "dismiss", "Close"),
        Binding("question_mark", "dismiss", "Close"),
    ]

    DEFAULT_CSS = """
    HelpScreen {
        align: center middle;
    }

    #help-dialog {
        width: 60;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }

    #help-title {
        text-style: bold;
        text-align: center;
        margin-bottom: 1;
        width: 100%;
    }

    .help-section {
        height: auto;
        margin-top: 1;
    }

    .help-section-title {
        text-style: bold;
        color: $primary;
    }

    .help-binding {
        margin-left: 2;
    }
    """

    def compose(self) -> ComposeResult:
        """Create help dialog content."""
        with Vertical(id="help-dialog"):
            yield Label("gitme - Keyboard Shortcuts", id="help-title")

            for title, bindings in _SECTIONS:
                with Vertical(classes="help-section"):
                    yield Label(title, classes="help-section-title")
                    for binding in bindings:
                        yield Label(binding, classes="help-binding")

            yield Label("")
            yield Label("Press Esc, q or ? to close", id="help-footer")
