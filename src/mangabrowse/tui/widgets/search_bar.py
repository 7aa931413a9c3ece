"""Header search bar.

A search typed here always runs against the browse feed; the App switches
to the browse tab before dispatching it.
"""

from __future__ import annotations

from textual.widgets import Input

from mangabrowse.telemetry import get_telemetry
from mangabrowse.tui.messages import SearchRequested


class SearchBar(Input):
    """Single-line search input. Enter posts SearchRequested.

    Blank input is ignored so an accidental Enter does not wipe the
    browse feed's current query.
    """

    DEFAULT_CSS = """
    SearchBar {
        dock: top;
        height: 3;
        padding: 0 1;
        border-bottom: solid $primary;
    }
    """

    def __init__(self) -> None:
        super().__init__(
            placeholder="Search manga... (Ctrl+F to focus)",
            id="nav-search",
        )

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input is not self:
            return
        event.stop()
        query = event.value.strip()
        if not query:
            return
        get_telemetry().log.info(f"nav search submitted query={query!r}")
        self.post_message(SearchRequested(query=query))
