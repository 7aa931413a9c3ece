"""Custom Textual Message types for inter-widget communication.

Widgets never call feed controllers directly. They post these messages,
the App routes each one to the controller of the named feed.
"""

from __future__ import annotations

from textual.message import Message


class SearchRequested(Message):
    """Fired by the header search bar or the browse search box."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__()


class FiltersApplied(Message):
    """Fired when the user applies new filter values to a feed."""

    def __init__(self, feed: str, changes: dict[str, str]) -> None:
        self.feed = feed
        self.changes = changes
        super().__init__()


class FiltersReset(Message):
    """Fired when the user restores a feed's default filters."""

    def __init__(self, feed: str) -> None:
        self.feed = feed
        super().__init__()


class LoadMoreRequested(Message):
    """Fired by a feed's load-more button."""

    def __init__(self, feed: str) -> None:
        self.feed = feed
        super().__init__()


class CardSelected(Message):
    """Fired when a manga card is clicked or activated with Enter."""

    def __init__(self, card: object) -> None:
        self.card = card
        super().__init__()
