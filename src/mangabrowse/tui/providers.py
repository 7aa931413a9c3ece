"""Command palette provider for the manga browser TUI.

Registers the main actions as fuzzy-searchable commands reachable via
Ctrl+P, using Textual's Provider/Hit API.
"""

from __future__ import annotations

from functools import partial

from textual.command import Hit, Hits, Provider


class MangaBrowseCommands(Provider):
    """Maps human-readable command names to App actions."""

    COMMANDS: dict[str, str] = {
        "Search Catalog": "focus_search",
        "Show Top Manga": "show_top",
        "Browse Catalog": "show_browse",
        "Load More Results": "load_more",
        "Reload Current Feed": "reload",
        "Reset Browse Filters": "reset_filters",
    }

    async def search(self, query: str) -> Hits:
        """Yield a scored Hit for every command whose name matches *query*."""
        matcher = self.matcher(query)
        for name, action in self.COMMANDS.items():
            score = matcher.match(name)
            if score > 0:
                yield Hit(
                    score,
                    matcher.highlight(name),
                    partial(self.app.run_action, action),
                )
