"""Interactive Textual front-end for the manga catalog.

Two tabs (top-ranked and browse) backed by independent feed controllers,
a header search bar, and a detail pane for the selected card.
"""

from __future__ import annotations

from mangabrowse.config import BrowserConfig


def run_tui(
    config: BrowserConfig | None = None,
    initial_search: str | None = None,
    log_dir: str | None = "logs",
) -> None:
    """Build the catalog client and run the Textual app.

    Imports are deferred so ``mangabrowse --help`` stays fast.

    Args:
        config: Browser configuration; defaults when ``None``.
        initial_search: Optional browse query to run on startup.
        log_dir: Directory for JSON-lines logs; ``None`` disables file logging.
    """
    from mangabrowse.client import CatalogClient
    from mangabrowse.telemetry import configure_file_logging
    from mangabrowse.tui.app import MangaBrowseApp

    if log_dir is not None:
        configure_file_logging(log_dir)

    config = config if config is not None else BrowserConfig()
    app = MangaBrowseApp(
        client=CatalogClient(config),
        config=config,
        initial_search=initial_search,
        close_client=True,
    )
    app.run()
