"""Configuration loading for the catalog client and feeds."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path

from mangabrowse.constants import (
    JIKAN_API_BASE,
    MANGA_PER_PAGE,
    RATE_LIMIT_RETRY_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
)

DEFAULT_CONFIG_PATH = Path("config/browser_config.json")
BASE_URL_ENV = "MANGABROWSE_BASE_URL"


@dataclass
class BrowserConfig:
    """Settings shared by every feed controller.

    ``max_rate_limit_retries`` of ``None`` keeps retrying a rate-limited
    request for as long as the API keeps answering 429.
    """

    base_url: str = JIKAN_API_BASE
    page_size: int = MANGA_PER_PAGE
    request_timeout: float = REQUEST_TIMEOUT_SECONDS
    rate_limit_delay: float = RATE_LIMIT_RETRY_SECONDS
    max_rate_limit_retries: int | None = None
    user_agent: str = "mangabrowse/0.1"

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive, got {self.page_size}")
        if self.rate_limit_delay < 0:
            raise ValueError(
                f"rate_limit_delay must not be negative, got {self.rate_limit_delay}"
            )
        if self.max_rate_limit_retries is not None and self.max_rate_limit_retries < 0:
            raise ValueError(
                "max_rate_limit_retries must be None or >= 0, "
                f"got {self.max_rate_limit_retries}"
            )


def load_browser_config(config_path: Path | None = None) -> BrowserConfig:
    """Load browser configuration from JSON, falling back to defaults.

    Reads ``config/browser_config.json`` when *config_path* is ``None``.
    A missing file yields a ``BrowserConfig`` with defaults. Unrecognised
    keys are ignored. ``MANGABROWSE_BASE_URL`` overrides ``base_url``.

    Args:
        config_path: Optional explicit path to browser_config.json.

    Returns:
        BrowserConfig populated from file + environment overrides.

    Raises:
        ValueError: If the file holds an out-of-range value.
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    data: dict = {}
    if config_path.exists():
        with open(config_path) as f:
            data = json.load(f)

    field_names = {f.name for f in fields(BrowserConfig)}
    kwargs = {k: v for k, v in data.items() if k in field_names}

    base_url = os.environ.get(BASE_URL_ENV)
    if base_url:
        kwargs["base_url"] = base_url

    return BrowserConfig(**kwargs)
