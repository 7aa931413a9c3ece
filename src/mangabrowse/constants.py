"""Project-wide named constants.

Defaults here are the values the catalog front-end ships with. Anything
that a deployment may want to change is also exposed on ``BrowserConfig``.
"""

JIKAN_API_BASE: str = "https://api.jikan.moe/v4"

# Jikan caps ``limit`` at 25; 24 fills a 4/6/8-column grid without a ragged row.
MANGA_PER_PAGE: int = 24

# Jikan allows ~3 requests/second; a flat one-second pause clears the window.
RATE_LIMIT_RETRY_SECONDS: float = 1.0

REQUEST_TIMEOUT_SECONDS: float = 10.0

ERROR_MESSAGE: str = "Failed to load manga. Please try again later."

# Card placeholders for fields the API leaves null
UNKNOWN_TITLE: str = "Unknown Title"
UNKNOWN_SCORE: str = "N/A"
UNKNOWN_TYPE: str = "Unknown"
UNKNOWN_VOLUMES: str = "Unknown volumes"

# ``/top/manga`` only understands this one ``filter`` value for ordering;
# anything else falls back to the API's default score ordering.
TOP_POPULARITY_FILTER: str = "bypopularity"
TOP_DEFAULT_SORT: str = TOP_POPULARITY_FILTER

BROWSE_DEFAULT_ORDER_BY: str = "score"
BROWSE_DEFAULT_SORT: str = "desc"

# Trace id written for log records emitted outside any fetch cycle.
NO_TRACE: str = "0" * 32
