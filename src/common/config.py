"""
Centralized configuration for the listings map engine.
All tunable constants and settings are defined here.
"""

import os

# Console log level for every engine logger
LOG_LEVEL: str = os.environ.get("LISTINGS_MAP_LOG_LEVEL", "INFO").upper()

# Listing ingestion
LISTINGS_API_BASE_URL: str = "http://localhost:3000/api"

# Listings requested per page
PAGE_SIZE: int = 100

# Paging stops once the offset passes this many listings
MAX_FETCHED: int = 500

# Timeout for one listing page request (seconds)
LISTINGS_TIMEOUT_SECONDS: float = 10.0

# Proximity filtering
NEARBY_RADIUS_KM: float = 30.0

# Geocoding - Nominatim search endpoint
NOMINATIM_SEARCH_URL: str = "https://nominatim.openstreetmap.org/search"

# Nominatim usage policy requires an identifying User-Agent
NOMINATIM_USER_AGENT: str = os.environ.get(
    "NOMINATIM_USER_AGENT", "listings-map-engine/0.1 (contact: maps@example.com)"
)

GEOCODE_ACCEPT_LANGUAGE: str = "en"

# Pause after every external lookup, keeps us under the public rate limit
GEOCODE_DELAY_MS: int = 120

# A stalled lookup would block the whole sequential queue without this
GEOCODE_TIMEOUT_SECONDS: float = 8.0

# Map presentation helpers
DEFAULT_CENTER: tuple[float, float] = (41.8719, 12.5674)
SUGGESTION_LIMIT: int = 8
DESCRIPTION_MAX_CHARS: int = 180
SNIPPET_PLACEHOLDER: str = "A thoughtful, tailored experience shaped around your pace and style."

# Local fallback table, keyed by listing location value (country code or city value)
LOCATION_COORDINATES: dict[str, tuple[float, float]] = {
    # Countries
    "it": (42.8333, 12.8333),
    "fr": (46.0, 2.0),
    "es": (40.0, -4.0),
    "pt": (39.5, -8.0),
    "gr": (39.0, 22.0),
    "de": (51.0, 9.0),
    "at": (47.3333, 13.3333),
    "ch": (47.0, 8.0),
    "nl": (52.5, 5.75),
    "be": (50.8333, 4.0),
    "gb": (54.0, -2.0),
    "ie": (53.0, -8.0),
    "cz": (49.75, 15.5),
    "hr": (45.1667, 15.5),
    "us": (38.0, -97.0),
    "ca": (60.0, -95.0),
    "mx": (23.0, -102.0),
    "jp": (36.0, 138.0),
    "th": (15.0, 100.0),
    "au": (-27.0, 133.0),
    # Popular cities
    "rome": (41.9028, 12.4964),
    "venice": (45.4408, 12.3155),
    "florence": (43.7696, 11.2558),
    "milan": (45.4642, 9.1900),
    "naples": (40.8518, 14.2681),
    "paris": (48.8566, 2.3522),
    "barcelona": (41.3851, 2.1734),
    "madrid": (40.4168, -3.7038),
    "lisbon": (38.7223, -9.1393),
    "athens": (37.9838, 23.7275),
    "london": (51.5074, -0.1278),
    "amsterdam": (52.3676, 4.9041),
    "berlin": (52.5200, 13.4050),
    "vienna": (48.2082, 16.3738),
    "prague": (50.0755, 14.4378),
    "new-york": (40.7128, -74.0060),
    "tokyo": (35.6762, 139.6503),
}
