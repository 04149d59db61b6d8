"""Error types raised by the listings map engine components."""


class EngineError(Exception):
    """Base class for listings map engine failures."""


class IngestionPageError(EngineError):
    """A listing page request failed (transport error, bad status or bad payload)."""

    def __init__(self, skip: int, take: int, reason: str):
        self.skip = skip
        self.take = take
        self.reason = reason
        super().__init__(f"Listing page skip={skip} take={take} failed: {reason}")


class GeocodeLookupError(EngineError):
    """An external geocoding lookup failed for one query."""

    def __init__(self, query: str, reason: str):
        self.query = query
        self.reason = reason
        super().__init__(f"Geocode lookup for '{query}' failed: {reason}")
