"""OpenTelemetry metrics for geocoding and ingestion observability."""

from common.metrics.instruments import (
    coordinates_resolved,
    geocode_duration,
    geocode_requests,
    listings_ingested,
)

__all__ = [
    "coordinates_resolved",
    "geocode_duration",
    "geocode_requests",
    "listings_ingested",
]
