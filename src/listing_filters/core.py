"""
Listing Filters

Narrows the session working set for the map and search UI:
- Proximity filtering (haversine distance from a reference point)
- Keyword filtering (substring over title, category, location and keywords)
- Location-token filtering (substring over location fields only)

Keyword and location-token modes are mutually exclusive; either composes with
proximity filtering via AND.
"""

from collections.abc import Iterable, Mapping, Sequence

import numpy as np

from common.config import (
    DEFAULT_CENTER,
    DESCRIPTION_MAX_CHARS,
    NEARBY_RADIUS_KM,
    SNIPPET_PLACEHOLDER,
    SUGGESTION_LIMIT,
)
from common.logging_config import get_logger
from common.types import Coordinates, ListingRef

logger = get_logger("listing_filters")

EARTH_RADIUS_KM = 6371.0


def haversine_distance(a: Coordinates, b: Coordinates) -> float:
    """Calculate the great-circle distance between two points in kilometers."""
    lat1 = np.radians(a["latitude"])
    lat2 = np.radians(b["latitude"])
    delta_lat = np.radians(b["latitude"] - a["latitude"])
    delta_lon = np.radians(b["longitude"] - a["longitude"])

    h = np.sin(delta_lat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(delta_lon / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points
    h = min(1.0, h)

    return float(2 * EARTH_RADIUS_KM * np.arcsin(np.sqrt(h)))


def is_within(reference: Coordinates, candidate: Coordinates, radius_km: float) -> bool:
    return haversine_distance(reference, candidate) <= radius_km


def filter_by_proximity(
    listings: Iterable[ListingRef],
    coords: Mapping[str, Coordinates],
    reference: Coordinates | None,
    radius_km: float = NEARBY_RADIUS_KM,
) -> list[ListingRef]:
    """
    Keep listings whose cached coordinates lie within radius_km of the reference.

    Without a reference point this is a no-op. Listings without cached
    coordinates cannot be evaluated and are dropped.
    """
    listings = list(listings)
    if reference is None:
        return listings

    result = [
        listing
        for listing in listings
        if listing.id in coords and is_within(reference, coords[listing.id], radius_km)
    ]
    logger.debug(f"Proximity filter: {len(listings)} -> {len(result)} listings (within {radius_km}km)")
    return result


def normalize_query(query: str | None) -> str:
    return (query or "").strip().lower()


def normalize_location_tokens(tokens: Iterable[str | None]) -> list[str]:
    """Trim and lowercase location tokens, dropping empty ones."""
    normalized = []
    for token in tokens:
        if not token:
            continue
        value = str(token).strip().lower()
        if value:
            normalized.append(value)
    return normalized


def parse_array_param(value: str | Sequence[str] | None) -> list[str]:
    """Split a comma-separated value (or list of them) into trimmed, non-empty items."""
    if not value:
        return []
    items = [value] if isinstance(value, str) else value
    return [part.strip() for item in items for part in str(item).split(",") if part.strip()]


def matches_keyword(listing: ListingRef, query: str | None) -> bool:
    """Substring match over the listing's searchable text. Empty query matches everything."""
    normalized = normalize_query(query)
    if not normalized:
        return True
    haystack = " ".join(listing.searchable_text).lower()
    return normalized in haystack


def matches_location_tokens(listing: ListingRef, tokens: Iterable[str | None]) -> bool:
    """
    True if any location token appears in the listing's location fields.

    An empty token set matches nothing: an unresolved location selection
    should show no results rather than everything.
    """
    normalized = normalize_location_tokens(tokens)
    if not normalized:
        return False
    haystack = " ".join(listing.location_fields).lower()
    return any(token in haystack for token in normalized)


def filter_listings(
    listings: Iterable[ListingRef],
    coords: Mapping[str, Coordinates],
    query: str | None = None,
    location_tokens: Iterable[str | None] | None = None,
    reference: Coordinates | None = None,
    nearby_only: bool = False,
    radius_km: float = NEARBY_RADIUS_KM,
) -> list[ListingRef]:
    """
    Apply the search filter (keyword or location-token mode) and the proximity filter.

    Args:
        listings: Working set
        coords: Snapshot of the coordinate cache
        query: Keyword mode query
        location_tokens: Location-token mode tokens (mutually exclusive with query)
        reference: User location for nearby filtering
        nearby_only: Proximity filtering is opt-in
        radius_km: Nearby radius

    Returns:
        Listings passing every active filter, in working-set order

    Raises:
        ValueError: If both query and location_tokens are given
    """
    if query is not None and location_tokens is not None:
        raise ValueError("Keyword and location-token filters are mutually exclusive")

    if location_tokens is not None:
        tokens = normalize_location_tokens(location_tokens)
        result = [listing for listing in listings if matches_location_tokens(listing, tokens)]
    else:
        result = [listing for listing in listings if matches_keyword(listing, query)]

    if nearby_only:
        result = filter_by_proximity(result, coords, reference, radius_km)

    return result


def select_suggestions(
    filtered: Sequence[ListingRef],
    query: str | None,
    nearby_only: bool,
    limit: int = SUGGESTION_LIMIT,
) -> list[ListingRef]:
    """Top filtered listings to suggest, only while a query or nearby mode is active."""
    if not normalize_query(query) and not nearby_only:
        return []
    return list(filtered[:limit])


def select_map_center(
    coords: Mapping[str, Coordinates],
    filtered: Iterable[ListingRef],
    highlighted: Coordinates | None = None,
    selected_listing_id: str | None = None,
    user_location: Coordinates | None = None,
) -> Coordinates:
    """
    Pick where the map should be centred.

    Preference order: highlighted point, selected listing, user location,
    first filtered listing with coordinates, DEFAULT_CENTER.
    """
    if highlighted is not None:
        return highlighted
    if selected_listing_id and selected_listing_id in coords:
        return coords[selected_listing_id]
    if user_location is not None:
        return user_location
    for listing in filtered:
        if listing.id in coords:
            return coords[listing.id]
    return {"latitude": DEFAULT_CENTER[0], "longitude": DEFAULT_CENTER[1]}


def build_listing_snippet(listing: ListingRef, max_chars: int = DESCRIPTION_MAX_CHARS) -> str:
    raw = " ".join((listing.description or "").split())
    if not raw:
        return SNIPPET_PLACEHOLDER
    if len(raw) <= max_chars:
        return raw
    return f"{raw[:max_chars].rstrip()}…"
