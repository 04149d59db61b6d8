"""
Local fallback lookup for resolving listing location values to coordinates.

Uses the LOCATION_COORDINATES table from config.py (country codes and popular
city values). No network access, so it never counts against the external
geocoder's rate limit.
"""

from common.config import LOCATION_COORDINATES
from common.types import Coordinates


def lookup_by_location_value(value: str | None) -> Coordinates | None:
    """
    Resolve a listing location value to coordinates.

    Values are matched case-insensitively against the local table, so both
    "IT" and "it" resolve.

    Args:
        value: Location value stored on the listing (e.g. "IT", "rome")

    Returns:
        A new Coordinates dict with latitude/longitude, or None if not in the table
    """
    if not value:
        return None

    coords = LOCATION_COORDINATES.get(value.strip().lower())
    if coords is None:
        return None
    return {"latitude": coords[0], "longitude": coords[1]}
