"""
Coordinate Cache

Session-scoped mapping from listing id to resolved coordinates.

- Append-only: entries are never evicted or overwritten
- First-wins: set_if_absent is the only write operation
- Copy-on-write: each write swaps in a new mapping, so snapshots handed to
  readers never change underneath them
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from common.types import Coordinates


class CoordinateCache:
    """Listing id -> Coordinates, first successful write wins."""

    def __init__(self) -> None:
        self._entries: dict[str, Coordinates] = {}

    def set_if_absent(self, listing_id: str, coords: Coordinates) -> bool:
        """
        Store coordinates for a listing unless it already has some.

        Args:
            listing_id: Listing identifier
            coords: Resolved coordinates

        Returns:
            True if the entry was written, False if the id was already cached
        """
        if listing_id in self._entries:
            return False
        updated = dict(self._entries)
        updated[listing_id] = Coordinates(
            latitude=float(coords["latitude"]),
            longitude=float(coords["longitude"]),
        )
        self._entries = updated
        return True

    def get(self, listing_id: str) -> Coordinates | None:
        return self._entries.get(listing_id)

    def snapshot(self) -> Mapping[str, Coordinates]:
        """Read-only view of the cache as it is right now."""
        return MappingProxyType(self._entries)

    def __contains__(self, listing_id: object) -> bool:
        return listing_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
