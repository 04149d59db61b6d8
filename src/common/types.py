"""Type definitions shared by the listings map engine."""

from dataclasses import dataclass
from typing import Any, TypedDict


class Coordinates(TypedDict):
    """Geographic coordinates."""

    latitude: float
    longitude: float


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item]
    return [str(value)]


@dataclass(frozen=True)
class ListingRef:
    """
    Immutable view of a listing, reduced to what the map engine needs.

    searchable_text holds the title, primary category, location fields,
    categories and SEO keywords, in that order.
    """

    id: str
    location_value: str | None = None
    location_description: str | None = None
    meeting_point: str | None = None
    searchable_text: tuple[str, ...] = ()
    title: str | None = None
    description: str | None = None

    @property
    def location_fields(self) -> tuple[str, ...]:
        """Non-empty location fields, used by location-token matching."""
        return tuple(
            field
            for field in (self.location_value, self.location_description, self.meeting_point)
            if field
        )

    @property
    def geocode_query(self) -> str | None:
        """Most precise location text available for an external lookup."""
        return self.meeting_point or self.location_description or self.location_value

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "ListingRef":
        """
        Build a ListingRef from a listing-source JSON object.

        Raises:
            ValueError: If the payload has no id
        """
        listing_id = _clean(payload.get("id"))
        if not listing_id:
            raise ValueError("Listing payload has no id")

        title = _clean(payload.get("title"))
        location_value = _clean(payload.get("locationValue"))
        location_description = _clean(payload.get("locationDescription"))
        meeting_point = _clean(payload.get("meetingPoint"))

        searchable = [
            title,
            _clean(payload.get("primaryCategory")),
            location_value,
            location_description,
            meeting_point,
            *_as_list(payload.get("category")),
            *_as_list(payload.get("seoKeywords")),
        ]

        return cls(
            id=listing_id,
            location_value=location_value,
            location_description=location_description,
            meeting_point=meeting_point,
            searchable_text=tuple(text for text in searchable if text),
            title=title,
            description=_clean(payload.get("description")),
        )
