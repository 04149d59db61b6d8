"""Tests for common.types and the local fallback lookup."""

import pytest

from common.config import LOCATION_COORDINATES
from common.geocoding import lookup_by_location_value
from common.types import ListingRef


class TestListingRefFromApi:
    def test_builds_searchable_text(self):
        listing = ListingRef.from_api(
            {
                "id": "l1",
                "title": "Cooking class in Rome",
                "primaryCategory": "Food & Drink",
                "locationValue": "IT",
                "locationDescription": "  ",
                "meetingPoint": "Campo de' Fiori",
                "category": ["Food", None],
                "seoKeywords": ["pasta", "workshop"],
                "description": "Learn to make fresh pasta.",
            }
        )

        assert listing.location_description is None
        assert listing.searchable_text == (
            "Cooking class in Rome",
            "Food & Drink",
            "IT",
            "Campo de' Fiori",
            "Food",
            "pasta",
            "workshop",
        )
        assert listing.geocode_query == "Campo de' Fiori"

    def test_missing_id_rejected(self):
        with pytest.raises(ValueError):
            ListingRef.from_api({"title": "Orphan"})

    def test_is_immutable(self):
        listing = ListingRef.from_api({"id": "l1"})
        with pytest.raises(AttributeError):
            listing.meeting_point = "somewhere"


class TestLookupByLocationValue:
    def test_city_value(self):
        lat, lon = LOCATION_COORDINATES["rome"]
        assert lookup_by_location_value("rome") == {"latitude": lat, "longitude": lon}

    def test_country_code_is_case_insensitive(self):
        assert lookup_by_location_value("IT") == lookup_by_location_value("it")
        assert lookup_by_location_value("IT") is not None

    def test_unknown_and_empty(self):
        assert lookup_by_location_value("atlantis") is None
        assert lookup_by_location_value("") is None
        assert lookup_by_location_value(None) is None
        assert lookup_by_location_value("   ") is None

    def test_each_call_returns_a_fresh_dict(self):
        """Callers may hold on to the result without sharing it across sessions."""
        first = lookup_by_location_value("paris")
        first["latitude"] = 0.0

        assert lookup_by_location_value("paris")["latitude"] == LOCATION_COORDINATES["paris"][0]
        assert lookup_by_location_value("paris") is not lookup_by_location_value("paris")
