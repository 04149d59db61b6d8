"""Tests for the listings map session pipeline."""

from conftest import FakeGeocoder, RecordingSleep, coords, make_listing, run

from common.errors import IngestionPageError
from common.pipeline import ListingsMapSession
from listing_ingestor.core import ListingPage


def _fetcher(pages):
    pages = list(pages)

    async def fetch_page(skip, take):
        if not pages:
            return ListingPage([])
        page = pages.pop(0)
        if isinstance(page, Exception):
            raise page
        return ListingPage(page)

    return fetch_page


class TestListingsMapSession:
    def test_open_ingests_and_resolves(self, rome):
        listings = [
            make_listing("cooking", location_value="rome", searchable_text=("Cooking class in Rome",)),
            make_listing("kayak", location_description="Lake Como", searchable_text=("Kayak tour",)),
        ]
        geocoder = FakeGeocoder({"Lake Como": coords(46.0160, 9.2572)})
        session = ListingsMapSession(_fetcher([listings]), geocoder, sleep=RecordingSleep())

        report = run(session.open())

        assert report.fallback_hits == 1
        assert report.geocoded == 1
        nearby = session.results(user_location=rome, nearby_only=True)
        assert [listing.id for listing in nearby.listings] == ["cooking"]
        assert [listing.id for listing in nearby.suggestions] == ["cooking"]
        assert session.results(query="kayak").listings[0].id == "kayak"

    def test_open_with_failed_source_uses_initial_listings(self):
        initial = [make_listing("startup", location_value="paris")]
        session = ListingsMapSession(
            _fetcher([IngestionPageError(0, 100, "HTTP 500")]),
            FakeGeocoder(),
            initial_listings=initial,
            sleep=RecordingSleep(),
        )

        run(session.open())

        assert [listing.id for listing in session.listings] == ["startup"]
        assert "startup" in session.cache

    def test_refresh_resolves_only_new_listings(self):
        geocoder = FakeGeocoder({"Alpha": coords(1.0, 1.0), "Beta": coords(2.0, 2.0)})
        session = ListingsMapSession(
            _fetcher([[make_listing("a", location_description="Alpha")]]), geocoder, sleep=RecordingSleep()
        )

        run(session.open())
        run(session.refresh([make_listing("a", location_description="Alpha"), make_listing("b", meeting_point="Beta")]))

        assert geocoder.queries == ["Alpha", "Beta"]
        assert len(session.listings) == 2

    def test_close_stops_further_resolution(self):
        geocoder = FakeGeocoder()
        session = ListingsMapSession(_fetcher([[]]), geocoder, sleep=RecordingSleep())
        run(session.open())

        session.close()
        report = run(session.refresh([make_listing("late", location_value="rome", meeting_point="Colosseum")]))

        assert session.closed
        assert report.cancelled
        assert "late" not in session.cache
        assert geocoder.queries == []

    def test_location_tokens_with_no_selection_show_nothing(self):
        session = ListingsMapSession(
            _fetcher([[make_listing("a", location_value="rome")]]), FakeGeocoder(), sleep=RecordingSleep()
        )
        run(session.open())

        assert session.results(location_tokens=[]).listings == []
        assert [listing.id for listing in session.results(location_tokens=["Rome"]).listings] == ["a"]

    def test_nearby_suggestions_without_user_location(self):
        """Nearby mode still yields suggestions when the user location is unknown."""
        listings = [make_listing(f"l{i}", location_value="rome") for i in range(10)]
        session = ListingsMapSession(_fetcher([listings]), FakeGeocoder(), sleep=RecordingSleep())
        run(session.open())

        results = session.results(nearby_only=True)

        assert len(results.listings) == 10
        assert [listing.id for listing in results.suggestions] == [f"l{i}" for i in range(8)]
        assert session.results().suggestions == []

    def test_close_discards_working_set_and_coordinates(self):
        session = ListingsMapSession(
            _fetcher([[make_listing("a", location_value="rome")]]), FakeGeocoder(), sleep=RecordingSleep()
        )
        run(session.open())
        snapshot = session.results().coordinates

        session.close()

        assert session.results().listings == []
        assert len(session.cache) == 0
        assert session.queue.cache is session.cache
        assert session.queue.pending == set()
        # snapshots handed out before close are unaffected
        assert "a" in snapshot
