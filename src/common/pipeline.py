"""
Listings Map Session

Orchestrates ingestion -> coordinate resolution -> filtering for one map
overlay session. The coordinate cache, pending set and cancellation token
live exactly as long as the session.
"""

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from common.config import GEOCODE_DELAY_MS, NEARBY_RADIUS_KM
from common.logging_config import get_logger
from common.types import Coordinates, ListingRef
from coordinate_cache.core import CoordinateCache
from listing_filters.core import filter_listings, select_suggestions
from listing_ingestor.core import IngestionResult, PageFetcher, ingest_listings, merge_listings
from resolution_queue.core import CancellationToken, ResolutionQueue, ResolutionReport, Sleep
from resolution_queue.geocoder import Geocoder

logger = get_logger("listings_map_session")


@dataclass
class SessionResults:
    """Filtered listings for the current search state."""

    listings: list[ListingRef]
    suggestions: list[ListingRef]
    coordinates: Mapping[str, Coordinates]


class ListingsMapSession:
    def __init__(
        self,
        fetch_page: PageFetcher,
        geocoder: Geocoder,
        initial_listings: Iterable[ListingRef] = (),
        delay_ms: int = GEOCODE_DELAY_MS,
        sleep: Sleep = asyncio.sleep,
    ):
        self.fetch_page = fetch_page
        self.initial_listings = list(initial_listings)
        self.cache = CoordinateCache()
        self.queue = ResolutionQueue(self.cache, geocoder, delay_ms=delay_ms, sleep=sleep)
        self.token = CancellationToken()
        self.listings: list[ListingRef] = list(merge_listings(self.initial_listings))
        self.ingestion: IngestionResult | None = None

    @property
    def closed(self) -> bool:
        return self.token.cancelled

    async def open(self) -> ResolutionReport:
        """Ingest the listing source once, then resolve coordinates for the working set."""
        if self.ingestion is None:
            self.ingestion = await ingest_listings(self.fetch_page, self.initial_listings)
            if self.closed:
                logger.info("Session closed during ingestion, skipping resolution")
                return ResolutionReport(cancelled=True)
            self.listings = merge_listings(self.listings, self.ingestion.listings)
        return await self.queue.run(self.listings, self.token)

    async def refresh(self, new_listings: Iterable[ListingRef]) -> ResolutionReport:
        """Merge newly arrived listings and resolve whatever is still missing."""
        if self.closed:
            return ResolutionReport(cancelled=True)
        self.listings = merge_listings(self.listings, new_listings)
        return await self.queue.run(self.listings, self.token)

    def results(
        self,
        query: str | None = None,
        location_tokens: Iterable[str | None] | None = None,
        user_location: Coordinates | None = None,
        nearby_only: bool = False,
        radius_km: float = NEARBY_RADIUS_KM,
    ) -> SessionResults:
        coords = self.cache.snapshot()
        filtered = filter_listings(
            self.listings,
            coords,
            query=query,
            location_tokens=location_tokens,
            reference=user_location,
            nearby_only=nearby_only,
            radius_km=radius_km,
        )
        return SessionResults(
            listings=filtered,
            suggestions=select_suggestions(filtered, query, nearby_only),
            coordinates=coords,
        )

    def close(self) -> None:
        """Stop any running resolution pass and discard the session's working set and coordinates."""
        self.token.cancel()
        logger.info(f"Session closed with {len(self.cache)}/{len(self.listings)} listings resolved")
        self.cache = CoordinateCache()
        self.queue.cache = self.cache
        self.queue.pending.clear()
        self.listings = []
