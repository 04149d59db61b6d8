"""
Resolution Queue

Sequential, rate-limited worker that gives every listing in the working set a
coordinate, cheapest source first:

1. Local fallback table (no network, written immediately)
2. External geocoder, one request per listing, followed by a fixed delay

Listings are processed one at a time in working-set order. Re-running the
queue on a grown working set only touches ids that are neither cached nor
pending. A CancellationToken stops the run at the next checkpoint and
discards any in-flight result.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from common.config import GEOCODE_DELAY_MS
from common.errors import GeocodeLookupError
from common.geocoding import lookup_by_location_value
from common.logging_config import get_logger
from common.metrics import coordinates_resolved
from common.types import Coordinates, ListingRef
from coordinate_cache.core import CoordinateCache
from resolution_queue.geocoder import Geocoder

logger = get_logger("resolution_queue")

FallbackLookup = Callable[[str | None], Coordinates | None]
Sleep = Callable[[float], Awaitable[None]]


class CancellationToken:
    """Cooperative stop flag shared between a session and its queue runs."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


@dataclass
class ResolutionReport:
    """Counts from one pass of the queue."""

    fallback_hits: int = 0
    geocoded: int = 0
    not_found: int = 0
    failed: int = 0
    skipped: int = 0
    external_calls: int = 0
    cancelled: bool = False


class ResolutionQueue:
    def __init__(
        self,
        cache: CoordinateCache,
        geocoder: Geocoder,
        fallback_lookup: FallbackLookup = lookup_by_location_value,
        delay_ms: int = GEOCODE_DELAY_MS,
        sleep: Sleep = asyncio.sleep,
    ):
        self.cache = cache
        self.geocoder = geocoder
        self.fallback_lookup = fallback_lookup
        self.delay_ms = delay_ms
        self.sleep = sleep
        self.pending: set[str] = set()

    def _write(self, listing_id: str, coords: Coordinates, source: str, token: CancellationToken) -> bool:
        if token.cancelled:
            logger.debug(f"Discarding {source} coordinates for {listing_id}: run cancelled")
            return False
        written = self.cache.set_if_absent(listing_id, coords)
        if written:
            coordinates_resolved.add(1, {"source": source})
        return written

    async def _resolve_external(
        self, listing: ListingRef, query: str, token: CancellationToken, report: ResolutionReport
    ) -> None:
        report.external_calls += 1
        try:
            coords = await self.geocoder.geocode(query)
        except GeocodeLookupError as e:
            report.failed += 1
            logger.warning(f"Failed to resolve listing {listing.id} coordinates: {e}")
            return

        if coords is None:
            report.not_found += 1
            logger.debug(f"No geocoder match for listing {listing.id} ('{query}')")
            return

        if self._write(listing.id, coords, "geocoder", token):
            report.geocoded += 1

    async def run(self, listings: Iterable[ListingRef], token: CancellationToken) -> ResolutionReport:
        """
        Resolve coordinates for every listing not yet cached or pending.

        Args:
            listings: Working set, processed in order
            token: Cancellation token checked before each listing, before each
                cache write and after each delay

        Returns:
            ResolutionReport for this pass
        """
        report = ResolutionReport()

        for listing in listings:
            if token.cancelled:
                report.cancelled = True
                break
            if listing.id in self.cache or listing.id in self.pending:
                report.skipped += 1
                continue

            self.pending.add(listing.id)
            called_external = False
            try:
                fallback = self.fallback_lookup(listing.location_value)
                if fallback is not None and self._write(listing.id, fallback, "fallback", token):
                    report.fallback_hits += 1

                query = listing.geocode_query
                if query and not token.cancelled:
                    called_external = True
                    await self._resolve_external(listing, query, token, report)
            finally:
                self.pending.discard(listing.id)

            if called_external and not token.cancelled:
                await self.sleep(self.delay_ms / 1000)

        if token.cancelled:
            report.cancelled = True

        logger.info(
            f"Resolution pass: {report.fallback_hits} fallback, {report.geocoded} geocoded, "
            f"{report.not_found} not found, {report.failed} failed, {report.skipped} skipped"
            + (" (cancelled)" if report.cancelled else "")
        )
        return report
