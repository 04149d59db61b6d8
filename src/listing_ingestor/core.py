"""
Listing Ingestor - pages through the listing source into a session working set.

Paging stops on a short page, once the offset passes MAX_FETCHED, or on the
first failed page. A failed page is not fatal: everything collected before it
is kept. Start-up listings and fetched pages are merged by id.
"""

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

import httpx

from common.config import LISTINGS_API_BASE_URL, LISTINGS_TIMEOUT_SECONDS, MAX_FETCHED, PAGE_SIZE
from common.errors import IngestionPageError
from common.logging_config import get_logger
from common.metrics import listings_ingested
from common.types import ListingRef

logger = get_logger("listing_ingestor")


@dataclass
class ListingPage:
    """
    One page from the listing source.

    raw_count is the number of rows on the wire, before malformed rows are
    dropped. Paging ends on raw_count, not on len(listings).
    """

    listings: list[ListingRef]
    raw_count: int | None = None

    def __post_init__(self) -> None:
        if self.raw_count is None:
            self.raw_count = len(self.listings)


# fetch_page(skip, take) contract
PageFetcher = Callable[[int, int], Awaitable[ListingPage]]


@dataclass
class IngestionResult:
    """Merged working set plus paging metadata."""

    listings: list[ListingRef]
    pages_fetched: int
    stopped_early: bool


def merge_listings(*batches: Iterable[ListingRef]) -> list[ListingRef]:
    """
    Union listing batches by id, keeping the order of first appearance.

    Merging is idempotent: merging a working set with itself returns an equal list.
    """
    merged: dict[str, ListingRef] = {}
    for batch in batches:
        for listing in batch:
            if listing.id not in merged:
                merged[listing.id] = listing
    return list(merged.values())


async def ingest_listings(
    fetch_page: PageFetcher,
    initial_listings: Iterable[ListingRef] = (),
    page_size: int = PAGE_SIZE,
    max_fetched: int = MAX_FETCHED,
) -> IngestionResult:
    """
    Page through the listing source and merge the results with the start-up listings.

    Args:
        fetch_page: Async callable returning one ListingPage
        initial_listings: Listings already available when the session opens
        page_size: Listings requested per page
        max_fetched: Offset limit; paging stops once skip passes it

    Returns:
        IngestionResult with the deduplicated working set
    """
    initial = list(initial_listings)
    fetched: list[ListingRef] = []
    pages_fetched = 0
    stopped_early = False

    skip = 0
    while skip <= max_fetched:
        try:
            page = await fetch_page(skip, page_size)
        except IngestionPageError as e:
            logger.warning(f"Stopping ingestion after {pages_fetched} pages: {e}")
            stopped_early = True
            break

        pages_fetched += 1
        fetched.extend(page.listings)
        logger.debug(f"Fetched page skip={skip}: {len(page.listings)}/{page.raw_count} rows usable")

        if page.raw_count < page_size:
            break
        skip += page_size

    listings = merge_listings(initial, fetched)
    added = len(listings) - len(merge_listings(initial))
    if added > 0:
        listings_ingested.add(added)

    logger.info(
        f"Ingestion complete: {len(initial)} initial + {len(fetched)} fetched -> "
        f"{len(listings)} unique listings ({pages_fetched} pages)"
    )
    return IngestionResult(listings=listings, pages_fetched=pages_fetched, stopped_early=stopped_early)


class ListingsApiClient:
    """HTTP implementation of the fetch_page contract: GET /listings?take=&skip=."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = LISTINGS_API_BASE_URL,
        timeout: float = LISTINGS_TIMEOUT_SECONDS,
    ):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _parse_page(self, data: list[Any]) -> ListingPage:
        listings: list[ListingRef] = []
        for item in data:
            if not isinstance(item, dict):
                logger.warning(f"Skipping non-object listing entry: {item!r}")
                continue
            try:
                listings.append(ListingRef.from_api(item))
            except ValueError as e:
                logger.warning(f"Skipping malformed listing: {e}")
        return ListingPage(listings=listings, raw_count=len(data))

    async def fetch_page(self, skip: int, take: int) -> ListingPage:
        """
        Fetch one page of listings.

        Raises:
            IngestionPageError: On transport failure, non-success status or a
                payload that is not a JSON array
        """
        try:
            response = await self.client.get(
                f"{self.base_url}/listings",
                params={"take": take, "skip": skip},
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise IngestionPageError(skip, take, str(e)) from e

        if not response.is_success:
            raise IngestionPageError(skip, take, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise IngestionPageError(skip, take, f"invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise IngestionPageError(skip, take, "expected a JSON array")

        return self._parse_page(data)
