"""Shared pytest fixtures and utilities for all tests."""

import asyncio

import pytest

from common.types import Coordinates, ListingRef


def make_listing(
    listing_id: str,
    location_value: str | None = None,
    location_description: str | None = None,
    meeting_point: str | None = None,
    searchable_text: tuple[str, ...] = (),
    description: str | None = None,
) -> ListingRef:
    """Build a ListingRef with only the fields a test cares about."""
    return ListingRef(
        id=listing_id,
        location_value=location_value,
        location_description=location_description,
        meeting_point=meeting_point,
        searchable_text=searchable_text,
        description=description,
    )


def coords(latitude: float, longitude: float) -> Coordinates:
    return {"latitude": latitude, "longitude": longitude}


class FakeGeocoder:
    """Records queries and answers from a fixed table (missing query -> None)."""

    def __init__(self, answers: dict[str, Coordinates | Exception] | None = None):
        self.answers = answers or {}
        self.queries: list[str] = []

    async def geocode(self, query: str) -> Coordinates | None:
        self.queries.append(query)
        answer = self.answers.get(query)
        if isinstance(answer, Exception):
            raise answer
        return answer


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays without waiting."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def run(coro):
    """Drive a coroutine to completion from a synchronous test."""
    return asyncio.run(coro)


@pytest.fixture
def rome() -> Coordinates:
    return coords(41.9, 12.5)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
