"""Tests for the session coordinate cache."""

import pytest
from conftest import coords

from coordinate_cache.core import CoordinateCache


class TestCoordinateCache:
    def test_first_write_wins(self):
        cache = CoordinateCache()

        assert cache.set_if_absent("a", coords(41.9, 12.5))
        assert not cache.set_if_absent("a", coords(0.0, 0.0))
        assert cache.get("a") == coords(41.9, 12.5)

    def test_missing_id(self):
        cache = CoordinateCache()
        assert cache.get("missing") is None
        assert "missing" not in cache

    def test_snapshot_is_stable_and_read_only(self):
        cache = CoordinateCache()
        cache.set_if_absent("a", coords(1.0, 2.0))
        snapshot = cache.snapshot()

        cache.set_if_absent("b", coords(3.0, 4.0))

        assert list(snapshot) == ["a"]
        assert len(cache) == 2
        with pytest.raises(TypeError):
            snapshot["c"] = coords(5.0, 6.0)

    def test_stored_values_are_copies(self):
        cache = CoordinateCache()
        original = coords(1.0, 2.0)
        cache.set_if_absent("a", original)
        original["latitude"] = 99.0

        assert cache.get("a") == coords(1.0, 2.0)
