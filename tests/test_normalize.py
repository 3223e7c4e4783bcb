import threading

import pytest

from codebook_outline.normalize import (
    BoundedCache,
    NormalizedViewCache,
    build_normalized_view,
    get_view,
    normalize_search_text,
)


class TestNormalizedView:
    def test_collapses_whitespace_runs_to_first_offset(self) -> None:
        view = build_normalized_view("  Fire\n\n Doors ")
        assert view.normalized == " fire doors "
        assert view.index_map == (0, 2, 3, 4, 5, 6, 9, 10, 11, 12, 13, 14)

    def test_empty_input_gives_empty_view(self) -> None:
        view = build_normalized_view("")
        assert view.normalized == ""
        assert view.index_map == ()
        assert build_normalized_view(None).normalized == ""

    def test_index_map_points_back_into_source(self) -> None:
        raw = "5.2  Loads:\tDEAD loads\r\n shall   be\n\ndetermined."
        view = build_normalized_view(raw)
        assert len(view.index_map) == len(view.normalized)
        assert list(view.index_map) == sorted(view.index_map)
        for k, offset in enumerate(view.index_map):
            assert 0 <= offset < len(raw)
            assert raw[offset].isspace() == (view.normalized[k] == " ")

    def test_idempotent_on_normalized_text(self) -> None:
        once = build_normalized_view("Exit   WIDTH\n 1100 mm").normalized
        assert build_normalized_view(once).normalized == once

    def test_normalize_search_text_trims(self) -> None:
        assert normalize_search_text("  Fire\n Doors ") == "fire doors"
        assert normalize_search_text(None) == ""


class TestBoundedCache:
    def test_rejects_zero_capacity(self) -> None:
        with pytest.raises(ValueError):
            BoundedCache(capacity=0)

    def test_factory_runs_once_per_key(self) -> None:
        cache: BoundedCache[str] = BoundedCache(capacity=4)
        calls = []

        def factory() -> str:
            calls.append(1)
            return "value"

        assert cache.get_or_create("a", factory) == "value"
        assert cache.get_or_create("a", factory) == "value"
        assert len(calls) == 1

    def test_evicts_least_recently_used(self) -> None:
        cache: BoundedCache[int] = BoundedCache(capacity=2)
        cache.get_or_create("a", lambda: 1)
        cache.get_or_create("b", lambda: 2)
        cache.get("a")
        cache.get_or_create("c", lambda: 3)
        assert "a" in cache
        assert "b" not in cache
        assert len(cache) == 2

    def test_concurrent_first_access_computes_once(self) -> None:
        cache: BoundedCache[int] = BoundedCache(capacity=2)
        calls = []
        lock = threading.Lock()

        def factory() -> int:
            with lock:
                calls.append(1)
            return 42

        threads = [threading.Thread(target=cache.get_or_create, args=("k", factory)) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(calls) == 1
        assert cache.get("k") == 42

    def test_failed_factory_releases_key_lock(self) -> None:
        cache: BoundedCache[int] = BoundedCache(capacity=2)

        def failing() -> int:
            raise RuntimeError("extraction failed")

        with pytest.raises(RuntimeError):
            cache.get_or_create("k", failing)
        assert "k" not in cache
        assert "k" not in cache._key_locks
        assert cache.get_or_create("k", lambda: 1) == 1


class TestNormalizedViewCache:
    def test_reuses_view_for_same_text(self) -> None:
        cache = NormalizedViewCache(capacity=2)
        raw = "5.1 Scope\nText"
        assert cache.view_for(raw) is cache.view_for(raw)

    def test_rebuilds_stale_view_for_key(self) -> None:
        cache = NormalizedViewCache(capacity=2)
        first = cache.view_for("Old Text", key="doc")
        second = cache.view_for("New  Text", key="doc")
        assert first.normalized == "old text"
        assert second.normalized == "new text"
        assert cache.get("doc") is second

    def test_get_view_without_cache(self) -> None:
        assert get_view("A  B").normalized == "a b"
