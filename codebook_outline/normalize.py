"""
Text normalization shared by section location, evidence and search.

build_normalized_view() lowercases a raw text and collapses whitespace runs to one
space while keeping a map from every normalized position back to the raw offset.
Views are meant to be built once per raw text per request; NormalizedViewCache is
the explicit, caller-owned cache for that.
"""

import logging
import re
import threading
from collections import OrderedDict
from typing import Callable, Generic, Hashable, TypeVar

from codebook_outline.models import NormalizedView

log = logging.getLogger(__name__)

WHITESPACE_RE = re.compile(r"\s+")

DEFAULT_CACHE_CAPACITY = 8

V = TypeVar("V")


def normalize_search_text(value: str | None) -> str:
    """Lowercase, collapse whitespace runs to one space and trim: '  Fire\\n Doors ' -> 'fire doors'."""
    return WHITESPACE_RE.sub(" ", str(value or "").lower()).strip()


def build_normalized_view(raw: str | None) -> NormalizedView:
    """
    One pass over raw: whitespace runs become a single space mapped to the first
    whitespace character of the run; every other character is lowercased and mapped
    to its own offset. Never fails; an empty input gives an empty view.
    """
    source = str(raw or "")
    out: list[str] = []
    index_map: list[int] = []
    last_was_space = False
    for i, ch in enumerate(source):
        if ch.isspace():
            if not last_was_space:
                out.append(" ")
                index_map.append(i)
                last_was_space = True
            continue
        # str.lower() can expand a single character ("İ" -> "i̇"); map each piece back to i
        for piece in ch.lower():
            out.append(piece)
            index_map.append(i)
        last_was_space = False
    return NormalizedView(source=source, normalized="".join(out), index_map=tuple(index_map))


class BoundedCache(Generic[V]):
    """
    Capacity-bounded key -> value map with insert-if-absent semantics.
    get_or_create() computes a missing value at most once per key, even when several
    threads ask for the same key at the same time. Least recently used keys are evicted.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_CAPACITY):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._items: OrderedDict[Hashable, V] = OrderedDict()
        self._lock = threading.Lock()
        self._key_locks: dict[Hashable, threading.Lock] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._items

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: Hashable) -> V | None:
        with self._lock:
            if key not in self._items:
                return None
            self._items.move_to_end(key)
            return self._items[key]

    def get_or_create(self, key: Hashable, factory: Callable[[], V]) -> V:
        with self._lock:
            if key in self._items:
                self._items.move_to_end(key)
                return self._items[key]
            key_lock = self._key_locks.setdefault(key, threading.Lock())
        with key_lock:
            try:
                # Another thread may have filled the key while we waited
                existing = self.get(key)
                if existing is not None:
                    return existing
                value = factory()
                with self._lock:
                    self._items[key] = value
                    self._items.move_to_end(key)
                    while len(self._items) > self._capacity:
                        evicted, _ = self._items.popitem(last=False)
                        log.debug("cache: evicted %r", evicted)
                return value
            finally:
                with self._lock:
                    if self._key_locks.get(key) is key_lock:
                        del self._key_locks[key]

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


class NormalizedViewCache(BoundedCache[NormalizedView]):
    """
    Views keyed by raw-text identity. Pass a key (e.g. the document name) when one is
    known; otherwise the text itself is the key.
    """

    def view_for(self, raw: str, key: Hashable | None = None) -> NormalizedView:
        cache_key = key if key is not None else raw
        view = self.get_or_create(cache_key, lambda: build_normalized_view(raw))
        if view.source is not raw and view.source != raw:
            # Same key, different text (document reloaded): rebuild and replace
            log.debug("cache: stale view for %r, rebuilding", cache_key)
            view = build_normalized_view(raw)
            with self._lock:
                self._items[cache_key] = view
        return view


def get_view(raw: str, cache: NormalizedViewCache | None = None, key: Hashable | None = None) -> NormalizedView:
    """Return the normalized view of raw, from cache when one is given."""
    if cache is None:
        return build_normalized_view(raw)
    return cache.view_for(raw, key=key)
