"""In-memory implementation of CacheStore.

Entries live in an append-ordered list that the matching scans walk, plus
a keyed timed store (``cachetools.TTLCache``) indexed by normalized address.
Both are bounded by the same capacity; the oldest entry is evicted first.

All scans and mutations run under one ``threading.Lock``. Lookup cost is
linear in the number of entries, which is acceptable at the default
capacity of 1000.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterator, Sequence

from cachetools import TTLCache

from geo_semantic_cache.config import settings
from geo_semantic_cache.entities import CacheEntryEntity, CacheStatsEntity
from geo_semantic_cache.exceptions import EmbeddingDimensionError
from geo_semantic_cache.similarity import cosine_similarity, haversine_distance

logger = logging.getLogger(__name__)

KEY_PREFIX = "geo:"


class InMemoryCacheRepository:
    """Bounded, TTL-aware store of resolved addresses.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Matching rules:
    - Forward (``find_similar``): an entry is a candidate when its cosine
      similarity to the query exceeds ``similarity_threshold``. The first
      candidate becomes the provisional best; a later candidate replaces it
      only when it is more similar AND lies within
      ``distance_threshold_meters`` of the current provisional best.
    - Reverse (``find_nearby``): the first entry strictly inside the radius.

    Entries older than the TTL are ignored by both scans and pruned on the
    next insertion.
    """

    def __init__(
        self,
        max_entries: int | None = None,
        ttl: int | None = None,
        similarity_threshold: float | None = None,
        distance_threshold_meters: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory cache repository.

        Args:
            max_entries: Capacity before FIFO eviction. Defaults to settings.
            ttl: Time-to-live for entries in seconds. Defaults to settings.
            similarity_threshold: Minimum cosine similarity (exclusive). Defaults to settings.
            distance_threshold_meters: Max distance between competing candidates.
                Defaults to settings.
            clock: Time source in seconds, shared with the keyed store.
        """
        self._max_entries = max_entries if max_entries is not None else settings.cache_max_entries
        self._ttl = ttl if ttl is not None else settings.cache_ttl_seconds
        self._similarity_threshold = (
            similarity_threshold if similarity_threshold is not None else settings.similarity_threshold
        )
        self._distance_threshold = (
            distance_threshold_meters
            if distance_threshold_meters is not None
            else settings.distance_threshold_meters
        )
        if self._max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self._clock = clock
        self._lock = threading.Lock()
        self._entries: list[CacheEntryEntity] = []
        self._keyed: TTLCache[str, CacheEntryEntity] = TTLCache(
            maxsize=self._max_entries, ttl=self._ttl, timer=clock
        )
        self._dimension: int | None = None

        self._hits = 0
        self._misses = 0
        self._similarity_hits = 0
        self._similarity_misses = 0

    @classmethod
    def create(
        cls,
        max_entries: int | None = None,
        ttl: int | None = None,
        similarity_threshold: float | None = None,
        distance_threshold_meters: float | None = None,
    ) -> "InMemoryCacheRepository":
        """Factory method to create InMemoryCacheRepository with defaults.

        Args:
            max_entries: Capacity. If None, uses settings.
            ttl: Entry TTL in seconds. If None, uses settings.
            similarity_threshold: Cosine threshold. If None, uses settings.
            distance_threshold_meters: Candidate distance threshold. If None, uses settings.

        Returns:
            Configured InMemoryCacheRepository
        """
        return cls(
            max_entries=max_entries,
            ttl=ttl,
            similarity_threshold=similarity_threshold,
            distance_threshold_meters=distance_threshold_meters,
        )

    @staticmethod
    def _key(normalized_key: str) -> str:
        return f"{KEY_PREFIX}{normalized_key}"

    def _is_live(self, entry: CacheEntryEntity, now: float) -> bool:
        return now - entry.inserted_at < self._ttl

    def _live_entries(self) -> Iterator[CacheEntryEntity]:
        now = self._clock()
        return (entry for entry in self._entries if self._is_live(entry, now))

    def _drop_key(self, entry: CacheEntryEntity) -> None:
        """Remove entry's key unless a newer entry now owns it."""
        key = self._key(entry.normalized_key)
        if self._keyed.get(key) is entry:
            del self._keyed[key]

    def _prune_expired(self) -> None:
        # Insertion order means expired entries form a prefix
        now = self._clock()
        expired = 0
        while self._entries and not self._is_live(self._entries[0], now):
            self._drop_key(self._entries.pop(0))
            expired += 1
        if expired:
            logger.debug("Pruned %d expired cache entries", expired)

    def store(self, entry: CacheEntryEntity) -> None:
        """Insert an entry, evicting the oldest one when over capacity.

        Duplicate normalized keys are allowed and age independently; the
        keyed store points at the newest one.

        Args:
            entry: The entry to insert

        Raises:
            EmbeddingDimensionError: If the embedding length differs from
                the entries already stored
        """
        with self._lock:
            self._prune_expired()

            if self._entries and self._dimension is not None and entry.dimension != self._dimension:
                raise EmbeddingDimensionError(self._dimension, entry.dimension)
            self._dimension = entry.dimension

            self._entries.append(entry)
            if len(self._entries) > self._max_entries:
                evicted = self._entries.pop(0)
                self._drop_key(evicted)
                logger.debug("Evicted oldest cache entry: %s", evicted.normalized_key)

            self._keyed[self._key(entry.normalized_key)] = entry

    def find_similar(
        self,
        normalized_query: str,
        query_embedding: Sequence[float],
    ) -> CacheEntryEntity | None:
        """Find the best semantically similar entry.

        Candidates are compared with each other, not with the query's
        location (unknown at this point): a later candidate must be within
        the distance threshold of the current best to replace it.

        Args:
            normalized_query: The normalized query text
            query_embedding: Embedding of the normalized query

        Returns:
            The best match, or None if no entry exceeds the similarity threshold
        """
        best_match: CacheEntryEntity | None = None
        best_score = 0.0

        with self._lock:
            for entry in self._live_entries():
                similarity = cosine_similarity(query_embedding, entry.embedding)
                if similarity <= self._similarity_threshold:
                    continue

                if best_match is None:
                    best_match, best_score = entry, similarity
                    continue

                distance = haversine_distance(
                    entry.latitude, entry.longitude, best_match.latitude, best_match.longitude
                )
                if distance < self._distance_threshold and similarity > best_score:
                    best_match, best_score = entry, similarity

            if best_match is None:
                self._similarity_misses += 1
            else:
                self._similarity_hits += 1

        if best_match is not None:
            logger.debug(
                "Similarity match for %r: %r (score=%.4f)",
                normalized_query,
                best_match.normalized_key,
                best_score,
            )
        return best_match

    def find_nearby(
        self,
        latitude: float,
        longitude: float,
        radius_meters: float | None = None,
    ) -> CacheEntryEntity | None:
        """Find the first entry strictly within a radius of a point.

        First match in insertion order, not the closest one.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees
            radius_meters: Search radius in meters. Defaults to settings.reverse_radius_meters.

        Returns:
            The first entry found, or None
        """
        radius = radius_meters if radius_meters is not None else settings.reverse_radius_meters
        with self._lock:
            for entry in self._live_entries():
                if haversine_distance(latitude, longitude, entry.latitude, entry.longitude) < radius:
                    return entry
        return None

    def get_by_key(self, normalized_key: str) -> CacheEntryEntity | None:
        """Look up the newest entry for an exact normalized key.

        This is the only operation that moves the hit/miss counters.

        Args:
            normalized_key: The normalized address

        Returns:
            The entry, or None if absent or expired
        """
        with self._lock:
            entry = self._keyed.get(self._key(normalized_key))
            if entry is None:
                self._misses += 1
            else:
                self._hits += 1
            return entry

    def entries(self) -> tuple[CacheEntryEntity, ...]:
        """Snapshot of live entries, oldest first."""
        with self._lock:
            return tuple(self._live_entries())

    def clear(self) -> None:
        """Drop all entries, reset the keyed store and zero the counters."""
        with self._lock:
            self._entries = []
            self._keyed.clear()
            self._dimension = None
            self._hits = 0
            self._misses = 0
            self._similarity_hits = 0
            self._similarity_misses = 0
        logger.info("Cache cleared")

    def count(self) -> int:
        """Count live entries.

        Returns:
            Number of entries that have not expired
        """
        with self._lock:
            return sum(1 for _ in self._live_entries())

    def health_check(self) -> bool:
        """Check if the store is usable.

        Returns:
            Always True for the in-memory store
        """
        return True

    def get_stats(self) -> CacheStatsEntity:
        """Get a statistics snapshot.

        Returns:
            CacheStatsEntity with entry/key counts and counters since the last clear
        """
        with self._lock:
            self._prune_expired()
            self._keyed.expire()
            return CacheStatsEntity(
                entries=sum(1 for _ in self._live_entries()),
                keys=len(self._keyed),
                hits=self._hits,
                misses=self._misses,
                similarity_hits=self._similarity_hits,
                similarity_misses=self._similarity_misses,
                capacity=self._max_entries,
                ttl_seconds=self._ttl,
            )

    @property
    def similarity_threshold(self) -> float:
        """Get the cosine similarity threshold."""
        return self._similarity_threshold

    @property
    def distance_threshold_meters(self) -> float:
        """Get the candidate distance threshold."""
        return self._distance_threshold

    @property
    def ttl(self) -> int:
        """Get the entry time-to-live in seconds."""
        return self._ttl

    @property
    def max_entries(self) -> int:
        """Get the store capacity."""
        return self._max_entries
