"""Cache statistics snapshot."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class CacheStatsEntity:
    """Read-only snapshot of the cache store counters.

    Attributes:
        entries: Live entries in the ordered match sequence
        keys: Keys held by the keyed timed store
        hits: Keyed-store lookups that found an entry
        misses: Keyed-store lookups that found nothing
        similarity_hits: Similarity scans that returned a match
        similarity_misses: Similarity scans that returned nothing
        capacity: Maximum number of entries before FIFO eviction
        ttl_seconds: Entry time-to-live
    """

    entries: int
    keys: int
    hits: int
    misses: int
    similarity_hits: int = 0
    similarity_misses: int = 0
    capacity: int = 0
    ttl_seconds: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary."""
        return asdict(self)
