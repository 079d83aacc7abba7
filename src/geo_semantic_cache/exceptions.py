"""Error taxonomy for the geo semantic cache.

Provider errors are always recovered inside the service layer (fallback
embedding or a miss). Coordinate errors are client errors and are rejected
at the boundary. Capacity pressure is handled by eviction and never raises.
"""


class GeoCacheError(Exception):
    """Base class for all errors raised by this package."""


class EmbeddingProviderError(GeoCacheError):
    """The embedding backend is unreachable, timed out or answered badly."""


class GeoProviderError(GeoCacheError):
    """The geocoding backend is unreachable, timed out or answered badly."""


class InvalidCoordinatesError(GeoCacheError, ValueError):
    """Latitude or longitude outside [-90, 90] / [-180, 180]."""

    def __init__(self, latitude: float, longitude: float) -> None:
        super().__init__(f"Invalid coordinates: lat={latitude}, lng={longitude}")
        self.latitude = latitude
        self.longitude = longitude


class EmbeddingDimensionError(GeoCacheError):
    """An embedding's length differs from the one already held by the store."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Embedding dimension mismatch: expected {expected}, got {actual}")
        self.expected = expected
        self.actual = actual
