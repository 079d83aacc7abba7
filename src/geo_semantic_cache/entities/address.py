"""Structured address domain entity."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class StructuredAddress:
    """Address broken into components.

    Every field is optional; None means "unknown", never an error.
    """

    building: str | None = None
    street: str | None = None
    area: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Convert to dictionary."""
        return asdict(self)
