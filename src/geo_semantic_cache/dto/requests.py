"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field, field_validator


class GeocodeRequest(BaseModel):
    """Request DTO for forward geocoding.

    The handler will convert this to internal calls to the service layer.
    """

    address: str = Field(..., description="Free-form address to resolve", min_length=1)

    @field_validator("address")
    @classmethod
    def address_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Address is required")
        return value


class ReverseGeocodeRequest(BaseModel):
    """Request DTO for reverse geocoding."""

    lat: float = Field(..., description="Latitude in degrees", ge=-90.0, le=90.0)
    lng: float = Field(..., description="Longitude in degrees", ge=-180.0, le=180.0)
