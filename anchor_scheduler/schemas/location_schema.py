"""Geocoded location and travel estimate models."""

from pydantic import BaseModel, ConfigDict


class ResolvedLocation(BaseModel):
    """A geocoded address. Immutable once produced."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    formatted_address: str


class DistanceResult(BaseModel):
    """Estimated road distance and drive time between two locations."""

    model_config = ConfigDict(frozen=True)

    distance_miles: float
    duration_minutes: int

    @property
    def distance_text(self) -> str:
        return f"{self.distance_miles} mi"

    @property
    def duration_text(self) -> str:
        return f"{self.duration_minutes} mins"
