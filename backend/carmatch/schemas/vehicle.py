"""
Pydantic schema for inventory records.

The engine only reads snapshots of these records; they are frozen so a
snapshot shared between calls can never be mutated by a search.
"""

from pydantic import BaseModel, ConfigDict, Field


class VehicleRecord(BaseModel):
    """A single inventory unit as supplied by the inventory provider."""

    model_config = ConfigDict(frozen=True)

    id: str
    brand: str
    model: str
    version: str | None = None  # trim, e.g. "1.0 LT Turbo"
    year: int
    mileage: int = Field(default=0, ge=0)
    price: float = Field(default=0.0, ge=0)  # 0 means unknown
    color: str | None = None
    body_type: str = ""  # free text, normalized by the category normalizer
    fuel: str = ""
    transmission: str = ""
    available: bool = True
    photo_url: str | None = None
    url: str | None = None

    @property
    def display_name(self) -> str:
        return f"{self.brand} {self.model} {self.year}"
