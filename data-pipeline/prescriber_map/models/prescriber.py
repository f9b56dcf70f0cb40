"""
Pydantic models for prescriber records and the published dataset.

The JSON artifact uses camelCase keys (practiceType, geoSource, ...) because the
map front end reads it directly; Python code uses the snake_case attributes.
"""

import unicodedata
from datetime import UTC, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..constants import GEO_SOURCES


def name_sort_key(name: str) -> tuple[str, str]:
    """
    Locale-style collation key for prescriber names.

    Accents and case are folded for the primary comparison ("Élan" sorts with
    "elan"); the raw name breaks ties so ordering stays deterministic.
    """
    decomposed = unicodedata.normalize("NFKD", name or "")
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return folded, name or ""


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Address(BaseModel):
    """Structured postal address. ``full`` is what gets geocoded."""

    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    full: Optional[str] = None


class Prescriber(BaseModel):
    """
    One normalized prescriber record.

    Invariants:
    - lat/lng are both set or both null
    - geo_source is set exactly when coordinates are present
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    organization: Optional[str] = None
    specialty: Optional[str] = None
    practice_type: Optional[str] = Field(None, alias="practiceType")
    npi: Optional[str] = None
    address: Address = Field(default_factory=Address)
    lat: Optional[float] = None
    lng: Optional[float] = None
    geo_source: Optional[str] = Field(None, alias="geoSource")
    health_system: Optional[str] = Field(None, alias="healthSystem")
    verified: bool = False
    google_address: Optional[str] = Field(None, alias="googleAddress")

    @field_validator("id", "npi", mode="before")
    @classmethod
    def coerce_to_str(cls, v: Any) -> Any:
        """CRM identifiers arrive as strings or numbers; store them as strings."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        return v

    @model_validator(mode="after")
    def check_coordinates(self) -> "Prescriber":
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must both be set or both be null")
        if self.lat is None:
            if self.geo_source is not None:
                raise ValueError("geoSource requires coordinates")
        elif self.geo_source not in GEO_SOURCES:
            raise ValueError(f"geoSource must be one of {sorted(GEO_SOURCES)}")
        return self

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys; googleAddress only when present."""
        data = self.model_dump(mode="json", by_alias=True)
        if data.get("googleAddress") is None:
            data.pop("googleAddress", None)
        return data


class PrescriberDataset(BaseModel):
    """The published document: summary counters plus the sorted record list."""

    model_config = ConfigDict(populate_by_name=True)

    generated: str
    total: int = Field(..., ge=0)
    geocoded: int = Field(..., ge=0)
    no_address: int = Field(..., ge=0, alias="noAddress")
    prescribers: list[Prescriber] = Field(default_factory=list)

    @classmethod
    def from_records(cls, records: list[Prescriber], generated: Optional[str] = None) -> "PrescriberDataset":
        """Sort records by name and compute the summary counters."""
        ordered = sorted(records, key=lambda p: name_sort_key(p.name))
        geocoded = sum(1 for p in ordered if p.has_coordinates)
        no_address = sum(1 for p in ordered if not p.has_coordinates and not p.address.full)
        return cls(
            generated=generated or utc_timestamp(),
            total=len(ordered),
            geocoded=geocoded,
            no_address=no_address,
            prescribers=ordered,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "generated": self.generated,
            "total": self.total,
            "geocoded": self.geocoded,
            "noAddress": self.no_address,
            "prescribers": [p.to_dict() for p in self.prescribers],
        }
