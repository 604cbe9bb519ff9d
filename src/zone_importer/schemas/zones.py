"""Pydantic models for delivery zones as exchanged with the marketplace backend."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Coordinate = tuple[float, float]


class _BackendModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class DeliveryZoneDraft(_BackendModel):
    """A creation-ready zone. Coordinates are (lat, lon) pairs."""

    zone_name: str
    base_delivery_fee: float = Field(0.0, ge=0.0, allow_inf_nan=False)
    per_mile_fee: float = Field(0.0, ge=0.0, allow_inf_nan=False)
    min_order_amount: float = Field(0.0, ge=0.0, allow_inf_nan=False)
    estimated_preparation_time: float = Field(0.0, ge=0.0, allow_inf_nan=False, description="Minutes.")
    is_restricted: bool = False
    coordinates: list[Coordinate] = Field(..., min_length=1)
    store_identifier: str = Field("", alias="storeUuid")

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class DeliveryZoneUpdate(_BackendModel):
    """Partial update applied by review edits or the zone edit path."""

    zone_name: Optional[str] = None
    base_delivery_fee: Optional[float] = Field(None, ge=0.0, allow_inf_nan=False)
    per_mile_fee: Optional[float] = Field(None, ge=0.0, allow_inf_nan=False)
    min_order_amount: Optional[float] = Field(None, ge=0.0, allow_inf_nan=False)
    estimated_preparation_time: Optional[float] = Field(None, ge=0.0, allow_inf_nan=False)
    is_restricted: Optional[bool] = None
    coordinates: Optional[list[Coordinate]] = Field(None, min_length=1)
    store_identifier: Optional[str] = Field(None, alias="storeUuid")

    @field_validator("zone_name", "store_identifier")
    @classmethod
    def _strip(cls, value: Optional[str]) -> Optional[str]:
        return value.strip() if value is not None else value

    def changes(self) -> dict:
        """Field-name keyed changes that were explicitly provided."""
        return self.model_dump(exclude_unset=True, exclude_none=True)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude_none=True)


class DeliveryZone(_BackendModel):
    """A zone persisted by the backend."""

    zone_id: int | str
    zone_name: str
    base_delivery_fee: float = 0.0
    per_mile_fee: float = 0.0
    min_order_amount: float = 0.0
    estimated_preparation_time: Optional[float] = None
    is_restricted: bool = False
    coordinates: list[Coordinate] = Field(default_factory=list)
    store_identifier: str = Field("", alias="storeUuid")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class StoreModel(BaseModel):
    identifier: str
    display_name: str
