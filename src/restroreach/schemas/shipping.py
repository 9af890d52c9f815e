"""Shipping quote request/response schemas."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from ..models.domain import Coordinate, ShippingQuote


class ShippingQuoteRequest(BaseModel):
    latitude: Optional[float] = Field(default=None, description="Delivery latitude.")
    longitude: Optional[float] = Field(default=None, description="Delivery longitude.")
    address: Optional[str] = Field(default=None, description="Delivery address, geocoded when coordinates are absent.")
    postcode: Optional[str] = Field(default=None, description="Delivery postcode used for zone pricing.")
    cart_total: float = Field(default=0.0, ge=0.0)
    calculation_method: Optional[Literal["haversine", "routing_service", "google_maps"]] = Field(
        default=None,
        description="Override the configured distance source.",
    )

    @model_validator(mode="after")
    def _require_destination(self) -> "ShippingQuoteRequest":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together.")
        if self.latitude is None and not (self.address and self.address.strip()):
            raise ValueError("Provide either latitude/longitude or an address.")
        return self

    def coordinate(self) -> Optional[Coordinate]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class DeliveryZoneModel(BaseModel):
    postcode_pattern: str
    price_multiplier: float
    additional_cost: float
    name: Optional[str] = None


class ShippingQuoteResponse(BaseModel):
    label: str
    distance_km: float
    cost: float
    calculation_method: str
    free_delivery: bool
    zone_applied: Optional[DeliveryZoneModel] = None

    @classmethod
    def from_quote(cls, quote: ShippingQuote) -> "ShippingQuoteResponse":
        zone = quote.zone_applied
        return cls(
            label=quote.label,
            distance_km=round(quote.distance_km, 3),
            cost=quote.cost,
            calculation_method=quote.calculation_method.value,
            free_delivery=quote.free_delivery,
            zone_applied=DeliveryZoneModel(
                postcode_pattern=zone.postcode_pattern,
                price_multiplier=zone.price_multiplier,
                additional_cost=zone.additional_cost,
                name=zone.name,
            )
            if zone
            else None,
        )
