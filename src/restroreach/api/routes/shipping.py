"""Shipping quote endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...data.zones_repository import load_delivery_zones
from ...schemas.shipping import ShippingQuoteRequest, ShippingQuoteResponse
from ...services.routing.osrm_client import get_routing_client
from ...services.shipping.service import quote_delivery, resolve_restaurant_location

router = APIRouter(prefix="/shipping", tags=["shipping"])


@router.post("/quote", response_model=ShippingQuoteResponse, status_code=status.HTTP_200_OK)
def quote(payload: ShippingQuoteRequest) -> ShippingQuoteResponse:
    try:
        routing_client = get_routing_client()
        quote_result = quote_delivery(
            payload,
            restaurant=resolve_restaurant_location(routing_client),
            zones=load_delivery_zones(),
            routing_client=routing_client,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error computing shipping quote: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute shipping quote: {str(exc)}",
        ) from exc

    if quote_result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No delivery rate available for this destination.",
        )
    return ShippingQuoteResponse.from_quote(quote_result)
