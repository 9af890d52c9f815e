"""Order tracking endpoints."""

from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import APIRouter, HTTPException, status

from ...config import settings
from ...schemas.tracking import ETARequest, ETAResponse, MilestoneModel, TimelineRequest, TrackingResponse
from ...models.domain import AgentLocation
from ...services.routing.osrm_client import get_routing_client
from ...services.tracking.eta import estimate_eta
from ...services.tracking.service import get_tracking_summary
from ...services.tracking.timeline import build_status_timeline

router = APIRouter(prefix="/tracking", tags=["tracking"])


@router.post("/eta", response_model=ETAResponse, status_code=status.HTTP_200_OK)
def eta(payload: ETARequest) -> ETAResponse:
    agent = None
    if payload.agent_location is not None:
        agent = AgentLocation(
            coordinate=payload.agent_location.to_coordinate(),
            recorded_at=payload.agent_location.recorded_at,
            accuracy=payload.agent_location.accuracy,
            agent_id=payload.agent_location.agent_id,
        )
    try:
        result = estimate_eta(
            payload.order_status,
            agent_location=agent,
            restaurant_location=payload.restaurant_location.to_coordinate() if payload.restaurant_location else None,
            customer_location=payload.customer_location.to_coordinate() if payload.customer_location else None,
            routing_client=get_routing_client() if payload.use_routing_service else None,
            avg_speed_kmh=settings.average_speed_kmh,
            max_location_age=timedelta(minutes=settings.agent_location_max_age_minutes),
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ETAResponse.from_result(result)


@router.post("/timeline", response_model=list[MilestoneModel], status_code=status.HTTP_200_OK)
def timeline(payload: TimelineRequest) -> list[MilestoneModel]:
    try:
        milestones = build_status_timeline(payload.order_status, payload.timestamps)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [MilestoneModel.from_milestone(milestone) for milestone in milestones]


@router.get("/{order_id}", response_model=TrackingResponse, status_code=status.HTTP_200_OK)
def tracking_summary(order_id: str) -> TrackingResponse:
    try:
        return get_tracking_summary(order_id, routing_client=get_routing_client())
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ConnectionError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error building tracking summary for order {order_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to load tracking data: {str(exc)}",
        ) from exc
