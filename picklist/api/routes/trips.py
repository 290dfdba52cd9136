"""Trip history endpoints, the only write path that feeds learned ordering."""

from __future__ import annotations

import structlog
from fastapi import APIRouter

from picklist.api.routes.errors import error_response
from picklist.models.contracts import (
    CompleteTripRequest,
    CompleteTripResponse,
    ErrorResponse,
    ShoppingTrip,
    TripHistoryResponse,
)
from picklist.store import DuplicateTripError, store

logger = structlog.get_logger()

router = APIRouter(tags=["trips"])


@router.post("/lists/{list_id}/trips/complete", response_model=CompleteTripResponse)
async def complete_trip(list_id: str, body: CompleteTripRequest) -> CompleteTripResponse:
    """Finish shop mode: record the check-off order, then reset checked items.

    Nothing is recorded when learning is switched off for this trip or when
    nothing was checked off.
    """
    trip = store.get(list_id).complete_trip(
        location=body.location,
        start_time=body.start_time,
        enable_learning=body.enable_learning,
    )
    if trip is None:
        logger.info("trip_not_recorded", list_id=list_id, enable_learning=body.enable_learning)
        return CompleteTripResponse(recorded=False)
    logger.info(
        "trip_recorded",
        list_id=list_id,
        trip_id=trip.id,
        items=len(trip.items),
        has_location=trip.location is not None,
    )
    return CompleteTripResponse(recorded=True, trip=trip)


@router.post(
    "/lists/{list_id}/trips",
    status_code=201,
    response_model=ShoppingTrip,
    responses={409: {"model": ErrorResponse}},
)
async def add_trip(list_id: str, body: ShoppingTrip):
    """Append a trip built elsewhere (e.g. an offline client syncing)."""
    try:
        trip = store.get(list_id).add_trip(body)
    except DuplicateTripError as exc:
        return error_response(409, "duplicate_trip", str(exc))
    logger.info("trip_imported", list_id=list_id, trip_id=trip.id, items=len(trip.items))
    return trip


@router.get("/lists/{list_id}/trips", response_model=TripHistoryResponse)
async def trip_history(list_id: str) -> TripHistoryResponse:
    trips = store.get(list_id).trip_history()
    return TripHistoryResponse(trips=trips, count=len(trips))
