from __future__ import annotations

from collections.abc import Sequence

from picklist.learning.constants import LOCATION_OVERRIDE_MIN_TRIPS
from picklist.learning.location import LocationLike, is_similar_location, parse_location
from picklist.models.contracts import ShoppingTrip


def _rank_in(trip: ShoppingTrip, item_id: str) -> int | None:
    for entry in trip.items:
        if entry.id == item_id:
            return entry.check_off_order or 0
    return None


def average_check_off_order(
    item_id: str,
    trips: Sequence[ShoppingTrip],
    current_location: LocationLike = None,
) -> float | None:
    """Mean check-off rank of ``item_id`` across the trips that contain it.

    With a current location, trips recorded at the same store replace the
    full history once there are at least LOCATION_OVERRIDE_MIN_TRIPS of them.
    Returns None when no trip contains the item.
    """
    ranks = [(trip, rank) for trip in trips if (rank := _rank_in(trip, item_id)) is not None]

    here = parse_location(current_location)
    if here is not None and ranks:
        local = [
            (trip, rank)
            for trip, rank in ranks
            if trip.location and is_similar_location(trip.location, here)
        ]
        if len(local) >= LOCATION_OVERRIDE_MIN_TRIPS:
            ranks = local

    if not ranks:
        return None
    return sum(rank for _, rank in ranks) / len(ranks)
