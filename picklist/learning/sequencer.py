"""Learned ordering of a shopping list.

Items the user has bought before are sorted by where in the store they
usually pick them up (mean check-off rank, lowest first). Items with no
history follow in the order they were given. Until the history holds
LEARNING_MIN_TRIPS trips the list is returned untouched.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

import structlog

from picklist.learning.constants import LEARNING_MIN_TRIPS
from picklist.learning.location import LocationLike, parse_location
from picklist.learning.scoring import average_check_off_order
from picklist.models.contracts import ShoppingTrip

logger = structlog.get_logger()

T = TypeVar("T")


def is_learning_active(trips: Sequence[ShoppingTrip]) -> bool:
    return len(trips) >= LEARNING_MIN_TRIPS


def item_id(item: Any) -> str:
    """Read the stable product id from a model/dataclass or a plain dict."""
    if isinstance(item, Mapping):
        return str(item["id"])
    return str(item.id)


def sort_by_learning_algorithm(
    items: Sequence[T],
    trips: Sequence[ShoppingTrip],
    current_location: LocationLike = None,
    key: Callable[[T], str] = item_id,
) -> list[T]:
    """Return ``items`` reordered by learned shopping order.

    Scored items come first, ascending by mean rank; equal scores keep their
    input order. Unscored items are appended in input order. Never raises on
    a bad location: it simply falls back to the global history.
    """
    if not is_learning_active(trips):
        logger.debug("learning_inactive", trips=len(trips), items=len(items))
        return list(items)

    # parsed once per pass
    here = parse_location(current_location)
    scored: list[tuple[float, int, T]] = []
    unscored: list[T] = []
    for position, item in enumerate(items):
        score = average_check_off_order(key(item), trips, here)
        if score is None:
            unscored.append(item)
        else:
            scored.append((score, position, item))

    scored.sort(key=lambda entry: (entry[0], entry[1]))
    logger.debug(
        "learned_order_applied",
        trips=len(trips),
        scored=len(scored),
        unscored=len(unscored),
        has_location=here is not None,
    )
    return [item for _, _, item in scored] + unscored
