"""Learned shopping-list ordering."""

from picklist.learning.location import is_similar_location, parse_location
from picklist.learning.scoring import average_check_off_order
from picklist.learning.sequencer import is_learning_active, sort_by_learning_algorithm

__all__ = [
    "average_check_off_order",
    "is_learning_active",
    "is_similar_location",
    "parse_location",
    "sort_by_learning_algorithm",
]
