"""In-memory list store: picklist products and the trip history per list.

Stands in for the document store the web client talks to. Each list is
keyed by its owner id. Trip history is append-only: trips are added once,
when a shopping session completes, and never edited afterwards.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

import structlog

from picklist.learning.location import format_location
from picklist.models.contracts import (
    GeoPoint,
    Product,
    ProductInput,
    ProductUpdate,
    ShoppingTrip,
    TripItem,
)

logger = structlog.get_logger()


class StoreError(Exception):
    """Base class for list store failures."""


class ProductNotFoundError(StoreError):
    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id!r} not found")
        self.product_id = product_id


class DuplicateTripError(StoreError):
    def __init__(self, trip_id: str) -> None:
        super().__init__(f"Trip {trip_id!r} already recorded")
        self.trip_id = trip_id


class ProductNotOnListError(StoreError):
    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product {product_id!r} is not on the shopping list")
        self.product_id = product_id


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass
class ListState:
    """Everything stored for one list owner."""

    products: dict[str, Product] = field(default_factory=dict)
    trips: list[ShoppingTrip] = field(default_factory=list)

    # --- products ---

    def get_product(self, product_id: str) -> Product:
        try:
            return self.products[product_id]
        except KeyError:
            raise ProductNotFoundError(product_id) from None

    def _save(self, product: Product, **changes: object) -> Product:
        updated = Product.model_validate({**product.model_dump(), **changes, "updated_at": _now()})
        self.products[product.id] = updated
        return updated

    def list_products(self) -> list[Product]:
        """Picklist products, newest first."""
        ranked = sorted(
            enumerate(self.products.values()),
            key=lambda entry: (entry[1].created_at, entry[0]),
            reverse=True,
        )
        return [product for _, product in ranked]

    def add_product(self, data: ProductInput) -> Product:
        product = Product(id=str(uuid.uuid4()), **data.model_dump())
        self.products[product.id] = product
        return product

    def update_product(self, product_id: str, update: ProductUpdate) -> Product:
        product = self.get_product(product_id)
        return self._save(product, **update.model_dump(exclude_unset=True))

    def delete_product(self, product_id: str) -> None:
        self.get_product(product_id)
        del self.products[product_id]

    def clear_all_products(self) -> int:
        count = len(self.products)
        self.products.clear()
        return count

    def toggle_in_shopping_list(self, product_id: str) -> Product:
        product = self.get_product(product_id)
        return self._save(product, in_shopping_list=not product.in_shopping_list)

    def reorder_products(self, product_ids: list[str]) -> None:
        for product_id in product_ids:
            self.get_product(product_id)
        for index, product_id in enumerate(product_ids):
            self._save(self.products[product_id], order=index)

    # --- shopping list / shop mode ---

    def shopping_list_items(self) -> list[Product]:
        """Products on the shopping list in their own order.

        Custom drag order first (ascending), then the rest in insertion order.
        """
        on_list = [p for p in self.products.values() if p.in_shopping_list]
        ordered = sorted((p for p in on_list if p.order is not None), key=lambda p: p.order)
        return ordered + [p for p in on_list if p.order is None]

    def check_off(self, product_id: str) -> Product:
        """Mark a product as picked up, ranked after everything already checked.

        Ranks only grow within a session, so removing a checked product never
        frees its rank for reuse.
        """
        product = self.get_product(product_id)
        if not product.in_shopping_list:
            raise ProductNotOnListError(product_id)
        if product.checked_off:
            return product
        rank = 1 + max(
            (p.check_off_order or 0 for p in self.products.values() if p.checked_off),
            default=0,
        )
        return self._save(product, checked_off=True, check_off_order=rank)

    def clear_checked(self) -> int:
        checked = [p for p in self.products.values() if p.checked_off]
        for product in checked:
            self._save(product, checked_off=False, check_off_order=None)
        return len(checked)

    # --- trips ---

    def add_trip(self, trip: ShoppingTrip) -> ShoppingTrip:
        if any(t.id == trip.id for t in self.trips):
            raise DuplicateTripError(trip.id)
        self.trips.append(trip)
        return trip

    def complete_trip(
        self,
        location: str | GeoPoint | None = None,
        start_time: str | None = None,
        enable_learning: bool = True,
    ) -> ShoppingTrip | None:
        """End a shopping session.

        Records a trip from the checked products still on the shopping list
        (by rank) when learning is enabled and any are left, then resets the
        checked state. Coordinates are stored as a fingerprint string.
        """
        if isinstance(location, GeoPoint):
            location = format_location(location)
        checked = sorted(
            (p for p in self.products.values() if p.checked_off and p.in_shopping_list),
            key=lambda p: p.check_off_order or 0,
        )
        trip = None
        if enable_learning and checked:
            trip = self.add_trip(
                ShoppingTrip(
                    id=str(uuid.uuid4()),
                    date=_now(),
                    location=location,
                    start_time=start_time,
                    items=tuple(
                        TripItem(id=p.id, check_off_order=p.check_off_order or 0)
                        for p in checked
                    ),
                )
            )
        self.clear_checked()
        return trip

    def list_trips(self) -> list[ShoppingTrip]:
        """Trips in the order they were recorded."""
        return list(self.trips)

    def trip_history(self) -> list[ShoppingTrip]:
        """Trips newest first."""
        return sorted(self.trips, key=lambda t: t.date, reverse=True)


class ListStore:
    """All lists held by this process, keyed by owner id."""

    def __init__(self) -> None:
        self._lists: dict[str, ListState] = {}

    def get(self, list_id: str) -> ListState:
        state = self._lists.get(list_id)
        if state is None:
            state = self._lists[list_id] = ListState()
            logger.debug("list_created", list_id=list_id)
        return state

    def clear(self) -> None:
        self._lists.clear()


store = ListStore()
