"""Tests for the pydantic contract models."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from picklist.models.contracts import (
    DEFAULT_CATEGORY,
    VALID_CATEGORIES,
    VALID_UNITS,
    CompleteTripRequest,
    ErrorResponse,
    ExtractProductsRequest,
    GeoPoint,
    Product,
    ProductInput,
    ProductUpdate,
    ReorderRequest,
    ShoppingTrip,
    TripItem,
)


class TestEnums:
    def test_category_list(self):
        """All 22 grocery categories, with the pantry fallback among them."""
        assert len(VALID_CATEGORIES) == 22
        assert DEFAULT_CATEGORY in VALID_CATEGORIES

    def test_units(self):
        assert set(VALID_UNITS) == {
            "lb", "oz", "kg", "g", "ml", "l", "unit", "dozen", "bunch", "package"
        }


class TestProduct:
    def test_defaults(self):
        """New products are off the shopping list and unchecked."""
        p = Product(id="p1", name="Milk")
        assert p.in_shopping_list is False
        assert p.checked_off is False
        assert p.check_off_order is None
        assert p.category == DEFAULT_CATEGORY
        assert p.unit == "unit"
        assert p.quantity == 1

    def test_unknown_category_rejected(self):
        with pytest.raises(ValidationError):
            Product(id="p1", name="Milk", category="Dairy")

    def test_rank_must_be_positive(self):
        with pytest.raises(ValidationError):
            Product(id="p1", name="Milk", checked_off=True, check_off_order=0)

    def test_input_requires_name(self):
        with pytest.raises(ValidationError):
            ProductInput(name="")

    def test_input_rejects_zero_quantity(self):
        with pytest.raises(ValidationError):
            ProductInput(name="Milk", quantity=0)

    def test_update_tracks_only_set_fields(self):
        update = ProductUpdate(quantity=3)
        assert update.model_dump(exclude_unset=True) == {"quantity": 3}


class TestTripRecords:
    def test_camel_case_aliases_accepted(self):
        """Records written by the web client use checkOffOrder/startTime/products."""
        trip = ShoppingTrip.model_validate(
            {
                "id": "t1",
                "date": "2025-03-01T10:15:00Z",
                "location": "50.85°, 4.35°",
                "startTime": "10:15 AM",
                "products": [{"id": "a", "checkOffOrder": 1}, {"id": "b", "checkOffOrder": 2}],
            }
        )
        assert trip.start_time == "10:15 AM"
        assert trip.items == (
            TripItem(id="a", check_off_order=1),
            TripItem(id="b", check_off_order=2),
        )
        assert trip.date == datetime(2025, 3, 1, 10, 15, tzinfo=UTC)

    def test_snake_case_accepted(self):
        trip = ShoppingTrip.model_validate(
            {
                "id": "t1",
                "date": "2025-03-01T10:15:00Z",
                "items": [{"id": "a", "check_off_order": 3}],
            }
        )
        assert trip.items[0].check_off_order == 3
        assert trip.location is None

    def test_trip_is_immutable(self):
        trip = ShoppingTrip(id="t1", date=datetime(2025, 3, 1, tzinfo=UTC))
        with pytest.raises(ValidationError):
            trip.location = "50.85°, 4.35°"

    def test_naive_date_read_as_utc(self):
        trip = ShoppingTrip.model_validate({"id": "t1", "date": "2025-03-02T10:00:00"})
        assert trip.date == datetime(2025, 3, 2, 10, tzinfo=UTC)

    def test_negative_rank_rejected(self):
        with pytest.raises(ValidationError):
            TripItem(id="a", check_off_order=-1)

    def test_serializes_with_snake_case(self):
        dumped = TripItem(id="a", check_off_order=2).model_dump()
        assert dumped == {"id": "a", "check_off_order": 2}


class TestRequests:
    def test_complete_trip_defaults(self):
        req = CompleteTripRequest()
        assert req.enable_learning is True
        assert req.location is None

    def test_complete_trip_location_forms(self):
        assert CompleteTripRequest(location="50.85°, 4.35°").location == "50.85°, 4.35°"
        req = CompleteTripRequest.model_validate({"location": {"lat": 50.85, "lon": 4.35}})
        assert req.location == GeoPoint(lat=50.85, lon=4.35)

    def test_reorder_requires_ids(self):
        with pytest.raises(ValidationError):
            ReorderRequest(product_ids=[])

    def test_extract_requires_image(self):
        with pytest.raises(ValidationError):
            ExtractProductsRequest(image="")

    def test_geopoint_frozen(self):
        point = GeoPoint(lat=1.0, lon=2.0)
        with pytest.raises(ValidationError):
            point.lat = 3.0

    def test_error_response_detail_optional(self):
        er = ErrorResponse(error="x", message="y", retryable=False)
        assert er.detail is None
