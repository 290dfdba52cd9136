"""Picklist contract models.

Wire format shared by the web client, the trip history store and the
ordering engine. Field names are snake_case; the camelCase names the
client has always sent for trip records (checkOffOrder, startTime,
products) are accepted as aliases so older records still load.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# === Shared Types ===

ProductCategory = Literal[
    "Fresh Produce",
    "Meat & Seafood",
    "Dairy & Eggs",
    "Bakery & Bread",
    "Frozen Foods",
    "Pantry & Dry Goods",
    "Canned & Jarred Foods",
    "Snacks & Chips",
    "Candy & Chocolate",
    "Beverages",
    "Wine & Spirits",
    "Breakfast & Cereals",
    "Deli & Prepared Foods",
    "Condiments & Sauces",
    "Baking Supplies",
    "Health & Wellness",
    "Baby Products",
    "Pet Supplies",
    "Personal Care & Beauty",
    "Household & Cleaning",
    "Kitchen & Dining",
    "Home & Garden",
]

VALID_CATEGORIES: tuple[str, ...] = ProductCategory.__args__  # type: ignore[attr-defined]
DEFAULT_CATEGORY: ProductCategory = "Pantry & Dry Goods"

Unit = Literal["lb", "oz", "kg", "g", "ml", "l", "unit", "dozen", "bunch", "package"]
VALID_UNITS: tuple[str, ...] = Unit.__args__  # type: ignore[attr-defined]

ImageSource = Literal["fridge", "product", "shopping_list", "dish", "recipe", "voice"]
ImageType = Literal["fridge", "product", "shopping_list", "dish", "recipe"]
VALID_IMAGE_TYPES: tuple[str, ...] = ImageType.__args__  # type: ignore[attr-defined]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ProductDetails(BaseModel):
    price: str | None = None
    nutritional_info: str | None = None
    alternatives: list[str] = []
    notes: str | None = None


# === Products ===


class ProductInput(BaseModel):
    """Fields the client supplies when adding a product to the picklist."""

    name: str = Field(min_length=1)
    category: ProductCategory = DEFAULT_CATEGORY
    quantity: float = Field(gt=0, default=1)
    unit: Unit = "unit"
    source: ImageSource | None = None
    image_url: str | None = None
    details: ProductDetails | None = None


class ProductUpdate(BaseModel):
    """Partial update: only fields that are set are applied."""

    name: str | None = Field(default=None, min_length=1)
    category: ProductCategory | None = None
    quantity: float | None = Field(default=None, gt=0)
    unit: Unit | None = None
    source: ImageSource | None = None
    image_url: str | None = None
    details: ProductDetails | None = None
    in_shopping_list: bool | None = None


class Product(BaseModel):
    id: str
    name: str
    category: ProductCategory = DEFAULT_CATEGORY
    quantity: float = Field(gt=0, default=1)
    unit: Unit = "unit"
    source: ImageSource | None = None
    in_shopping_list: bool = False
    checked_off: bool = False
    check_off_order: int | None = Field(default=None, ge=1)
    image_url: str | None = None
    details: ProductDetails | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    order: int | None = None  # custom position set by drag-to-reorder


# === Trip Records ===


class TripItem(BaseModel):
    """One checked-off product within a trip, with its 1-based rank."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    # 0 only appears in legacy records written before ranks were enforced
    check_off_order: int = Field(
        ge=0,
        validation_alias=AliasChoices("check_off_order", "checkOffOrder"),
    )


class ShoppingTrip(BaseModel):
    """Immutable log of one completed shopping session."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    date: datetime
    location: str | None = None
    start_time: str | None = Field(
        default=None,
        validation_alias=AliasChoices("start_time", "startTime"),
    )
    items: tuple[TripItem, ...] = Field(
        default=(),
        validation_alias=AliasChoices("items", "products"),
    )

    @field_validator("date")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # dates without an offset are UTC so history stays sortable
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class GeoPoint(BaseModel):
    """Parsed form of a location fingerprint, in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float
    lon: float


# === API Request/Response Models ===


class CreateProductResponse(BaseModel):
    product: Product


class ProductListResponse(BaseModel):
    products: list[Product]


class ReorderRequest(BaseModel):
    product_ids: list[str] = Field(min_length=1)


class ShoppingListResponse(BaseModel):
    items: list[Product]
    learning_active: bool
    trip_count: int = Field(ge=0)


class CheckOffResponse(BaseModel):
    product: Product


class CompleteTripRequest(BaseModel):
    """Finish shop mode. ``location`` is a fingerprint string or raw coordinates."""

    location: str | GeoPoint | None = None
    start_time: str | None = None
    enable_learning: bool = True


class CompleteTripResponse(BaseModel):
    recorded: bool
    trip: ShoppingTrip | None = None


class TripHistoryResponse(BaseModel):
    trips: list[ShoppingTrip]
    count: int = Field(ge=0)


class ExtractProductsRequest(BaseModel):
    image: str = Field(min_length=1)  # data URL or bare base64


class ExtractedProduct(BaseModel):
    name: str
    category: ProductCategory = DEFAULT_CATEGORY
    quantity: float = 1
    unit: Unit = "unit"
    source: ImageSource = "product"
    details: ProductDetails | None = None


class ImageValidationResponse(BaseModel):
    valid: bool
    message: str
    image_type: ImageType | None = None
    products: list[ExtractedProduct] = []


class ActionResponse(BaseModel):
    status: Literal["ok"] = "ok"


class ErrorResponse(BaseModel):
    error: str
    message: str
    retryable: bool
    detail: str | None = None
