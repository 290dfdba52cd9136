"""AI product extraction: turns a photo into candidate picklist products.

The photo (fridge, receipt, recipe card, ...) is sent to Claude vision with a
fixed prompt asking for JSON. The reply is parsed leniently and every
product is normalized onto the contract enums before it reaches the client.

Stateless: all inputs passed in, output returned.
"""

from __future__ import annotations

import json
import re
from typing import Any

import anthropic
import structlog

from picklist.config import settings
from picklist.models.contracts import (
    DEFAULT_CATEGORY,
    VALID_CATEGORIES,
    VALID_IMAGE_TYPES,
    VALID_UNITS,
    ExtractedProduct,
    ExtractProductsRequest,
    ImageValidationResponse,
    ProductDetails,
)

log = structlog.get_logger("picklist.extraction")

DEFAULT_MEDIA_TYPE = "image/jpeg"
_DATA_URL_RE = re.compile(r"^data:(?P<media>image/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)

SYSTEM_PROMPT = f"""You are a grocery product extraction AI. Analyze images and extract \
products into valid JSON format.

Response must be a JSON object with:
- valid: boolean (true if image contains groceries/food/household items)
- message: string (brief description)
- imageType: string (detected type: fridge, product, shopping_list, dish, or recipe)
- products: array of objects with: name, category, quantity, unit, source, details \
(with price and notes)

Valid categories: {", ".join(VALID_CATEGORIES)}
Valid units: {", ".join(VALID_UNITS)}
Valid sources: fridge, product, shopping_list, dish, recipe (match detected imageType)"""

USER_PROMPT = """Analyze this image and first determine what type it is:
- fridge: Photo of refrigerator/pantry contents
- product: Close-up of individual grocery items
- shopping_list: Receipt or shopping list
- dish: Prepared meal/dish
- recipe: Recipe card/cookbook page

Then extract ALL visible grocery/food/household products.

For receipts: include prices
For quantities: use realistic estimates
Choose most specific category
Set source to match the detected imageType
If not a relevant image, set valid=false and explain why

Return only JSON with valid, message, imageType, and products array."""


class ExtractionError(Exception):
    """Raised when the extraction call fails or its reply is unusable."""

    def __init__(self, message: str, *, retryable: bool) -> None:
        super().__init__(message)
        self.retryable = retryable


def _split_image(image: str) -> tuple[str, str]:
    """Return (media_type, base64 payload) from a data URL or bare base64."""
    match = _DATA_URL_RE.match(image.strip())
    if match:
        return match.group("media"), match.group("data")
    return DEFAULT_MEDIA_TYPE, image.strip()


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if not text.startswith("```"):
        return text
    text = text.removeprefix("```")
    for lang in ("json", "JSON"):
        text = text.removeprefix(lang)
    return text.lstrip("\n").rsplit("```", 1)[0].strip()


def _extract_json(text: str) -> dict[str, Any]:
    """Parse the JSON object in Claude's reply, tolerating fences and preambles.

    Returns an empty dict when no object can be recovered.
    """
    text = _strip_code_fence(text)
    if not text:
        return {}
    try:
        data = json.loads(text)
        return data if isinstance(data, dict) else {}
    except json.JSONDecodeError:
        pass

    start = text.find("{")
    if start == -1:
        return {}
    try:
        data, _ = json.JSONDecoder().raw_decode(text[start:])
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def _coerce_quantity(raw: Any) -> float:
    try:
        quantity = float(raw)
    except (TypeError, ValueError):
        return 1.0
    return quantity if quantity > 0 else 1.0


def _coerce_details(raw: Any) -> ProductDetails | None:
    if not isinstance(raw, dict):
        return None
    price = raw.get("price")
    notes = raw.get("notes")
    return ProductDetails(
        price=str(price) if price not in (None, "") else None,
        notes=str(notes) if notes not in (None, "") else None,
    )


_REQUIRED_FIELDS = ("name", "category", "quantity")


def normalize_products(raw_products: list[Any], image_type: str) -> list[ExtractedProduct]:
    """Drop incomplete entries and map the rest onto the contract enums.

    Entries need a name, a category and a quantity. Unknown categories fall
    back to DEFAULT_CATEGORY, unknown units to "unit", and the source to the
    detected image type.
    """
    products: list[ExtractedProduct] = []
    for raw in raw_products:
        if not isinstance(raw, dict) or not all(raw.get(f) for f in _REQUIRED_FIELDS):
            log.warning("extraction_product_dropped", reason="missing required fields")
            continue
        category = raw["category"] if raw["category"] in VALID_CATEGORIES else DEFAULT_CATEGORY
        unit = raw.get("unit") if raw.get("unit") in VALID_UNITS else "unit"
        source = raw.get("source") if raw.get("source") in VALID_IMAGE_TYPES else image_type
        products.append(
            ExtractedProduct(
                name=str(raw["name"]).strip(),
                category=category,
                quantity=_coerce_quantity(raw["quantity"]),
                unit=unit,
                source=source,
                details=_coerce_details(raw.get("details")),
            )
        )
    if len(products) < len(raw_products):
        log.info(
            "extraction_products_validated",
            raw=len(raw_products),
            valid=len(products),
            dropped=len(raw_products) - len(products),
        )
    return products


def _parse_reply(text: str) -> ImageValidationResponse:
    data = _extract_json(text)
    if not isinstance(data.get("valid"), bool) or not isinstance(data.get("products"), list):
        raise ExtractionError("Invalid response format from AI", retryable=True)

    detected = data.get("imageType") or data.get("image_type")
    image_type = detected if detected in VALID_IMAGE_TYPES else "product"
    message = str(data.get("message") or "")
    if not data["valid"]:
        return ImageValidationResponse(valid=False, message=message, image_type=image_type)
    return ImageValidationResponse(
        valid=True,
        message=message,
        image_type=image_type,
        products=normalize_products(data["products"], image_type),
    )


def _mock_extraction() -> ImageValidationResponse:
    return ImageValidationResponse(
        valid=True,
        message="Mock extraction: fridge contents",
        image_type="fridge",
        products=[
            ExtractedProduct(name="Whole Milk", category="Dairy & Eggs", unit="l", source="fridge"),
            ExtractedProduct(
                name="Eggs", category="Dairy & Eggs", quantity=1, unit="dozen", source="fridge"
            ),
            ExtractedProduct(
                name="Spinach", category="Fresh Produce", unit="bunch", source="fridge"
            ),
        ],
    )


async def extract_products(
    request: ExtractProductsRequest,
    client: anthropic.AsyncAnthropic | None = None,
) -> ImageValidationResponse:
    """Extract candidate products from one image."""
    media_type, payload = _split_image(request.image)
    if len(payload) > settings.max_image_base64_bytes:
        log.info("extraction_image_too_large", size_bytes=len(payload))
        return ImageValidationResponse(
            valid=False,
            message="Image is too complex to process. Please try a simpler or smaller image.",
        )

    if settings.use_mock_activities:
        return _mock_extraction()

    if client is None:
        if not settings.anthropic_api_key:
            raise ExtractionError("ANTHROPIC_API_KEY not set", retryable=False)
        client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)

    try:
        response = await client.messages.create(
            model=settings.extraction_model,
            max_tokens=settings.extraction_max_tokens,
            temperature=0.2,
            system=SYSTEM_PROMPT,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": media_type,
                                "data": payload,
                            },
                        },
                        {"type": "text", "text": USER_PROMPT},
                    ],
                }
            ],
        )
    except anthropic.RateLimitError as e:
        log.warning("extraction_rate_limited")
        raise ExtractionError(f"Claude rate limited during extraction: {e}", retryable=True) from e
    except anthropic.APIStatusError as e:
        log.error("extraction_api_error", status=e.status_code)
        raise ExtractionError(
            f"Claude API error during extraction ({e.status_code}): {e}",
            retryable=e.status_code != 400,
        ) from e

    log.info(
        "extraction_tokens",
        input_tokens=response.usage.input_tokens,
        output_tokens=response.usage.output_tokens,
        model=settings.extraction_model,
    )

    text = "".join(block.text for block in response.content if hasattr(block, "text"))
    result = _parse_reply(text)
    log.info(
        "extraction_complete",
        valid=result.valid,
        image_type=result.image_type,
        products=len(result.products),
    )
    return result
