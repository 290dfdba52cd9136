from __future__ import annotations

import structlog
from fastapi import APIRouter

from picklist.activities.extraction import ExtractionError, extract_products
from picklist.api.routes.errors import error_response
from picklist.models.contracts import (
    ErrorResponse,
    ExtractProductsRequest,
    ImageValidationResponse,
)

logger = structlog.get_logger()

router = APIRouter(tags=["extraction"])


@router.post(
    "/extract-products",
    response_model=ImageValidationResponse,
    responses={502: {"model": ErrorResponse}},
)
async def extract_products_from_image(body: ExtractProductsRequest):
    """Suggest picklist products from a photo. Nothing is added to the list."""
    try:
        return await extract_products(body)
    except ExtractionError as exc:
        logger.warning("extraction_failed", error=str(exc), retryable=exc.retryable)
        return error_response(502, "extraction_failed", str(exc), retryable=exc.retryable)
