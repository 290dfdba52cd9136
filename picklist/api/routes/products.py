"""Picklist and shopping-list endpoints.

The picklist holds every product the user knows about; the shopping list
is the subset toggled onto it. GET /shopping-list is where learned ordering
is applied: the list's own order goes in, the trip history reorders it.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter

from picklist.api.routes.errors import error_response
from picklist.learning import is_learning_active, sort_by_learning_algorithm
from picklist.models.contracts import (
    ActionResponse,
    CheckOffResponse,
    CreateProductResponse,
    ErrorResponse,
    Product,
    ProductInput,
    ProductListResponse,
    ProductUpdate,
    ReorderRequest,
    ShoppingListResponse,
)
from picklist.store import ProductNotFoundError, ProductNotOnListError, store

logger = structlog.get_logger()

router = APIRouter(tags=["products"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


def _not_found(exc: ProductNotFoundError):
    return error_response(404, "product_not_found", str(exc))


# --- Picklist ---


@router.get("/lists/{list_id}/products", response_model=ProductListResponse)
async def list_products(list_id: str) -> ProductListResponse:
    return ProductListResponse(products=store.get(list_id).list_products())


@router.post("/lists/{list_id}/products", status_code=201, response_model=CreateProductResponse)
async def add_product(list_id: str, body: ProductInput) -> CreateProductResponse:
    product = store.get(list_id).add_product(body)
    logger.info("product_added", list_id=list_id, product_id=product.id, source=product.source)
    return CreateProductResponse(product=product)


@router.patch(
    "/lists/{list_id}/products/{product_id}", response_model=Product, responses=_NOT_FOUND
)
async def update_product(list_id: str, product_id: str, body: ProductUpdate):
    try:
        return store.get(list_id).update_product(product_id, body)
    except ProductNotFoundError as exc:
        return _not_found(exc)


@router.delete("/lists/{list_id}/products/{product_id}", status_code=204, responses=_NOT_FOUND)
async def delete_product(list_id: str, product_id: str):
    try:
        store.get(list_id).delete_product(product_id)
    except ProductNotFoundError as exc:
        return _not_found(exc)
    logger.info("product_deleted", list_id=list_id, product_id=product_id)


@router.delete("/lists/{list_id}/products", status_code=204)
async def clear_all_products(list_id: str) -> None:
    removed = store.get(list_id).clear_all_products()
    logger.info("products_cleared", list_id=list_id, removed=removed)


@router.post(
    "/lists/{list_id}/products/{product_id}/toggle", response_model=Product, responses=_NOT_FOUND
)
async def toggle_in_shopping_list(list_id: str, product_id: str):
    """Add the product to the shopping list, or take it off."""
    try:
        return store.get(list_id).toggle_in_shopping_list(product_id)
    except ProductNotFoundError as exc:
        return _not_found(exc)


@router.post(
    "/lists/{list_id}/products/reorder", response_model=ActionResponse, responses=_NOT_FOUND
)
async def reorder_products(list_id: str, body: ReorderRequest):
    """Persist a manual drag-and-drop order."""
    try:
        store.get(list_id).reorder_products(body.product_ids)
    except ProductNotFoundError as exc:
        return _not_found(exc)
    return ActionResponse()


# --- Shopping list / shop mode ---


@router.get("/lists/{list_id}/shopping-list", response_model=ShoppingListResponse)
async def get_shopping_list(list_id: str, location: str | None = None) -> ShoppingListResponse:
    """Shopping list in learned order.

    ``location`` is the fingerprint of where the user is now; when it matches
    enough past trips only those trips are used.
    """
    state = store.get(list_id)
    trips = state.list_trips()
    items = sort_by_learning_algorithm(state.shopping_list_items(), trips, location)
    return ShoppingListResponse(
        items=items,
        learning_active=is_learning_active(trips),
        trip_count=len(trips),
    )


@router.post(
    "/lists/{list_id}/shopping-list/{product_id}/check-off",
    response_model=CheckOffResponse,
    responses={**_NOT_FOUND, 409: {"model": ErrorResponse}},
)
async def check_off(list_id: str, product_id: str):
    try:
        product = store.get(list_id).check_off(product_id)
    except ProductNotFoundError as exc:
        return _not_found(exc)
    except ProductNotOnListError as exc:
        return error_response(409, "product_not_on_list", str(exc))
    logger.debug(
        "product_checked_off", list_id=list_id, product_id=product_id, rank=product.check_off_order
    )
    return CheckOffResponse(product=product)


@router.post("/lists/{list_id}/shopping-list/clear-checked", response_model=ActionResponse)
async def clear_checked(list_id: str) -> ActionResponse:
    """Leave shop mode without recording a trip."""
    cleared = store.get(list_id).clear_checked()
    logger.info("checked_products_cleared", list_id=list_id, cleared=cleared)
    return ActionResponse()
