"""Picklist API entrypoint.

Run with ``uvicorn picklist.main:app``. Every non-2xx body, including
framework errors, is an ErrorResponse so the web client has one shape to
handle whether shop mode or extraction failed.
"""

import uuid

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from picklist.api.routes import extraction, health, products, trips
from picklist.logging import configure_logging
from picklist.models.contracts import ErrorResponse

configure_logging()

logger = structlog.get_logger()

app = FastAPI(
    title="Picklist API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url=None,
)


def _error_json(request: Request, status: int, body: ErrorResponse) -> JSONResponse:
    response = JSONResponse(status_code=status, content=body.model_dump())
    # the 500 handler runs outside the middleware
    response.headers["X-Request-ID"] = getattr(
        request.state, "request_id", request.headers.get("X-Request-ID", "")
    )
    return response


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, path=request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """422 listing each bad field, e.g. ``body → name: Field required``."""
    messages = [
        f"{' → '.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    ]
    body = ErrorResponse(error="validation_error", message="; ".join(messages), retryable=False)
    return _error_json(request, 422, body)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        method=request.method,
        error_type=type(exc).__name__,
        exc_info=exc,
    )
    body = ErrorResponse(
        error="internal_error", message="An unexpected error occurred", retryable=True
    )
    return _error_json(request, 500, body)


app.include_router(health.router)
app.include_router(products.router, prefix="/api/v1")
app.include_router(trips.router, prefix="/api/v1")
app.include_router(extraction.router, prefix="/api/v1")
