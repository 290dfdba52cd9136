from __future__ import annotations

from fastapi.responses import JSONResponse

from picklist.models.contracts import ErrorResponse


def error_response(
    status: int, code: str, message: str, *, retryable: bool = False
) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=ErrorResponse(error=code, message=message, retryable=retryable).model_dump(),
    )
