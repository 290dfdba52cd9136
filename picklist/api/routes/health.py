"""Health check endpoint.

Always returns 200 so load balancers keep routing; the extraction field
only reports whether image extraction would reach the real API.
"""

from __future__ import annotations

from fastapi import APIRouter

from picklist.config import settings

router = APIRouter(tags=["health"])


def _extraction_status() -> str:
    if settings.use_mock_activities:
        return "mock"
    return "configured" if settings.anthropic_api_key else "unconfigured"


@router.get("/health")
async def health_check() -> dict:
    """Confirm the API process is alive."""
    return {
        "status": "ok",
        "version": "0.1.0",
        "environment": settings.environment,
        "extraction": _extraction_status(),
    }
