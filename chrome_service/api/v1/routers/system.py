"""
System Router - Health and status endpoints.
"""

from fastapi import APIRouter, Depends

from ....config import settings
from ....deps import get_pdfa_converter, get_session_manager
from ....models import HealthResponse
from ....services.pdfa import PdfaConverter
from ....services.session import SessionManager

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    manager: SessionManager = Depends(get_session_manager),
    converter: PdfaConverter = Depends(get_pdfa_converter),
) -> HealthResponse:
    """
    Check service health.

    Reports "degraded" while the rendering engine is unreachable; the next
    render request will try to reconnect.
    """
    connected = manager.engine.is_connected
    return HealthResponse(
        status="healthy" if connected else "degraded",
        engine_connected=connected,
        active_sessions=manager.active_sessions,
        session_timeout_seconds=manager.timeout_seconds,
        pdfa_converter=converter.name,
    )


@router.get("/")
async def root() -> dict:
    """Root endpoint."""
    return {
        "service": settings.api_title,
        "version": settings.api_version,
        "status": "running",
    }
