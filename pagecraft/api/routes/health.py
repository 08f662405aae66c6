"""
Health Routes
=============

FastAPI routes for health check endpoints.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from pagecraft.config.logging import get_logger
from pagecraft.api.dependencies import EditingServices, get_services
from pagecraft.core.rendering.markdown import get_markdown_renderer
from pagecraft.models.schemas import HealthStatus

logger = get_logger(__name__)

router = APIRouter(tags=["Health"])


def check_markdown_health() -> Dict[str, Any]:
    """
    Convert a probe document through the Markdown sandbox.

    Returns:
        Dictionary with the sandbox status
    """
    try:
        html = get_markdown_renderer().to_html("**probe** <script>x</script>")
    except Exception as e:
        logger.error("Markdown health probe failed", error=str(e))
        return {"healthy": False, "error": str(e)}
    sanitized = "<script" not in html
    return {"healthy": sanitized and "<strong>probe</strong>" in html, "sanitized": sanitized}


@router.get("/health", response_model=HealthStatus)
async def health_check(services: EditingServices = Depends(get_services)) -> HealthStatus:
    """Application health: store and queue sizes and Markdown sandbox status."""
    try:
        markdown_health = check_markdown_health()
        health_status = HealthStatus(
            status="healthy" if markdown_health["healthy"] else "degraded",
            version=services.settings.app_version,
            environment=services.settings.environment,
            modules=len(services.store),
            pending_edits=len(services.queue),
            markdown=markdown_health["healthy"],
        )
    except Exception as e:
        logger.error("Health check failed", error=str(e))
        raise HTTPException(status_code=503, detail="Health check failed")

    logger.info("Health check completed", status=health_status.status, modules=health_status.modules)
    return health_status
