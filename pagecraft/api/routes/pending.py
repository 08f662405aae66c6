"""
Review Queue Routes
===================

Listing, approval and rejection of edits queued by non-owner users.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from pagecraft.config.logging import get_logger
from pagecraft.api.dependencies import EditingServices, current_user, get_services
from pagecraft.api.responses import html_fragment, page_outcome_response

logger = get_logger(__name__)

router = APIRouter(prefix="/pending-edits", tags=["Review"])


@router.get("", response_class=HTMLResponse)
async def list_pending_edits(
    user: Optional[str] = None,
    module_id: Optional[str] = None,
    services: EditingServices = Depends(get_services),
) -> HTMLResponse:
    return html_fragment(services.review.pending_view(user, module_id), services)


@router.post("/{edit_id}/approve", response_class=HTMLResponse)
async def approve_pending_edit(
    edit_id: str, request: Request, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    """Apply a queued edit and refresh the page."""
    user = current_user(request)
    outcome = services.review.approve(edit_id, user)
    logger.info("Approve requested", pending_id=edit_id, reviewer=user, outcome=type(outcome).__name__)
    return page_outcome_response(outcome, services, user)


@router.delete("/{edit_id}/reject", response_class=HTMLResponse)
async def reject_pending_edit(
    edit_id: str, request: Request, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    user = current_user(request)
    outcome = services.review.reject(edit_id, user)
    logger.info("Reject requested", pending_id=edit_id, reviewer=user, outcome=type(outcome).__name__)
    return page_outcome_response(outcome, services, user)
