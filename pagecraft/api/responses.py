"""
HTML Responses
==============

Turns edit outcomes into htmx response bodies.

Mutating endpoints always answer with two out-of-band fragments: the emptied modal
container and the refreshed region. An outcome that keeps the modal open (a form
with errors, an unauthorized notice) answers with the modal fragment only.
"""

from typing import Any, Optional

from fastapi.responses import HTMLResponse

from pagecraft.core.editing.oob import (
    OobResponse,
    modal_response,
    module_refresh_response,
    page_refresh_response,
)
from pagecraft.core.editing.outcomes import EditOutcome, NoChange, outcome_node
from pagecraft.core.rendering.nodes import Fragment, render
from .dependencies import EditingServices


def html_fragment(node: Any, services: EditingServices) -> HTMLResponse:
    return HTMLResponse(render(node, services.render_context()))


def oob_html(response: OobResponse, services: EditingServices) -> HTMLResponse:
    return HTMLResponse(response.render(services.render_context()))


def _open_modal(outcome: EditOutcome, services: EditingServices) -> Optional[HTMLResponse]:
    if isinstance(outcome, NoChange) and outcome.form is not None:
        return oob_html(modal_response(services.settings.modal_container_id, outcome.form), services)
    return None


def page_outcome_response(
    outcome: EditOutcome,
    services: EditingServices,
    user: Optional[str] = None,
) -> HTMLResponse:
    """Close the modal and refresh the page content, with any notice on top."""
    modal = _open_modal(outcome, services)
    if modal is not None:
        return modal
    page = services.modules.page_view(user)
    notice = getattr(outcome, "notice", None)
    region = Fragment(notice, page) if notice is not None else page
    response = page_refresh_response(
        services.settings.modal_container_id, services.settings.page_container_id, region
    )
    return oob_html(response, services)


def module_outcome_response(
    outcome: EditOutcome,
    module_id: str,
    services: EditingServices,
) -> HTMLResponse:
    """Close the modal and replace the module's container."""
    modal = _open_modal(outcome, services)
    if modal is not None:
        return modal
    response = module_refresh_response(
        services.settings.modal_container_id, module_id, outcome_node(outcome)
    )
    return oob_html(response, services)
