"""
Editing Routes
==============

Page-level edit endpoints: edit modals, list item add/edit/delete, module
save/delete and adding modules to page rows. Mutations refresh the whole page
content container.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from pagecraft.config.logging import get_logger
from pagecraft.api.dependencies import EditingServices, current_user, get_services, read_form
from pagecraft.api.responses import html_fragment, page_outcome_response

logger = get_logger(__name__)

router = APIRouter(tags=["Editing"])


@router.get("/page", response_class=HTMLResponse)
async def page_fragment(
    user: Optional[str] = None, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    """Page content fragment without the document shell."""
    return html_fragment(services.modules.page_view(user), services)


@router.get("/edit/{module_id}", response_class=HTMLResponse)
async def edit_module_form(
    module_id: str, user: Optional[str] = None, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    return html_fragment(services.modules.render_edit_form(module_id, user), services)


@router.post("/cancel/{module_id}", response_class=HTMLResponse)
async def cancel_edit(module_id: str, services: EditingServices = Depends(get_services)) -> HTMLResponse:
    services.modules.cancel(module_id)
    return HTMLResponse("")


@router.get("/add-child/{parent_id}", response_class=HTMLResponse)
async def add_child_form(
    parent_id: str, user: Optional[str] = None, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    return html_fragment(services.children.render_add_form(parent_id, user), services)


@router.post("/add-child/{parent_id}", response_class=HTMLResponse)
async def add_child(
    parent_id: str, request: Request, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    """
    Add an item to a list module.

    Args:
        parent_id: List module id
        request: Form body with ``text`` and optional ``user``

    Returns:
        Modal-close and page-content out-of-band fragments
    """
    fields = await read_form(request)
    user = current_user(request, fields)
    mode = services.modules.resolve_mode(parent_id, user)
    logger.info("Add child requested", parent_id=parent_id, user=user, edit_mode=mode.value)
    outcome = services.children.handle_add(parent_id, fields, mode, user)
    return page_outcome_response(outcome, services, user)


@router.get("/edit-child/{parent_id}/{child_id}", response_class=HTMLResponse)
async def edit_child_form(
    parent_id: str,
    child_id: str,
    user: Optional[str] = None,
    services: EditingServices = Depends(get_services),
) -> HTMLResponse:
    return html_fragment(services.children.render_edit_form(parent_id, child_id, user), services)


@router.post("/save-child/{parent_id}/{child_id}", response_class=HTMLResponse)
async def save_child(
    parent_id: str,
    child_id: str,
    request: Request,
    services: EditingServices = Depends(get_services),
) -> HTMLResponse:
    fields = await read_form(request)
    user = current_user(request, fields)
    mode = services.modules.resolve_mode(parent_id, user)
    logger.info("Save child requested", parent_id=parent_id, child_id=child_id, edit_mode=mode.value)
    outcome = services.children.handle_save(parent_id, child_id, fields, mode, user)
    return page_outcome_response(outcome, services, user)


@router.delete("/delete-child/{parent_id}/{child_id}", response_class=HTMLResponse)
async def delete_child(
    parent_id: str,
    child_id: str,
    request: Request,
    services: EditingServices = Depends(get_services),
) -> HTMLResponse:
    user = current_user(request)
    mode = services.modules.resolve_mode(parent_id, user)
    logger.info("Delete child requested", parent_id=parent_id, child_id=child_id, edit_mode=mode.value)
    outcome = services.children.handle_delete(parent_id, child_id, mode, user)
    return page_outcome_response(outcome, services, user)


@router.post("/save/{module_id}", response_class=HTMLResponse)
async def save_module(
    module_id: str, request: Request, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    fields = await read_form(request)
    user = current_user(request, fields)
    mode = services.modules.resolve_mode(module_id, user)
    logger.info("Module save requested", module_id=module_id, user=user, edit_mode=mode.value)
    outcome = services.modules.handle_update(module_id, fields, mode, user)
    return page_outcome_response(outcome, services, user)


@router.delete("/delete/{module_id}", response_class=HTMLResponse)
async def delete_module(
    module_id: str, request: Request, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    user = current_user(request)
    mode = services.modules.resolve_mode(module_id, user)
    logger.info("Module delete requested", module_id=module_id, user=user, edit_mode=mode.value)
    outcome = services.modules.handle_delete(module_id, mode, user)
    return page_outcome_response(outcome, services, user)


@router.get("/add-module/{row}", response_class=HTMLResponse)
async def add_module_form(
    row: str, user: Optional[str] = None, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    return html_fragment(services.modules.render_add_module_form(row, user), services)


@router.post("/add-module/{row}", response_class=HTMLResponse)
async def add_module(
    row: str, request: Request, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    """
    Add a content or list module to a page row.

    Args:
        row: Page row number
        request: Form body with ``kind``, ``title`` and optional ``user``

    Returns:
        Modal-close and page-content out-of-band fragments, or the modal again when
        the form is invalid or the row is full
    """
    fields = await read_form(request)
    user = current_user(request, fields)
    logger.info("Add module requested", row=row, user=user)
    outcome = services.modules.handle_add_module(row, fields, user)
    return page_outcome_response(outcome, services, user)
