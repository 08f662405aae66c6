"""
Module Routes
=============

Module-scoped endpoints. Mutations replace only the module's own container,
addressed by class.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from pagecraft.config.logging import get_logger
from pagecraft.api.dependencies import EditingServices, current_user, get_services, read_form
from pagecraft.api.responses import html_fragment, module_outcome_response

logger = get_logger(__name__)

router = APIRouter(prefix="/modules", tags=["Modules"])


@router.post("/{module_id}/update", response_class=HTMLResponse)
async def update_module(
    module_id: str, request: Request, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    """
    Update a module's editable fields.

    Owners and administrators apply the change directly; other users queue it for
    review and get a notice above the unchanged module.
    """
    fields = await read_form(request)
    user = current_user(request, fields)
    mode = services.modules.resolve_mode(module_id, user)
    logger.info("Module update requested", module_id=module_id, user=user, edit_mode=mode.value)
    outcome = services.modules.handle_update(
        module_id,
        fields,
        mode,
        user,
        save_path=f"/modules/{module_id}/update",
        delete_path=f"/modules/{module_id}/delete",
    )
    return module_outcome_response(outcome, module_id, services)


@router.delete("/{module_id}/delete", response_class=HTMLResponse)
async def delete_module(
    module_id: str, request: Request, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    user = current_user(request)
    mode = services.modules.resolve_mode(module_id, user)
    logger.info("Module delete requested", module_id=module_id, user=user, edit_mode=mode.value)
    outcome = services.modules.handle_delete(module_id, mode, user)
    return module_outcome_response(outcome, module_id, services)


@router.get("/{module_id}/view", response_class=HTMLResponse)
async def view_module(
    module_id: str, request: Request, services: EditingServices = Depends(get_services)
) -> HTMLResponse:
    return html_fragment(services.modules.module_node(module_id, current_user(request)), services)
