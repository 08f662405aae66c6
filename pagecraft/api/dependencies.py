"""
API Dependencies
================

Process-wide editing services shared by the routers.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from fastapi import Request

from pagecraft.config.logging import get_logger
from pagecraft.config.settings import Settings, get_settings
from pagecraft.core.editing.auth import OwnershipAuthorizationChecker
from pagecraft.core.editing.handler import ChildEditService, ModuleEditService, ReviewService
from pagecraft.core.editing.state_machine import EditStateMachine
from pagecraft.core.rendering.context import RenderContext
from pagecraft.core.storage.memory import InMemoryModuleStore, ReviewQueue, seed_modules
from pagecraft.models.schemas import ModuleRecord

logger = get_logger(__name__)


@dataclass
class EditingServices:
    """Store, review queue, state machine and the handlers built on them."""

    settings: Settings
    store: InMemoryModuleStore
    queue: ReviewQueue
    machine: EditStateMachine
    modules: ModuleEditService
    children: ChildEditService
    review: ReviewService

    def render_context(self) -> RenderContext:
        return RenderContext.empty(self.settings.max_render_depth)


def build_services(
    settings: Optional[Settings] = None,
    records: Optional[List[ModuleRecord]] = None,
) -> EditingServices:
    settings = settings or get_settings()
    store = InMemoryModuleStore(seed_modules() if records is None else records)
    queue = ReviewQueue()
    machine = EditStateMachine()
    modules = ModuleEditService(
        store,
        queue,
        machine,
        OwnershipAuthorizationChecker(settings.admin_users),
        page_container_id=settings.page_container_id,
        modal_container_id=settings.modal_container_id,
        max_modules_per_row=settings.max_modules_per_row,
    )
    children = ChildEditService(modules)
    return EditingServices(
        settings=settings,
        store=store,
        queue=queue,
        machine=machine,
        modules=modules,
        children=children,
        review=ReviewService(modules, children),
    )


# Global services instance
_services: Optional[EditingServices] = None


def get_services() -> EditingServices:
    """Dependency returning the shared editing services."""
    global _services
    if _services is None:
        _services = build_services()
        logger.info("Editing services initialized", modules=len(_services.store))
    return _services


def reset_services(
    settings: Optional[Settings] = None,
    records: Optional[List[ModuleRecord]] = None,
) -> EditingServices:
    """Replace the shared services with a fresh store and state machine."""
    global _services
    _services = build_services(settings, records)
    return _services


async def read_form(request: Request) -> Dict[str, str]:
    """Submitted form fields; file uploads are ignored."""
    form = await request.form()
    return {name: value for name, value in form.items() if isinstance(value, str)}


def current_user(request: Request, fields: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Acting user from the form body or the query string."""
    user = (fields or {}).get("user") or request.query_params.get("user")
    return user or None
