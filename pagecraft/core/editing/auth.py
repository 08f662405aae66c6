"""
Edit Authorization
==================

Resolves per-user edit permissions and edit mode for a module.
"""

from typing import Callable, List, Optional, Protocol, TypeVar

from pagecraft.config.logging import get_logger
from pagecraft.core.rendering.components import alert, modal
from pagecraft.core.rendering.nodes import Element
from pagecraft.models.schemas import EditMode, ModuleRecord

logger = get_logger(__name__)

T = TypeVar("T")


class AuthorizationChecker(Protocol):
    """Permission lookups used by the edit endpoints."""

    def can_edit(self, module: ModuleRecord, user: Optional[str]) -> bool:
        ...

    def can_delete(self, module: ModuleRecord, user: Optional[str]) -> bool:
        ...

    def edit_mode(self, module: ModuleRecord, user: Optional[str]) -> EditMode:
        ...

    def can_review(self, module: ModuleRecord, user: Optional[str]) -> bool:
        ...

    def can_add_module(self, user: Optional[str]) -> bool:
        ...


class OwnershipAuthorizationChecker:
    """
    Owner and admin users edit in owner mode; everyone else gets the module's mode.

    Affordance flags on the module only restrict non-privileged users.
    """

    def __init__(self, admin_users: List[str]) -> None:
        self.admin_users = frozenset(admin_users)
        self.logger = logger.bind(component="authorization")

    def is_privileged(self, module: ModuleRecord, user: Optional[str]) -> bool:
        return user is not None and (user in self.admin_users or user == module.owner)

    def can_edit(self, module: ModuleRecord, user: Optional[str]) -> bool:
        return self.is_privileged(module, user) or module.can_edit

    def can_delete(self, module: ModuleRecord, user: Optional[str]) -> bool:
        return self.is_privileged(module, user) or module.can_delete

    def can_review(self, module: ModuleRecord, user: Optional[str]) -> bool:
        """Only privileged users approve or reject queued edits."""
        return self.is_privileged(module, user)

    def can_add_module(self, user: Optional[str]) -> bool:
        """Only administrators add modules to the page."""
        return user is not None and user in self.admin_users

    def edit_mode(self, module: ModuleRecord, user: Optional[str]) -> EditMode:
        mode = EditMode.OWNER_EDIT if self.is_privileged(module, user) else module.edit_mode
        self.logger.debug("Edit mode resolved", module_id=module.module_id, user=user, edit_mode=mode.value)
        return mode


def unauthorized_modal(message: str = "Permission denied") -> Element:
    return modal("unauthorized-modal", "Unauthorized", alert(message, "danger")).build()


def require(
    allowed: bool,
    action: Callable[[], T],
    on_denied: Callable[[], T],
) -> T:
    """Run ``action`` when allowed, otherwise ``on_denied``."""
    return action() if allowed else on_denied()
