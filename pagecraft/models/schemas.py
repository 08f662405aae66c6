"""
Pydantic Models and Schemas
===========================

Data models for stored modules, queued edits and API responses.
"""

from typing import Optional, List, Dict, Any, Literal
from datetime import datetime, timezone
from enum import Enum
import uuid

from pydantic import BaseModel, Field

SAFE_ID_PATTERN = r"^[A-Za-z0-9_-]+$"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Enums
class EditMode(str, Enum):
    """How a submitted edit takes effect."""
    OWNER_EDIT = "owner_edit"
    USER_EDIT = "user_edit"


class EditAction(str, Enum):
    """Edit operations understood by the state machine."""
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    CANCEL = "cancel"


class ModuleKind(str, Enum):
    """Stored module layouts."""
    CONTENT = "content"
    LIST = "list"


# Module Models
class ItemRecord(BaseModel):
    """A child entry of a list module."""
    id: str = Field(..., pattern=SAFE_ID_PATTERN, description="Item identifier")
    text: str = Field(..., description="Item text")


class ModuleRecord(BaseModel):
    """Stored state of one editable module."""
    module_id: str = Field(..., pattern=SAFE_ID_PATTERN, description="Module identifier")
    kind: ModuleKind = Field(default=ModuleKind.CONTENT, description="Module layout")
    title: Optional[str] = Field(None, description="Module title")
    content: str = Field(default="", description="Module body text or Markdown")
    use_markdown: bool = Field(default=False, description="Render content as Markdown")
    items: List[ItemRecord] = Field(default_factory=list, description="List entries")
    edit_mode: EditMode = Field(
        default=EditMode.OWNER_EDIT, description="Edit mode for users that do not own the module"
    )
    owner: Optional[str] = Field(None, description="Owning user")
    can_edit: bool = Field(default=True, description="Show the edit affordance")
    row: int = Field(default=0, ge=0, description="Page row holding the module")
    can_delete: bool = Field(default=True, description="Show the delete affordance")
    next_item_number: int = Field(default=0, ge=0, description="Counter for generated item ids")

    def find_item(self, item_id: str) -> Optional[ItemRecord]:
        return next((item for item in self.items if item.id == item_id), None)


class PendingEdit(BaseModel):
    """An edit queued for review."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    module_id: str = Field(..., pattern=SAFE_ID_PATTERN, description="Target module")
    child_id: Optional[str] = Field(
        None, pattern=SAFE_ID_PATTERN, description="Target child, for nested entities"
    )
    action: EditAction = Field(..., description="Requested operation")
    changes: Dict[str, str] = Field(default_factory=dict, description="Submitted form fields")
    submitted_by: Optional[str] = Field(None, description="Submitting user")
    submitted_at: datetime = Field(default_factory=_utcnow, description="Submission time")

    @property
    def target(self) -> str:
        """Queue key. Later edits replace earlier ones with the same key; every add is its own key."""
        if self.action is EditAction.ADD:
            return f"{self.module_id}/add:{self.id}"
        return self.label

    @property
    def label(self) -> str:
        return f"{self.module_id}/{self.child_id}" if self.child_id else self.module_id


# Response Models
class HealthStatus(BaseModel):
    """Health check status."""
    status: Literal["healthy", "unhealthy", "degraded"] = Field(..., description="Overall status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Deployment environment")
    modules: int = Field(0, ge=0, description="Number of stored modules")
    pending_edits: int = Field(0, ge=0, description="Number of queued edits")
    markdown: bool = Field(..., description="Markdown sandbox availability")


class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")
    request_id: Optional[str] = Field(None, description="Request identifier for tracking")
