"""
In-Memory Storage
=================

Thread-safe in-memory module store and review queue.

Records are copied on the way in and out, so callers never share mutable state
with the store.
"""

import re
import threading
from typing import Dict, List, Optional, Protocol

from pagecraft.config.logging import get_logger
from pagecraft.models.schemas import (
    EditMode,
    ItemRecord,
    ModuleKind,
    ModuleRecord,
    PendingEdit,
)

logger = get_logger(__name__)

_MODULE_NUMBER = re.compile(r"module-(\d+)")


class ModuleStore(Protocol):
    """Storage used by the edit handlers."""

    def get(self, module_id: str) -> Optional[ModuleRecord]:
        ...

    def list(self) -> List[ModuleRecord]:
        ...

    def save(self, record: ModuleRecord) -> None:
        ...

    def delete(self, module_id: str) -> bool:
        ...

    def allocate_id(self) -> str:
        ...


class InMemoryModuleStore:
    """Module records kept in insertion order."""

    def __init__(self, records: Optional[List[ModuleRecord]] = None) -> None:
        self._records: Dict[str, ModuleRecord] = {}
        self._next_number = 1
        self._lock = threading.RLock()
        self.logger = logger.bind(component="module_store")
        for record in records or []:
            self.save(record)

    def get(self, module_id: str) -> Optional[ModuleRecord]:
        with self._lock:
            record = self._records.get(module_id)
            return record.model_copy(deep=True) if record else None

    def list(self) -> List[ModuleRecord]:
        with self._lock:
            return [record.model_copy(deep=True) for record in self._records.values()]

    def save(self, record: ModuleRecord) -> None:
        with self._lock:
            self._records[record.module_id] = record.model_copy(deep=True)
            match = _MODULE_NUMBER.fullmatch(record.module_id)
            if match:
                self._next_number = max(self._next_number, int(match.group(1)) + 1)
        self.logger.debug("Module saved", module_id=record.module_id, items=len(record.items))

    def delete(self, module_id: str) -> bool:
        with self._lock:
            removed = self._records.pop(module_id, None) is not None
        self.logger.debug("Module deleted", module_id=module_id, removed=removed)
        return removed

    def allocate_id(self) -> str:
        """Return a fresh ``module-{n}`` id. A number is never handed out twice, even after a delete."""
        with self._lock:
            number = self._next_number
            while f"module-{number}" in self._records:
                number += 1
            self._next_number = number + 1
        return f"module-{number}"

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class ReviewQueue:
    """
    Edits waiting for approval.

    Only the latest submission per target (module, or module and child) is kept.
    """

    def __init__(self) -> None:
        self._pending: Dict[str, PendingEdit] = {}
        self._lock = threading.RLock()
        self.logger = logger.bind(component="review_queue")

    def enqueue(self, edit: PendingEdit) -> PendingEdit:
        with self._lock:
            replaced = [key for key, queued in self._pending.items() if queued.target == edit.target]
            for key in replaced:
                del self._pending[key]
            self._pending[edit.id] = edit
        self.logger.info(
            "Edit queued for review",
            pending_id=edit.id,
            target=edit.target,
            action=edit.action.value,
            replaced=len(replaced),
        )
        return edit

    def get(self, edit_id: str) -> Optional[PendingEdit]:
        with self._lock:
            return self._pending.get(edit_id)

    def pop(self, edit_id: str) -> Optional[PendingEdit]:
        with self._lock:
            return self._pending.pop(edit_id, None)

    def list(self, module_id: Optional[str] = None) -> List[PendingEdit]:
        with self._lock:
            edits = list(self._pending.values())
        if module_id is not None:
            edits = [edit for edit in edits if edit.module_id == module_id]
        return sorted(edits, key=lambda edit: edit.submitted_at)

    def discard_module(self, module_id: str) -> int:
        """Drop every queued edit for a module that no longer exists."""
        with self._lock:
            keys = [key for key, edit in self._pending.items() if edit.module_id == module_id]
            for key in keys:
                del self._pending[key]
        return len(keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


def seed_modules() -> List[ModuleRecord]:
    """Modules available on a fresh page."""
    return [
        ModuleRecord(
            module_id="module-1",
            kind=ModuleKind.CONTENT,
            title="Community Notes",
            content="Anyone may suggest changes here. **Suggestions** are reviewed before they go live.",
            use_markdown=True,
            edit_mode=EditMode.USER_EDIT,
            owner="alice",
            row=0,
        ),
        ModuleRecord(
            module_id="module-2",
            kind=ModuleKind.CONTENT,
            title="About",
            content="A page assembled from independently editable modules.",
            use_markdown=False,
            edit_mode=EditMode.OWNER_EDIT,
            row=0,
        ),
        ModuleRecord(
            module_id="module-9",
            kind=ModuleKind.LIST,
            title="Task List",
            items=[
                ItemRecord(id="item-0", text="Write the introduction"),
                ItemRecord(id="item-1", text="Review open suggestions"),
                ItemRecord(id="item-2", text="Publish the page"),
            ],
            next_item_number=3,
            edit_mode=EditMode.OWNER_EDIT,
            row=1,
        ),
    ]
