"""
Edit Handlers
=============

Module, child and review-queue edit operations.

Every operation resolves its target in the store, validates the submitted fields,
asks the state machine for the effect of the submission and acts on that effect:
``APPLY`` mutates the store, ``REMOVE`` deletes, ``ENQUEUE`` queues a pending edit for
review. The result is always an ``EditOutcome``; business failures such as unknown
targets or invalid fields are outcomes with notices, never exceptions.
"""

import re
import threading
from typing import Dict, Mapping, Optional, Protocol, Sequence
from urllib.parse import urlencode

from pagecraft.config.logging import get_logger
from pagecraft.core.rendering.components import alert, button, div, paragraph
from pagecraft.core.rendering.context import RenderInvariantError
from pagecraft.core.rendering.escaping import InvalidInputError, validate_dom_id
from pagecraft.core.rendering.nodes import EMPTY, Node, Tag
from pagecraft.core.storage.memory import ModuleStore, ReviewQueue
from pagecraft.models.schemas import (
    EditAction,
    EditMode,
    ItemRecord,
    ModuleKind,
    ModuleRecord,
    PendingEdit,
)
from .auth import AuthorizationChecker, require, unauthorized_modal
from .modal import CHILD_ID_PLACEHOLDER, DELETE_MODULE_CONFIRM, EditModalBuilder
from .modules import (
    DEFAULT_MAX_MODULES_PER_ROW,
    EditableModule,
    EditableRow,
    edit_view,
    editable_children,
    item_edit_view,
    module_container,
    module_view,
    new_module_view,
    page_content,
)
from .outcomes import (
    Applied,
    EditOutcome,
    NoChange,
    PendingApproval,
    not_found_notice,
    pending_notice,
)
from .state_machine import Effect, EditStateMachine, Transition, entity_key
from .validation import (
    ValidationResult,
    validate_content_fields,
    validate_item_fields,
    validate_list_fields,
    validate_new_module_fields,
)

logger = get_logger(__name__)

_ROW_NUMBER = re.compile(r"[0-9]{1,4}")
TRUTHY_VALUES = frozenset({"on", "true", "1", "yes"})
EDIT_DENIED = "You do not have permission to edit this module."
DELETE_DENIED = "You do not have permission to delete this module."
REVIEW_DENIED = "Only the module owner or an administrator can review edits."
ADD_MODULE_DENIED = "Only administrators can add modules to the page."


class EditHandler(Protocol):
    """Edit operations for one kind of editable entity."""

    def render_edit_form(self, module_id: str) -> Node:
        ...

    def handle_update(self, module_id: str, fields: Mapping[str, str], edit_mode: EditMode) -> EditOutcome:
        ...

    def handle_delete(self, module_id: str, edit_mode: EditMode) -> EditOutcome:
        ...


def with_user(path: str, user: Optional[str]) -> str:
    """Append the acting user to a URL path."""
    return f"{path}?{urlencode({'user': user})}" if user else path


def _is_checked(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in TRUTHY_VALUES


def module_changes(record: ModuleRecord, fields: Mapping[str, str]) -> Dict[str, str]:
    """
    Extract the editable fields of a module from submitted form data.

    An unchecked checkbox is absent from form data, so ``useMarkdown`` is always
    normalized to ``"true"`` or ``"false"`` for content modules.
    """
    changes: Dict[str, str] = {}
    if "title" in fields:
        changes["title"] = fields["title"]
    if record.kind is ModuleKind.CONTENT:
        if "content" in fields:
            changes["content"] = fields["content"]
        changes["useMarkdown"] = "true" if _is_checked(fields.get("useMarkdown")) else "false"
    return changes


def apply_module_changes(record: ModuleRecord, changes: Mapping[str, str]) -> ModuleRecord:
    updates: Dict[str, object] = {}
    if "title" in changes:
        updates["title"] = changes["title"].strip()
    if "content" in changes:
        updates["content"] = changes["content"]
    if "useMarkdown" in changes:
        updates["use_markdown"] = _is_checked(changes["useMarkdown"])
    return record.model_copy(update=updates, deep=True)


def validate_module_changes(record: ModuleRecord, changes: Mapping[str, str]) -> ValidationResult:
    if record.kind is ModuleKind.LIST:
        return validate_list_fields(changes)
    return validate_content_fields(changes)


def validate_row(row: object) -> int:
    """Page row number from a path segment or int."""
    if isinstance(row, int) and not isinstance(row, bool) and row >= 0:
        return row
    if isinstance(row, str) and _ROW_NUMBER.fullmatch(row):
        return int(row)
    raise InvalidInputError(f"Invalid row: {row!r}", field="row", value=str(row))


def _unexpected(transition: Transition) -> RenderInvariantError:
    return RenderInvariantError(f"Unexpected edit effect: {transition.effect.value}")


class ModuleEditService:
    """Edit handler for whole modules, plus the module and page views they refresh."""

    def __init__(
        self,
        store: ModuleStore,
        queue: ReviewQueue,
        machine: EditStateMachine,
        auth: AuthorizationChecker,
        page_container_id: str = "page-content",
        modal_container_id: str = "edit-modal-container",
        max_modules_per_row: int = DEFAULT_MAX_MODULES_PER_ROW,
    ) -> None:
        if max_modules_per_row < 1:
            raise ValueError("max_modules_per_row must be at least 1")
        self.store = store
        self.queue = queue
        self.machine = machine
        self.auth = auth
        self.page_container_id = validate_dom_id(page_container_id, "page container id")
        self.modal_container_id = validate_dom_id(modal_container_id, "modal container id")
        self.max_modules_per_row = max_modules_per_row
        self._layout_lock = threading.Lock()
        self.logger = logger.bind(component="module_edit_service")

    # Views

    def module_block(self, record: ModuleRecord, user: Optional[str] = None) -> Tag:
        """The module's view inside its editable wrapper."""
        return (
            EditableModule.wrap(record.module_id, module_view(record))
            .with_permissions(self.auth.can_edit(record, user), self.auth.can_delete(record, user))
            .with_query(user=user)
            .with_edit_url(f"/edit/{record.module_id}", target=f"#{self.modal_container_id}")
            .with_delete_url(f"/modules/{record.module_id}/delete", confirm=DELETE_MODULE_CONFIRM)
            .build()
        )

    def module_node(self, module_id: str, user: Optional[str] = None) -> Node:
        module_id = validate_dom_id(module_id, "module id")
        record = self.store.get(module_id)
        if record is None:
            return not_found_notice(module_id)
        return module_container(module_id, self.module_block(record, user)).build()

    def page_view(self, user: Optional[str] = None) -> Tag:
        """Modules grouped into rows in row order, with add controls for users who may add modules."""
        can_add = self.auth.can_add_module(user)
        modal_target = f"#{self.modal_container_id}"
        rows: Dict[int, EditableRow] = {}
        for record in self.store.list():
            row = rows.get(record.row)
            if row is None:
                row = rows[record.row] = EditableRow.create(record.row, self.max_modules_per_row)
                if can_add:
                    row.with_add_url(with_user(f"/add-module/{record.row}", user), target=modal_target)
            row.with_module(module_container(record.module_id, self.module_block(record, user)))
        add_row_url = None
        if can_add:
            add_row_url = with_user(f"/add-module/{max(rows) + 1 if rows else 0}", user)
        return page_content(
            (rows[number].build() for number in sorted(rows)), add_row_url=add_row_url, add_target=modal_target
        )

    def resolve_mode(self, module_id: str, user: Optional[str]) -> EditMode:
        """Edit mode of ``user`` for a module; unknown modules resolve to owner mode."""
        record = self.store.get(module_id)
        return self.auth.edit_mode(record, user) if record else EditMode.OWNER_EDIT

    def _modal(
        self,
        record: ModuleRecord,
        user: Optional[str],
        save_path: Optional[str],
        delete_path: Optional[str],
        errors: Sequence[str] = (),
    ) -> Tag:
        module_id = record.module_id
        builder = (
            EditModalBuilder.create()
            .with_title("Edit List" if record.kind is ModuleKind.LIST else "Edit Module")
            .with_module_id(module_id)
            .with_edit_view(edit_view(record))
            .with_save_url(with_user(save_path or f"/save/{module_id}", user))
            .with_errors(list(errors))
            .with_page_container_id(self.page_container_id)
            .with_modal_container_id(self.modal_container_id)
        )
        if self.auth.can_delete(record, user):
            builder.with_delete_url(with_user(delete_path or f"/delete/{module_id}", user))
        else:
            builder.hide_delete()
        if record.kind is ModuleKind.LIST:
            builder.with_add_child_url(with_user(f"/add-child/{module_id}", user)).with_children(
                editable_children(record),
                edit_url=with_user(f"/edit-child/{module_id}/{CHILD_ID_PLACEHOLDER}", user),
                delete_url=with_user(f"/delete-child/{module_id}/{CHILD_ID_PLACEHOLDER}", user),
            )
        return builder.build()

    # Edit handler operations

    def render_edit_form(
        self,
        module_id: str,
        user: Optional[str] = None,
        save_path: Optional[str] = None,
        delete_path: Optional[str] = None,
    ) -> Node:
        """
        Render the edit modal for a module.

        Args:
            module_id: Target module
            user: Acting user
            save_path: Save endpoint, defaults to the page-level save route
            delete_path: Delete endpoint, defaults to the page-level delete route

        Returns:
            The modal, a not-found notice or an unauthorized modal

        Raises:
            InvalidInputError: If the module id is not a safe DOM id
        """
        module_id = validate_dom_id(module_id, "module id")
        record = self.store.get(module_id)
        if record is None:
            return not_found_notice(module_id)

        def open_form() -> Node:
            self.machine.request_edit(entity_key(module_id))
            self.logger.info("Edit form rendered", module_id=module_id, user=user)
            return self._modal(record, user, save_path, delete_path).build()

        return require(self.auth.can_edit(record, user), open_form, lambda: unauthorized_modal(EDIT_DENIED))

    def handle_update(
        self,
        module_id: str,
        fields: Mapping[str, str],
        edit_mode: EditMode,
        user: Optional[str] = None,
        save_path: Optional[str] = None,
        delete_path: Optional[str] = None,
    ) -> EditOutcome:
        module_id = validate_dom_id(module_id, "module id")
        record = self.store.get(module_id)
        if record is None:
            self.logger.info("Update for unknown module", module_id=module_id)
            return NoChange(notice=not_found_notice(module_id))
        if not self.auth.can_edit(record, user):
            return NoChange(form=unauthorized_modal(EDIT_DENIED))

        changes = module_changes(record, fields)
        updated = apply_module_changes(record, changes)
        result = validate_module_changes(record, changes)
        if not result.is_valid:
            self.logger.info("Module update rejected", module_id=module_id, errors=list(result.errors))
            return NoChange(form=self._modal(updated, user, save_path, delete_path, result.errors).build())

        transition = self.machine.submit(entity_key(module_id), edit_mode, EditAction.UPDATE)
        if transition.effect is Effect.ENQUEUE:
            pending = self.queue.enqueue(
                PendingEdit(module_id=module_id, action=EditAction.UPDATE, changes=changes, submitted_by=user)
            )
            return PendingApproval(
                node=self.module_block(record, user).build(), notice=pending_notice(), pending=pending
            )
        if transition.effect is Effect.APPLY:
            self.store.save(updated)
            self.logger.info("Module updated", module_id=module_id, fields=sorted(changes))
            return Applied(node=self.module_block(updated, user).build())
        raise _unexpected(transition)

    def handle_delete(self, module_id: str, edit_mode: EditMode, user: Optional[str] = None) -> EditOutcome:
        module_id = validate_dom_id(module_id, "module id")
        record = self.store.get(module_id)
        if record is None:
            self.logger.info("Delete of absent module", module_id=module_id)
            return NoChange()
        if not self.auth.can_delete(record, user):
            return NoChange(form=unauthorized_modal(DELETE_DENIED))

        transition = self.machine.submit(entity_key(module_id), edit_mode, EditAction.DELETE)
        if transition.effect is Effect.ENQUEUE:
            pending = self.queue.enqueue(
                PendingEdit(module_id=module_id, action=EditAction.DELETE, submitted_by=user)
            )
            return PendingApproval(
                node=self.module_block(record, user).build(), notice=pending_notice(), pending=pending
            )
        if transition.effect is Effect.REMOVE:
            self.store.delete(module_id)
            discarded = self.queue.discard_module(module_id)
            self.logger.info("Module deleted", module_id=module_id, discarded_edits=discarded)
            return Applied(node=EMPTY, removed=True)
        if transition.effect is Effect.NONE:
            return NoChange()
        raise _unexpected(transition)

    def cancel(self, module_id: str) -> EditOutcome:
        """Abandon an open edit; the module returns to its view state."""
        self.machine.cancel(entity_key(validate_dom_id(module_id, "module id")))
        return NoChange()

    # Page layout

    def row_size(self, row: int) -> int:
        return sum(1 for record in self.store.list() if record.row == row)

    def _row_full_message(self, row: int) -> str:
        return f"Row {row} already holds the maximum of {self.max_modules_per_row} modules."

    def _add_module_modal(
        self,
        row: int,
        user: Optional[str],
        fields: Optional[Mapping[str, str]] = None,
        errors: Sequence[str] = (),
    ) -> Tag:
        fields = fields or {}
        return (
            EditModalBuilder.create()
            .with_title("Add Module")
            .with_edit_view(new_module_view(fields.get("kind"), fields.get("title")))
            .with_save_url(with_user(f"/add-module/{row}", user))
            .with_errors(list(errors))
            .with_page_container_id(self.page_container_id)
            .with_modal_container_id(self.modal_container_id)
            .hide_delete()
            .build()
        )

    def render_add_module_form(self, row: object, user: Optional[str] = None) -> Node:
        """
        Render the modal for adding a module to a page row.

        A full row gets the modal with an error in place of a usable form.

        Raises:
            InvalidInputError: If the row is not a non-negative integer
        """
        row = validate_row(row)
        if not self.auth.can_add_module(user):
            return unauthorized_modal(ADD_MODULE_DENIED)
        errors = [self._row_full_message(row)] if self.row_size(row) >= self.max_modules_per_row else []
        return self._add_module_modal(row, user, errors=errors).build()

    def handle_add_module(self, row: object, fields: Mapping[str, str], user: Optional[str] = None) -> EditOutcome:
        """
        Add an empty content or list module to a page row.

        Module ids come from the store's counter and are never reused. A row at the
        per-row limit keeps the modal open with an error.
        """
        row = validate_row(row)
        if not self.auth.can_add_module(user):
            return NoChange(form=unauthorized_modal(ADD_MODULE_DENIED))
        result = validate_new_module_fields(fields)
        if not result.is_valid:
            return NoChange(form=self._add_module_modal(row, user, fields, result.errors).build())

        with self._layout_lock:
            if self.row_size(row) >= self.max_modules_per_row:
                self.logger.info("Add module rejected", row=row, limit=self.max_modules_per_row)
                return NoChange(
                    form=self._add_module_modal(row, user, fields, [self._row_full_message(row)]).build()
                )
            module_id = self.store.allocate_id()
            transition = self.machine.submit(entity_key(module_id), EditMode.OWNER_EDIT, EditAction.ADD)
            if transition.effect is not Effect.APPLY:
                raise _unexpected(transition)
            record = ModuleRecord(
                module_id=module_id,
                kind=ModuleKind(fields["kind"]),
                title=fields["title"].strip(),
                row=row,
                owner=user,
            )
            self.store.save(record)
        self.logger.info("Module added", module_id=module_id, kind=record.kind.value, row=row, user=user)
        return Applied(node=self.module_block(record, user).build())


class ChildEditService:
    """Edit handler for list items, scoped under their parent module."""

    def __init__(self, modules: ModuleEditService) -> None:
        self.modules = modules
        self.logger = logger.bind(component="child_edit_service")

    def _parent(self, parent_id: str) -> Optional[ModuleRecord]:
        record = self.modules.store.get(parent_id)
        if record is None or record.kind is not ModuleKind.LIST:
            return None
        return record

    def _item_modal(
        self,
        parent: ModuleRecord,
        title: str,
        item: Optional[ItemRecord],
        save_path: str,
        user: Optional[str],
        delete_path: Optional[str] = None,
        errors: Sequence[str] = (),
    ) -> Tag:
        builder = (
            EditModalBuilder.create()
            .with_title(title)
            .with_module_id(parent.module_id)
            .with_edit_view(item_edit_view(item))
            .with_save_url(with_user(save_path, user))
            .with_errors(list(errors))
            .with_page_container_id(self.modules.page_container_id)
            .with_modal_container_id(self.modules.modal_container_id)
        )
        if delete_path:
            builder.with_delete_url(with_user(delete_path, user))
        else:
            builder.hide_delete()
        return builder.build()

    def _next_item_id(self, parent: ModuleRecord) -> str:
        number = parent.next_item_number
        while parent.find_item(f"item-{number}") is not None:
            number += 1
        return f"item-{number}"

    def _enqueue(
        self,
        parent: ModuleRecord,
        action: EditAction,
        user: Optional[str],
        child_id: Optional[str] = None,
        changes: Optional[Dict[str, str]] = None,
    ) -> PendingApproval:
        pending = self.modules.queue.enqueue(
            PendingEdit(
                module_id=parent.module_id,
                child_id=child_id,
                action=action,
                changes=changes or {},
                submitted_by=user,
            )
        )
        return PendingApproval(
            node=self.modules.module_block(parent, user).build(), notice=pending_notice(), pending=pending
        )

    def render_add_form(self, parent_id: str, user: Optional[str] = None) -> Node:
        parent_id = validate_dom_id(parent_id, "parent id")
        parent = self._parent(parent_id)
        if parent is None:
            return not_found_notice(parent_id, "List")
        if not self.modules.auth.can_edit(parent, user):
            return unauthorized_modal(EDIT_DENIED)
        return self._item_modal(parent, "Add New Item", None, f"/add-child/{parent_id}", user).build()

    def handle_add(
        self,
        parent_id: str,
        fields: Mapping[str, str],
        edit_mode: EditMode,
        user: Optional[str] = None,
    ) -> EditOutcome:
        """
        Add an item to a list module.

        The new item id is allocated from the parent's counter, so ids are never
        reused after a delete.
        """
        parent_id = validate_dom_id(parent_id, "parent id")
        parent = self._parent(parent_id)
        if parent is None:
            return NoChange(notice=not_found_notice(parent_id, "List"))
        if not self.modules.auth.can_edit(parent, user):
            return NoChange(form=unauthorized_modal(EDIT_DENIED))

        text = fields.get("text", "")
        result = validate_item_fields(fields)
        if not result.is_valid:
            draft = ItemRecord(id="new-item", text=text)
            return NoChange(
                form=self._item_modal(
                    parent, "Add New Item", draft, f"/add-child/{parent_id}", user, errors=result.errors
                ).build()
            )

        item_id = self._next_item_id(parent)
        transition = self.modules.machine.submit(entity_key(parent_id, item_id), edit_mode, EditAction.ADD)
        if transition.effect is Effect.ENQUEUE:
            return self._enqueue(parent, EditAction.ADD, user, changes={"text": text})
        if transition.effect is Effect.APPLY:
            number = int(item_id.rsplit("-", 1)[1])
            updated = parent.model_copy(
                update={
                    "items": parent.items + [ItemRecord(id=item_id, text=text.strip())],
                    "next_item_number": number + 1,
                },
                deep=True,
            )
            self.modules.store.save(updated)
            self.logger.info("Item added", parent_id=parent_id, child_id=item_id)
            return Applied(node=self.modules.module_block(updated, user).build())
        raise _unexpected(transition)

    def render_edit_form(self, parent_id: str, child_id: str, user: Optional[str] = None) -> Node:
        parent_id = validate_dom_id(parent_id, "parent id")
        child_id = validate_dom_id(child_id, "child id")
        parent = self._parent(parent_id)
        if parent is None:
            return not_found_notice(parent_id, "List")
        item = parent.find_item(child_id)
        if item is None:
            return not_found_notice(child_id, "Item")
        if not self.modules.auth.can_edit(parent, user):
            return unauthorized_modal(EDIT_DENIED)
        self.modules.machine.request_edit(entity_key(parent_id, child_id))
        return self._item_modal(
            parent,
            "Edit Item",
            item,
            f"/save-child/{parent_id}/{child_id}",
            user,
            delete_path=f"/delete-child/{parent_id}/{child_id}",
        ).build()

    def handle_save(
        self,
        parent_id: str,
        child_id: str,
        fields: Mapping[str, str],
        edit_mode: EditMode,
        user: Optional[str] = None,
    ) -> EditOutcome:
        parent_id = validate_dom_id(parent_id, "parent id")
        child_id = validate_dom_id(child_id, "child id")
        parent = self._parent(parent_id)
        if parent is None:
            return NoChange(notice=not_found_notice(parent_id, "List"))
        item = parent.find_item(child_id)
        if item is None:
            return NoChange(notice=not_found_notice(child_id, "Item"))
        if not self.modules.auth.can_edit(parent, user):
            return NoChange(form=unauthorized_modal(EDIT_DENIED))

        text = fields.get("text", "")
        result = validate_item_fields(fields)
        if not result.is_valid:
            draft = ItemRecord(id=child_id, text=text)
            return NoChange(
                form=self._item_modal(
                    parent,
                    "Edit Item",
                    draft,
                    f"/save-child/{parent_id}/{child_id}",
                    user,
                    delete_path=f"/delete-child/{parent_id}/{child_id}",
                    errors=result.errors,
                ).build()
            )

        transition = self.modules.machine.submit(entity_key(parent_id, child_id), edit_mode, EditAction.UPDATE)
        if transition.effect is Effect.ENQUEUE:
            return self._enqueue(parent, EditAction.UPDATE, user, child_id=child_id, changes={"text": text})
        if transition.effect is Effect.APPLY:
            items = [
                ItemRecord(id=entry.id, text=text.strip()) if entry.id == child_id else entry
                for entry in parent.items
            ]
            updated = parent.model_copy(update={"items": items}, deep=True)
            self.modules.store.save(updated)
            self.logger.info("Item updated", parent_id=parent_id, child_id=child_id)
            return Applied(node=self.modules.module_block(updated, user).build())
        raise _unexpected(transition)

    def handle_delete(
        self,
        parent_id: str,
        child_id: str,
        edit_mode: EditMode,
        user: Optional[str] = None,
    ) -> EditOutcome:
        parent_id = validate_dom_id(parent_id, "parent id")
        child_id = validate_dom_id(child_id, "child id")
        parent = self._parent(parent_id)
        item = parent.find_item(child_id) if parent else None
        if parent is None or item is None:
            self.logger.info("Delete of absent item", parent_id=parent_id, child_id=child_id)
            return NoChange()
        if not self.modules.auth.can_edit(parent, user):
            return NoChange(form=unauthorized_modal(EDIT_DENIED))

        transition = self.modules.machine.submit(entity_key(parent_id, child_id), edit_mode, EditAction.DELETE)
        if transition.effect is Effect.ENQUEUE:
            return self._enqueue(parent, EditAction.DELETE, user, child_id=child_id)
        if transition.effect is Effect.REMOVE:
            items = [entry for entry in parent.items if entry.id != child_id]
            updated = parent.model_copy(update={"items": items}, deep=True)
            self.modules.store.save(updated)
            self.logger.info("Item deleted", parent_id=parent_id, child_id=child_id)
            return Applied(node=self.modules.module_block(updated, user).build(), removed=True)
        if transition.effect is Effect.NONE:
            return NoChange()
        raise _unexpected(transition)


class ReviewService:
    """Approves or rejects queued edits; approval replays the edit in owner mode."""

    def __init__(self, modules: ModuleEditService, children: ChildEditService) -> None:
        self.modules = modules
        self.children = children
        self.logger = logger.bind(component="review_service")

    def pending_view(self, reviewer: Optional[str] = None, module_id: Optional[str] = None) -> Tag:
        edits = self.modules.queue.list(module_id)
        section = div(cls="pending-edits")
        if not edits:
            return section.child(paragraph("No edits are waiting for review.", cls="text-muted"))
        for edit in edits:
            summary = f"{edit.action.value.capitalize()} {edit.label}"
            if edit.submitted_by:
                summary += f" by {edit.submitted_by}"
            row = div(cls="pending-edit").attr("data-pending-id", edit.id).child(paragraph(summary))
            for name, value in sorted(edit.changes.items()):
                row.child(paragraph(f"{name}: {value}", cls="pending-change text-muted"))
            row.child(
                div(
                    button("Approve", "success")
                    .hx("post", with_user(f"/pending-edits/{edit.id}/approve", reviewer))
                    .hx_swap("none"),
                    button("Reject", "danger")
                    .hx("delete", with_user(f"/pending-edits/{edit.id}/reject", reviewer))
                    .hx_swap("none"),
                    cls="btn-group btn-group-sm",
                )
            )
            section.child(row)
        return section

    def _refusal(self, edit_id: str, reviewer: Optional[str]) -> Optional[NoChange]:
        """Why a queued edit cannot be reviewed by ``reviewer``, or None when it can."""
        edit = self.modules.queue.get(edit_id)
        if edit is None:
            return NoChange(notice=not_found_notice(edit_id, "Pending edit"))
        record = self.modules.store.get(edit.module_id)
        if record is None:
            self.modules.queue.pop(edit_id)
            return NoChange(notice=not_found_notice(edit.module_id))
        if not self.modules.auth.can_review(record, reviewer):
            return NoChange(form=unauthorized_modal(REVIEW_DENIED))
        return None

    def approve(self, edit_id: str, reviewer: Optional[str] = None) -> EditOutcome:
        """
        Apply a queued edit as an owner edit.

        Returns:
            The outcome of replaying the edit, or a notice when the edit is unknown,
            its module is gone or the reviewer is not allowed to review it
        """
        refusal = self._refusal(edit_id, reviewer)
        if refusal is not None:
            return refusal
        edit = self.modules.queue.pop(edit_id)
        if edit is None:
            return NoChange(notice=not_found_notice(edit_id, "Pending edit"))

        self.logger.info("Pending edit approved", pending_id=edit_id, target=edit.target, reviewer=reviewer)
        owner = EditMode.OWNER_EDIT
        if edit.action is EditAction.ADD:
            return self.children.handle_add(edit.module_id, edit.changes, owner, reviewer)
        if edit.child_id is None:
            if edit.action is EditAction.DELETE:
                return self.modules.handle_delete(edit.module_id, owner, reviewer)
            return self.modules.handle_update(edit.module_id, edit.changes, owner, reviewer)
        if edit.action is EditAction.DELETE:
            return self.children.handle_delete(edit.module_id, edit.child_id, owner, reviewer)
        return self.children.handle_save(edit.module_id, edit.child_id, edit.changes, owner, reviewer)

    def reject(self, edit_id: str, reviewer: Optional[str] = None) -> EditOutcome:
        refusal = self._refusal(edit_id, reviewer)
        if refusal is not None:
            return refusal
        edit = self.modules.queue.pop(edit_id)
        if edit is None:
            return NoChange(notice=not_found_notice(edit_id, "Pending edit"))
        self.logger.info("Pending edit rejected", pending_id=edit_id, target=edit.target, reviewer=reviewer)
        return NoChange(notice=alert(f"Edit to '{edit.label}' was rejected.", "info").build())
