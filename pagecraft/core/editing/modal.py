"""
Edit Modal Builder
==================

Builds the edit dialog for a module: the properties form, an optional list of
editable children with per-child controls, and the Delete / Cancel / Save footer.
"""

from dataclasses import dataclass
from typing import Any, List, Optional

from pagecraft.core.rendering.components import button, div, heading, modal
from pagecraft.core.rendering.context import RenderInvariantError
from pagecraft.core.rendering.escaping import validate_dom_id
from pagecraft.core.rendering.nodes import Tag

MODAL_FIELDS_SELECTOR = ".modal-body input, .modal-body textarea, .modal-body select"
DELETE_MODULE_CONFIRM = "Are you sure you want to delete this module? This cannot be undone."
CHILD_ID_PLACEHOLDER = "{id}"


@dataclass(frozen=True)
class EditableChild:
    """A nested entity listed in a module's edit modal."""

    id: str
    label: str
    summary: Optional[str] = None


class EditModalBuilder:
    """Fluent builder for module edit modals. ``edit_view`` and ``save_url`` are required."""

    def __init__(self) -> None:
        self.title = "Edit Module"
        self.module_id: Optional[str] = None
        self.edit_view: Any = None
        self.save_url: Optional[str] = None
        self.delete_url: Optional[str] = None
        self.add_child_url: Optional[str] = None
        self.add_child_label = "Add Item"
        self.child_edit_url: Optional[str] = None
        self.child_delete_url: Optional[str] = None
        self.children: List[EditableChild] = []
        self.errors: List[str] = []
        self.notices: List[Any] = []
        self.show_delete = True
        self.page_container_id = "page-content"
        self.modal_container_id = "edit-modal-container"
        self.delete_target: Optional[str] = None

    @classmethod
    def create(cls) -> "EditModalBuilder":
        return cls()

    def with_title(self, title: str) -> "EditModalBuilder":
        self.title = title
        return self

    def with_module_id(self, module_id: str) -> "EditModalBuilder":
        self.module_id = validate_dom_id(module_id, "module id")
        return self

    def with_edit_view(self, edit_view: Any) -> "EditModalBuilder":
        self.edit_view = edit_view
        return self

    def with_save_url(self, url: str) -> "EditModalBuilder":
        self.save_url = url
        return self

    def with_delete_url(self, url: str, target: Optional[str] = None) -> "EditModalBuilder":
        self.delete_url = url
        self.delete_target = target
        return self

    def hide_delete(self) -> "EditModalBuilder":
        self.show_delete = False
        return self

    def with_add_child_url(self, url: str, label: str = "Add Item") -> "EditModalBuilder":
        self.add_child_url = url
        self.add_child_label = label
        return self

    def with_children(
        self,
        children: List[EditableChild],
        edit_url: Optional[str] = None,
        delete_url: Optional[str] = None,
    ) -> "EditModalBuilder":
        """
        List nested entities with edit and delete buttons.

        Args:
            children: Entities to list
            edit_url: Child edit URL containing ``{id}``
            delete_url: Child delete URL containing ``{id}``
        """
        for child in children:
            validate_dom_id(child.id, "child id")
        self.children = list(children)
        self.child_edit_url = edit_url
        self.child_delete_url = delete_url
        return self

    def with_errors(self, errors: List[str]) -> "EditModalBuilder":
        self.errors = list(errors)
        return self

    def with_notice(self, notice: Any) -> "EditModalBuilder":
        self.notices.append(notice)
        return self

    def with_page_container_id(self, container_id: str) -> "EditModalBuilder":
        self.page_container_id = validate_dom_id(container_id, "page container id")
        return self

    def with_modal_container_id(self, container_id: str) -> "EditModalBuilder":
        self.modal_container_id = validate_dom_id(container_id, "modal container id")
        return self

    def _modal_id(self) -> str:
        return f"edit-modal-{self.module_id}" if self.module_id else "edit-modal"

    def _build_errors(self) -> Tag:
        errors = div(cls="alert alert-danger edit-errors").attr("role", "alert")
        for message in self.errors:
            errors.child(Tag("div").text(message))
        return errors

    def _build_children_section(self) -> Tag:
        section = div(cls="edit-children-section mt-4").child(heading(4, "Content Items", cls="mb-3"))
        listing = div(cls="list-group")
        for child in self.children:
            row = div(
                cls="list-group-item d-flex justify-content-between align-items-center p-2"
            ).attr("data-child-id", child.id)
            info = div().child(div(child.label, cls="fw-bold"))
            if child.summary is not None:
                info.child(div(child.summary, cls="text-muted small text-truncate").max_width("200px"))
            row.child(info)

            actions = div(cls="btn-group btn-group-sm")
            if self.child_edit_url:
                actions.child(
                    button("Edit", "secondary")
                    .hx("get", self.child_edit_url.replace(CHILD_ID_PLACEHOLDER, child.id))
                    .hx_target(f"#{self.modal_container_id}")
                    .hx_swap("innerHTML")
                )
            if self.child_delete_url:
                actions.child(
                    button("Delete", "danger")
                    .hx("delete", self.child_delete_url.replace(CHILD_ID_PLACEHOLDER, child.id))
                    .attr("hx-confirm", "Delete this item?")
                    .hx_swap("none")
                )
            listing.child(row.child(actions))
        return section.child(listing)

    def _build_footer(self) -> Tag:
        left = div()
        if self.show_delete and self.delete_url:
            left.child(
                button("Delete", "danger")
                .hx("delete", self.delete_url)
                .attr("hx-confirm", DELETE_MODULE_CONFIRM)
                .hx_target(self.delete_target or f"#{self.page_container_id}")
                .hx_swap("none")
            )
        cancel = (
            button("Cancel", "secondary")
            .attr("data-modal-id", self.modal_container_id)
            .attr("onclick", "document.getElementById(this.dataset.modalId).innerHTML = ''")
        )
        if self.module_id:
            cancel.hx("post", f"/cancel/{self.module_id}").hx_swap("none")
        save = (
            button("Save Changes", "primary")
            .hx("post", self.save_url)
            .hx_swap("none")
            .attr("hx-include", MODAL_FIELDS_SELECTOR)
        )
        right = div(cancel, save, cls="d-flex gap-2")
        return div(left, right, cls="d-flex justify-content-between w-100")

    def build(self) -> Tag:
        """
        Build the modal.

        Raises:
            RenderInvariantError: If the edit view or save URL is missing
        """
        if self.edit_view is None:
            raise RenderInvariantError("edit_view is required")
        if self.save_url is None:
            raise RenderInvariantError("save_url is required")

        body = div()
        for notice in self.notices:
            body.child(_detached(notice))
        if self.errors:
            body.child(self._build_errors())
        body.child(div(_detached(self.edit_view), cls="edit-properties-section"))
        if self.add_child_url:
            body.child(
                div(
                    button(self.add_child_label, "secondary")
                    .add_class("add-child-btn")
                    .hx("get", self.add_child_url)
                    .hx_target(f"#{self.modal_container_id}")
                    .hx_swap("innerHTML"),
                    cls="edit-add-child mt-3",
                )
            )
        if self.children:
            body.child(self._build_children_section())

        return modal(self._modal_id(), self.title, body, self._build_footer(), close_on_backdrop=False)


def _detached(node: Any) -> Any:
    return node.build() if isinstance(node, Tag) else node
