"""
Module Views
============

Rendering of stored modules: read-only views, the editable wrapper with its edit
and delete affordances, the per-module container and the page content region.
"""

from typing import Dict, Iterable, List, Optional
from urllib.parse import urlencode

from pagecraft.core.rendering.components import (
    button,
    checkbox_field,
    div,
    form_field,
    heading,
    paragraph,
    select,
    text_field,
    textarea_field,
)
from pagecraft.core.rendering.escaping import validate_dom_id
from pagecraft.core.rendering.markdown import markdown
from pagecraft.core.rendering.nodes import Tag
from pagecraft.models.schemas import ItemRecord, ModuleKind, ModuleRecord
from .modal import EditableChild
from .oob import module_container_class

EDIT_BUTTON_LABEL = "✏"
DELETE_BUTTON_LABEL = "\U0001f5d1"
DEFAULT_MAX_MODULES_PER_ROW = 3
MODULE_KIND_OPTIONS = [(ModuleKind.CONTENT.value, "Content"), (ModuleKind.LIST.value, "List")]


def content_module_view(record: ModuleRecord) -> Tag:
    """Title heading and body; the body is sanitized Markdown or encoded text."""
    view = Tag("div").add_class("module", "content-module")
    if record.title:
        view.child(heading(2, record.title, cls="module-title"))
    body = div(cls="module-content")
    if record.content:
        body.child(markdown(record.content) if record.use_markdown else record.content)
    return view.child(body)


def list_module_view(record: ModuleRecord) -> Tag:
    view = Tag("div").add_class("module", "simple-list-module")
    if record.title:
        view.child(heading(3, record.title, cls="module-title"))
    if not record.items:
        return view.child(paragraph("No items yet. Add items to see them here.", cls="text-muted"))
    listing = Tag("ul").add_class("list-group")
    for item in record.items:
        listing.child(
            Tag("li").add_class("list-group-item").attr("data-item-id", item.id).text(item.text)
        )
    return view.child(listing)


def module_view(record: ModuleRecord) -> Tag:
    if record.kind is ModuleKind.LIST:
        return list_module_view(record)
    return content_module_view(record)


class EditableModule:
    """
    Wraps a module view with edit and delete buttons.

    The buttons are synthetic children placed before the wrapped view.
    """

    def __init__(self, module_id: str, view: Tag) -> None:
        self.module_id = validate_dom_id(module_id, "module id")
        self.view = view
        self.can_edit = True
        self.can_delete = True
        self.query: Dict[str, str] = {}
        self.edit_url: Optional[str] = None
        self.edit_target = "#edit-modal-container"
        self.edit_swap = "innerHTML"
        self.delete_url: Optional[str] = None
        self.delete_target: Optional[str] = None
        self.delete_swap = "none"
        self.delete_confirm: Optional[str] = None

    @classmethod
    def wrap(cls, module_id: str, view: Tag) -> "EditableModule":
        return cls(module_id, view)

    def with_permissions(self, can_edit: bool, can_delete: bool) -> "EditableModule":
        self.can_edit = can_edit
        self.can_delete = can_delete
        return self

    def with_query(self, **params: Optional[str]) -> "EditableModule":
        """Query parameters appended to the edit and delete URLs; None values are skipped."""
        self.query.update({name: value for name, value in params.items() if value is not None})
        return self

    def with_edit_url(self, url: str, target: Optional[str] = None, swap: str = "innerHTML") -> "EditableModule":
        self.edit_url = url
        if target:
            self.edit_target = target
        self.edit_swap = swap
        return self

    def with_delete_url(
        self,
        url: str,
        target: Optional[str] = None,
        swap: str = "none",
        confirm: Optional[str] = None,
    ) -> "EditableModule":
        self.delete_url = url
        self.delete_target = target
        self.delete_swap = swap
        self.delete_confirm = confirm
        return self

    def _with_query(self, url: str) -> str:
        if not self.query:
            return url
        separator = "&" if "?" in url else "?"
        return f"{url}{separator}{urlencode(self.query)}"

    def build(self) -> Tag:
        wrapper = Tag("div").add_class("editable-module-wrapper").id(self.module_id)
        controls = div(cls="module-edit-controls")
        if self.can_edit and self.edit_url:
            controls.child(
                button(EDIT_BUTTON_LABEL, "link")
                .add_class("module-edit-btn")
                .hx("get", self._with_query(self.edit_url))
                .hx_target(self.edit_target)
                .hx_swap(self.edit_swap)
                .attr("title", "Edit")
            )
        if self.can_delete and self.delete_url:
            delete = (
                button(DELETE_BUTTON_LABEL, "link")
                .add_class("module-delete-btn")
                .hx("delete", self._with_query(self.delete_url))
                .hx_target(self.delete_target or f"#{self.module_id}")
                .hx_swap(self.delete_swap)
            )
            if self.delete_confirm:
                delete.attr("hx-confirm", self.delete_confirm)
            controls.child(delete.attr("title", "Delete"))
        if controls.child_count:
            wrapper.prepend(controls)
        return wrapper.child(self.view)


def module_container(module_id: str, inner: Tag) -> Tag:
    """Element addressed by class when a single module is refreshed."""
    return Tag("div").add_class(module_container_class(module_id)).child(inner)


def column_width(count: int) -> str:
    """Equal share of a row for each of ``count`` columns, as a CSS percentage."""
    return f"{100 / max(count, 1):.4g}%"


class EditableRow:
    """
    A page row of module containers laid out in equal-width columns.

    The "Add Module" control is shown only while the row holds fewer than
    ``max_modules`` modules and an add URL is set.
    """

    def __init__(self, row: int, max_modules: int = DEFAULT_MAX_MODULES_PER_ROW) -> None:
        if max_modules < 1:
            raise ValueError("max_modules must be at least 1")
        self.row = row
        self.max_modules = max_modules
        self.containers: List[Tag] = []
        self.add_url: Optional[str] = None
        self.add_target = "#edit-modal-container"

    @classmethod
    def create(cls, row: int, max_modules: int = DEFAULT_MAX_MODULES_PER_ROW) -> "EditableRow":
        return cls(row, max_modules)

    def with_module(self, container: Tag) -> "EditableRow":
        self.containers.append(container)
        return self

    def with_add_url(self, url: str, target: Optional[str] = None) -> "EditableRow":
        self.add_url = url
        if target:
            self.add_target = target
        return self

    @property
    def is_full(self) -> bool:
        return len(self.containers) >= self.max_modules

    def build(self) -> Tag:
        wrapper = div(cls="editable-row-wrapper").id(f"row-{self.row}")
        columns = div(cls="row page-row")
        width = column_width(len(self.containers))
        for container in self.containers:
            columns.child(div(container, cls="col page-column").width(width))
        wrapper.child(columns)
        if self.add_url and not self.is_full:
            wrapper.child(
                div(
                    button("+ Add Module", "secondary")
                    .add_class("add-module-btn")
                    .hx("get", self.add_url)
                    .hx_target(self.add_target)
                    .hx_swap("innerHTML"),
                    cls="add-module-section",
                )
            )
        return wrapper


def page_content(
    rows: Iterable[Tag],
    add_row_url: Optional[str] = None,
    add_target: str = "#edit-modal-container",
) -> Tag:
    """The page region: rows in order, then an "Add Row" control when ``add_row_url`` is set."""
    page = div(cls="page-modules")
    count = 0
    for row in rows:
        page.child(row)
        count += 1
    if not count:
        page.child(paragraph("This page has no modules.", cls="text-muted"))
    if add_row_url:
        page.child(
            div(
                button("+ Add Row", "link")
                .add_class("add-row-btn")
                .hx("get", add_row_url)
                .hx_target(add_target)
                .hx_swap("innerHTML"),
                cls="insert-row-section",
            )
        )
    return page


# Edit views


def content_edit_view(record: ModuleRecord) -> Tag:
    return div(
        text_field("Title", "title", record.title),
        textarea_field("Content", "content", record.content, rows=15),
        checkbox_field("Render as Markdown", "useMarkdown", record.use_markdown),
    )


def list_edit_view(record: ModuleRecord) -> Tag:
    return div(text_field("List Title", "title", record.title))


def item_edit_view(item: Optional[ItemRecord] = None) -> Tag:
    return div(text_field("Item Text", "text", item.text if item else ""))


def new_module_view(kind: Optional[str] = None, title: Optional[str] = None) -> Tag:
    """Type picker and title for a module that does not exist yet."""
    return div(
        form_field("Module Type", select("kind", MODULE_KIND_OPTIONS, kind or ModuleKind.CONTENT.value)),
        text_field("Title", "title", title),
    )


def edit_view(record: ModuleRecord) -> Tag:
    if record.kind is ModuleKind.LIST:
        return list_edit_view(record)
    return content_edit_view(record)


def editable_children(record: ModuleRecord) -> List[EditableChild]:
    return [
        EditableChild(id=item.id, label=f"Item {index + 1}", summary=item.text)
        for index, item in enumerate(record.items)
    ]
