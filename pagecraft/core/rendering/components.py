"""
Component Builders
==================

Free functions that configure ``Tag`` builders for the widgets used by pages and
the editing protocol. Each returns the builder so callers can keep chaining.
"""

from typing import Any, Iterable, Optional, Sequence, Tuple

from .escaping import InvalidInputError, validate_dom_id
from .nodes import Tag

ALERT_LEVELS = ("info", "success", "warning", "danger")


def div(*children: Any, cls: Optional[str] = None) -> Tag:
    builder = Tag("div").children(*children)
    if cls:
        builder.add_class(cls)
    return builder


def span(text: str, cls: Optional[str] = None) -> Tag:
    builder = Tag("span").text(text)
    if cls:
        builder.add_class(cls)
    return builder


def paragraph(text: str, cls: Optional[str] = None) -> Tag:
    builder = Tag("p").text(text)
    if cls:
        builder.add_class(cls)
    return builder


def heading(level: int, text: str, cls: Optional[str] = None) -> Tag:
    """Create an ``<h1>`` to ``<h6>`` heading."""
    if not 1 <= level <= 6:
        raise InvalidInputError(f"Heading level must be 1-6, got {level}", field="level")
    builder = Tag(f"h{level}").text(text)
    if cls:
        builder.add_class(cls)
    return builder


def button(label: str, variant: str = "primary", button_type: str = "button") -> Tag:
    return Tag("button").attr("type", button_type).add_class("btn", f"btn-{variant}").text(label)


def link(text: str, url: str) -> Tag:
    return Tag("a").href(url).text(text)


def image(src: str, alt: str = "") -> Tag:
    return Tag("img").src(src).attr("alt", alt)


def alert(message: str, level: str = "info") -> Tag:
    """Create an alert box. ``level`` is one of info, success, warning or danger."""
    if level not in ALERT_LEVELS:
        raise InvalidInputError(f"Unknown alert level: {level}", field="level", value=level)
    return Tag("div").add_class("alert", f"alert-{level}").attr("role", "alert").text(message)


def text_input(name: str, value: Optional[str] = None, input_type: str = "text") -> Tag:
    builder = Tag("input").attr("type", input_type).attr("name", name).add_class("form-input")
    if value is not None:
        builder.attr("value", value)
    return builder


def hidden_input(name: str, value: str) -> Tag:
    return Tag("input").attr("type", "hidden").attr("name", name).attr("value", value)


def textarea(name: str, value: Optional[str] = None, rows: int = 5) -> Tag:
    builder = Tag("textarea").attr("name", name).attr("rows", str(rows)).add_class("form-textarea")
    if value:
        builder.text(value)
    return builder


def checkbox(name: str, label: str, value: str = "true", checked: bool = False) -> Tag:
    """Create a labelled checkbox; the input is rendered inside its label."""
    control = Tag("input").attr("type", "checkbox").attr("name", name).attr("value", value)
    if checked:
        control.attr("checked")
    return Tag("label").add_class("form-checkbox").child(control).child(Tag("span").text(label))


def select(name: str, options: Sequence[Tuple[str, str]], selected: Optional[str] = None) -> Tag:
    """Create a ``<select>`` from (value, label) pairs."""
    builder = Tag("select").attr("name", name).add_class("form-select")
    for value, label in options:
        option = Tag("option").attr("value", value).text(label)
        if value == selected:
            option.attr("selected")
        builder.child(option)
    return builder


def unordered_list(items: Iterable[Any], cls: Optional[str] = None) -> Tag:
    builder = Tag("ul")
    if cls:
        builder.add_class(cls)
    for item in items:
        builder.child(item if isinstance(item, Tag) and item.tag == "li" else Tag("li").child(item))
    return builder


def form_field(label: str, control: Tag) -> Tag:
    """Label paragraph followed by a form control."""
    return div(paragraph(f"{label}:", cls="form-label"), control, cls="form-field")


def text_field(label: str, name: str, value: Optional[str]) -> Tag:
    return form_field(label, text_input(name, value or "").max_width("100%"))


def textarea_field(label: str, name: str, value: Optional[str], rows: int = 5) -> Tag:
    return form_field(label, textarea(name, value or "", rows=rows).max_width("100%"))


def checkbox_field(label: str, name: str, checked: bool) -> Tag:
    return div(checkbox(name, label, checked=checked), cls="form-field")


def modal(
    modal_id: str,
    title: Optional[str],
    body: Any,
    footer: Any = None,
    close_on_backdrop: bool = True,
) -> Tag:
    """
    Create a modal dialog.

    The modal id is interpolated into the close handlers, so it must be a safe DOM
    id that starts with a letter.

    Args:
        modal_id: DOM id of the backdrop element
        title: Header title, or None for a header with only the close button
        body: Body node or builder
        footer: Optional footer node or builder
        close_on_backdrop: Close the modal when the backdrop is clicked

    Returns:
        Builder for the modal backdrop

    Raises:
        InvalidInputError: If the modal id is not a safe DOM id
    """
    validate_dom_id(modal_id, "modal id")
    if not modal_id[0].isalpha():
        raise InvalidInputError(
            f"Modal id must start with a letter, got {modal_id!r}", field="modal id", value=modal_id
        )
    close_script = f"document.getElementById('{modal_id}').remove()"

    header = Tag("div").add_class("modal-header")
    header.child(Tag("h3").add_class("modal-title").text(title) if title is not None else Tag("div"))
    header.child(
        Tag("button")
        .attr("type", "button")
        .add_class("modal-close")
        .attr("onclick", close_script)
        .attr("aria-label", "Close")
        .raw("&times;")
    )

    container = (
        Tag("div")
        .add_class("modal-container")
        .attr("onclick", "event.stopPropagation()")
        .child(header)
        .child(Tag("div").add_class("modal-body").child(body))
    )
    if footer is not None:
        container.child(Tag("div").add_class("modal-footer").child(footer))

    backdrop = Tag("div").add_class("modal-backdrop").id(modal_id)
    if close_on_backdrop:
        backdrop.attr("onclick", close_script)
    backdrop.attr("onkeydown", "if(event.key === 'Escape') this.remove()").attr("tabindex", "0")
    return backdrop.child(container)
