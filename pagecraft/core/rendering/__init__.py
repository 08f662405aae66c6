"""
Rendering
=========

Component render tree and the escaping boundary.

Modules:
- escaping: text/attribute encoding and URL, CSS, id and name validation
- attributes: ordered attribute sets with class-token merging
- context: immutable render context and slot keys
- nodes: node types, the immutable Element and the Tag builder
- components: builder functions for common widgets
- markdown: sanitized Markdown conversion
- template: compiled templates with per-request slots
- page_shell: Jinja2 full-page documents
"""

from .context import RenderContext, RenderInvariantError, SlotKey
from .escaping import InvalidInputError
from .nodes import EMPTY, Element, Fragment, Node, RawMarkup, Slot, Tag, Text, render, tag

__all__ = [
    "EMPTY",
    "Element",
    "Fragment",
    "InvalidInputError",
    "Node",
    "RawMarkup",
    "RenderContext",
    "RenderInvariantError",
    "Slot",
    "SlotKey",
    "Tag",
    "Text",
    "render",
    "tag",
]
