"""
Compiled Templates
==================

Pre-render the static parts of a tree once and fill slots per request.

A template is read-only after compilation and can be shared between concurrent
requests; each request supplies its own ``RenderContext``.
"""

from typing import Any, List, Optional, Union

from .context import RenderContext
from .nodes import Element, Fragment, RawMarkup, Tag, Text, expand_children

Segment = Union[str, Any]


class Template:
    """A tree flattened into static markup runs and dynamic nodes."""

    def __init__(self, root: Union[Element, Tag]) -> None:
        element = root.build() if isinstance(root, Tag) else root
        segments: List[Segment] = []
        self._compile(element, RenderContext.empty(), segments)
        self._segments = tuple(self._merge(segments))

    @classmethod
    def of(cls, root: Union[Element, Tag]) -> "Template":
        return cls(root)

    def _compile(self, node: Any, context: RenderContext, out: List[Segment]) -> None:
        if isinstance(node, (Text, RawMarkup)):
            out.append(node.render(context))
        elif isinstance(node, Fragment):
            for child in node.nodes:
                self._compile(child, context, out)
        elif type(node) is Element:
            out.append(f"<{node.tag}{node.attributes.render()}")
            if node.self_closing:
                out.append(" />")
                return
            out.append(">")
            child_context = context.descend()
            for group in (node.leading, node.children, node.trailing):
                for child in group:
                    self._compile(child, child_context, out)
            out.append(f"</{node.tag}>")
        else:
            # Slots, lazy producers and Element subclasses stay dynamic.
            out.append((node, context.depth))

    @staticmethod
    def _merge(segments: List[Segment]) -> List[Segment]:
        merged: List[Segment] = []
        buffer: List[str] = []
        for segment in segments:
            if isinstance(segment, str):
                buffer.append(segment)
                continue
            if buffer:
                merged.append("".join(buffer))
                buffer = []
            merged.append(segment)
        if buffer:
            merged.append("".join(buffer))
        return merged

    @property
    def dynamic_count(self) -> int:
        return sum(1 for segment in self._segments if not isinstance(segment, str))

    def render(self, context: Optional[RenderContext] = None) -> str:
        context = context or RenderContext.empty()
        parts: List[str] = []
        for segment in self._segments:
            if isinstance(segment, str):
                parts.append(segment)
                continue
            node, depth = segment
            local = RenderContext(depth=depth, max_depth=context.max_depth, slots=context.slots)
            parts.extend(child.render(local) for child in expand_children((node,), local))
        return "".join(parts)
