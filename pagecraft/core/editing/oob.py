"""
Out-of-Band Responses
=====================

Assembles one response body from a primary fragment and any number of htmx
out-of-band fragments.

Each out-of-band fragment is a single ``<div>`` carrying ``hx-swap-oob`` followed by
the target ``id`` or ``class``, with the rendered content inside. The body is
``primary + wrap(f1) + wrap(f2) + ...`` in insertion order, so identical inputs
always produce identical bytes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

from pagecraft.config.logging import get_logger
from pagecraft.core.rendering.context import RenderContext
from pagecraft.core.rendering.escaping import validate_dom_id
from pagecraft.core.rendering.nodes import EMPTY, Fragment, Node, Tag

logger = get_logger(__name__)


class SwapDirective(str, Enum):
    """htmx out-of-band swap styles."""
    TRUE = "true"
    OUTER_HTML = "outerHTML"
    INNER_HTML = "innerHTML"


@dataclass(frozen=True)
class OobTarget:
    """Element addressed by an out-of-band fragment, by id or by class."""

    attribute: str
    value: str

    @classmethod
    def by_id(cls, element_id: str) -> "OobTarget":
        return cls("id", validate_dom_id(element_id, "target id"))

    @classmethod
    def by_class(cls, class_name: str) -> "OobTarget":
        return cls("class", validate_dom_id(class_name, "target class"))

    @property
    def selector(self) -> str:
        return f"#{self.value}" if self.attribute == "id" else f".{self.value}"


@dataclass(frozen=True)
class OobFragment:
    target: OobTarget
    swap: SwapDirective
    node: Node

    def wrap(self) -> Tag:
        return Tag("div").attr("hx-swap-oob", SwapDirective(self.swap).value).attr(
            self.target.attribute, self.target.value
        ).child(self.node)

    def render(self, context: Optional[RenderContext] = None) -> str:
        return self.wrap().render(context)


class OobResponse:
    """A primary fragment followed by ordered out-of-band fragments."""

    def __init__(self, primary: Any = EMPTY) -> None:
        self.primary: Node = primary if isinstance(primary, Node) else Fragment(primary)
        self._fragments: List[OobFragment] = []

    def add(self, target: OobTarget, swap: SwapDirective, node: Any) -> "OobResponse":
        if isinstance(node, Tag):
            node = node.build()
        elif not isinstance(node, Node):
            node = Fragment(node)
        self._fragments.append(OobFragment(target, SwapDirective(swap), node))
        return self

    @property
    def fragments(self) -> Tuple[OobFragment, ...]:
        return tuple(self._fragments)

    def render(self, context: Optional[RenderContext] = None) -> str:
        context = context or RenderContext.empty()
        body = self.primary.render(context) + "".join(
            fragment.render(context) for fragment in self._fragments
        )
        logger.debug(
            "OOB response assembled",
            fragments=len(self._fragments),
            targets=[fragment.target.selector for fragment in self._fragments],
            html_length=len(body),
        )
        return body


def module_container_class(module_id: str) -> str:
    """Class that marks the element holding a module's rendered view."""
    return f"{validate_dom_id(module_id, 'module id')}-container"


def mutation_response(
    modal_container_id: str,
    region: OobTarget,
    swap: SwapDirective,
    node: Any,
) -> OobResponse:
    """
    The two-fragment response for a mutating interaction.

    The first fragment empties the modal container; the second refreshes the
    affected region.
    """
    return (
        OobResponse()
        .add(OobTarget.by_id(modal_container_id), SwapDirective.TRUE, EMPTY)
        .add(region, swap, node)
    )


def page_refresh_response(modal_container_id: str, page_container_id: str, page: Any) -> OobResponse:
    """Close the modal and refresh the whole page content container."""
    return mutation_response(
        modal_container_id, OobTarget.by_id(page_container_id), SwapDirective.TRUE, page
    )


def module_refresh_response(modal_container_id: str, module_id: str, view: Any) -> OobResponse:
    """Close the modal and replace the module's own container element."""
    return mutation_response(
        modal_container_id,
        OobTarget.by_class(module_container_class(module_id)),
        SwapDirective.OUTER_HTML,
        view,
    )


def modal_response(modal_container_id: str, modal: Any) -> OobResponse:
    """Keep the modal open with new content, e.g. a form re-rendered with errors."""
    return OobResponse().add(OobTarget.by_id(modal_container_id), SwapDirective.TRUE, modal)
