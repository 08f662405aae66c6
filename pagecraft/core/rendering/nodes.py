"""
Render Tree
===========

Nodes that produce markup and the fluent builder used to assemble them.

``Tag`` is a mutable, per-request builder. ``Tag.build()`` produces an immutable
``Element`` tree that can be rendered any number of times with identical output.
"""

from dataclasses import dataclass
from typing import (
    Any,
    Callable,
    Iterable,
    Iterator,
    List,
    Optional,
    Protocol,
    Tuple,
    Union,
    runtime_checkable,
)

from .attributes import AttributeSet
from .context import RenderContext, RenderInvariantError, SlotKey
from .escaping import (
    encode_text,
    validate_css_length,
    validate_tag_name,
)

VOID_TAGS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img",
        "input", "link", "meta", "source", "track", "wbr",
    }
)
HX_VERBS = ("get", "post", "put", "patch", "delete")


@runtime_checkable
class Node(Protocol):
    """Anything that renders to markup."""

    def render(self, context: Optional[RenderContext] = None) -> str:
        ...


LazyChildren = Callable[[RenderContext], Any]
Child = Union[Node, LazyChildren]


@dataclass(frozen=True)
class Text:
    """Text leaf. Always encoded."""

    value: str

    def render(self, context: Optional[RenderContext] = None) -> str:
        return encode_text(self.value)


@dataclass(frozen=True)
class RawMarkup:
    """
    Pre-trusted markup leaf.

    Only for markup generated or sanitized by this package, never for request input.
    """

    markup: str

    def render(self, context: Optional[RenderContext] = None) -> str:
        return self.markup


@dataclass(frozen=True)
class Slot:
    """Placeholder filled from the render context at render time."""

    key: SlotKey

    def render(self, context: Optional[RenderContext] = None) -> str:
        context = context or RenderContext.empty()
        value = context.get(self.key)
        if value is None:
            return ""
        if isinstance(value, Node):
            return value.render(context)
        return encode_text(str(value))


class Fragment:
    """An ordered run of nodes rendered without a wrapping element."""

    __slots__ = ("nodes",)

    def __init__(self, *nodes: Any) -> None:
        self.nodes: Tuple[Child, ...] = tuple(_coerce(node) for node in nodes)

    def render(self, context: Optional[RenderContext] = None) -> str:
        context = context or RenderContext.empty()
        return "".join(node.render(context) for node in expand_children(self.nodes, context))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Fragment) and self.nodes == other.nodes

    def __repr__(self) -> str:
        return f"Fragment({len(self.nodes)} nodes)"


EMPTY = Fragment()


def _coerce(value: Any) -> Child:
    if isinstance(value, Tag):
        return value.build()
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, Node) or callable(value):
        return value
    raise RenderInvariantError(f"Cannot use {type(value).__name__} as a child node")


def expand_children(children: Iterable[Child], context: RenderContext) -> Iterator[Node]:
    """Yield concrete nodes, evaluating lazy children against the context."""
    for child in children:
        if isinstance(child, Node):
            yield child
            continue
        produced = child(context)
        if produced is None:
            continue
        if isinstance(produced, (str, Tag)) or isinstance(produced, Node):
            yield _coerce(produced)  # type: ignore[misc]
            continue
        for item in produced:
            node = _coerce(item)
            if not isinstance(node, Node):
                raise RenderInvariantError("Lazy children must produce nodes or strings")
            yield node


class Element:
    """
    Immutable container node: tag, attributes and ordered children.

    Children are produced through ``child_stream``. Subclasses that inject synthetic
    children override it and must keep the order deterministic.
    """

    __slots__ = ("tag", "attributes", "children", "self_closing", "leading", "trailing")

    def __init__(
        self,
        tag: str,
        attributes: Optional[AttributeSet] = None,
        children: Iterable[Any] = (),
        self_closing: bool = False,
        leading: Iterable[Any] = (),
        trailing: Iterable[Any] = (),
    ) -> None:
        object.__setattr__(self, "tag", tag)
        object.__setattr__(self, "attributes", (attributes or AttributeSet()).freeze())
        object.__setattr__(self, "self_closing", self_closing)
        coerced = tuple(_coerce(child) for child in children)
        before = tuple(_coerce(child) for child in leading)
        after = tuple(_coerce(child) for child in trailing)
        if self_closing and (coerced or before or after):
            raise RenderInvariantError(f"Self-closing <{tag}> cannot have children")
        object.__setattr__(self, "children", coerced)
        object.__setattr__(self, "leading", before)
        object.__setattr__(self, "trailing", after)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Element is immutable")

    def child_stream(self, context: RenderContext) -> Iterator[Node]:
        """Yield leading synthetic children, declared children, then trailing ones."""
        yield from expand_children(self.leading, context)
        yield from expand_children(self.children, context)
        yield from expand_children(self.trailing, context)

    def render(self, context: Optional[RenderContext] = None) -> str:
        context = context or RenderContext.empty()
        opening = f"<{self.tag}{self.attributes.render()}"
        if self.self_closing:
            return opening + " />"
        child_context = context.descend()
        body = "".join(child.render(child_context) for child in self.child_stream(child_context))
        return f"{opening}>{body}</{self.tag}>"

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    @property
    def classes(self) -> Tuple[str, ...]:
        return self.attributes.classes

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return (
            self.tag == other.tag
            and self.self_closing == other.self_closing
            and list(self.attributes.items()) == list(other.attributes.items())
            and self.leading == other.leading
            and self.children == other.children
            and self.trailing == other.trailing
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Element(<{self.tag}>, {len(self.children)} children)"


class Tag:
    """
    Fluent builder for ``Element``.

    Every configuration method returns the builder. A builder may be attached to
    exactly one parent builder; ``build()`` may be called any number of times and
    always yields equal trees.
    """

    def __init__(self, tag: str, self_closing: Optional[bool] = None) -> None:
        self.tag = validate_tag_name(tag)
        self.self_closing = tag in VOID_TAGS if self_closing is None else self_closing
        self.attributes = AttributeSet()
        self._children: List[Any] = []
        self._leading: List[Any] = []
        self._trailing: List[Any] = []
        self._parent: Optional["Tag"] = None

    # Attributes

    def attr(self, name: str, value: Optional[str] = "") -> "Tag":
        self.attributes.set(name, value)
        return self

    def attrs(self, **values: str) -> "Tag":
        """Set several attributes; underscores in keyword names become hyphens."""
        for name, value in values.items():
            self.attributes.set(name.replace("_", "-"), value)
        return self

    def add_class(self, *tokens: str) -> "Tag":
        self.attributes.add_class(*tokens)
        return self

    def id(self, value: str) -> "Tag":
        self.attributes.set("id", value)
        return self

    def style(self, prop: str, value: str) -> "Tag":
        self.attributes.set_style(prop, value)
        return self

    def width(self, value: str) -> "Tag":
        return self.style("width", validate_css_length(value, "width"))

    def max_width(self, value: str) -> "Tag":
        return self.style("max-width", validate_css_length(value, "max-width"))

    def min_width(self, value: str) -> "Tag":
        return self.style("min-width", validate_css_length(value, "min-width"))

    def height(self, value: str) -> "Tag":
        return self.style("height", validate_css_length(value, "height"))

    def href(self, url: str) -> "Tag":
        return self.attr("href", url)

    def src(self, url: str) -> "Tag":
        return self.attr("src", url)

    def action(self, url: str) -> "Tag":
        return self.attr("action", url)

    def hx(self, verb: str, url: str) -> "Tag":
        """Set an htmx request attribute such as ``hx-post``."""
        if verb not in HX_VERBS:
            raise ValueError(f"Unsupported htmx verb: {verb}")
        return self.attr(f"hx-{verb}", url)

    def hx_target(self, selector: str) -> "Tag":
        return self.attr("hx-target", selector)

    def hx_swap(self, swap: str) -> "Tag":
        return self.attr("hx-swap", swap)

    # Children

    def _adopt(self, value: Any) -> Any:
        if isinstance(value, Tag):
            if self.self_closing:
                raise RenderInvariantError(f"Self-closing <{self.tag}> cannot have children")
            if value._parent is not None:
                raise RenderInvariantError(
                    f"<{value.tag}> is already attached to <{value._parent.tag}>"
                )
            ancestor: Optional[Tag] = self
            while ancestor is not None:
                if ancestor is value:
                    raise RenderInvariantError(f"Attaching <{value.tag}> would create a cycle")
                ancestor = ancestor._parent
            value._parent = self
        elif self.self_closing:
            raise RenderInvariantError(f"Self-closing <{self.tag}> cannot have children")
        elif not isinstance(value, (str, Tag)) and not isinstance(value, Node) and not callable(value):
            raise RenderInvariantError(f"Cannot use {type(value).__name__} as a child node")
        return value

    def child(self, node: Any) -> "Tag":
        """Append a node, builder or string. Strings are encoded when rendered."""
        if node is not None:
            self._children.append(self._adopt(node))
        return self

    def children(self, *nodes: Any) -> "Tag":
        for node in nodes:
            self.child(node)
        return self

    def text(self, value: str) -> "Tag":
        return self.child(Text(value))

    def raw(self, markup: str) -> "Tag":
        """Append trusted markup generated by this package."""
        return self.child(RawMarkup(markup))

    def lazy(self, producer: LazyChildren) -> "Tag":
        """Append children computed from the render context at render time."""
        return self.child(producer)

    def prepend(self, node: Any) -> "Tag":
        """Add a synthetic child rendered before the declared children."""
        self._leading.append(self._adopt(node))
        return self

    def append(self, node: Any) -> "Tag":
        """Add a synthetic child rendered after the declared children."""
        self._trailing.append(self._adopt(node))
        return self

    @property
    def child_count(self) -> int:
        return len(self._children)

    def build(self) -> Element:
        return Element(
            self.tag,
            self.attributes,
            [_built(child) for child in self._children],
            self_closing=self.self_closing,
            leading=[_built(child) for child in self._leading],
            trailing=[_built(child) for child in self._trailing],
        )

    def render(self, context: Optional[RenderContext] = None) -> str:
        return self.build().render(context)

    def __repr__(self) -> str:
        return f"Tag(<{self.tag}>)"


def _built(value: Any) -> Any:
    return value.build() if isinstance(value, Tag) else value


def tag(name: str, *children: Any, **attributes: str) -> Tag:
    """Shorthand for ``Tag(name).attrs(**attributes).children(*children)``."""
    return Tag(name).attrs(**attributes).children(*children)


def render(node: Any, context: Optional[RenderContext] = None) -> str:
    """Render a node, builder, plain string or lazy producer."""
    return Fragment(node).render(context)
