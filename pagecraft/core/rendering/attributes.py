"""
Attribute Set
=============

Ordered attribute storage for elements.

``class`` tokens and inline style declarations are kept apart from the other
attributes and flattened to strings only when the set is rendered. Every other
name is last-write-wins and keeps the position of its first insertion.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from .context import RenderInvariantError
from .escaping import (
    InvalidInputError,
    encode_attribute,
    validate_attribute_name,
    validate_dom_id,
    validate_image_url,
    validate_style_declaration,
    validate_url,
)

CLASS = "class"
STYLE = "style"
ID = "id"

HX_REQUEST_ATTRIBUTES = frozenset(
    f"{prefix}hx-{verb}"
    for prefix in ("", "data-")
    for verb in ("get", "post", "put", "patch", "delete")
)
URL_ATTRIBUTES = frozenset({"href", "action", "formaction"}) | HX_REQUEST_ATTRIBUTES
IMAGE_URL_ATTRIBUTES = frozenset({"src"})


class AttributeSet:
    """Ordered name/value pairs with class-token accumulation."""

    def __init__(self) -> None:
        self._order: List[str] = []
        self._values: Dict[str, str] = {}
        self._classes: List[str] = []
        self._styles: Dict[str, str] = {}
        self._frozen = False

    def _check_mutable(self) -> None:
        if self._frozen:
            raise RenderInvariantError("Attributes of a built element cannot be changed")

    def _touch(self, name: str) -> None:
        if name not in self._order:
            self._order.append(name)

    def set(self, name: str, value: Optional[str] = "") -> "AttributeSet":
        """
        Set an attribute value.

        ``class`` values are split into tokens and merged; ``style`` values are parsed
        into declarations. An empty value renders as a boolean attribute.

        Values of URL-bearing names are checked against the link allow-list, or the
        image allow-list for ``src``. An ``id`` must be a safe DOM id.

        Raises:
            InvalidInputError: If the name, a URL, an id or a style declaration is malformed
        """
        self._check_mutable()
        validate_attribute_name(name)
        name = name.lower()
        value = None if value is None else str(value)
        _check_value(name, value)
        value = value or ""
        if name == CLASS:
            return self.add_class(value)
        if name == STYLE:
            for prop, prop_value in _parse_style(value):
                self.set_style(prop, prop_value)
            return self
        self._touch(name)
        self._values[name] = value
        return self

    def add_class(self, *tokens: str) -> "AttributeSet":
        """Add class tokens, ignoring tokens already present."""
        self._check_mutable()
        for raw in tokens:
            for token in (raw or "").split():
                if token not in self._classes:
                    self._classes.append(token)
        if self._classes:
            self._touch(CLASS)
        return self

    def set_style(self, prop: str, value: str) -> "AttributeSet":
        """Set one inline style declaration, replacing any previous value for the property."""
        self._check_mutable()
        validate_style_declaration(prop, value)
        self._styles[prop] = value.strip()
        self._touch(STYLE)
        return self

    def get(self, name: str) -> Optional[str]:
        """Return the effective value for a name, or None."""
        name = name.lower()
        if name == CLASS:
            return " ".join(self._classes) if self._classes else None
        if name == STYLE:
            return self._style_value() if self._styles else None
        return self._values.get(name)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._order

    def __len__(self) -> int:
        return len(self._order)

    @property
    def classes(self) -> Tuple[str, ...]:
        return tuple(self._classes)

    @property
    def styles(self) -> Tuple[Tuple[str, str], ...]:
        return tuple(self._styles.items())

    def _style_value(self) -> str:
        return " ".join(f"{prop}: {value};" for prop, value in self._styles.items())

    def items(self) -> Iterator[Tuple[str, str]]:
        """Yield effective (name, value) pairs in insertion order."""
        for name in self._order:
            yield name, self.get(name) or ""

    def copy(self) -> "AttributeSet":
        clone = AttributeSet()
        clone._order = list(self._order)
        clone._values = dict(self._values)
        clone._classes = list(self._classes)
        clone._styles = dict(self._styles)
        return clone

    def freeze(self) -> "AttributeSet":
        """Return an immutable copy."""
        clone = self.copy()
        clone._frozen = True
        return clone

    def render(self) -> str:
        """Serialize as `` name="value"`` pairs; empty values render as boolean attributes."""
        parts = []
        for name, value in self.items():
            if value == "":
                parts.append(f" {name}")
            else:
                parts.append(f' {name}="{encode_attribute(value)}"')
        return "".join(parts)

    def __repr__(self) -> str:
        return f"AttributeSet({dict(self.items())!r})"


def _parse_style(value: str) -> List[Tuple[str, str]]:
    declarations = []
    for chunk in value.split(";"):
        if not chunk.strip():
            continue
        if ":" not in chunk:
            raise InvalidInputError(f"Invalid style declaration: {chunk!r}", field=STYLE, value=value)
        prop, prop_value = chunk.split(":", 1)
        declarations.append((prop.strip().lower(), prop_value.strip()))
    return declarations


def _check_value(name: str, value: Optional[str]) -> None:
    if name in URL_ATTRIBUTES:
        validate_url(value, name)
    elif name in IMAGE_URL_ATTRIBUTES:
        validate_image_url(value, name)
    elif name == ID:
        validate_dom_id(value, name)
