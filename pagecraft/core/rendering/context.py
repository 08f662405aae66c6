"""
Render Context
==============

Immutable per-render state threaded top-down through the tree.

A context carries the current nesting depth, the depth limit and any slot values
supplied by the request. Descending into a child produces a new context; nothing
is ever mutated in place.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

T = TypeVar("T")

DEFAULT_MAX_DEPTH = 256


class RenderInvariantError(RuntimeError):
    """Raised when a tree is malformed: shared or cyclic nodes, runaway depth, bad transitions."""

    pass


@dataclass(frozen=True)
class SlotKey(Generic[T]):
    """
    Typed key for a value supplied through the render context.

    Keys compare by name. A default may be a constant or a callable that receives
    the context being rendered.
    """

    name: str
    default: Optional[Any] = field(default=None, compare=False, hash=False)

    def default_for(self, context: "RenderContext") -> Optional[T]:
        if callable(self.default):
            return self.default(context)
        return self.default


def _frozen(values: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class RenderContext:
    """Immutable render state: depth, depth limit and slot values keyed by slot name."""

    depth: int = 0
    max_depth: int = DEFAULT_MAX_DEPTH
    slots: Mapping[str, Any] = field(default_factory=lambda: _frozen(None))

    @classmethod
    def empty(cls, max_depth: int = DEFAULT_MAX_DEPTH) -> "RenderContext":
        return cls(depth=0, max_depth=max_depth)

    @classmethod
    def of(cls, values: Dict[SlotKey, Any], max_depth: int = DEFAULT_MAX_DEPTH) -> "RenderContext":
        """Create a context holding the given slot values."""
        return cls(
            depth=0,
            max_depth=max_depth,
            slots=_frozen({key.name: value for key, value in values.items()}),
        )

    def get(self, key: SlotKey[T]) -> Optional[T]:
        """Return the slot value, falling back to the key's default."""
        if key.name in self.slots:
            return self.slots[key.name]
        return key.default_for(self)

    def with_value(self, key: SlotKey[T], value: T) -> "RenderContext":
        """Return a copy with one slot value set."""
        values = dict(self.slots)
        values[key.name] = value
        return RenderContext(depth=self.depth, max_depth=self.max_depth, slots=_frozen(values))

    def descend(self) -> "RenderContext":
        """
        Return the context for rendering one level deeper.

        Raises:
            RenderInvariantError: If the depth limit would be exceeded
        """
        if self.depth + 1 > self.max_depth:
            raise RenderInvariantError(
                f"Render depth exceeded the limit of {self.max_depth}"
            )
        return RenderContext(depth=self.depth + 1, max_depth=self.max_depth, slots=self.slots)


