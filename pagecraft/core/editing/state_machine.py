"""
Edit State Machine
==================

Per-entity edit lifecycle and the single decision point for edit effects.

States run ``VIEW -> EDIT_REQUESTED -> VIEW``, with ``ABSENT`` as the terminal
state after an owner delete. The submitted state is transient: ``submit`` decides
the effect and stores the next state under one lock, so it is never observable and
has no member here. Review replays and direct posts submit from ``VIEW`` without a
rendered form.

The effect of a submission depends only on ``(edit_mode, action)`` and is resolved
by ``decide``; handlers act on the returned effect and never inspect the edit mode
themselves.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from pagecraft.config.logging import get_logger
from pagecraft.core.rendering.context import RenderInvariantError
from pagecraft.models.schemas import EditAction, EditMode

logger = get_logger(__name__)


class EditState(str, Enum):
    """Lifecycle state of one module or child entity."""
    VIEW = "view"
    EDIT_REQUESTED = "edit_requested"
    ABSENT = "absent"


class Effect(str, Enum):
    """What a handler must do for a submission."""
    APPLY = "apply"
    REMOVE = "remove"
    ENQUEUE = "enqueue"
    NONE = "none"


@dataclass(frozen=True)
class Transition:
    effect: Effect
    next_state: EditState


_CANCEL = Transition(Effect.NONE, EditState.VIEW)

TRANSITIONS: Dict[Tuple[EditMode, EditAction], Transition] = {
    (EditMode.OWNER_EDIT, EditAction.ADD): Transition(Effect.APPLY, EditState.VIEW),
    (EditMode.OWNER_EDIT, EditAction.UPDATE): Transition(Effect.APPLY, EditState.VIEW),
    (EditMode.OWNER_EDIT, EditAction.DELETE): Transition(Effect.REMOVE, EditState.ABSENT),
    (EditMode.USER_EDIT, EditAction.ADD): Transition(Effect.ENQUEUE, EditState.VIEW),
    (EditMode.USER_EDIT, EditAction.UPDATE): Transition(Effect.ENQUEUE, EditState.VIEW),
    (EditMode.USER_EDIT, EditAction.DELETE): Transition(Effect.ENQUEUE, EditState.VIEW),
}


def decide(edit_mode: EditMode, action: EditAction) -> Transition:
    """
    Map an edit mode and action to its effect and next state.

    Args:
        edit_mode: Owner or user edit mode
        action: Submitted action

    Returns:
        The transition to perform
    """
    if action is EditAction.CANCEL:
        return _CANCEL
    return TRANSITIONS[(EditMode(edit_mode), EditAction(action))]


EntityKey = Tuple[str, Optional[str]]


def entity_key(module_id: str, child_id: Optional[str] = None) -> EntityKey:
    """Key for a module, or for a child scoped under its parent module."""
    return (module_id, child_id)


class EditStateMachine:
    """Tracks the edit state of every module and child entity."""

    def __init__(self) -> None:
        self._states: Dict[EntityKey, EditState] = {}
        self._lock = threading.RLock()
        self.logger = logger.bind(component="edit_state_machine")

    def state(self, key: EntityKey) -> EditState:
        with self._lock:
            return self._states.get(key, EditState.VIEW)

    def request_edit(self, key: EntityKey) -> EditState:
        """
        Record that an edit form was rendered.

        Raises:
            RenderInvariantError: If the entity was deleted
        """
        with self._lock:
            current = self.state(key)
            if current is EditState.ABSENT:
                raise RenderInvariantError(f"Cannot edit deleted entity {_label(key)}")
            self._states[key] = EditState.EDIT_REQUESTED
            return EditState.EDIT_REQUESTED

    def submit(self, key: EntityKey, edit_mode: EditMode, action: EditAction) -> Transition:
        """
        Submit an action and move the entity straight to its next state.

        A delete of an absent entity is a no-op. Any other submission for an absent
        entity is an illegal transition.

        Raises:
            RenderInvariantError: On an illegal transition
        """
        with self._lock:
            current = self.state(key)
            if current is EditState.ABSENT:
                if action is EditAction.DELETE:
                    return Transition(Effect.NONE, EditState.ABSENT)
                raise RenderInvariantError(
                    f"Illegal transition: {action.value} on deleted entity {_label(key)}"
                )
            transition = decide(edit_mode, action)
            self._states[key] = transition.next_state
            self.logger.debug(
                "Edit transition",
                entity=_label(key),
                action=action.value,
                edit_mode=EditMode(edit_mode).value,
                effect=transition.effect.value,
                state=transition.next_state.value,
            )
            return transition

    def cancel(self, key: EntityKey) -> EditState:
        with self._lock:
            if self.state(key) is not EditState.ABSENT:
                self._states[key] = EditState.VIEW
            return self.state(key)

    def mark_absent(self, key: EntityKey) -> None:
        """Record that an entity no longer exists, e.g. after an approved delete."""
        with self._lock:
            self._states[key] = EditState.ABSENT

    def reset(self, key: EntityKey) -> None:
        """Forget an entity so a new one under the same key starts in ``VIEW``."""
        with self._lock:
            self._states.pop(key, None)


def _label(key: EntityKey) -> str:
    module_id, child_id = key
    return f"{module_id}/{child_id}" if child_id else module_id
