"""
Edit Outcomes
=============

Tagged results returned by every edit handler operation.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from pagecraft.core.rendering.components import alert
from pagecraft.core.rendering.nodes import EMPTY, Element, Fragment, Node
from pagecraft.models.schemas import PendingEdit

PENDING_NOTICE = "Your changes have been submitted for review and will appear once approved."


@dataclass(frozen=True)
class Applied:
    """The stored content now reflects the mutation. ``node`` is the refreshed view."""

    node: Node
    removed: bool = False


@dataclass(frozen=True)
class PendingApproval:
    """The mutation was queued for review; ``node`` is the unchanged view."""

    node: Node
    notice: Node
    pending: Optional[PendingEdit] = None


@dataclass(frozen=True)
class NoChange:
    """
    Nothing was mutated: unknown target, failed validation, denied access or delete
    of an absent entity.

    ``form`` is set when the modal must stay open, e.g. re-rendered with errors.
    """

    node: Node = field(default_factory=lambda: EMPTY)
    notice: Optional[Node] = None
    form: Optional[Node] = None


EditOutcome = Union[Applied, PendingApproval, NoChange]


def pending_notice(message: str = PENDING_NOTICE) -> Element:
    return alert(message, "warning").add_class("pending-approval-notice").build()


def not_found_notice(target: str, kind: str = "Module") -> Element:
    return alert(f"{kind} '{target}' was not found.", "danger").add_class("not-found-notice").build()


def outcome_node(outcome: EditOutcome) -> Node:
    """Node to render for an outcome: any notice first, then the content view."""
    notice = getattr(outcome, "notice", None)
    if notice is None:
        return outcome.node
    return Fragment(notice, outcome.node)
