"""
Module Editing
==============

Edit state machine, edit handlers, edit modals and out-of-band response assembly.
"""

from .handler import ChildEditService, EditHandler, ModuleEditService, ReviewService
from .oob import OobResponse, OobTarget, SwapDirective
from .outcomes import Applied, EditOutcome, NoChange, PendingApproval
from .state_machine import Effect, EditState, EditStateMachine

__all__ = [
    "Applied",
    "ChildEditService",
    "Effect",
    "EditHandler",
    "EditOutcome",
    "EditState",
    "EditStateMachine",
    "ModuleEditService",
    "NoChange",
    "OobResponse",
    "OobTarget",
    "PendingApproval",
    "ReviewService",
    "SwapDirective",
]
