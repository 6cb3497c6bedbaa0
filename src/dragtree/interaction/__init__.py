"""Interaction package - pointer gestures turned into tree changes."""

from dragtree.interaction.changes import ChangeSet, DragEcho, DropDecision, DropOutcome
from dragtree.interaction.click import ClickDisambiguator, ClickState
from dragtree.interaction.drag import DragReparentEngine
from dragtree.interaction.scheduler import ManualScheduler, Scheduler, TimerHandle

__all__ = [
    "ChangeSet",
    "ClickDisambiguator",
    "ClickState",
    "DragEcho",
    "DragReparentEngine",
    "DropDecision",
    "DropOutcome",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
]
