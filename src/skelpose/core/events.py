"""EventBus for decoupled publish/subscribe communication."""

from enum import Enum, auto
from typing import Any, Callable
from collections import defaultdict


class EventType(Enum):
    # Skeleton lifecycle
    SKELETON_LOADED = auto()          # data: bone_count (int), groups (dict)

    # Selection
    SELECTION_CHANGED = auto()        # data: bone_id (str | None), previous_id (str | None)

    # Posing
    BONE_ROTATED = auto()             # data: bone_id (str), axis (str), value (float)
    ROTATION_LIMITS_CHANGED = auto()  # data: bone_id (str), limits (dict[str, RotationConstraint])
    POSE_RESET = auto()               # data: bone_ids (list[str])


class EventBus:
    """Simple publish/subscribe event system."""

    def __init__(self):
        self._handlers: dict[EventType, list[Callable]] = defaultdict(list)

    def subscribe(self, event_type: EventType, handler: Callable) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: EventType, handler: Callable) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_type: EventType, **data: Any) -> None:
        for handler in list(self._handlers[event_type]):
            handler(**data)

    def clear(self) -> None:
        self._handlers.clear()
