"""Result signals returned by pose operations."""

from enum import Enum, auto


class Status(Enum):
    """Outcome of a rotation, constraint or reset call.

    Failures are reported as values; the caller decides whether and how
    to surface them.
    """
    OK = auto()
    NOT_FOUND = auto()
    INVALID_RANGE = auto()

    def __bool__(self) -> bool:
        return self is Status.OK
