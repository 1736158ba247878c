"""Status enum for vehicle compliance levels."""

from enum import Enum


class Status(Enum):
    """Compliance status categories. Lower value = more urgent."""

    CRITICAL = 1
    WARNING = 2
    ACTIVE = 3
