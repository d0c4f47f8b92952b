"""
Typed outcomes for player-triggerable operations.

Failures here are normal narrative outcomes ("the bag is full"), so they are
returned rather than raised.
"""

from dataclasses import dataclass
from enum import Enum


class Constraint(Enum):
    """Which container rule rejected an insertion."""

    CAPACITY = "capacity"
    WEIGHT = "weight"
    SIZE = "size"
    CONTAINMENT = "containment"


@dataclass(frozen=True)
class ActionResult:
    """Result of an action such as adding to a container or unlocking a door."""

    ok: bool
    message: str = ""
    constraint: Constraint | None = None

    @classmethod
    def success(cls, message: str = "") -> "ActionResult":
        return cls(ok=True, message=message)

    @classmethod
    def failure(cls, message: str, constraint: Constraint | None = None) -> "ActionResult":
        return cls(ok=False, message=message, constraint=constraint)
