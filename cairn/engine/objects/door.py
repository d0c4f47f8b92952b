"""Doors, which gate exits between locations."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..results import ActionResult
from ..text import definite
from .base import GameObject, ObjectId, object_type

if TYPE_CHECKING:
    from ..factory import ObjectFactory

# Heavy enough that no container or inventory can ever take it
DEFAULT_DOOR_WEIGHT_KG = 1000.0


@object_type("door")
@dataclass(eq=False)
class Door(GameObject):
    """A lockable door. Unlocked only by the object whose ID matches key_id."""

    key_id: ObjectId = ""
    locked: bool = True

    def parse_record(self, data: dict[str, Any], factory: "ObjectFactory") -> None:
        super().parse_record(data, factory)

        if data.get("weight") in (None, ""):
            self.weight = DEFAULT_DOOR_WEIGHT_KG
        if "door" not in (alias.lower() for alias in self.aliases):
            self.aliases.append("door")

        self.key_id = str(data.get("key", ""))
        self.locked = bool(data.get("locked", True))

    def unlock(self, key: GameObject) -> ActionResult:
        """Unlock with a candidate key. Only the matching key works."""
        if not self.locked:
            return ActionResult.failure(f"{definite(self.name, capital=True)} is already unlocked.")
        if key.id != self.key_id:
            return ActionResult.failure(
                f"{definite(key.name, capital=True)} does not unlock {definite(self.name)}."
            )
        self.locked = False
        return ActionResult.success(
            f"You unlock {definite(self.name)} with {definite(key.name)}."
        )

    def examine(self) -> list[str]:
        lines = list(self.description)
        state = "locked" if self.locked else "unlocked"
        lines.append(f"{definite(self.name, capital=True)} is {state}.")
        return lines
