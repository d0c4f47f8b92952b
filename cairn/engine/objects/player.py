"""The player's character."""
from __future__ import annotations

from dataclasses import dataclass

from .base import object_type
from .character import Character


@object_type("player")
@dataclass(eq=False)
class Player(Character):
    """
    A Character driven by commands rather than by the tick.

    Players still fight back on the tick once engaged; everything else they do
    goes through PlayerActions.
    """

    def examine(self) -> list[str]:
        lines = list(self.description) or [f"You are {self.name}."]
        lines.extend(self.inventory.list_contents("You are holding"))
        if self.armour is not None:
            lines.append(
                f"You are wearing {self.armour.name}. (HP={self.armour.current_hp}/{self.armour.hp}.)"
            )
        lines.extend(self.stats())
        return lines
