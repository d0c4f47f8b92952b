"""Food."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .base import GameObject, object_type

if TYPE_CHECKING:
    from ..factory import ObjectFactory


@object_type("food")
@dataclass(eq=False)
class Food(GameObject):
    # HP restored when eaten
    hp: int = 0

    def parse_record(self, data: dict[str, Any], factory: "ObjectFactory") -> None:
        super().parse_record(data, factory)
        self.hp = int(data.get("hp", 0))

    def examine(self) -> list[str]:
        lines = super().examine()
        lines.append(f"Restores {self.hp} HP.")
        return lines
