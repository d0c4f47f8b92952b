"""Armour, worn by characters to absorb damage."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..errors import ConfigurationError
from .base import GameObject, object_type

if TYPE_CHECKING:
    from ..factory import ObjectFactory

_PERCENTAGE_RE = re.compile(r"^\s*(?P<value>\d+(?:\.\d+)?)\s*%\s*$")


def parse_percentage(raw: str, object_id: str) -> float:
    """
    '75%' -> 0.75.

    Raises:
        ConfigurationError: if the string is not a 0-100 percentage
    """
    match = _PERCENTAGE_RE.match(str(raw))
    if not match:
        raise ConfigurationError(object_id, f"Invalid percentage '{raw}'")
    value = float(match.group("value"))
    if value > 100.0:
        raise ConfigurationError(object_id, f"Percentage '{raw}' is over 100%")
    return value / 100.0


@object_type("armour")
@dataclass(eq=False)
class Armour(GameObject):
    # HP from the definition, and what is left of it
    hp: int = 0
    current_hp: int = 0
    damage_reduction: str = "0%"
    damage_reduction_factor: float = 0.0

    def parse_record(self, data: dict[str, Any], factory: "ObjectFactory") -> None:
        super().parse_record(data, factory)
        self.hp = int(data.get("hp", 0))
        self.current_hp = self.hp
        self.damage_reduction = str(data.get("damage_reduction", "0%"))
        self.damage_reduction_factor = parse_percentage(self.damage_reduction, self.id)

    @property
    def is_broken(self) -> bool:
        return self.current_hp <= 0

    def repair(self) -> None:
        self.current_hp = self.hp

    def examine(self) -> list[str]:
        lines = super().examine()
        lines.append(f"HP: {self.current_hp}/{self.hp}")
        lines.append(f"Damage reduction: {self.damage_reduction}")
        return lines
