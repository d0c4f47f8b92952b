"""Weapons."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .attacks import Attack, parse_attacks
from .base import GameObject, object_type

if TYPE_CHECKING:
    from ..factory import ObjectFactory


@object_type("weapon")
@dataclass(eq=False)
class Weapon(GameObject):
    """An object that grants attacks to whoever carries it."""

    attacks: list[Attack] = field(default_factory=list)

    def parse_record(self, data: dict[str, Any], factory: "ObjectFactory") -> None:
        super().parse_record(data, factory)
        self.attacks = parse_attacks(data.get("attacks"), self.id)

    def examine(self) -> list[str]:
        lines = super().examine()
        lines.append("Attacks:")
        lines.extend(f"- {attack.stats()}" for attack in self.attacks)
        return lines
