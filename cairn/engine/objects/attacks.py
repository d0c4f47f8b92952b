"""Attacks performed by characters and weapons."""

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class Attack:
    """
    One named attack with a damage range.

    The range comes from a "min-max" string such as "10-20". A malformed
    string is logged and leaves the damage at 0 rather than failing the
    whole object.
    """

    name: str = ""
    damage: str = ""
    min_damage: int = 0
    max_damage: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any], owner_id: str = "") -> "Attack":
        attack = cls(name=str(data.get("name", "")), damage=str(data.get("damage", "")))
        attack.parse_damage(owner_id)
        return attack

    def parse_damage(self, owner_id: str = "") -> None:
        tokens = self.damage.split("-")
        if len(tokens) != 2:
            logger.error(
                "Invalid damage format '%s' for attack=%s, object=%s",
                self.damage, self.name, owner_id,
            )
            return
        try:
            min_damage, max_damage = int(tokens[0]), int(tokens[1])
        except ValueError as exc:
            logger.error(
                "Invalid damage format '%s' for attack=%s, object=%s: %s",
                self.damage, self.name, owner_id, exc,
            )
            return
        self.min_damage, self.max_damage = min_damage, max_damage

    def stats(self) -> str:
        return f"{self.name}: {self.min_damage}-{self.max_damage}"


def parse_attacks(raw: Any, owner_id: str) -> list[Attack]:
    """Build the attack list of a weapon or character definition."""
    return [Attack.from_dict(entry or {}, owner_id) for entry in raw or []]
