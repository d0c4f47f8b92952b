"""
Locations: named places joined by exits.

A location owns a root LocationContainer holding everything lying around in
it, characters included. Exits may be gated by a Door; doors live on the exit
rather than in the container so they can never be picked up or moved.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..errors import ConfigurationError
from ..results import ActionResult
from ..text import definite, names_and_counts
from .base import GameObject, ObjectId, object_type
from .character import Character
from .container import FoundObject, LocationContainer
from .door import Door
from .player import Player

if TYPE_CHECKING:
    from ..factory import ObjectFactory
    from ..systems.context import GameContext
    from ..systems.events import Event


# Canonical direction names, in display order
DIRECTIONS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW", "UP", "DOWN")

DIRECTION_ALIASES = {
    "NORTH": "N",
    "NORTHEAST": "NE",
    "NORTH-EAST": "NE",
    "EAST": "E",
    "SOUTHEAST": "SE",
    "SOUTH-EAST": "SE",
    "SOUTH": "S",
    "SOUTHWEST": "SW",
    "SOUTH-WEST": "SW",
    "WEST": "W",
    "NORTHWEST": "NW",
    "NORTH-WEST": "NW",
    "U": "UP",
    "D": "DOWN",
}


def normalise_direction(raw: str) -> str | None:
    """'north' -> 'N', 'Up' -> 'UP'. Unknown directions give None."""
    key = str(raw).strip().upper()
    key = DIRECTION_ALIASES.get(key, key)
    return key if key in DIRECTIONS else None


@dataclass(eq=False)
class Exit:
    """A one-way exit. Two locations joined both ways need an exit each."""

    direction: str
    to: ObjectId
    door_id: ObjectId = ""
    door: Door | None = None

    @property
    def is_blocked(self) -> bool:
        return self.door is not None and self.door.locked

    def describe(self) -> str:
        if self.door is None:
            return self.direction
        state = "locked" if self.door.locked else "unlocked"
        return f"{self.direction} ({self.door.name}, {state})"


@object_type("location")
@dataclass(eq=False)
class Location(GameObject):
    """A place in the world."""

    exits: dict[str, Exit] = field(default_factory=dict)
    root: LocationContainer = field(default_factory=LocationContainer, repr=False)

    def __post_init__(self) -> None:
        self.root.root_of = self

    # ---------- Resolution ----------

    def parse_record(self, data: dict[str, Any], factory: "ObjectFactory") -> None:
        super().parse_record(data, factory)

        self.exits = {}
        for raw_exit in data.get("exits") or []:
            raw_exit = raw_exit or {}
            direction = normalise_direction(raw_exit.get("direction", ""))
            if direction is None:
                raise ConfigurationError(self.id, f"Unknown exit direction '{raw_exit.get('direction')}'")
            if direction in self.exits:
                raise ConfigurationError(self.id, f"Duplicate exit '{direction}'")
            target = str(raw_exit.get("to", ""))
            if not target:
                raise ConfigurationError(self.id, f"Exit '{direction}' has no target location")

            door_id = str(raw_exit.get("door") or "")
            door = factory.door_for_exit(door_id) if door_id else None
            self.exits[direction] = Exit(direction, target, door_id, door)

        for object_id in data.get("objects") or []:
            self.root.add_starting_object(factory.create_object(object_id))

    # ---------- Contents ----------

    def add_object(self, obj: GameObject) -> ActionResult:
        return self.root.add(obj)

    def remove_object(self, obj: GameObject) -> GameObject:
        return self.root.remove(obj)

    @property
    def doors(self) -> list[Door]:
        return [exit_.door for exit_ in self.exits.values() if exit_.door is not None]

    def find_object_by_name(self, name: str) -> FoundObject | None:
        """Depth-first search of everything lying here. Doors are searched separately."""
        return self.root.find_by_name(name)

    def find_door_by_name(self, name: str) -> Door | None:
        for door in self.doors:
            if door.matches_name(name):
                return door
        return None

    def characters(self) -> list[Character]:
        """Characters standing here (not ones packed inside containers)."""
        return [obj for obj in self.root.contents if isinstance(obj, Character)]

    def get_exit(self, direction: str) -> Exit | None:
        normalised = normalise_direction(direction)
        return self.exits.get(normalised) if normalised else None

    # ---------- Text ----------

    def examine(self) -> list[str]:
        lines = [self.name] if self.name else []
        lines.extend(self.description)

        characters = self.characters()
        items = [obj for obj in self.root.contents if not isinstance(obj, Character)]
        if items:
            lines.append(f"You can see: {names_and_counts(obj.name for obj in items)}.")
        for character in characters:
            if character.is_alive and not isinstance(character, Player):
                lines.append(f"{definite(character.name, capital=True)} is here.")

        if self.exits:
            ordered = sorted(self.exits.values(), key=lambda exit_: DIRECTIONS.index(exit_.direction))
            lines.append("Exits: " + ", ".join(exit_.describe() for exit_ in ordered) + ".")
        else:
            lines.append("There are no exits.")
        return lines

    # ---------- Tick ----------

    def update(self, now: datetime, ctx: "GameContext") -> list["Event"]:
        return self.root.update(now, ctx)
