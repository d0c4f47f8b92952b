"""
PlayerActions - player intents turned into container and world operations.

There is no text parsing here: callers have already decided the player wants
to "take bags" or "put apple in box". Every method returns narration events
for the caller to dispatch. Failures a player can cause (a full bag, a locked
door, a name that matches nothing) are narration, never exceptions.

Targets are resolved in the player's inventory first, then in the location
(nested containers included), then among the location's doors. Names go
through ObjectFactory.get_object_name() so "apples" finds "apple".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from ..objects import (
    Armour,
    Character,
    Container,
    Door,
    Food,
    GameObject,
    Inventory,
    Weapon,
    normalise_direction,
)
from ..text import definite
from .events import Event, msg_to_player

if TYPE_CHECKING:
    from ..objects import Location, Player
    from ..world import WorldManager

logger = logging.getLogger(__name__)

SELF_NAMES = {"me", "self", "myself"}
ALL_NAMES = {"all", "everything"}


@dataclass(frozen=True)
class Target:
    """A resolved command target and the container directly holding it (None for doors)."""

    obj: GameObject
    owner: Container | None


class PlayerActions:
    """
    Usage:
        actions = PlayerActions(manager)
        manager.dispatcher.dispatch(actions.take("apples"))
    """

    def __init__(self, manager: "WorldManager") -> None:
        self.manager = manager

    # ---------- Helpers ----------

    @property
    def player(self) -> "Player":
        return self.manager.world.player

    @property
    def location(self) -> "Location | None":
        return self.player.location

    def _say(self, *lines: str) -> List[Event]:
        return [msg_to_player(self.player.id, "\n".join(lines))]

    def _canonical(self, name: str) -> tuple[str, bool]:
        return self.manager.factory.get_object_name(name)

    def _find(self, name: str) -> Target | None:
        """Inventory, then the location's contents, then its doors."""
        canonical, _ = self._canonical(name)
        for candidate in (name, canonical):
            found = self.player.inventory.find_by_name(candidate)
            if found is not None:
                return Target(found.obj, found.owner)

            location = self.location
            if location is None:
                continue
            found = location.find_object_by_name(candidate)
            if found is not None and found.obj is not self.player:
                return Target(found.obj, found.owner)
            door = location.find_door_by_name(candidate)
            if door is not None:
                return Target(door, None)
        return None

    def _find_all_in_location(self, name: str) -> List[GameObject]:
        location = self.location
        if location is None:
            return []
        canonical, _ = self._canonical(name)
        return [found.obj for found in location.root.find_all_by_name(canonical) if found.obj is not self.player]

    def _dead(self) -> List[Event] | None:
        if self.player.is_dead:
            return self._say("You are dead.")
        return None

    def _not_here(self, name: str) -> List[Event]:
        return self._say(f"You can't see '{name}' here.")

    # ---------- Looking ----------

    def look(self) -> List[Event]:
        location = self.location
        if location is None:
            return self._say("You are nowhere at all.")
        return self._say(*location.examine())

    def examine(self, target: str) -> List[Event]:
        if target.strip().lower() in SELF_NAMES:
            return self._say(*self.player.examine())
        found = self._find(target)
        if found is None:
            return self._not_here(target)
        return self._say(*found.obj.examine())

    def inventory(self) -> List[Event]:
        lines = self.player.inventory.list_contents("You are holding")
        if self.player.armour is not None:
            armour = self.player.armour
            lines.append(f"You are wearing {definite(armour.name)}. (HP={armour.current_hp}/{armour.hp}.)")
        return self._say(*lines)

    def stats(self, target: str | None = None) -> List[Event]:
        if target is None or target.strip().lower() in SELF_NAMES:
            return self._say(*self.player.stats())
        found = self._find(target)
        if found is None:
            return self._not_here(target)
        if not isinstance(found.obj, Character):
            return self._say(f"{definite(found.obj.name, capital=True)} has no stats.")
        return self._say(*found.obj.stats())

    # ---------- Moving ----------

    def go(self, direction: str) -> List[Event]:
        dead = self._dead()
        if dead:
            return dead
        normalised = normalise_direction(direction)
        if normalised is None:
            return self._say(f"'{direction}' is not a direction.")

        leaving = self.location
        result = self.manager.move_character(self.player, normalised)
        if not result.ok:
            return self._say(result.message)

        events = []
        if leaving is not None:
            events.append(self.manager.ctx.msg_to_location(leaving.id, f"{self.player.name} leaves."))
        events.extend(self._say(f"You go {normalised}.", *self.location.examine()))
        return events

    # ---------- Items ----------

    def _take_one(self, obj: GameObject) -> str:
        if isinstance(obj, Character):
            return f"You can't take {definite(obj.name)}."
        if isinstance(obj, Door) or obj.container is None:
            return f"You can't take {definite(obj.name)}."
        if self.player.inventory.contains(obj) or obj.container is self.player.inventory:
            return f"You already have {definite(obj.name)}."
        result = self.player.inventory.add(obj)
        if not result.ok:
            return result.message
        return f"You take {definite(obj.name)}."

    def take(self, target: str) -> List[Event]:
        """Take one object, every match of a plural name, or 'all'."""
        dead = self._dead()
        if dead:
            return dead
        location = self.location
        if location is None:
            return self._say("There is nothing here to take.")

        if target.strip().lower() in ALL_NAMES:
            candidates = [
                obj for obj in location.root.contents if not isinstance(obj, Character)
            ]
            if not candidates:
                return self._say("There is nothing here to take.")
            return self._say(*(self._take_one(obj) for obj in candidates))

        _, plural = self._canonical(target)
        if plural:
            candidates = self._find_all_in_location(target)
            if not candidates:
                return self._not_here(target)
            return self._say(*(self._take_one(obj) for obj in candidates))

        found = location.find_object_by_name(target) or location.find_object_by_name(self._canonical(target)[0])
        if found is None or found.obj is self.player:
            door = location.find_door_by_name(target)
            if door is not None:
                return self._say(self._take_one(door))
            if self.player.inventory.find_by_name(target) is not None:
                return self._say(f"You already have {definite(target)}.")
            return self._not_here(target)
        return self._say(self._take_one(found.obj))

    def _drop_one(self, obj: GameObject) -> str:
        result = self.location.add_object(obj)
        if not result.ok:
            return result.message
        return f"You drop {definite(obj.name)}."

    def drop(self, target: str) -> List[Event]:
        """Drop one carried object, every match of a plural name, or 'all'."""
        if self.location is None:
            return self._say("There is nowhere to drop anything.")

        inventory = self.player.inventory
        if target.strip().lower() in ALL_NAMES:
            candidates = list(inventory.contents)
            if not candidates:
                return self._say("You are not holding anything.")
            return self._say(*(self._drop_one(obj) for obj in candidates))

        canonical, plural = self._canonical(target)
        if plural:
            candidates = [found.obj for found in inventory.find_all_by_name(canonical)]
        else:
            found = inventory.find_by_name(target) or inventory.find_by_name(canonical)
            candidates = [found.obj] if found is not None else []
        if not candidates:
            return self._say(f"You don't have '{target}'.")
        return self._say(*(self._drop_one(obj) for obj in candidates))

    def put(self, item: str, container: str) -> List[Event]:
        dead = self._dead()
        if dead:
            return dead
        found_item = self._find(item)
        if found_item is None:
            return self._not_here(item)
        found_container = self._find(container)
        if found_container is None:
            return self._not_here(container)

        obj, holder = found_item.obj, found_container.obj
        if not isinstance(holder, Container) or isinstance(holder, Inventory):
            return self._say(f"{definite(holder.name, capital=True)} is not a container.")
        if isinstance(obj, (Character, Door)):
            return self._say(f"You can't move {definite(obj.name)}.")

        result = holder.add(obj)
        if not result.ok:
            return self._say(result.message)
        return self._say(f"You put {definite(obj.name)} in {definite(holder.name)}.")

    def give(self, item: str, character: str) -> List[Event]:
        dead = self._dead()
        if dead:
            return dead
        found_item = self.player.inventory.find_by_name(item) or self.player.inventory.find_by_name(
            self._canonical(item)[0]
        )
        if found_item is None:
            return self._say(f"You don't have '{item}'.")
        found_target = self._find(character)
        if found_target is None:
            return self._not_here(character)
        receiver = found_target.obj
        if not isinstance(receiver, Character) or receiver.is_dead:
            return self._say(f"You can't give anything to {definite(receiver.name)}.")

        obj = found_item.obj
        result, exchanged = receiver.given(obj)
        if not result.ok:
            return self._say(
                f"{definite(receiver.name, capital=True)} can't take {definite(obj.name)}: {result.message}"
            )

        lines = [f"You give {definite(obj.name)} to {definite(receiver.name)}."]
        if result.message:
            lines.append(result.message)
        if exchanged is not None:
            lines.append(f"{definite(receiver.name, capital=True)} gives you {definite(exchanged.name)}.")
            if not self.player.inventory.add(exchanged).ok:
                self.location.add_object(exchanged)
                lines.append(f"You can't carry {definite(exchanged.name)}, so you drop it.")
            logger.debug("%s exchanged %s for %s", receiver.id, obj.id, exchanged.id)
        return self._say(*lines)

    def eat(self, target: str) -> List[Event]:
        dead = self._dead()
        if dead:
            return dead
        found = self._find(target)
        if found is None:
            return self._not_here(target)
        food = found.obj
        if not isinstance(food, Food):
            return self._say(f"You can't eat {definite(food.name)}.")

        found.owner.remove(food)
        gained = self.player.heal(food.hp)
        return self._say(
            f"You eat {definite(food.name)}. (+{gained} HP, now {self.player.hp}/{self.player.max_hp}.)"
        )

    def wear(self, target: str) -> List[Event]:
        dead = self._dead()
        if dead:
            return dead
        worn = self.player.armour
        if worn is not None and worn.matches_name(target):
            return self._say(f"You are already wearing {definite(worn.name)}.")
        found = self._find(target)
        if found is None:
            return self._not_here(target)
        armour = found.obj
        if not isinstance(armour, Armour):
            return self._say(f"You can't wear {definite(armour.name)}.")
        return self._say(*self.player.wear(armour))

    def repair(self, target: str) -> List[Event]:
        armour = self.player.armour
        if armour is None or not armour.matches_name(target):
            found = self._find(target)
            if found is None:
                return self._not_here(target)
            armour = found.obj
        if not isinstance(armour, Armour):
            return self._say(f"You can't repair {definite(armour.name)}.")
        armour.repair()
        return self._say(f"You repair {definite(armour.name)}. (HP={armour.current_hp}/{armour.hp}.)")

    def unlock(self, target: str) -> List[Event]:
        """Unlock a door with whichever carried object is its key."""
        dead = self._dead()
        if dead:
            return dead
        found = self._find(target)
        if found is None:
            return self._not_here(target)
        door = found.obj
        if not isinstance(door, Door):
            return self._say(f"You can't unlock {definite(door.name)}.")
        if not door.locked:
            return self._say(f"{definite(door.name, capital=True)} is already unlocked.")

        key = self.player.inventory.find_by_id(door.key_id) if door.key_id else None
        if key is None:
            return self._say(f"You don't have anything that unlocks {definite(door.name)}.")
        result = door.unlock(key.obj)
        events = self._say(result.message)
        if result.ok:
            events.append(
                self.manager.ctx.msg_to_location(
                    self.location.id, f"{self.player.name} unlocks {definite(door.name)}."
                )
            )
        return events

    # ---------- Characters ----------

    def kill(self, target: str, weapon: str | None = None) -> List[Event]:
        """Start a fight. Both sides fight on each tick until one dies or leaves."""
        dead = self._dead()
        if dead:
            return dead
        found = self._find(target)
        if found is None:
            return self._not_here(target)
        opponent = found.obj
        if not isinstance(opponent, Character) or opponent.container is None or opponent.container.root_of is None:
            return self._say(f"You can't attack {definite(opponent.name)}.")
        if opponent.is_dead:
            return self._say(f"{definite(opponent.name, capital=True)} is already dead.")

        weapon_name = ""
        if weapon:
            found_weapon = self.player.inventory.find_by_name(weapon)
            if found_weapon is None or not isinstance(found_weapon.obj, Weapon):
                return self._say(f"You don't have a weapon called '{weapon}'.")
            weapon_name = found_weapon.obj.name

        self.player.add_fight_opponent(opponent, weapon_name)
        opponent.add_fight_opponent(self.player)
        logger.debug("%s engaged %s (weapon=%r)", self.player.id, opponent.id, weapon_name)
        return [
            *self._say(f"You attack {definite(opponent.name)}."),
            self.manager.ctx.msg_to_location(
                self.location.id, f"{self.player.name} attacks {definite(opponent.name)}."
            ),
        ]

    def talk(self, target: str) -> List[Event]:
        found = self._find(target)
        if found is None:
            return self._not_here(target)
        character = found.obj
        if not isinstance(character, Character) or character.is_dead:
            return self._say(f"{definite(character.name, capital=True)} doesn't say anything.")
        lines = character.talk()
        if not lines:
            return self._say(f"{definite(character.name, capital=True)} has nothing to say.")
        return self._say(f"{definite(character.name, capital=True)} says:", *lines)
