"""
World state and the simulation loop.

The World is rebuilt wholesale by WorldManager.reset_world() and advanced by
WorldManager.tick(). Each tick:

1. Every location updates its contents, as they were when the tick began.
   Characters fight from their update hook.
2. Dead characters standing in each location are cleaned up: everything they
   carried (worn armour included) is dropped where they fell and the body is
   removed, so cleanup happens exactly once per death.
3. The narration produced is dispatched to subscribers and returned.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, List

from .errors import ConfigurationError
from .factory import ObjectFactory
from .objects import Attack, Character, Dimensions, GameObject, Location, Player
from .results import ActionResult
from .systems.context import GameContext
from .systems.events import Event, EventDispatcher
from .text import definite, names_and_counts

logger = logging.getLogger(__name__)

# Definition ID used for the player, if the world data provides one
PLAYER_ID = "player"


@dataclass
class World:
    """Every location of one game, and the player."""

    locations: dict[str, Location] = field(default_factory=dict)
    player: Player | None = None
    tick_count: int = 0

    def get_location(self, location_id: str) -> Location | None:
        return self.locations.get(location_id)

    def find_location_of(self, obj: GameObject) -> Location | None:
        return obj.location

    def iter_characters(self) -> Iterator[Character]:
        for location in self.locations.values():
            yield from location.characters()

    def neighbours(self, location_id: str) -> dict[str, str]:
        """direction -> target location ID, for every exit of a location."""
        location = self.locations.get(location_id)
        if location is None:
            return {}
        return {direction: exit_.to for direction, exit_ in location.exits.items()}

    def reachable_from(self, location_id: str, *, through_locked_doors: bool = True) -> list[str]:
        """Breadth-first walk over exits. Includes the starting location."""
        if location_id not in self.locations:
            return []
        seen = {location_id}
        order = [location_id]
        queue = deque([location_id])
        while queue:
            location = self.locations[queue.popleft()]
            for exit_ in location.exits.values():
                if exit_.to in seen or exit_.to not in self.locations:
                    continue
                if exit_.is_blocked and not through_locked_doors:
                    continue
                seen.add(exit_.to)
                order.append(exit_.to)
                queue.append(exit_.to)
        return order


class WorldManager:
    """
    Owns the World, the event dispatcher and the random source.

    Usage:
        manager = WorldManager(factory, "village-square", rng=random.Random(1))
        manager.reset_world()
        manager.dispatcher.subscribe(print_event)
        manager.tick()
    """

    def __init__(
        self,
        factory: ObjectFactory,
        start_location_id: str,
        *,
        rng: random.Random | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self.factory = factory
        self.start_location_id = start_location_id
        self.rng = rng or random.Random()
        self.dispatcher = dispatcher or EventDispatcher()
        self._world: World | None = None
        self._ctx: GameContext | None = None

    @property
    def world(self) -> World:
        if self._world is None:
            raise RuntimeError("World has not been created; call reset_world() first")
        return self._world

    @property
    def ctx(self) -> GameContext:
        if self._ctx is None:
            raise RuntimeError("World has not been created; call reset_world() first")
        return self._ctx

    # ---------- Reset ----------

    def reset_world(self) -> World:
        """
        Throw away the current world and build a new one from the definitions.

        Raises:
            ConfigurationError: if an exit leads nowhere, the start location is
                unknown, or the player cannot be placed there
        """
        locations = self.factory.create_all_locations()
        for location in locations.values():
            for exit_ in location.exits.values():
                if exit_.to not in locations:
                    raise ConfigurationError(
                        location.id, f"Exit '{exit_.direction}' leads to unknown location '{exit_.to}'"
                    )

        start = locations.get(self.start_location_id)
        if start is None:
            raise ConfigurationError(self.start_location_id, "Start location not found")

        player = self.create_player()
        result = start.add_object(player)
        if not result.ok:
            raise ConfigurationError(start.id, f"Cannot place the player: {result.message}")

        self._world = World(locations=locations, player=player)
        self._ctx = GameContext(self._world, rng=self.rng, factory=self.factory)
        logger.info("World reset: %d locations, player in %s", len(locations), start.id)
        return self._world

    def create_player(self) -> Player:
        """The player from the world data, or a default one."""
        if PLAYER_ID in self.factory:
            return self.factory.create_object_as(PLAYER_ID, Player)
        punch = Attack(name="punch", damage="1-3")
        punch.parse_damage(PLAYER_ID)
        return Player(
            id=PLAYER_ID,
            name="Adventurer",
            dimensions=Dimensions(1.8, 0.5, 0.3),
            weight=75.0,
            attacks=[punch],
            _base_resolved=True,
        )

    # ---------- Tick ----------

    def tick(self, now: datetime | None = None) -> List[Event]:
        """
        Advance the world by one tick.

        Args:
            now: Current UTC time (defaults to the wall clock)

        Returns:
            The narration events produced, after dispatching them
        """
        world = self.world
        now = now or datetime.now(timezone.utc)

        events: List[Event] = []
        for location in list(world.locations.values()):
            events.extend(location.update(now, self.ctx))
        for location in list(world.locations.values()):
            events.extend(self.cleanup_dead(location))

        world.tick_count += 1
        logger.debug("Tick %d at %s produced %d events", world.tick_count, now.isoformat(), len(events))
        self.dispatcher.dispatch(events)
        return events

    def cleanup_dead(self, location: Location) -> List[Event]:
        """Drop the belongings of every dead character here, then remove the bodies."""
        events: List[Event] = []
        for character in location.characters():
            if character.is_alive:
                continue

            # Objects the location rejects stay with the body
            dropped: List[GameObject] = []
            for obj in character.inventory.contents:
                result = location.add_object(obj)
                if result.ok:
                    dropped.append(obj)
                else:
                    logger.warning("%s could not drop %s in %s: %s", character.id, obj.id, location.id, result.message)
            armour = character.armour
            if armour is not None:
                result = location.add_object(armour)
                if result.ok:
                    character.armour = None
                    dropped.append(armour)
                else:
                    logger.warning("%s could not drop %s in %s: %s", character.id, armour.id, location.id, result.message)

            location.remove_object(character)
            character.prune_fight_opponents()

            name = definite(character.name, capital=True)
            events.append(self.ctx.msg_to_location(location.id, f"{name} has died."))
            if dropped:
                events.append(
                    self.ctx.msg_to_location(
                        location.id, f"{name} drops {names_and_counts(obj.name for obj in dropped)}."
                    )
                )
            logger.debug("Cleaned up %s in %s, dropped %d objects", character.id, location.id, len(dropped))
        return events

    # ---------- Movement ----------

    def move_character(self, character: Character, direction: str) -> ActionResult:
        """Move through an exit. A locked door blocks the way."""
        location = character.location
        if location is None:
            return ActionResult.failure(f"{definite(character.name, capital=True)} is not anywhere.")

        exit_ = location.get_exit(direction)
        if exit_ is None:
            return ActionResult.failure("You can't go that way.")
        if exit_.is_blocked:
            return ActionResult.failure(f"{definite(exit_.door.name, capital=True)} is locked.")

        target = self.world.get_location(exit_.to)
        if target is None:
            return ActionResult.failure("You can't go that way.")
        return target.add_object(character)
