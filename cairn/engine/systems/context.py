"""
GameContext - shared state passed to update hooks and systems.

Holds the world, the random source used for combat rolls, and the object
factory (for anything created mid-game). Avoids circular imports between the
object model and the world.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from .events import Event, msg_to_location, msg_to_player

if TYPE_CHECKING:
    from ..factory import ObjectFactory
    from ..world import World


class GameContext:
    """
    Usage:
        ctx = GameContext(world, rng=random.Random(42))
        events = location.update(now, ctx)
    """

    def __init__(
        self,
        world: "World | None" = None,
        *,
        rng: random.Random | None = None,
        factory: "ObjectFactory | None" = None,
    ) -> None:
        self.world = world
        self.rng = rng or random.Random()
        self.factory = factory

    # ---------- Event helpers ----------

    def msg_to_player(self, player_id: str, text: str, *, payload: dict | None = None) -> Event:
        return msg_to_player(player_id, text, payload=payload)

    def msg_to_location(self, location_id: str | None, text: str, *, payload: dict | None = None) -> Event:
        return msg_to_location(location_id, text, payload=payload)
