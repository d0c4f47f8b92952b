"""
Game systems.

- EventDispatcher: narration events and their subscribers
- GameContext: shared state handed to update hooks
- combat: attack resolution and damage application
- PlayerActions: player intents turned into container/world operations
"""

from .events import Event, EventDispatcher, msg_to_location, msg_to_player
from .context import GameContext
from .combat import CombatConfig, resolve_attack
from .actions import PlayerActions

__all__ = [
    "CombatConfig",
    "Event",
    "EventDispatcher",
    "GameContext",
    "PlayerActions",
    "msg_to_location",
    "msg_to_player",
    "resolve_attack",
]
