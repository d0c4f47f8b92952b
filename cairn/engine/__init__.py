"""
The cairn engine: object model, containers, factory and world simulation.

    from cairn.engine import ObjectFactory, WorldManager

    factory = ObjectFactory()
    factory.load_root("world_data")
    manager = WorldManager(factory, "village-square")
    manager.reset_world()
    events = manager.tick()
"""

from .errors import (
    CairnError,
    ConfigurationError,
    ObjectNotFoundError,
    ObjectTypeMismatchError,
    UnitsError,
    ValidationError,
)
from .results import ActionResult, Constraint
from .factory import ObjectFactory, ObjectRecord
from .world import World, WorldManager
from .systems import EventDispatcher, GameContext, PlayerActions

__all__ = [
    "ActionResult",
    "CairnError",
    "ConfigurationError",
    "Constraint",
    "EventDispatcher",
    "GameContext",
    "ObjectFactory",
    "ObjectNotFoundError",
    "ObjectRecord",
    "ObjectTypeMismatchError",
    "PlayerActions",
    "UnitsError",
    "ValidationError",
    "World",
    "WorldManager",
]
