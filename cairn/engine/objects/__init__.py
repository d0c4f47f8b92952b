"""
World object types.

Importing this package registers every type tag with the object registry,
so the factory can dispatch on the `object_type` of a definition.
"""

from .base import (
    Dimensions,
    GameObject,
    ObjectId,
    get_all_object_types,
    get_object_class,
    object_type,
)
from .attacks import Attack
from .container import Container, FoundObject, Inventory, LocationContainer
from .door import Door
from .armour import Armour
from .weapon import Weapon
from .food import Food
from .character import Character, Exchange
from .player import Player
from .location import DIRECTIONS, Exit, Location, normalise_direction

__all__ = [
    "Armour",
    "Attack",
    "Character",
    "Container",
    "DIRECTIONS",
    "Dimensions",
    "Door",
    "Exchange",
    "Exit",
    "Food",
    "FoundObject",
    "GameObject",
    "Inventory",
    "Location",
    "LocationContainer",
    "ObjectId",
    "Player",
    "Weapon",
    "get_all_object_types",
    "get_object_class",
    "normalise_direction",
    "object_type",
]
