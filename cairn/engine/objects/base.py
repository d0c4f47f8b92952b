"""
Base class and type registry for everything that can exist in the world.

Every object type is a GameObject subclass registered against the type tag
used in definition files:

    @object_type("food")
    class Food(GameObject):
        hp: int = 0

        def parse_record(self, data, factory):
            super().parse_record(data, factory)
            self.hp = int(data.get("hp", 0))

parse_record() resolves the raw definition into numeric/runtime state. Every
override must call the base implementation first; the factory refuses objects
whose base resolution did not run (they would have zero dimensions and slip
through every container size check).
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar

from ..errors import ConfigurationError, UnitsError
from ..text import definite
from .. import units

if TYPE_CHECKING:
    from ..factory import ObjectFactory
    from ..systems.context import GameContext
    from ..systems.events import Event
    from .container import Container
    from .location import Location

logger = logging.getLogger(__name__)

ObjectId = str


# =============================================================================
# Dimensions
# =============================================================================


@dataclass
class Dimensions:
    """Resolved height/width/depth in metres."""

    height: float = 0.0
    width: float = 0.0
    depth: float = 0.0

    def sorted_desc(self) -> tuple[float, float, float]:
        """The three axes, largest first."""
        return tuple(sorted((self.height, self.width, self.depth), reverse=True))

    def fits_inside(self, outer: "Dimensions") -> bool:
        """
        Largest-fits-largest check.

        Each of this object's sorted axes must be strictly smaller than the
        matching sorted axis of the outer object. Rotation and irregular
        shapes are not modelled.
        """
        return all(
            inner < outer_axis
            for inner, outer_axis in zip(self.sorted_desc(), outer.sorted_desc())
        )


# =============================================================================
# GameObject
# =============================================================================


@dataclass(eq=False)
class GameObject:
    """
    A live object created from a definition.

    Identity matters: two apples stamped from the same definition are two
    different objects, so equality is by reference (eq=False).
    """

    object_type: ClassVar[str] = "object"

    id: ObjectId = ""
    name: str = ""
    aliases: list[str] = field(default_factory=list)
    description: list[str] = field(default_factory=list)
    dimensions: Dimensions = field(default_factory=Dimensions)
    weight: float = 0.0

    # Unique per created instance
    instance_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    # Direct owning container (None when not held by anything)
    container: "Container | None" = field(default=None, repr=False)

    _base_resolved: bool = field(default=False, repr=False)

    # ---------- Resolution ----------

    def parse_record(self, data: dict[str, Any], factory: "ObjectFactory") -> None:
        """Resolve the fields every object type shares."""
        self.id = str(data.get("id", self.id))
        self.name = str(data.get("name", self.name or self.id))
        self.aliases = [str(alias) for alias in data.get("aliases") or []]
        self.description = _parse_lines(data.get("description"))

        raw_dimensions = data.get("dimensions") or {}
        self.dimensions = Dimensions(
            height=self._resolve_units(raw_dimensions.get("height"), "height"),
            width=self._resolve_units(raw_dimensions.get("width"), "width"),
            depth=self._resolve_units(raw_dimensions.get("depth"), "depth"),
        )
        self.weight = self._resolve_units(data.get("weight"), "weight")
        self._base_resolved = True

    def _resolve_units(self, raw: Any, field_name: str, default: float = 0.0) -> float:
        if raw is None or raw == "":
            return default
        try:
            return units.parse(raw)
        except UnitsError as exc:
            raise ConfigurationError(self.id, f"Invalid {field_name} '{raw}': {exc}") from exc

    @property
    def is_resolved(self) -> bool:
        return self._base_resolved

    # ---------- Naming ----------

    def matches_name(self, name: str) -> bool:
        """Case-insensitive match against the name or any alias."""
        wanted = name.strip().lower()
        if wanted == self.name.lower():
            return True
        return any(wanted == alias.lower() for alias in self.aliases)

    # ---------- Weight / placement ----------

    @property
    def total_weight(self) -> float:
        """Own weight plus anything carried. Plain objects carry nothing."""
        return self.weight

    @property
    def location(self) -> "Location | None":
        """The Location this object is ultimately in, if any."""
        holder = self.container
        while holder is not None:
            if holder.root_of is not None:
                return holder.root_of
            if holder.container is not None:
                holder = holder.container
            elif holder.owner is not None:
                holder = holder.owner.container
            else:
                holder = None
        return None

    @property
    def location_id(self) -> str | None:
        location = self.location
        return location.id if location else None

    # ---------- Behaviour hooks ----------

    def examine(self) -> list[str]:
        """Text shown when the object is examined."""
        if self.description:
            return list(self.description)
        return [f"You see nothing special about {definite(self.name)}."]

    def update(self, now: datetime, ctx: "GameContext") -> list["Event"]:
        """Called once per tick. Returns narration events."""
        return []


def _parse_lines(raw: Any) -> list[str]:
    """Description text may be a single (multi-line) string or a list of lines."""
    if raw is None:
        return []
    if isinstance(raw, str):
        return raw.strip("\n").splitlines()
    return [str(line) for line in raw]


# =============================================================================
# Object type registry
# =============================================================================

# Registry of type tag -> GameObject subclass
_OBJECT_REGISTRY: dict[str, type[GameObject]] = {}


def object_type(tag: str):
    """
    Decorator to register a GameObject subclass for a definition type tag.

    Usage:
        @object_type("weapon")
        class Weapon(GameObject):
            ...
    """

    def decorator(cls: type[GameObject]) -> type[GameObject]:
        key = tag.lower()
        cls.object_type = key
        if key in _OBJECT_REGISTRY and _OBJECT_REGISTRY[key] is not cls:
            logger.warning("Overwriting object type '%s'", key)
        _OBJECT_REGISTRY[key] = cls
        return cls

    return decorator


def get_object_class(tag: str) -> type[GameObject] | None:
    """Get the class registered for a type tag (case-insensitive)."""
    return _OBJECT_REGISTRY.get(str(tag).lower())


def get_all_object_types() -> dict[str, type[GameObject]]:
    """Get a copy of the whole registry."""
    return _OBJECT_REGISTRY.copy()


object_type("object")(GameObject)
