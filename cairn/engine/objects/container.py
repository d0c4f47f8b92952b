"""
Containers and the containment rules.

All containment mutations go through Container.add(), which is the single
atomic move operation: every rule is checked before anything changes, and a
successful add detaches the object from whatever held it before. Ownership
is therefore always tree-shaped; an object is never in two containers, or
"in between" two containers.

Rules checked on every add, in order:
    0. containment - a container never goes inside itself or its own contents
    1. capacity    - the container must have a free item slot
    2. weight      - the incoming weight plus the current load must not exceed
                     the weight limit (of this container and of every container
                     enclosing it)
    3. size        - largest-fits-largest dimension check (strictly smaller)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Iterator

from ..errors import ConfigurationError
from ..results import ActionResult, Constraint
from ..text import definite, names_and_counts
from .base import Dimensions, GameObject, ObjectId, object_type

if TYPE_CHECKING:
    from ..factory import ObjectFactory
    from ..systems.context import GameContext
    from ..systems.events import Event
    from .character import Character
    from .location import Location

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FoundObject:
    """An object and the container that directly holds it."""

    obj: GameObject
    owner: "Container"

    def detach(self) -> GameObject:
        """Remove the object from its owning container and return it."""
        return self.owner.remove(self.obj)


@object_type("container")
@dataclass(eq=False)
class Container(GameObject):
    """A bag, box, chest... anything that holds other objects."""

    capacity_items: int = 0
    capacity_weight: float = 0.0

    # Set when this container is the root container of a Location
    root_of: "Location | None" = field(default=None, repr=False)
    # Set when this container is a character's inventory
    owner: "Character | None" = field(default=None, repr=False)

    _contents: list[GameObject] = field(default_factory=list, repr=False)

    # ---------- Resolution ----------

    def parse_record(self, data: dict[str, Any], factory: "ObjectFactory") -> None:
        super().parse_record(data, factory)

        capacity = data.get("capacity") or {}
        self.capacity_items = int(capacity.get("items", 0))
        self.capacity_weight = self._resolve_units(capacity.get("weight"), "capacity weight")

        for content_id in data.get("contents") or []:
            self.add_starting_object(factory.create_object(content_id))

    def add_starting_object(self, obj: GameObject) -> None:
        """Add part of an object's starting state. A rejected add is a content error."""
        result = self.add(obj)
        if not result.ok:
            raise ConfigurationError(self.id, f"Starting contents rejected: {result.message}")

    # ---------- Queries ----------

    @property
    def contents(self) -> tuple[GameObject, ...]:
        """Snapshot of the direct contents, in insertion order."""
        return tuple(self._contents)

    def __len__(self) -> int:
        return len(self._contents)

    def __iter__(self) -> Iterator[GameObject]:
        return iter(self.contents)

    @property
    def contents_weight(self) -> float:
        """Recursive weight of everything inside (excluding the container itself)."""
        return sum(obj.total_weight for obj in self._contents)

    @property
    def total_weight(self) -> float:
        return self.weight + self.contents_weight

    def contains(self, obj: GameObject) -> bool:
        """True if obj is anywhere inside this container, at any depth."""
        return self._find(lambda candidate: candidate is obj) is not None

    def find_by_name(self, name: str) -> FoundObject | None:
        """
        Depth-first search by name or alias.

        Each object is checked before descending into it. The returned owner is
        the container that directly holds the object, which may be nested well
        below this one.
        """
        return self._find(lambda candidate: candidate.matches_name(name))

    def find_by_id(self, object_id: ObjectId) -> FoundObject | None:
        """Depth-first search by definition ID."""
        return self._find(lambda candidate: candidate.id == object_id)

    def find_all_by_name(self, name: str) -> list[FoundObject]:
        """Every match at any depth, in search order."""
        matches: list[FoundObject] = []
        self._walk(lambda candidate: candidate.matches_name(name), matches)
        return matches

    def _find(self, predicate: Callable[[GameObject], bool]) -> FoundObject | None:
        for obj in self._contents:
            if predicate(obj):
                return FoundObject(obj, self)
            if isinstance(obj, Container):
                found = obj._find(predicate)
                if found is not None:
                    return found
        return None

    def _walk(self, predicate: Callable[[GameObject], bool], matches: list[FoundObject]) -> None:
        for obj in self._contents:
            if predicate(obj):
                matches.append(FoundObject(obj, self))
            if isinstance(obj, Container):
                obj._walk(predicate, matches)

    # ---------- Mutations ----------

    def check_add(self, obj: GameObject) -> ActionResult:
        """Run every containment rule against obj without changing anything."""
        if any(holder is obj or holder.owner is obj for holder in self._enclosing()):
            return ActionResult.failure(
                f"You can't put {definite(obj.name)} inside itself.",
                Constraint.CONTAINMENT,
            )
        if obj.container is self:
            return ActionResult.success()

        if len(self._contents) >= self.capacity_items:
            return ActionResult.failure(
                f"{definite(obj.name, capital=True)} does not fit: {definite(self.name)} is full "
                f"({len(self._contents)}/{self.capacity_items} items).",
                Constraint.CAPACITY,
            )

        incoming = obj.total_weight
        already_inside = list(obj.container._enclosing()) if obj.container is not None else []
        for holder in self._enclosing():
            load = holder.contents_weight
            if holder in already_inside:
                # Already inside - do not count it twice
                load -= incoming
            if incoming + load > holder.capacity_weight:
                return ActionResult.failure(
                    f"{definite(obj.name, capital=True)} is too heavy for {definite(holder.name)}: "
                    f"the weight would be {incoming + load:g}kg, over its limit of "
                    f"{holder.capacity_weight:g}kg.",
                    Constraint.WEIGHT,
                )

        if not obj.dimensions.fits_inside(self.dimensions):
            return ActionResult.failure(
                f"{definite(obj.name, capital=True)} is too big to fit in {definite(self.name)}.",
                Constraint.SIZE,
            )

        return ActionResult.success()

    def add(self, obj: GameObject) -> ActionResult:
        """
        Move obj into this container.

        Either every rule passes and obj ends up here exactly once (detached from
        its previous container), or nothing changes and the failure explains why.
        """
        result = self.check_add(obj)
        if not result.ok or obj.container is self:
            return result

        if obj.container is not None:
            obj.container.remove(obj)
        self._contents.append(obj)
        obj.container = self
        return result

    def remove(self, obj: GameObject) -> GameObject:
        """Detach obj. Safe to call when obj is not held here."""
        for index, candidate in enumerate(self._contents):
            if candidate is obj:
                del self._contents[index]
                obj.container = None
                break
        return obj

    def remove_all(self) -> list[GameObject]:
        """Drain and return all direct contents."""
        drained = list(self._contents)
        self._contents.clear()
        for obj in drained:
            obj.container = None
        return drained

    def _enclosing(self) -> Iterator["Container"]:
        """This container, then every container around it."""
        holder: Container | None = self
        while holder is not None:
            yield holder
            if holder.container is not None:
                holder = holder.container
            elif holder.owner is not None:
                holder = holder.owner.container
            else:
                holder = None

    # ---------- Text ----------

    def list_contents(self, prefix: str, indent: str = "") -> list[str]:
        """
        Human-readable contents report.

        The first line lists the direct contents by name and count; each
        non-empty nested container then adds its own "<Name> contains:" line,
        indented one level deeper.
        """
        if not self._contents:
            return [f"{indent}{prefix} nothing."]

        lines = [f"{indent}{prefix}: {names_and_counts(obj.name for obj in self._contents)}."]
        for obj in self._contents:
            if isinstance(obj, Container) and len(obj) > 0:
                lines.extend(
                    obj.list_contents(f"{definite(obj.name, capital=True)} contains", indent + "  ")
                )
        return lines

    def examine(self) -> list[str]:
        lines = super().examine()
        lines.extend(self.list_contents(f"{definite(self.name, capital=True)} contains"))
        return lines

    # ---------- Tick ----------

    def update(self, now: datetime, ctx: "GameContext") -> list["Event"]:
        events: list["Event"] = []
        # Snapshot: objects may be added or removed by other objects' updates
        for obj in list(self._contents):
            events.extend(obj.update(now, ctx))
        return events


@dataclass(eq=False)
class Inventory(Container):
    """What a character carries."""

    name: str = "inventory"
    dimensions: Dimensions = field(default_factory=lambda: Dimensions(2.0, 2.0, 2.0))
    capacity_items: int = 10
    capacity_weight: float = 50.0
    _base_resolved: bool = field(default=True, repr=False)


@dataclass(eq=False)
class LocationContainer(Container):
    """Holds everything lying around in a location."""

    name: str = "location container"
    dimensions: Dimensions = field(default_factory=lambda: Dimensions(2000.0, 2000.0, 2000.0))
    capacity_items: int = 1000
    capacity_weight: float = 1_000_000.0
    _base_resolved: bool = field(default=True, repr=False)
