"""
ObjectFactory - loads definitions and stamps out live objects.

Definitions are YAML files discovered recursively under one or more roots.
Each one is kept as its original text and re-parsed on every create, so two
objects created from the same ID never share mutable state.

    factory = ObjectFactory()
    factory.load_root("world_data")
    failures = factory.validate_objects()
    locations = factory.create_all_locations()
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, TypeVar

import yaml

from .errors import CairnError, ConfigurationError, ObjectNotFoundError, ObjectTypeMismatchError, ValidationError
from .objects import Door, GameObject, Location, get_object_class

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=GameObject)

DEFINITION_SUFFIXES = (".yaml", ".yml", ".json")


@dataclass(frozen=True)
class ObjectRecord:
    """One definition, as loaded. The template live objects are created from."""

    id: str
    object_type: str
    name: str
    aliases: tuple[str, ...]
    source: str
    path: str | None = None

    def load(self) -> dict[str, Any]:
        """A fresh copy of the definition data."""
        data = yaml.safe_load(self.source)
        data["id"] = self.id
        return data


class ObjectFactory:
    """
    Registry of object definitions and creator of live objects.

    The definition index is only written while loading; after that the
    factory is read-only apart from the shared-door scope used while a whole
    world is being built.
    """

    def __init__(self) -> None:
        self._records: dict[str, ObjectRecord] = {}
        # lower-cased name or alias -> name as written in the definition
        self._names: dict[str, str] = {}
        # IDs currently being created, to catch definitions that contain themselves
        self._creating: list[str] = []
        # Set while create_all_locations() runs so exits share door objects
        self._shared_doors: dict[str, Door] | None = None

    # ---------- Loading ----------

    def load_root(self, path: str | Path) -> int:
        """
        Load every definition file under path, recursively.

        A malformed file is logged and skipped; the rest still load. Each new
        definition is created once to check it. References to IDs that are
        not loaded yet are allowed here (another root may supply them) and are
        reported by validate_objects() instead.

        Returns:
            Number of definitions loaded
        """
        root = Path(path)
        if not root.is_dir():
            raise FileNotFoundError(f"Definition root not found: {root}")

        loaded: list[ObjectRecord] = []
        for file_path in sorted(root.rglob("*")):
            if file_path.suffix.lower() not in DEFINITION_SUFFIXES or not file_path.is_file():
                continue
            if file_path.name.startswith("_"):
                continue
            try:
                loaded.append(self.load_file(file_path))
            except (CairnError, yaml.YAMLError, OSError) as exc:
                logger.error("Skipping definition file %s: %s", file_path, exc)

        count = 0
        for record in loaded:
            try:
                self.create_object(record.id)
            except ObjectNotFoundError as exc:
                logger.debug("Definition %s refers to an unknown ID: %s", record.id, exc)
            except CairnError as exc:
                logger.error("Skipping definition %s (%s): %s", record.id, record.path, exc)
                self._unregister(record)
                continue
            count += 1

        logger.info("Loaded %d object definitions from %s", count, root)
        return count

    def load_file(self, path: str | Path) -> ObjectRecord:
        file_path = Path(path)
        with open(file_path, "r", encoding="utf-8") as f:
            source = f.read()
        return self.add_definition(source, default_id=file_path.stem, path=str(file_path))

    def add_definition(
        self,
        source: str | dict[str, Any],
        *,
        default_id: str | None = None,
        path: str | None = None,
    ) -> ObjectRecord:
        """
        Register one definition from YAML text (or an already-parsed mapping).

        Raises:
            ConfigurationError: if the definition has no usable type tag or ID
        """
        if isinstance(source, dict):
            source = yaml.safe_dump(source, sort_keys=False)
        data = yaml.safe_load(source)
        label = default_id or path or "<definition>"

        if not isinstance(data, dict):
            raise ConfigurationError(label, "Definition is not a mapping")
        tag = data.get("object_type")
        if not tag:
            raise ConfigurationError(str(data.get("id", label)), "Definition has no object_type")
        if get_object_class(tag) is None:
            raise ConfigurationError(str(data.get("id", label)), f"Unknown object_type '{tag}'")

        object_id = str(data.get("id") or default_id or "")
        if not object_id:
            raise ConfigurationError(label, "Definition has no id")

        aliases = tuple(str(alias) for alias in data.get("aliases") or [])
        record = ObjectRecord(
            id=object_id,
            object_type=str(tag).lower(),
            name=str(data.get("name", object_id)),
            aliases=aliases,
            source=source,
            path=path,
        )

        if object_id in self._records:
            logger.warning("Definition '%s' from %s replaces an earlier one", object_id, path)
            self._unregister(self._records[object_id])
        self._records[object_id] = record
        for name in (record.name, *record.aliases):
            self._names.setdefault(name.lower(), name)
        return record

    def _unregister(self, record: ObjectRecord) -> None:
        self._records.pop(record.id, None)
        self._rebuild_names()

    def _rebuild_names(self) -> None:
        self._names = {}
        for record in self._records.values():
            for name in (record.name, *record.aliases):
                self._names.setdefault(name.lower(), name)

    # ---------- Index ----------

    def __contains__(self, object_id: str) -> bool:
        return object_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    @property
    def object_ids(self) -> list[str]:
        return sorted(self._records)

    def get_record(self, object_id: str) -> ObjectRecord | None:
        return self._records.get(object_id)

    def location_ids(self) -> list[str]:
        ids = []
        for record in self._records.values():
            cls = get_object_class(record.object_type)
            if cls is not None and issubclass(cls, Location):
                ids.append(record.id)
        return sorted(ids)

    def get_object_name(self, candidate: str) -> tuple[str, bool]:
        """
        Resolve a name typed by the player to a known object name.

        "bag" -> ("bag", False); "bags" -> ("bag", True). Tries the name as
        given, then without a trailing "es" or "s" (and "ies" -> "y"). Names
        that match nothing come back unchanged, not plural.
        """
        wanted = candidate.strip().lower()
        if wanted in self._names:
            return self._names[wanted], False

        singulars = []
        if wanted.endswith("ies"):
            singulars.append(wanted[:-3] + "y")
        if wanted.endswith("es"):
            singulars.append(wanted[:-2])
        if wanted.endswith("s"):
            singulars.append(wanted[:-1])
        for singular in singulars:
            if singular in self._names:
                return self._names[singular], True
        return candidate.strip(), False

    # ---------- Creation ----------

    def create_object(self, object_id: str) -> GameObject:
        """
        Create a fresh, fully resolved live object.

        Raises:
            ObjectNotFoundError: if no definition has this ID
            ConfigurationError: if the definition is malformed
        """
        record = self._records.get(object_id)
        if record is None:
            raise ObjectNotFoundError(object_id)
        cls = get_object_class(record.object_type)
        if cls is None:
            raise ConfigurationError(object_id, f"No object type registered for '{record.object_type}'")
        if object_id in self._creating:
            chain = " -> ".join([*self._creating, object_id])
            raise ConfigurationError(object_id, f"Definition contains itself ({chain})")

        self._creating.append(object_id)
        try:
            obj = cls()
            obj.parse_record(record.load(), self)
        except CairnError:
            raise
        except (ValueError, TypeError, AttributeError) as exc:
            raise ConfigurationError(object_id, f"Malformed definition: {exc}") from exc
        finally:
            self._creating.pop()

        if not obj.is_resolved:
            raise ConfigurationError(
                object_id, f"{cls.__name__}.parse_record() did not call the base implementation"
            )
        return obj

    def create_object_as(self, object_id: str, cls: type[T]) -> T:
        """
        create_object(), additionally checking the variant.

        Raises:
            ObjectTypeMismatchError: if the object is not a cls
        """
        obj = self.create_object(object_id)
        if not isinstance(obj, cls):
            raise ObjectTypeMismatchError(object_id, cls, type(obj))
        return obj

    def door_for_exit(self, door_id: str) -> Door:
        """The door object for an exit. Shared between exits while a world is built."""
        if self._shared_doors is None:
            return self.create_object_as(door_id, Door)
        door = self._shared_doors.get(door_id)
        if door is None:
            door = self.create_object_as(door_id, Door)
            self._shared_doors[door_id] = door
        return door

    @contextmanager
    def _shared_door_scope(self) -> Iterator[None]:
        self._shared_doors = {}
        try:
            yield
        finally:
            self._shared_doors = None

    def create_all_locations(self) -> dict[str, Location]:
        """
        Create every location, with starting contents and exit doors.

        A door referenced from several exits (both sides of a trapdoor) is one
        object, so unlocking it from one side unlocks it from the other.
        """
        locations: dict[str, Location] = {}
        with self._shared_door_scope():
            for object_id in self.location_ids():
                locations[object_id] = self.create_object_as(object_id, Location)
        logger.info("Created %d locations", len(locations))
        return locations

    # ---------- Validation ----------

    def validate_objects(self, raise_on_error: bool = False) -> dict[str, Exception]:
        """
        Try to create every known object, collecting every failure.

        Returns:
            Mapping of object ID to the error its creation raised (empty if all OK)

        Raises:
            ValidationError: if raise_on_error and anything failed
        """
        failures: dict[str, Exception] = {}
        for object_id in self.object_ids:
            try:
                self.create_object(object_id)
            except CairnError as exc:
                logger.error("Object %s failed validation: %s", object_id, exc)
                failures[object_id] = exc

        if failures and raise_on_error:
            raise ValidationError(failures)
        logger.info("Validated %d objects, %d failed", len(self._records), len(failures))
        return failures
