"""
Global pytest configuration and shared fixtures.

Provides:
- Definition writers that put YAML files into a temporary world_data dir
- Factories loaded from those files, or from the bundled starter world
- A seeded random source and fixed UTC times for tick-driven tests
"""

import random
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cairn import config  # noqa: E402
from cairn.engine import ObjectFactory, WorldManager  # noqa: E402
from cairn.engine.systems import GameContext  # noqa: E402

# ============================================================================
# Time / randomness
# ============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed UTC time to tick from."""
    return datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so combat rolls are repeatable."""
    return random.Random(1234)


@pytest.fixture
def ctx(rng) -> GameContext:
    """A context with no world, for driving update hooks directly."""
    return GameContext(rng=rng)


# ============================================================================
# Definitions
# ============================================================================


@pytest.fixture
def world_data(tmp_path) -> Path:
    """Empty definition root."""
    root = tmp_path / "world_data"
    root.mkdir()
    return root


@pytest.fixture
def write_definition(world_data):
    """
    Write one definition file.

    Usage:
        write_definition("apple", {"object_type": "food", "hp": 5})
        write_definition("items/box", {...})
    """

    def _write(relative: str, data: dict) -> Path:
        path = world_data / f"{relative}.yaml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def basic_definitions(write_definition):
    """A small, valid world: two locations, a locked door and some items."""
    write_definition("apple", {
        "object_type": "food",
        "name": "apple",
        "dimensions": {"height": "8cm", "width": "8cm", "depth": "8cm"},
        "weight": "200g",
        "hp": 5,
    })
    write_definition("key", {
        "object_type": "object",
        "name": "key",
        "dimensions": {"height": "8cm", "width": "3cm", "depth": "5mm"},
        "weight": "50g",
    })
    write_definition("bag", {
        "object_type": "container",
        "name": "bag",
        "aliases": ["sack"],
        "dimensions": {"height": "30cm", "width": "20cm", "depth": "10cm"},
        "weight": "200g",
        "capacity": {"items": 5, "weight": "5kg"},
    })
    write_definition("box", {
        "object_type": "container",
        "name": "box",
        "dimensions": {"height": "60cm", "width": "40cm", "depth": "30cm"},
        "weight": "3kg",
        "capacity": {"items": 10, "weight": "20kg"},
        "contents": ["apple"],
    })
    write_definition("sword", {
        "object_type": "weapon",
        "name": "sword",
        "dimensions": {"height": "90cm", "width": "10cm", "depth": "3cm"},
        "weight": "1.5kg",
        "attacks": [{"name": "slash", "damage": "4-8"}],
    })
    write_definition("armour", {
        "object_type": "armour",
        "name": "leather armour",
        "aliases": ["armour"],
        "dimensions": {"height": "70cm", "width": "50cm", "depth": "10cm"},
        "weight": "5kg",
        "hp": 20,
        "damage_reduction": "25%",
    })
    write_definition("trapdoor", {
        "object_type": "door",
        "name": "trapdoor",
        "key": "key",
    })
    write_definition("goblin", {
        "object_type": "character",
        "name": "goblin",
        "dimensions": {"height": "1.2m", "width": "50cm", "depth": "30cm"},
        "weight": "35kg",
        "hp": 20,
        "dexterity": 40,
        "attacks": [{"name": "claw", "damage": "2-5"}],
        "inventory": ["apple"],
    })
    write_definition("square", {
        "object_type": "location",
        "name": "Square",
        "description": "A cobbled square.",
        "exits": [
            {"direction": "north", "to": "path"},
            {"direction": "down", "to": "cellar", "door": "trapdoor"},
        ],
        "objects": ["box", "bag", "apple", "key", "sword"],
    })
    write_definition("path", {
        "object_type": "location",
        "name": "Path",
        "exits": [{"direction": "S", "to": "square"}],
        "objects": ["goblin"],
    })
    write_definition("cellar", {
        "object_type": "location",
        "name": "Cellar",
        "exits": [{"direction": "up", "to": "square", "door": "trapdoor"}],
        "objects": ["armour"],
    })


@pytest.fixture
def factory(world_data, basic_definitions) -> ObjectFactory:
    """Factory loaded with basic_definitions."""
    factory = ObjectFactory()
    factory.load_root(world_data)
    return factory


@pytest.fixture
def manager(factory, rng) -> WorldManager:
    """World built from basic_definitions, player in the square."""
    manager = WorldManager(factory, "square", rng=rng)
    manager.reset_world()
    return manager


@pytest.fixture
def bundled_factory() -> ObjectFactory:
    """Factory loaded with the starter world shipped in the package."""
    factory = ObjectFactory()
    factory.load_root(config.BUNDLED_WORLD_DATA_DIR)
    return factory
