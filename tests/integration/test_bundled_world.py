"""
The starter world shipped with the package must load cleanly and be playable.
"""

import random
from datetime import timedelta

import pytest

from cairn import config
from cairn.engine import PlayerActions, WorldManager


@pytest.fixture
def game(bundled_factory):
    manager = WorldManager(bundled_factory, config.START_LOCATION, rng=random.Random(7))
    manager.reset_world()
    return manager, PlayerActions(manager)


def say(events) -> str:
    return "\n".join(ev["text"] for ev in events if ev["scope"] == "player")


@pytest.mark.integration
def test_bundled_world_validates(bundled_factory):
    assert bundled_factory.validate_objects() == {}
    assert set(bundled_factory.location_ids()) == {"village-square", "forest-path", "cellar"}


@pytest.mark.integration
def test_bundled_world_walkthrough(game, fixed_now):
    manager, actions = game
    player = manager.world.player
    assert player.name == "Adventurer"

    look = say(actions.look())
    assert "Village Square" in look
    assert "The merchant is here." in look

    # Key, trapdoor, cellar, armour
    assert say(actions.take("key")) == "You take the key."
    assert say(actions.unlock("trapdoor")) == "You unlock the trapdoor with the key."
    assert say(actions.go("down")).startswith("You go DOWN.")
    actions.wear("armour")
    assert player.armour is not None
    assert say(actions.take("coins")).count("You take the coin.") == 3
    actions.go("up")

    # Trade an apple for the merchant's lantern
    actions.take("apple")
    assert "The merchant gives you the lantern." in say(actions.give("apple", "merchant"))

    # Fight the goblin with the sword from the path
    actions.go("north")
    assert say(actions.take("sword")) == "You take the sword."
    actions.kill("goblin", weapon="sword")

    goblin = next(c for c in player.location.characters() if c.name == "goblin")
    narration = []
    now = fixed_now
    for _ in range(300):
        narration.extend(ev["text"] for ev in manager.tick(now))
        now += timedelta(seconds=1)
        if goblin.is_dead or player.is_dead:
            break

    assert goblin.is_dead
    assert player.is_alive
    assert "The goblin has died." in narration
    assert player.location.root.find_by_name("apple") is not None
