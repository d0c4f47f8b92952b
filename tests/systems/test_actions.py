"""
Tests for PlayerActions: player intents against the basic test world.

The player starts in the square with a box (holding an apple), a bag, an
apple, a key and a sword. North is the path with the goblin; down, behind
the locked trapdoor, is the cellar with the leather armour.
"""

from datetime import timedelta

import pytest

from cairn.engine import PlayerActions
from cairn.engine.objects import Character, Exchange, GameObject


@pytest.fixture
def actions(manager) -> PlayerActions:
    return PlayerActions(manager)


@pytest.fixture
def player(manager):
    return manager.world.player


def text(events) -> str:
    """Text of the (single) message sent to the player."""
    player_events = [ev for ev in events if ev["scope"] == "player"]
    assert len(player_events) == 1
    return player_events[0]["text"]


def held(player) -> list[str]:
    return [obj.name for obj in player.inventory.contents]


# ============================================================================
# Looking
# ============================================================================


@pytest.mark.systems
def test_look(actions):
    assert text(actions.look()).splitlines() == [
        "Square",
        "A cobbled square.",
        "You can see: a box, a bag, an apple, a key, a sword.",
        "Exits: N, DOWN (trapdoor, locked).",
    ]


@pytest.mark.systems
def test_examine(actions):
    assert text(actions.examine("box")).splitlines() == [
        "You see nothing special about the box.",
        "The box contains: an apple.",
    ]
    assert text(actions.examine("door")).endswith("The trapdoor is locked.")
    assert text(actions.examine("unicorn")) == "You can't see 'unicorn' here."
    assert "HP: 50/50" in text(actions.examine("me"))


@pytest.mark.systems
def test_inventory_and_stats(actions, player):
    assert text(actions.inventory()) == "You are holding nothing."
    assert text(actions.stats()).splitlines()[:3] == ["HP: 50/50", "XP: 0", "Dexterity: 50"]
    assert text(actions.stats("box")) == "The box has no stats."


# ============================================================================
# Taking and dropping
# ============================================================================


@pytest.mark.systems
def test_take_and_drop(actions, player, manager):
    assert text(actions.take("sword")) == "You take the sword."
    assert held(player) == ["sword"]
    assert text(actions.take("sword")) == "You already have the sword."

    assert text(actions.drop("sword")) == "You drop the sword."
    assert held(player) == []
    assert manager.world.locations["square"].root.contents[-1].name == "sword"


@pytest.mark.systems
def test_take_plural_takes_every_match(actions, player):
    """'apples' resolves to 'apple' and takes each one, nested ones included."""
    assert text(actions.take("apples")) == "You take the apple.\nYou take the apple."
    assert held(player) == ["apple", "apple"]
    assert text(actions.examine("box")).endswith("The box contains nothing.")


@pytest.mark.systems
def test_take_all_and_drop_all(actions, player, manager):
    actions.take("all")
    assert held(player) == ["box", "bag", "apple", "key", "sword"]

    actions.drop("all")
    assert held(player) == []
    square = manager.world.locations["square"]
    assert len(square.root) == 6


@pytest.mark.systems
def test_cannot_take_doors_or_characters(actions):
    assert text(actions.take("trapdoor")) == "You can't take the trapdoor."
    actions.go("north")
    assert text(actions.take("goblin")) == "You can't take the goblin."


@pytest.mark.systems
def test_take_too_heavy(actions, player, manager):
    anvil = GameObject(id="anvil", name="anvil", weight=80.0, _base_resolved=True)
    manager.world.locations["square"].add_object(anvil)

    message = text(actions.take("anvil"))

    assert "too heavy" in message
    assert anvil.container.root_of is manager.world.locations["square"]


@pytest.mark.systems
def test_drop_missing(actions):
    assert text(actions.drop("crown")) == "You don't have 'crown'."
    assert text(actions.drop("all")) == "You are not holding anything."


# ============================================================================
# Containers
# ============================================================================


@pytest.mark.systems
def test_put(actions, manager):
    assert text(actions.put("sword", "bag")) == "The sword is too big to fit in the bag."
    assert text(actions.put("key", "bag")) == "You put the key in the bag."
    assert text(actions.put("bag", "bag")) == "You can't put the bag inside itself."
    assert text(actions.put("key", "sword")) == "The sword is not a container."

    bag = manager.world.locations["square"].find_object_by_name("bag").obj
    assert [obj.name for obj in bag.contents] == ["key"]


# ============================================================================
# Doors and movement
# ============================================================================


@pytest.mark.systems
def test_unlock_with_carried_key(actions, player):
    assert text(actions.unlock("trapdoor")) == "You don't have anything that unlocks the trapdoor."
    assert text(actions.go("down")) == "The trapdoor is locked."

    actions.take("key")
    events = actions.unlock("trapdoor")
    assert text(events) == "You unlock the trapdoor with the key."
    assert text(actions.unlock("trapdoor")) == "The trapdoor is already unlocked."

    assert text(actions.go("down")).startswith("You go DOWN.\nCellar")
    assert player.location.id == "cellar"


@pytest.mark.systems
def test_go(actions, player):
    assert text(actions.go("sideways")) == "'sideways' is not a direction."
    assert text(actions.go("west")) == "You can't go that way."

    events = actions.go("n")
    assert {"type": "message", "scope": "location", "location_id": "square", "text": "Adventurer leaves."} in events
    assert player.location.id == "path"
    assert "The goblin is here." in text(events)


# ============================================================================
# Items with effects
# ============================================================================


@pytest.mark.systems
def test_eat(actions, player, manager):
    player.hp = 40
    assert text(actions.eat("apple")) == "You eat the apple. (+5 HP, now 45/50.)"
    assert text(actions.eat("sword")) == "You can't eat the sword."

    player.hp = 49
    assert text(actions.eat("apple")) == "You eat the apple. (+1 HP, now 50/50.)"
    assert manager.world.locations["square"].root.find_by_name("apple") is None


@pytest.mark.systems
def test_wear_and_repair(actions, player):
    actions.take("key")
    actions.unlock("trapdoor")
    actions.go("down")

    assert text(actions.wear("armour")) == "Adventurer is now wearing the leather armour."
    assert player.armour.name == "leather armour"
    assert player.location.root.find_by_name("armour") is None
    assert text(actions.wear("armour")) == "You are already wearing the leather armour."

    player.armour.current_hp = 3
    assert text(actions.repair("armour")) == "You repair the leather armour. (HP=20/20.)"
    assert text(actions.repair("key")) == "You can't repair the key."


# ============================================================================
# Characters
# ============================================================================


@pytest.fixture
def trader(manager):
    lantern = GameObject(id="lantern", name="lantern", weight=1.0, _base_resolved=True)
    trader = Character(
        id="trader",
        name="trader",
        talk_texts=[["Hello there."]],
        exchange=Exchange(talk=["A lantern for an apple?"], gives="lantern", wants="apple"),
        _base_resolved=True,
    )
    trader.inventory.add(lantern)
    manager.world.locations["square"].add_object(trader)
    return trader


@pytest.mark.systems
def test_talk(actions, trader):
    assert text(actions.talk("trader")) == "The trader says:\nHello there.\n\nA lantern for an apple?"
    assert text(actions.talk("box")) == "The box doesn't say anything."


@pytest.mark.systems
def test_give_exchange(actions, player, trader):
    actions.take("apple")

    assert text(actions.give("apple", "trader")) == (
        "You give the apple to the trader.\nThe trader gives you the lantern."
    )
    assert held(player) == ["lantern"]
    assert [obj.name for obj in trader.inventory] == ["apple"]

    assert text(actions.give("crown", "trader")) == "You don't have 'crown'."


@pytest.mark.systems
def test_kill_engages_both_sides(actions, player, manager, fixed_now):
    actions.go("north")
    goblin = player.location.characters()[0]

    events = actions.kill("goblin")

    assert text(events) == "You attack the goblin."
    assert player.opponents == [goblin]
    assert goblin.opponents == [player]

    player.dexterity = 100
    manager.tick(fixed_now)
    assert goblin.hp < 20
    assert player.next_attack_time == fixed_now + timedelta(seconds=2)


@pytest.mark.systems
def test_kill_with_weapon(actions, player):
    assert text(actions.kill("box")) == "You can't attack the box."
    actions.take("sword")
    actions.go("north")

    assert text(actions.kill("goblin", weapon="axe")) == "You don't have a weapon called 'axe'."
    actions.kill("goblin", weapon="sword")

    assert player._fight_opponents[0].weapon_name == "sword"


@pytest.mark.systems
def test_dead_player_cannot_act(actions, player):
    player.hp = 0
    assert text(actions.take("apple")) == "You are dead."
    assert text(actions.go("north")) == "You are dead."
