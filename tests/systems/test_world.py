"""
Tests for the world: reset, the tick loop, dead-character cleanup and movement.
"""

from datetime import timedelta

import pytest

from cairn.engine import ConfigurationError, WorldManager
from cairn.engine.objects import Character, GameObject, Player
from cairn.engine.systems import EventDispatcher

# ============================================================================
# Reset
# ============================================================================


@pytest.mark.systems
def test_reset_builds_world(manager):
    world = manager.world

    assert set(world.locations) == {"square", "path", "cellar"}
    assert isinstance(world.player, Player)
    assert world.player.location is world.locations["square"]
    assert world.tick_count == 0


@pytest.mark.systems
def test_reset_is_wholesale(manager):
    """Nothing survives from the previous world."""
    old_world = manager.world
    old_world.locations["square"].root.remove_all()

    new_world = manager.reset_world()

    assert new_world is not old_world
    assert new_world.locations["square"] is not old_world.locations["square"]
    assert len(new_world.locations["square"].root) == 6  # five objects plus the player


@pytest.mark.systems
def test_world_before_reset_raises(factory):
    with pytest.raises(RuntimeError):
        WorldManager(factory, "square").world


@pytest.mark.systems
def test_reset_unknown_start_location(factory):
    with pytest.raises(ConfigurationError):
        WorldManager(factory, "moon").reset_world()


@pytest.mark.systems
def test_reset_rejects_dangling_exit(factory):
    factory.add_definition({"id": "attic", "object_type": "location",
                            "exits": [{"direction": "down", "to": "basement"}]})
    with pytest.raises(ConfigurationError, match="basement"):
        WorldManager(factory, "square").reset_world()


@pytest.mark.systems
def test_player_definition_used_when_present(factory):
    factory.add_definition({"id": "player", "object_type": "player", "name": "Brynn", "hp": 77})
    manager = WorldManager(factory, "square")
    world = manager.reset_world()
    assert world.player.name == "Brynn"
    assert world.player.hp == 77


@pytest.mark.systems
def test_graph_helpers(manager):
    world = manager.world
    assert world.neighbours("square") == {"N": "path", "DOWN": "cellar"}
    assert world.reachable_from("path") == ["path", "square", "cellar"]
    assert world.reachable_from("path", through_locked_doors=False) == ["path", "square"]
    assert world.reachable_from("nowhere") == []


# ============================================================================
# Tick
# ============================================================================


@pytest.mark.systems
def test_quiet_tick(manager, fixed_now):
    assert manager.tick(fixed_now) == []
    assert manager.world.tick_count == 1


@pytest.mark.systems
def test_tick_runs_fights_and_dispatches(manager, fixed_now):
    received = []
    manager.dispatcher.subscribe(received.append)

    path = manager.world.locations["path"]
    goblin = path.characters()[0]
    goblin.dexterity = 0
    victim = Character(id="rat", name="rat", hp=5, dexterity=0, _base_resolved=True)
    path.add_object(victim)
    goblin.add_fight_opponent(victim)

    events = manager.tick(fixed_now)

    assert [ev["text"] for ev in events] == ["The goblin launches a claw attack at the rat but misses."]
    assert received == events


@pytest.mark.systems
def test_objects_added_mid_tick_wait_for_next_tick(manager, fixed_now):
    """The tick walks a snapshot of each location's contents."""
    square = manager.world.locations["square"]
    updated = []

    class Spawner(GameObject):
        def update(self, now, ctx):
            updated.append(self.name)
            if self.name == "spawner":
                square.add_object(Spawner(id="child", name="child", _base_resolved=True))
            return []

    square.add_object(Spawner(id="spawner", name="spawner", _base_resolved=True))

    manager.tick(fixed_now)
    assert updated == ["spawner"]

    updated.clear()
    manager.tick(fixed_now + timedelta(seconds=1))
    assert sorted(updated) == ["child", "spawner"]


@pytest.mark.systems
def test_dead_character_cleaned_up_once(manager, fixed_now):
    path = manager.world.locations["path"]
    goblin = path.characters()[0]
    goblin.hp = 0

    events = manager.tick(fixed_now)

    assert [ev["text"] for ev in events] == ["The goblin has died.", "The goblin drops an apple."]
    assert goblin not in path.root.contents
    assert [obj.name for obj in path.root.contents] == ["apple"]
    assert len(goblin.inventory) == 0

    assert manager.tick(fixed_now + timedelta(seconds=1)) == []


@pytest.mark.systems
def test_worn_armour_dropped_on_death(factory, manager, fixed_now):
    path = manager.world.locations["path"]
    goblin = path.characters()[0]
    goblin.wear(factory.create_object("armour"))
    goblin.hp = -3

    events = manager.tick(fixed_now)

    assert events[-1]["text"] == "The goblin drops an apple, a leather armour."
    assert goblin.armour is None
    assert path.root.find_by_name("leather armour") is not None


@pytest.mark.systems
def test_rejected_drops_stay_with_the_body(factory, manager, fixed_now):
    path = manager.world.locations["path"]
    goblin = path.characters()[0]
    armour = factory.create_object("armour")
    goblin.wear(armour)
    apple = goblin.inventory.contents[0]
    path.root.capacity_items = len(path.root)
    goblin.hp = 0

    events = manager.tick(fixed_now)

    assert [ev["text"] for ev in events] == ["The goblin has died."]
    assert apple.container is goblin.inventory
    assert goblin.armour is armour
    assert goblin not in path.root.contents


@pytest.mark.systems
def test_tick_reaches_carried_objects(manager, fixed_now):
    ticked = []

    class Pocketwatch(GameObject):
        def update(self, now, ctx):
            ticked.append(now)
            return []

    goblin = manager.world.locations["path"].characters()[0]
    assert goblin.inventory.add(Pocketwatch(id="watch", name="watch", _base_resolved=True)).ok

    manager.tick(fixed_now)

    assert ticked == [fixed_now]


@pytest.mark.systems
def test_fight_to_the_death(manager, fixed_now):
    """A full fight: attacks each tick until the loser is cleaned up."""
    path = manager.world.locations["path"]
    goblin = path.characters()[0]
    hero = Character(id="hero", name="hero", hp=500, dexterity=100, _base_resolved=True)
    hero.attacks = list(goblin.attacks)
    hero.attack_interval_seconds = 1
    path.add_object(hero)
    hero.add_fight_opponent(goblin)
    goblin.add_fight_opponent(hero)

    texts = []
    now = fixed_now
    for _ in range(60):
        texts.extend(ev["text"] for ev in manager.tick(now))
        now += timedelta(seconds=1)
        if goblin.is_dead:
            break

    assert goblin.is_dead
    assert "The hero has killed the goblin." in texts
    assert "The goblin has died." in texts
    assert hero.xp > 0
    assert not hero.is_fighting
    assert goblin not in path.characters()


# ============================================================================
# Movement
# ============================================================================


@pytest.mark.systems
def test_move_through_open_exit(manager):
    player = manager.world.player
    result = manager.move_character(player, "north")

    assert result.ok
    assert player.location is manager.world.locations["path"]
    assert player not in manager.world.locations["square"].root.contents


@pytest.mark.systems
def test_locked_door_blocks(manager):
    player = manager.world.player
    result = manager.move_character(player, "down")

    assert not result.ok
    assert result.message == "The trapdoor is locked."
    assert player.location.id == "square"


@pytest.mark.systems
def test_unlocked_door_lets_through(manager):
    player = manager.world.player
    manager.world.locations["square"].get_exit("down").door.locked = False

    assert manager.move_character(player, "DOWN").ok
    assert player.location.id == "cellar"


@pytest.mark.systems
def test_no_exit(manager):
    result = manager.move_character(manager.world.player, "west")
    assert not result.ok
    assert result.message == "You can't go that way."


# ============================================================================
# Event dispatcher
# ============================================================================


@pytest.mark.systems
def test_dispatcher_subscribe_and_unsubscribe():
    dispatcher = EventDispatcher()
    seen = []
    unsubscribe = dispatcher.subscribe(seen.append)

    event = dispatcher.msg_to_location("square", "Hello.")
    dispatcher.dispatch([event])
    unsubscribe()
    dispatcher.dispatch([event])

    assert seen == [{"type": "message", "scope": "location", "location_id": "square", "text": "Hello."}]
    assert dispatcher.listener_count == 0


@pytest.mark.systems
def test_failing_listener_does_not_stop_others():
    dispatcher = EventDispatcher()
    seen = []

    def broken(ev):
        raise RuntimeError("boom")

    dispatcher.subscribe(broken)
    dispatcher.subscribe(seen.append)
    dispatcher.dispatch([dispatcher.msg_to_player("player", "Hi.")])

    assert len(seen) == 1
