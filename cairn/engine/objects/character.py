"""
Characters: the player and non-player characters.

A character fights on its update tick whenever it has opponents:

    Idle  --add_fight_opponent()-->  Fighting
    Fighting  --opponents dead / left the location-->  Idle
    Alive  --hp <= 0-->  Dead   (terminal; the world removes the body once)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from ..errors import ConfigurationError
from ..results import ActionResult
from ..text import definite, indefinite
from .armour import Armour
from .attacks import Attack, parse_attacks
from .base import GameObject, ObjectId, _parse_lines, object_type
from .container import Inventory
from .weapon import Weapon

if TYPE_CHECKING:
    import random

    from ..factory import ObjectFactory
    from ..systems.context import GameContext
    from ..systems.events import Event

logger = logging.getLogger(__name__)


@dataclass
class Exchange:
    """An item swap a character offers: hand over `wants` and receive `gives`."""

    talk: list[str] = field(default_factory=list)
    gives: ObjectId = ""
    wants: ObjectId = ""


@dataclass(eq=False)
class FightOpponent:
    """An engagement: who is being fought, and with which weapon (if any)."""

    opponent: "Character"
    weapon_name: str = ""


@object_type("character")
@dataclass(eq=False)
class Character(GameObject):
    """A living thing with HP, attacks and an inventory."""

    hp: int = 50
    max_hp: int = -1
    dexterity: int = 50  # 0-100
    xp: int = 0
    attacks: list[Attack] = field(default_factory=list)
    attack_interval_seconds: float = 2.0

    inventory: Inventory = field(default_factory=Inventory, repr=False)
    armour: Armour | None = None

    talk_texts: list[list[str]] = field(default_factory=list, repr=False)
    exchange: Exchange = field(default_factory=Exchange, repr=False)

    next_attack_time: datetime | None = None
    _fight_opponents: list[FightOpponent] = field(default_factory=list, repr=False)
    _talk_index: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self.inventory.owner = self
        if self.max_hp < 0:
            self.max_hp = self.hp

    # ---------- Resolution ----------

    def parse_record(self, data: dict[str, Any], factory: "ObjectFactory") -> None:
        super().parse_record(data, factory)

        self.hp = int(data.get("hp", 50))
        self.max_hp = int(data.get("max_hp", self.hp))
        self.dexterity = int(data.get("dexterity", 50))
        if not 0 <= self.dexterity <= 100:
            raise ConfigurationError(self.id, f"Dexterity {self.dexterity} is outside 0-100")
        self.xp = int(data.get("xp", 0))
        self.attacks = parse_attacks(data.get("attacks"), self.id)
        self.attack_interval_seconds = float(data.get("attack_interval_seconds", 2.0))

        for item_id in data.get("inventory") or []:
            result = self.inventory.add(factory.create_object(item_id))
            if not result.ok:
                raise ConfigurationError(self.id, f"Starting inventory rejected: {result.message}")

        armour_id = data.get("armour")
        if armour_id:
            self.armour = factory.create_object_as(armour_id, Armour)

        self.talk_texts = [_parse_lines(entry) for entry in data.get("talk") or []]
        raw_exchange = data.get("exchange") or {}
        self.exchange = Exchange(
            talk=_parse_lines(raw_exchange.get("talk")),
            gives=str(raw_exchange.get("give", "")),
            wants=str(raw_exchange.get("for", "")),
        )

    # ---------- State ----------

    @property
    def is_alive(self) -> bool:
        return self.hp > 0

    @property
    def is_dead(self) -> bool:
        return self.hp <= 0

    @property
    def total_weight(self) -> float:
        worn = self.armour.total_weight if self.armour else 0.0
        return self.weight + self.inventory.contents_weight + worn

    def heal(self, amount: int) -> int:
        """Restore up to `amount` HP without exceeding max_hp. Returns HP gained."""
        gained = max(0, min(amount, self.max_hp - self.hp))
        self.hp += gained
        return gained

    # ---------- Fighting ----------

    @property
    def opponents(self) -> list["Character"]:
        return [info.opponent for info in self._fight_opponents]

    @property
    def is_fighting(self) -> bool:
        return bool(self._fight_opponents)

    def add_fight_opponent(self, opponent: "Character", weapon_name: str = "") -> None:
        if opponent is self or self.is_fighting_opponent(opponent):
            return
        self._fight_opponents.append(FightOpponent(opponent, weapon_name))

    def is_fighting_opponent(self, opponent: "Character") -> bool:
        return any(info.opponent is opponent for info in self._fight_opponents)

    def prune_fight_opponents(self) -> None:
        """Drop opponents that are dead or no longer in the same location."""
        if self.is_dead:
            self._fight_opponents.clear()
            return
        location_id = self.location_id
        self._fight_opponents = [
            info
            for info in self._fight_opponents
            if info.opponent.is_alive and info.opponent.location_id == location_id
        ]

    def all_attacks(self) -> list[Attack]:
        """Built-in attacks plus those of weapons carried in the inventory."""
        attacks = list(self.attacks)
        for obj in self.inventory.contents:
            if isinstance(obj, Weapon):
                attacks.extend(obj.attacks)
        return attacks

    def attacks_for_weapon(self, weapon_name: str) -> list[Attack]:
        if not weapon_name:
            return []
        found = self.inventory.find_by_name(weapon_name)
        if found is None or not isinstance(found.obj, Weapon):
            return []
        return list(found.obj.attacks)

    def choose_attack(self, weapon_name: str, rng: "random.Random") -> Attack | None:
        candidates = self.attacks_for_weapon(weapon_name) or self.all_attacks()
        if not candidates:
            return None
        return rng.choice(candidates)

    def can_attack(self, now: datetime) -> bool:
        return self.next_attack_time is None or now >= self.next_attack_time

    def fight(self, now: datetime, ctx: "GameContext") -> list["Event"]:
        """
        Attack one active opponent, if the attack interval allows.

        Needs at least one opponent, at least one usable attack and an elapsed
        cooldown. The cooldown restarts on every attempt, hit or miss.
        """
        from ..systems.combat import resolve_attack

        self.prune_fight_opponents()
        if not self._fight_opponents or not self.all_attacks():
            return []
        if not self.can_attack(now):
            return []
        self.next_attack_time = now + timedelta(seconds=self.attack_interval_seconds)

        info = ctx.rng.choice(self._fight_opponents)
        attack = self.choose_attack(info.weapon_name, ctx.rng)
        if attack is None:
            return []

        events = resolve_attack(self, info.opponent, attack, ctx)
        self.prune_fight_opponents()
        return events

    def update(self, now: datetime, ctx: "GameContext") -> list["Event"]:
        events = self.fight(now, ctx)
        events.extend(self.inventory.update(now, ctx))
        return events

    # ---------- Items ----------

    def wear(self, armour: Armour) -> list[str]:
        """
        Put on armour.

        Armour already worn goes into the inventory if it fits, otherwise it is
        dropped where the character stands. Returns narration lines.
        """
        lines: list[str] = []
        if armour.container is not None:
            armour.container.remove(armour)

        previous = self.armour
        self.armour = armour
        if previous is not None:
            if self.inventory.add(previous).ok:
                lines.append(
                    f"{definite(self.name, capital=True)} adds {definite(previous.name)} to their inventory."
                )
            elif self.location is not None:
                self.location.add_object(previous)
                lines.append(f"{definite(self.name, capital=True)} drops {definite(previous.name)}.")
            else:
                logger.warning("%s has nowhere to put %s", self.id, previous.id)

        lines.append(f"{definite(self.name, capital=True)} is now wearing {definite(armour.name)}.")
        return lines

    def given(self, item: GameObject) -> tuple[ActionResult, GameObject | None]:
        """
        Receive an item from someone else.

        Armour is worn; anything else goes into the inventory. If the item is the
        one this character wants in exchange, the offered object is detached from
        the inventory and returned alongside the result.
        """
        if isinstance(item, Armour):
            result = ActionResult.success(" ".join(self.wear(item)))
        else:
            result = self.inventory.add(item)
            if not result.ok:
                return result, None

        exchanged = None
        if self.exchange.wants and item.id == self.exchange.wants:
            found = self.inventory.find_by_id(self.exchange.gives)
            if found is not None:
                exchanged = found.detach()
        return result, exchanged

    # ---------- Text ----------

    def talk(self) -> list[str]:
        """The next thing the character says, plus any exchange offer."""
        lines: list[str] = []
        if self.talk_texts:
            lines.extend(self.talk_texts[self._talk_index])
            self._talk_index = (self._talk_index + 1) % len(self.talk_texts)
        if self.exchange.talk:
            if lines:
                lines.append("")
            lines.extend(self.exchange.talk)
        return lines

    def stats(self) -> list[str]:
        lines = [f"HP: {self.hp}/{self.max_hp}", f"XP: {self.xp}", f"Dexterity: {self.dexterity}", "Attacks:"]
        lines.extend(f"- {attack.stats()}" for attack in self.all_attacks())
        return lines

    def examine(self) -> list[str]:
        lines = super().examine()
        lines.extend(self.inventory.list_contents(f"{definite(self.name, capital=True)} is holding"))
        if self.armour is not None:
            lines.append(
                f"{definite(self.name, capital=True)} is wearing {indefinite(self.armour.name)}. "
                f"(HP={self.armour.current_hp}/{self.armour.hp}.)"
            )
        lines.extend(self.stats())
        return lines
