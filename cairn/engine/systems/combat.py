"""
Combat - attack resolution and damage application.

Characters decide *when* to attack (Character.fight: opponent, attack and
cooldown checks). This module decides what an attack *does*:

1. Dexterity roll: a draw from [0, hit_roll_range) at or above the
   attacker's dexterity is a miss.
2. Damage is drawn uniformly from the attack's [min, max] range.
3. Working armour removes int(damage * reduction), then soaks up the rest
   with its own HP, breaking at 0 and passing any excess through.
4. What is left comes off the opponent's HP and is added to the attacker's XP.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from ..text import definite, indefinite

if TYPE_CHECKING:
    from ..objects.attacks import Attack
    from ..objects.character import Character
    from .context import GameContext
    from .events import Event

logger = logging.getLogger(__name__)


@dataclass
class CombatConfig:
    """Configuration for combat mechanics."""
    hit_roll_range: int = 100  # dexterity is a percentage chance to hit
    xp_per_damage: int = 1  # XP gained per point of damage dealt


DEFAULT_COMBAT_CONFIG = CombatConfig()


def roll_damage(attack: "Attack", ctx: "GameContext") -> int:
    low, high = sorted((attack.min_damage, attack.max_damage))
    return ctx.rng.randint(low, high)


def absorb_with_armour(opponent: "Character", damage: int) -> tuple[int, List[str]]:
    """
    Let the opponent's worn armour take its share of a hit.

    Returns:
        (damage left for the opponent, narration lines)
    """
    armour = opponent.armour
    if armour is None or armour.current_hp <= 0:
        return damage, []

    lines: List[str] = []
    reduced = int(damage * armour.damage_reduction_factor)
    lines.append(
        f"{definite(opponent.name, capital=True)}'s {armour.name} reduces the damage by {reduced} HP."
    )
    damage -= reduced

    if damage >= armour.current_hp:
        lines.append(
            f"{definite(armour.name, capital=True)} absorbs {armour.current_hp} HP, but is now broken."
        )
        damage -= armour.current_hp
        armour.current_hp = 0
    else:
        lines.append(f"{definite(armour.name, capital=True)} absorbs all the damage from this attack.")
        armour.current_hp -= damage
        damage = 0
    return damage, lines


def resolve_attack(
    attacker: "Character",
    opponent: "Character",
    attack: "Attack",
    ctx: "GameContext",
    config: CombatConfig | None = None,
) -> List["Event"]:
    """
    Perform one attack and return its narration, one event per line.

    Mutates the opponent's HP (and worn armour) and the attacker's XP.
    """
    config = config or DEFAULT_COMBAT_CONFIG
    location_id = attacker.location_id
    attacker_name = definite(attacker.name, capital=True)
    attack_name = indefinite(f"{attack.name} attack")

    roll = ctx.rng.randrange(config.hit_roll_range)
    if roll >= attacker.dexterity:
        logger.debug("%s missed %s (roll=%d, dexterity=%d)", attacker.id, opponent.id, roll, attacker.dexterity)
        return [
            ctx.msg_to_location(
                location_id,
                f"{attacker_name} launches {attack_name} at {definite(opponent.name)} but misses.",
            )
        ]

    damage = roll_damage(attack, ctx)
    lines = [f"{attacker_name} launches {attack_name} at {definite(opponent.name)} doing {damage} damage."]

    damage, armour_lines = absorb_with_armour(opponent, damage)
    lines.extend(armour_lines)

    opponent.hp -= damage
    attacker.xp += damage * config.xp_per_damage
    logger.debug("%s hit %s for %d (hp now %d)", attacker.id, opponent.id, damage, opponent.hp)

    if opponent.is_dead:
        lines.append(f"{attacker_name} has killed {definite(opponent.name)}.")

    return [ctx.msg_to_location(location_id, line) for line in lines]
