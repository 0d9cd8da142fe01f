from __future__ import annotations

from typing import Protocol

from .contracts import ACTION_SKILL, ACTION_WEAPON, AttackAction, Combatant
from .rules import SkillNotLearned

MIN_DAMAGE = 1
MIN_BONUS = 1


class RandomSource(Protocol):
    """Anything with an inclusive randint, e.g. random.Random(seed)."""

    def randint(self, a: int, b: int) -> int: ...


def roll_bonus(rng: RandomSource, stat: int) -> int:
    # stats of 0 still roll 1..1
    return rng.randint(MIN_BONUS, max(MIN_BONUS, stat))


def mitigate(raw: int, defence: int) -> int:
    return max(MIN_DAMAGE, raw - defence)


def base_damage(attacker: Combatant, action: AttackAction) -> tuple[int, int, str]:
    """
    Returns (base damage, scaling stat, label) for the action.
    Raises SkillNotLearned before any roll happens.
    """
    if action.kind == ACTION_SKILL:
        skill = attacker.learned_skill(action.skill_id)
        if skill is None:
            raise SkillNotLearned(attacker.id, action.skill_id)
        return skill.damage, attacker.intelligence, skill.name

    if action.kind != ACTION_WEAPON:
        raise ValueError(f"Unknown attack kind: {action.kind!r}")

    if attacker.weapon is None:
        return 0, attacker.strength, "bare hands"
    return attacker.weapon.damage, attacker.strength, attacker.weapon.name


def compute_damage(attacker: Combatant, action: AttackAction, defender: Combatant, rng: RandomSource) -> int:
    """
    Weapon: weapon damage + 1..STR. Skill: skill damage + 1..INT.
    The defender's defence is subtracted flat and the result floored at 1.
    Neither combatant is touched.
    """
    base, stat, _ = base_damage(attacker, action)
    return mitigate(base + roll_bonus(rng, stat), defender.defence)


def apply_damage(hit_points: int, damage: int) -> int:
    return max(0, hit_points - damage)
