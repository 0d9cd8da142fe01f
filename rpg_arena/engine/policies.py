from __future__ import annotations

from typing import Callable, Dict, List, Optional

from .contracts import AttackAction, Combatant

# (actor, living opponents in turn order, round number) -> target
TargetPolicy = Callable[[Combatant, List[Combatant], int], Optional[Combatant]]
# (actor, target, rng) -> action
ActionPolicy = Callable[[Combatant, Combatant, object], AttackAction]


# -----------------------------
# Targeting
# -----------------------------

def round_robin_target(actor: Combatant, opponents: List[Combatant], round_no: int) -> Optional[Combatant]:
    """
    `opponents` is already rotated to start right after the actor,
    so round 1 hits the next character in turn order, round 2 the one after, ...
    """
    if not opponents:
        return None
    return opponents[(round_no - 1) % len(opponents)]


def weakest_target(actor: Combatant, opponents: List[Combatant], round_no: int) -> Optional[Combatant]:
    if not opponents:
        return None
    # min() keeps the first of equal candidates, i.e. turn order
    return min(opponents, key=lambda c: c.hit_points)


# -----------------------------
# Action choice
# -----------------------------

def weapon_action(actor: Combatant, target: Combatant, rng) -> AttackAction:
    return AttackAction.weapon(actor.id, target.id)


def strongest_skill_action(actor: Combatant, target: Combatant, rng) -> AttackAction:
    if not actor.skills:
        return weapon_action(actor, target, rng)
    best = max(actor.skills, key=lambda s: (s.damage, -s.id))
    return AttackAction.skill(actor.id, target.id, best.id)


def random_action(actor: Combatant, target: Combatant, rng) -> AttackAction:
    """
    Coin flip between weapon and a random learned skill.
    Characters without skills always swing their weapon.
    """
    if not actor.skills or rng.randint(0, 1) == 0:
        return weapon_action(actor, target, rng)
    skill = actor.skills[rng.randint(0, len(actor.skills) - 1)]
    return AttackAction.skill(actor.id, target.id, skill.id)


TARGET_POLICIES: Dict[str, TargetPolicy] = {
    "round_robin": round_robin_target,
    "weakest": weakest_target,
}

ACTION_POLICIES: Dict[str, ActionPolicy] = {
    "weapon": weapon_action,
    "skill": strongest_skill_action,
    "random": random_action,
}


def get_target_policy(name: str) -> TargetPolicy:
    try:
        return TARGET_POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown target policy: {name!r}") from None


def get_action_policy(name: str) -> ActionPolicy:
    try:
        return ACTION_POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown action policy: {name!r}") from None
