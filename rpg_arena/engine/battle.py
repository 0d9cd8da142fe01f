from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from django.conf import settings

from .contracts import AttackAction, AttackResult, Combatant, FightResult, FightSnapshot
from .damage import apply_damage, base_damage, compute_damage
from .policies import get_action_policy, get_target_policy
from .rules import unique_ids, validate_contestants, validate_exchange

# =========================
# CONFIG
# =========================

MAX_FIGHT_ROUNDS = 500
DEFAULT_TARGET_POLICY = "round_robin"
DEFAULT_ACTION_POLICY = "weapon"
DEFAULT_HIT_POINTS = 100

PHASE_PENDING = "PENDING"
PHASE_IN_PROGRESS = "IN_PROGRESS"
PHASE_CONCLUDED = "CONCLUDED"


@dataclass(frozen=True)
class FightRules:
    max_rounds: int = MAX_FIGHT_ROUNDS
    target_policy: str = DEFAULT_TARGET_POLICY
    action_policy: str = DEFAULT_ACTION_POLICY

    def __post_init__(self):
        if self.max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")
        # fail on typos at configuration time, not mid-fight
        get_target_policy(self.target_policy)
        get_action_policy(self.action_policy)

    @classmethod
    def from_settings(cls) -> "FightRules":
        conf = getattr(settings, "RPG_ARENA", {}) or {}
        return cls(
            max_rounds=int(conf.get("MAX_FIGHT_ROUNDS", MAX_FIGHT_ROUNDS)),
            target_policy=conf.get("TARGET_POLICY", DEFAULT_TARGET_POLICY),
            action_policy=conf.get("ACTION_POLICY", DEFAULT_ACTION_POLICY),
        )


def make_rng(seed=None) -> random.Random:
    if seed is None:
        seed = (getattr(settings, "RPG_ARENA", {}) or {}).get("RANDOM_SEED")
    return random.Random(seed)


# =========================
# RUNTIME TYPES
# =========================

@dataclass
class FightState:
    """
    Working copy of one full fight. Hit points only change here;
    nothing is written to the database until the fight is concluded.
    """
    combatants: List[Combatant]  # contestants, in turn order
    rules: FightRules
    phase: str = PHASE_PENDING
    round: int = 0
    log: List[AttackResult] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    winner_id: Optional[int] = None
    round_limit_reached: bool = False

    def get(self, character_id: int) -> Combatant:
        return next(c for c in self.combatants if c.id == character_id)

    def living(self) -> List[Combatant]:
        return [c for c in self.combatants if c.alive]

    def opponents_of(self, actor: Combatant) -> List[Combatant]:
        """Living opponents in turn order, starting with the one seated after `actor`."""
        idx = next(i for i, c in enumerate(self.combatants) if c.id == actor.id)
        seated_after = self.combatants[idx + 1:] + self.combatants[:idx]
        return [c for c in seated_after if c.alive]

    def update(self, combatant: Combatant) -> None:
        self.combatants = [combatant if c.id == combatant.id else c for c in self.combatants]

    def event(self, message: str) -> None:
        self.messages.append(message)

    def snapshot(self) -> FightSnapshot:
        return {
            "phase": self.phase,
            "round": self.round,
            "hit_points": {c.id: c.hit_points for c in self.combatants},
            "log": list(self.messages),
            "winner": self.winner_id,
        }

    def result(self) -> FightResult:
        if self.phase != PHASE_CONCLUDED:
            raise RuntimeError("Fight has not been concluded yet.")
        return FightResult(
            log=tuple(self.log),
            winner_id=self.winner_id,
            loser_ids=tuple(c.id for c in self.combatants if c.id != self.winner_id),
            rounds=self.round,
            round_limit_reached=self.round_limit_reached,
            messages=tuple(self.messages),
            hit_points={c.id: c.hit_points for c in self.combatants},
        )


# =========================
# PUBLIC API
# =========================

def resolve_attack(attacker: Combatant, defender: Combatant, action: AttackAction, rng) -> Tuple[AttackResult, Combatant]:
    """
    One blow. Returns the result and the defender with its new hit points.
    Raises before computing anything if the exchange is not allowed.
    """
    if action.attacker_id != attacker.id or action.defender_id != defender.id:
        raise ValueError("Attack action does not match the combatants given.")
    validate_exchange(attacker, defender)

    damage = compute_damage(attacker, action, defender, rng)
    _, _, label = base_damage(attacker, action)
    hurt = defender.with_hit_points(apply_damage(defender.hit_points, damage))

    result = AttackResult(
        attacker_id=attacker.id,
        attacker_name=attacker.name,
        defender_id=defender.id,
        defender_name=defender.name,
        action=label,
        damage=damage,
        defender_hit_points=hurt.hit_points,
    )
    return result, hurt


def fight_state_new(combatants: List[Combatant], rules: Optional[FightRules] = None) -> FightState:
    """
    Repeated ids keep their first seat. Defeated characters are left out.
    """
    by_id = {}
    for c in combatants:
        by_id.setdefault(c.id, c)
    seated = [by_id[i] for i in unique_ids(c.id for c in combatants)]

    contestants = validate_contestants(seated)
    return FightState(combatants=contestants, rules=rules or FightRules())


def fight_state_advance(state: FightState, rng) -> FightState:
    """Plays one round. A concluded fight is returned unchanged."""
    if state.phase == PHASE_CONCLUDED:
        return state

    if state.round >= state.rules.max_rounds:
        _conclude_on_round_limit(state)
        return state

    state.phase = PHASE_IN_PROGRESS
    state.round += 1

    choose_target = get_target_policy(state.rules.target_policy)
    choose_action = get_action_policy(state.rules.action_policy)

    for seat in list(state.combatants):
        actor = state.get(seat.id)
        # knocked out earlier this round
        if not actor.alive:
            continue

        target = choose_target(actor, state.opponents_of(actor), state.round)
        if target is None:
            break
        _resolve_turn(state, actor, target, choose_action(actor, target, rng), rng)

        if len(state.living()) == 1:
            _conclude(state, state.living()[0])
            break

    return state


def fight_state_advance_until_concluded(state: FightState, rng) -> FightState:
    while state.phase != PHASE_CONCLUDED:
        fight_state_advance(state, rng)
    return state


def run_fight(combatants: List[Combatant], rules: Optional[FightRules] = None, rng=None) -> FightResult:
    """
    Runs a full elimination fight in one go.
    """
    state = fight_state_new(combatants, rules)
    fight_state_advance_until_concluded(state, rng or make_rng())
    return state.result()


# =========================
# INTERNAL LOGIC
# =========================

def _resolve_turn(state: FightState, actor: Combatant, target: Combatant, action: AttackAction, rng) -> None:
    result, hurt = resolve_attack(actor, target, action, rng)
    state.update(hurt)
    state.log.append(result)
    state.event(f"{result.attacker_name} attacks {result.defender_name} using {result.action} with {result.damage} damage.")

    if result.attacker_victorious:
        state.event(f"{result.defender_name} has been defeated!")


def _conclude(state: FightState, winner: Combatant) -> None:
    state.winner_id = winner.id
    state.phase = PHASE_CONCLUDED
    state.event(f"{winner.name} wins with {winner.hit_points} HP left!")


def _conclude_on_round_limit(state: FightState) -> None:
    """
    Most hit points left wins; equal hit points go to the earlier seat.
    """
    living = state.living()
    best = max(living, key=lambda c: c.hit_points)
    state.round_limit_reached = True
    state.event(f"Round limit of {state.rules.max_rounds} reached.")
    _conclude(state, best)
