from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

ACTION_WEAPON = "weapon"
ACTION_SKILL = "skill"


@dataclass(frozen=True)
class WeaponSnapshot:
    name: str
    damage: int


@dataclass(frozen=True)
class SkillSnapshot:
    id: int
    name: str
    damage: int


@dataclass(frozen=True)
class Combatant:
    """
    Point-in-time copy of a character's combat stats.
    Built per request by engine.loader, never written back directly.
    """
    id: int
    owner_id: int | None
    name: str
    hit_points: int
    strength: int
    defence: int
    intelligence: int
    character_class: str
    weapon: Optional[WeaponSnapshot] = None
    skills: Tuple[SkillSnapshot, ...] = ()

    @property
    def alive(self) -> bool:
        return self.hit_points > 0

    def learned_skill(self, skill_id: int) -> Optional[SkillSnapshot]:
        return next((s for s in self.skills if s.id == skill_id), None)

    def with_hit_points(self, hit_points: int) -> "Combatant":
        return replace(self, hit_points=hit_points)


@dataclass(frozen=True)
class AttackAction:
    kind: str  # ACTION_WEAPON / ACTION_SKILL
    attacker_id: int
    defender_id: int
    skill_id: int | None = None

    @classmethod
    def weapon(cls, attacker_id: int, defender_id: int) -> "AttackAction":
        return cls(ACTION_WEAPON, attacker_id, defender_id)

    @classmethod
    def skill(cls, attacker_id: int, defender_id: int, skill_id: int) -> "AttackAction":
        return cls(ACTION_SKILL, attacker_id, defender_id, skill_id)


@dataclass(frozen=True)
class AttackResult:
    attacker_id: int
    attacker_name: str
    defender_id: int
    defender_name: str
    action: str  # weapon or skill name used, for the fight log
    damage: int
    defender_hit_points: int

    @property
    def attacker_victorious(self) -> bool:
        return self.defender_hit_points <= 0


@dataclass(frozen=True)
class FightResult:
    log: Tuple[AttackResult, ...]
    winner_id: int
    loser_ids: Tuple[int, ...]
    rounds: int
    round_limit_reached: bool = False
    messages: Tuple[str, ...] = ()
    # final working hit points per participant, keyed by id
    hit_points: Dict[int, int] = field(default_factory=dict)

    @property
    def participant_ids(self) -> Tuple[int, ...]:
        return (self.winner_id,) + self.loser_ids


@dataclass(frozen=True)
class HighscoreEntry:
    id: int
    name: str
    fights: int
    victories: int
    defeats: int
    rank: int


FightSnapshot = Dict[str, Any]
"""
FightState.snapshot() contract:

{
  "phase": "PENDING" | "IN_PROGRESS" | "CONCLUDED",
  "round": int,
  "hit_points": { character_id: hp },
  "log": List[str],
  "winner": character_id | None,
}
"""
