from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Generic, List, Optional, TypeVar

from django.db import DatabaseError, transaction

from .engine.battle import FightRules, make_rng, resolve_attack, run_fight
from .engine.contracts import AttackAction, AttackResult, FightResult, HighscoreEntry
from .engine.loader import load_combatants
from .engine.records import apply_outcome, get_highscores, persist_hit_points
from .engine.rules import CombatError
from .log_config import get_logger
from .models import Character, Skill, Weapon

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class ServiceResponse(Generic[T]):
    data: Optional[T] = None
    success: bool = True
    message: str = ""

    @classmethod
    def fail(cls, message: str) -> "ServiceResponse[T]":
        return cls(data=None, success=False, message=message)


def _failure(operation: str, error: Exception, **context) -> ServiceResponse:
    if isinstance(error, CombatError):
        logger.warning(f"{operation} failed", code=error.code, reason=error.message, **context)
        return ServiceResponse.fail(error.message)
    logger.error(f"{operation} failed", code="PERSISTENCE_FAILURE", error=str(error), **context)
    return ServiceResponse.fail("Could not save changes.")


# =========================
# FIGHTS
# =========================

class FightService:
    """
    Entry points of the combat engine. Every method returns a ServiceResponse;
    engine and database errors become success=False with no data.
    """

    def __init__(self, rng=None, rules: Optional[FightRules] = None):
        self._rng = rng
        self._rules = rules

    @property
    def rng(self):
        if self._rng is None:
            self._rng = make_rng()
        return self._rng

    @property
    def rules(self) -> FightRules:
        if self._rules is None:
            self._rules = FightRules.from_settings()
        return self._rules

    def weapon_attack(self, attacker_id: int, defender_id: int) -> ServiceResponse[AttackResult]:
        action = AttackAction.weapon(attacker_id, defender_id)
        return self._exchange("weapon attack", action)

    def skill_attack(self, attacker_id: int, defender_id: int, skill_id: int) -> ServiceResponse[AttackResult]:
        action = AttackAction.skill(attacker_id, defender_id, skill_id)
        return self._exchange("skill attack", action)

    def fight(self, character_ids: List[int]) -> ServiceResponse[FightResult]:
        ids = list(character_ids)
        try:
            combatants = load_combatants(ids)
            logger.info("fight started", character_ids=ids, rules=asdict(self.rules))
            result = run_fight(combatants, self.rules, self.rng)
            apply_outcome(result)
        except (CombatError, DatabaseError) as e:
            return _failure("fight", e, character_ids=ids)

        logger.info(
            "fight concluded",
            winner_id=result.winner_id,
            rounds=result.rounds,
            round_limit_reached=result.round_limit_reached,
        )
        return ServiceResponse(data=result)

    def get_highscores(self) -> ServiceResponse[List[HighscoreEntry]]:
        try:
            return ServiceResponse(data=get_highscores())
        except DatabaseError as e:
            return _failure("highscore", e)

    def _exchange(self, operation: str, action: AttackAction) -> ServiceResponse[AttackResult]:
        try:
            with transaction.atomic():
                # lock both rows so concurrent blows on one defender queue up
                attacker, defender = load_combatants([action.attacker_id, action.defender_id], lock=True)
                result, hurt = resolve_attack(attacker, defender, action, self.rng)
                persist_hit_points(hurt.id, hurt.hit_points)
        except (CombatError, DatabaseError) as e:
            return _failure(operation, e, attacker_id=action.attacker_id, defender_id=action.defender_id)

        return ServiceResponse(data=result)


# =========================
# CHARACTERS / WEAPONS
# =========================

class CharacterService:
    """CRUD for the requesting user's own characters."""

    def __init__(self, user):
        self.user = user

    def _owned(self):
        return Character.objects.filter(owner=self.user).select_related("weapon").prefetch_related("skills")

    def _get_owned(self, character_id: int) -> Optional[Character]:
        return self._owned().filter(id=character_id).first()

    def get_all_characters(self) -> ServiceResponse[List[Character]]:
        return ServiceResponse(data=list(self._owned()))

    def get_character_by_id(self, character_id: int) -> ServiceResponse[Character]:
        character = self._get_owned(character_id)
        if character is None:
            return ServiceResponse.fail("Character not found!")
        return ServiceResponse(data=character)

    def add_character(self, fields: dict) -> ServiceResponse[List[Character]]:
        Character.objects.create(owner=self.user, **fields)
        return self.get_all_characters()

    def update_character(self, character_id: int, fields: dict) -> ServiceResponse[Character]:
        character = self._get_owned(character_id)
        if character is None:
            return ServiceResponse.fail(f"Character with Id '{character_id}' not found.")

        for key, value in fields.items():
            setattr(character, key, value)
        character.save(update_fields=list(fields) or None)
        return ServiceResponse(data=character)

    def delete_character(self, character_id: int) -> ServiceResponse[List[Character]]:
        deleted, _ = self._owned().filter(id=character_id).delete()
        if not deleted:
            return ServiceResponse.fail(f"Character with Id '{character_id}' not found.")
        return self.get_all_characters()

    def add_character_skill(self, character_id: int, skill_id: int) -> ServiceResponse[Character]:
        character = self._get_owned(character_id)
        if character is None:
            return ServiceResponse.fail("Character not found!")

        skill = Skill.objects.filter(id=skill_id).first()
        if skill is None:
            return ServiceResponse.fail("Skill not found!")
        if not skill.allows(character.character_class):
            return ServiceResponse.fail(f"{character.character_class} cannot learn {skill.name}.")

        character.skills.add(skill)
        logger.info("skill learned", character_id=character.id, skill_id=skill.id)
        return self.get_character_by_id(character.id)


class WeaponService:
    def __init__(self, user):
        self.user = user

    def add_weapon(self, character_id: int, name: str, damage: int) -> ServiceResponse[Character]:
        character = Character.objects.filter(id=character_id, owner=self.user).first()
        if character is None:
            return ServiceResponse.fail("Character not found!")

        try:
            with transaction.atomic():
                # one weapon per character: the new one replaces the old
                Weapon.objects.filter(character=character).delete()
                Weapon.objects.create(character=character, name=name, damage=damage)
        except DatabaseError as e:
            return _failure("add weapon", e, character_id=character_id)

        return CharacterService(self.user).get_character_by_id(character.id)
