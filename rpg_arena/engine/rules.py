# rpg_arena/engine/rules.py

from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class CombatError(Exception):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self):
        return self.message


# ============================================================
# ERROR KINDS
# ============================================================

class CombatantNotFound(CombatError):
    def __init__(self, character_id):
        super().__init__(
            code="COMBATANT_NOT_FOUND",
            message="Character not found!",
            details={"character_id": character_id},
        )


class SkillNotLearned(CombatError):
    def __init__(self, character_id, skill_id):
        super().__init__(
            code="SKILL_NOT_LEARNED",
            message="Attacker doesn't know that skill!",
            details={"character_id": character_id, "skill_id": skill_id},
        )


class InsufficientParticipants(CombatError):
    def __init__(self, living: int):
        super().__init__(
            code="INSUFFICIENT_PARTICIPANTS",
            message="A fight needs at least 2 living characters.",
            details={"living": living},
        )


class CombatantDefeated(CombatError):
    def __init__(self, character_id, name: str = ""):
        super().__init__(
            code="COMBATANT_DEFEATED",
            message=f"{name or 'Character'} has already been defeated!",
            details={"character_id": character_id},
        )


class InvalidTarget(CombatError):
    def __init__(self, character_id):
        super().__init__(
            code="INVALID_TARGET",
            message="A character cannot attack itself.",
            details={"character_id": character_id},
        )


class PersistenceFailure(CombatError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            code="PERSISTENCE_FAILURE",
            message=message,
            details=details,
        )


# ============================================================
# VALIDATION
# ============================================================

def unique_ids(character_ids) -> list:
    """
    Drops repeated ids, keeping the first occurrence so turn order is stable.
    """
    return list(dict.fromkeys(int(i) for i in character_ids))


def validate_contestants(combatants: list) -> list:
    """
    Rules enforced before a full fight starts:
    - defeated (0 HP) characters are not contestants
    - at least 2 living contestants remain
    """
    living = [c for c in combatants if c.alive]
    if len(living) < 2:
        raise InsufficientParticipants(len(living))
    return living


def validate_exchange(attacker, defender) -> None:
    if attacker.id == defender.id:
        raise InvalidTarget(attacker.id)
    if not attacker.alive:
        raise CombatantDefeated(attacker.id, attacker.name)
    if not defender.alive:
        raise CombatantDefeated(defender.id, defender.name)
