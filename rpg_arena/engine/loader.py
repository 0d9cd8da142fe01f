from typing import Iterable, List

from rpg_arena.models import Character

from .contracts import Combatant, SkillSnapshot, WeaponSnapshot
from .rules import CombatantNotFound


def to_combatant(character: Character) -> Combatant:
    weapon = getattr(character, "weapon", None)
    return Combatant(
        id=character.id,
        owner_id=character.owner_id,
        name=character.name,
        hit_points=character.hit_points,
        strength=character.strength,
        defence=character.defence,
        intelligence=character.intelligence,
        character_class=character.character_class,
        weapon=WeaponSnapshot(weapon.name, weapon.damage) if weapon else None,
        skills=tuple(SkillSnapshot(s.id, s.name, s.damage) for s in character.skills.all()),
    )


def _queryset(lock: bool = False):
    qs = Character.objects.select_related("weapon").prefetch_related("skills")
    if lock:
        # weapon is the nullable side of the join, only lock character rows
        qs = qs.select_for_update(of=("self",)).order_by("id")
    return qs


def load_combatant(character_id: int) -> Combatant:
    character = _queryset().filter(id=character_id).first()
    if character is None:
        raise CombatantNotFound(character_id)
    return to_combatant(character)


def load_combatants(character_ids: Iterable[int], lock: bool = False) -> List[Combatant]:
    """
    Loads every id up front, in the order given (repeats included).
    Any unknown id fails the whole batch. `lock` needs an open transaction.
    """
    ids = [int(i) for i in character_ids]
    found = {c.id: c for c in _queryset(lock).filter(id__in=ids)}
    for cid in ids:
        if cid not in found:
            raise CombatantNotFound(cid)
    return [to_combatant(found[cid]) for cid in ids]
