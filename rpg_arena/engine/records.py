from typing import List

from django.conf import settings
from django.db import DatabaseError, transaction
from django.db.models import F

from rpg_arena.log_config import get_logger
from rpg_arena.models import Character

from .battle import DEFAULT_HIT_POINTS
from .contracts import FightResult, HighscoreEntry
from .rules import CombatantNotFound, PersistenceFailure

logger = get_logger(__name__)


def _arena_setting(key, default):
    return (getattr(settings, "RPG_ARENA", {}) or {}).get(key, default)


def apply_outcome(fight_result: FightResult) -> None:
    """
    Winner gets +1 victory, every loser +1 defeat, everyone +1 fight.

    Rows are locked in id order and incremented with F() expressions.
    The aggregator does not deduplicate: applying the same result
    twice counts it twice.
    """
    participant_ids = sorted(set(fight_result.participant_ids))
    restore = _arena_setting("RESTORE_HIT_POINTS", True)
    full_hp = _arena_setting("DEFAULT_HIT_POINTS", DEFAULT_HIT_POINTS)

    try:
        with transaction.atomic():
            locked = list(
                Character.objects.select_for_update()
                .filter(id__in=participant_ids)
                .order_by("id")
                .values_list("id", flat=True)
            )
            missing = set(participant_ids) - set(locked)
            if missing:
                raise CombatantNotFound(min(missing))

            Character.objects.filter(id__in=participant_ids).update(fights=F("fights") + 1)
            Character.objects.filter(id=fight_result.winner_id).update(victories=F("victories") + 1)
            Character.objects.filter(id__in=fight_result.loser_ids).update(defeats=F("defeats") + 1)

            if restore:
                Character.objects.filter(id__in=participant_ids).update(hit_points=full_hp)
    except DatabaseError as e:
        logger.error("fight outcome not saved", winner_id=fight_result.winner_id, error=str(e))
        raise PersistenceFailure(
            "Fight outcome could not be saved.",
            details={"winner_id": fight_result.winner_id},
        ) from e

    logger.info(
        "fight outcome applied",
        winner_id=fight_result.winner_id,
        loser_ids=list(fight_result.loser_ids),
        rounds=fight_result.rounds,
    )


def persist_hit_points(character_id: int, hit_points: int) -> None:
    try:
        with transaction.atomic():
            updated = Character.objects.filter(id=character_id).update(hit_points=max(0, hit_points))
    except DatabaseError as e:
        raise PersistenceFailure(
            "Hit points could not be saved.",
            details={"character_id": character_id},
        ) from e

    if not updated:
        raise CombatantNotFound(character_id)


def get_highscores() -> List[HighscoreEntry]:
    rows = Character.objects.order_by("-victories", "defeats", "id").values(
        "id", "name", "fights", "victories", "defeats"
    )
    return [HighscoreEntry(rank=i, **row) for i, row in enumerate(rows, start=1)]
