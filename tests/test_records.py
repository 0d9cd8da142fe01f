import threading

import pytest
from django.db import connection

from rpg_arena.engine.contracts import FightResult
from rpg_arena.engine.loader import load_combatant, load_combatants
from rpg_arena.engine.records import apply_outcome, get_highscores, persist_hit_points
from rpg_arena.engine.rules import CombatantNotFound
from rpg_arena.models import Character
from rpg_arena.services import FightService

from conftest import MinRandom

pytestmark = pytest.mark.django_db


def outcome(winner, *losers):
    return FightResult(log=(), winner_id=winner.id, loser_ids=tuple(l.id for l in losers), rounds=1)


class TestApplyOutcome:

    def test_counters(self, make_character):
        a, b, c = make_character("A"), make_character("B"), make_character("C")
        bystander = make_character("D")

        apply_outcome(outcome(a, b, c))

        for ch in (a, b, c, bystander):
            ch.refresh_from_db()
        assert (a.fights, a.victories, a.defeats) == (1, 1, 0)
        assert (b.fights, b.victories, b.defeats) == (1, 0, 1)
        assert (c.fights, c.victories, c.defeats) == (1, 0, 1)
        assert (bystander.fights, bystander.victories, bystander.defeats) == (0, 0, 0)

    def test_hit_points_restored(self, make_character):
        a, b = make_character("A", hit_points=40), make_character("B", hit_points=0)
        apply_outcome(outcome(a, b))

        a.refresh_from_db()
        b.refresh_from_db()
        assert a.hit_points == b.hit_points == 100

    def test_hit_points_kept_when_disabled(self, make_character, settings):
        settings.RPG_ARENA = {**settings.RPG_ARENA, "RESTORE_HIT_POINTS": False}
        a, b = make_character("A", hit_points=40), make_character("B", hit_points=7)
        apply_outcome(outcome(a, b))

        b.refresh_from_db()
        assert b.hit_points == 7

    def test_not_deduplicated(self, make_character):
        a, b = make_character("A"), make_character("B")
        result = outcome(a, b)
        apply_outcome(result)
        apply_outcome(result)

        a.refresh_from_db()
        assert a.victories == 2

    def test_missing_character_rolls_back(self, make_character):
        a, b = make_character("A"), make_character("B")
        result = FightResult(log=(), winner_id=a.id, loser_ids=(b.id, 9999), rounds=1)

        with pytest.raises(CombatantNotFound):
            apply_outcome(result)

        a.refresh_from_db()
        assert (a.fights, a.victories) == (0, 0)


@pytest.mark.django_db(transaction=True)
class TestConcurrentFights:
    """Each fight runs on its own thread and database connection."""

    def run_fights(self, pairings):
        responses = []

        def fight(ids):
            try:
                responses.append(FightService(rng=MinRandom()).fight(ids))
            finally:
                connection.close()

        threads = [threading.Thread(target=fight, args=(ids,)) for ids in pairings]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return responses

    def test_same_pair_loses_no_updates(self, make_character):
        a = make_character("A", weapon=("Axe", 200))
        b = make_character("B")

        responses = self.run_fights([[a.id, b.id]] * 20)

        assert [r.message for r in responses if not r.success] == []
        assert len(responses) == 20
        a.refresh_from_db()
        b.refresh_from_db()
        assert a.fights == b.fights == 20
        assert a.victories + b.victories == 20
        assert a.defeats + b.defeats == 20

    def test_disjoint_pairs_do_not_interfere(self, make_character):
        pairs = [
            (make_character(f"W{i}", weapon=("Axe", 200)), make_character(f"L{i}"))
            for i in range(10)
        ]

        responses = self.run_fights([[w.id, l.id] for w, l in pairs])

        assert [r.message for r in responses if not r.success] == []
        for winner, loser in pairs:
            winner.refresh_from_db()
            loser.refresh_from_db()
            assert (winner.fights, winner.victories, winner.defeats) == (1, 1, 0)
            assert (loser.fights, loser.victories, loser.defeats) == (1, 0, 1)


class TestHitPoints:

    def test_persist(self, make_character):
        a = make_character("A")
        persist_hit_points(a.id, 42)
        a.refresh_from_db()
        assert a.hit_points == 42

    def test_never_negative(self, make_character):
        a = make_character("A")
        persist_hit_points(a.id, -5)
        a.refresh_from_db()
        assert a.hit_points == 0

    def test_unknown_character(self):
        with pytest.raises(CombatantNotFound):
            persist_hit_points(404, 10)


class TestHighscores:

    def test_ordering(self, make_character):
        low = make_character("Low", victories=1, defeats=5)
        top = make_character("Top", victories=5, defeats=3)
        tie_more_defeats = make_character("TieB", victories=3, defeats=4)
        tie_first = make_character("TieA1", victories=3, defeats=1)
        tie_second = make_character("TieA2", victories=3, defeats=1)

        board = get_highscores()

        assert [e.id for e in board] == [top.id, tie_first.id, tie_second.id, tie_more_defeats.id, low.id]
        assert [e.rank for e in board] == [1, 2, 3, 4, 5]
        assert board[0].name == "Top"

    def test_stable(self, make_character):
        for i in range(5):
            make_character(f"C{i}", victories=i % 2)
        assert get_highscores() == get_highscores()

    def test_counts_real_fights(self, make_character):
        a, b = make_character("A"), make_character("B")
        apply_outcome(outcome(b, a))

        board = get_highscores()
        assert [(e.name, e.fights, e.victories, e.defeats) for e in board] == [("B", 1, 1, 0), ("A", 1, 0, 1)]


class TestLoader:

    def test_snapshot(self, make_character, fireball, frenzy):
        ch = make_character("Gandalf", weapon=("Staff", 7), skills=[fireball, frenzy],
                            strength=3, defence=4, intelligence=20, character_class="Mage")
        snap = load_combatant(ch.id)

        assert snap.name == "Gandalf"
        assert snap.owner_id == ch.owner_id
        assert (snap.strength, snap.defence, snap.intelligence) == (3, 4, 20)
        assert snap.weapon.name == "Staff" and snap.weapon.damage == 7
        assert {s.id for s in snap.skills} == {fireball.id, frenzy.id}
        assert snap.character_class == "Mage"

    def test_snapshot_without_weapon(self, make_character):
        snap = load_combatant(make_character("Bare").id)
        assert snap.weapon is None
        assert snap.skills == ()

    def test_not_found(self):
        with pytest.raises(CombatantNotFound) as exc:
            load_combatant(12345)
        assert exc.value.details == {"character_id": 12345}

    def test_batch_keeps_order(self, make_character):
        a, b = make_character("A"), make_character("B")
        assert [c.id for c in load_combatants([b.id, a.id, b.id])] == [b.id, a.id, b.id]

    def test_batch_unknown_id(self, make_character):
        a = make_character("A")
        with pytest.raises(CombatantNotFound):
            load_combatants([a.id, 777])

    def test_reads_current_state(self, make_character):
        a = make_character("A")
        assert load_combatant(a.id).hit_points == 100
        Character.objects.filter(id=a.id).update(hit_points=12)
        assert load_combatant(a.id).hit_points == 12
