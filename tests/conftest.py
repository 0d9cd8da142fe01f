"""
Shared fixtures for the arena test suite.

Random sources here replace random.Random so damage rolls are exact.
"""

import pytest
from django.contrib.auth.models import User
from rest_framework.test import APIClient

from rpg_arena.engine.contracts import Combatant, SkillSnapshot, WeaponSnapshot
from rpg_arena.models import Character, Skill, Weapon


class MinRandom:
    """Every roll is the lowest value of its range."""

    def randint(self, a, b):
        return a


class MaxRandom:
    """Every roll is the highest value of its range."""

    def randint(self, a, b):
        return b


class SequenceRandom:
    """Replays a fixed list of rolls; fails loudly on an out-of-range value or an extra roll."""

    def __init__(self, rolls):
        self.rolls = list(rolls)
        self.calls = []

    def randint(self, a, b):
        if not self.rolls:
            raise AssertionError(f"unexpected roll randint({a}, {b})")
        value = self.rolls.pop(0)
        assert a <= value <= b, f"roll {value} outside {a}..{b}"
        self.calls.append((a, b))
        return value


def combatant(id, name=None, hit_points=100, strength=10, defence=0, intelligence=10,
              weapon=None, skills=(), character_class="Knight"):
    return Combatant(
        id=id,
        owner_id=None,
        name=name or f"C{id}",
        hit_points=hit_points,
        strength=strength,
        defence=defence,
        intelligence=intelligence,
        character_class=character_class,
        weapon=WeaponSnapshot(*weapon) if weapon else None,
        skills=tuple(SkillSnapshot(*s) for s in skills),
    )


@pytest.fixture
def min_rng():
    return MinRandom()


@pytest.fixture
def max_rng():
    return MaxRandom()


@pytest.fixture
def user(db):
    return User.objects.create_user(username="sam", password="pass1234")


@pytest.fixture
def other_user(db):
    return User.objects.create_user(username="frodo", password="pass1234")


@pytest.fixture
def make_character(db, user):
    def _make(name="Frodo", owner=user, weapon=None, skills=(), **fields):
        character = Character.objects.create(name=name, owner=owner, **fields)
        if weapon:
            Weapon.objects.create(character=character, name=weapon[0], damage=weapon[1])
        for skill in skills:
            character.skills.add(skill)
        return character
    return _make


@pytest.fixture
def fireball(db):
    return Skill.objects.create(name="Fireball", damage=30, character_class="Mage")


@pytest.fixture
def frenzy(db):
    return Skill.objects.create(name="Frenzy", damage=20)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def auth_client(api_client, user):
    api_client.force_authenticate(user=user)
    return api_client
