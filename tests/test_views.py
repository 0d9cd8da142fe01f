import pytest
from django.urls import reverse

from rpg_arena.models import Character

pytestmark = pytest.mark.django_db


class TestFightEndpoints:

    def test_weapon_attack(self, api_client, make_character):
        a = make_character("A", weapon=("Axe", 500))
        b = make_character("B")

        resp = api_client.post(reverse("fight-weapon"), {"attacker_id": a.id, "opponent_id": b.id}, format="json")

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["attacker"] == "A"
        assert body["data"]["opponent"] == "B"
        assert body["data"]["opponent_hp"] == 0
        assert body["data"]["attacker_victorious"] is True

    def test_weapon_attack_unknown_character(self, api_client, make_character):
        a = make_character("A")
        resp = api_client.post(reverse("fight-weapon"), {"attacker_id": a.id, "opponent_id": 999}, format="json")

        assert resp.status_code == 404
        assert resp.json() == {"data": None, "success": False, "message": "Character not found!"}

    def test_weapon_attack_bad_payload(self, api_client):
        resp = api_client.post(reverse("fight-weapon"), {"attacker_id": "x"}, format="json")
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_skill_attack_unlearned(self, api_client, make_character, frenzy):
        a, b = make_character("A"), make_character("B")
        resp = api_client.post(
            reverse("fight-skill"),
            {"attacker_id": a.id, "opponent_id": b.id, "skill_id": frenzy.id},
            format="json",
        )

        assert resp.status_code == 404
        assert resp.json()["message"] == "Attacker doesn't know that skill!"

    def test_fight(self, api_client, make_character):
        a = make_character("A", weapon=("Axe", 500))
        b = make_character("B")

        resp = api_client.post(reverse("fight"), {"character_ids": [a.id, b.id]}, format="json")

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["winner_id"] == a.id
        assert data["loser_ids"] == [b.id]
        assert data["log"][-1] == "A wins with 100 HP left!"
        assert data["attacks"][0]["attacker_id"] == a.id

    def test_fight_needs_two_ids(self, api_client, make_character):
        resp = api_client.post(reverse("fight"), {"character_ids": [make_character().id]}, format="json")

        assert resp.status_code == 404
        assert resp.json() == {
            "data": None,
            "success": False,
            "message": "A fight needs at least 2 living characters.",
        }

    def test_fight_without_ids(self, api_client):
        resp = api_client.post(reverse("fight"), {}, format="json")
        assert resp.status_code == 400

    def test_fight_with_ghost(self, api_client, make_character):
        a = make_character("A", hit_points=55)
        resp = api_client.post(reverse("fight"), {"character_ids": [a.id, 31337]}, format="json")

        assert resp.status_code == 404
        a.refresh_from_db()
        assert a.hit_points == 55

    def test_highscore(self, api_client, make_character):
        make_character("Low", victories=1)
        make_character("High", victories=4)

        resp = api_client.get(reverse("fight-highscore"))

        assert resp.status_code == 200
        assert [(e["rank"], e["name"]) for e in resp.json()["data"]] == [(1, "High"), (2, "Low")]


class TestCharacterEndpoints:

    def test_requires_login(self, api_client):
        resp = api_client.get(reverse("character-list"))
        assert resp.status_code in (401, 403)

    def test_create_and_list(self, auth_client):
        resp = auth_client.post(reverse("character-list"), {"name": "Pippin", "intelligence": 14}, format="json")

        assert resp.status_code == 200
        assert [c["name"] for c in resp.json()["data"]] == ["Pippin"]
        assert resp.json()["data"][0]["hit_points"] == 100

    def test_invalid_class(self, auth_client):
        resp = auth_client.post(reverse("character-list"), {"character_class": "Bard"}, format="json")
        assert resp.status_code == 400

    def test_detail_of_other_users_character(self, auth_client, make_character, other_user):
        theirs = make_character("Theirs", owner=other_user)
        resp = auth_client.get(reverse("character-detail", args=[theirs.id]))
        assert resp.status_code == 404

    def test_update(self, auth_client, make_character):
        ch = make_character("Sam")
        resp = auth_client.put(reverse("character-detail", args=[ch.id]), {"defence": 20}, format="json")

        assert resp.status_code == 200
        assert resp.json()["data"]["defence"] == 20

    def test_delete(self, auth_client, make_character):
        ch = make_character("Sam")
        resp = auth_client.delete(reverse("character-detail", args=[ch.id]))

        assert resp.status_code == 200
        assert resp.json()["data"] == []
        assert not Character.objects.filter(id=ch.id).exists()

    def test_learn_skill(self, auth_client, make_character, frenzy):
        ch = make_character("Boromir")
        resp = auth_client.post(reverse("character-skill"), {"character_id": ch.id, "skill_id": frenzy.id}, format="json")

        assert resp.status_code == 200
        assert [s["name"] for s in resp.json()["data"]["skills"]] == ["Frenzy"]

    def test_add_weapon(self, auth_client, make_character):
        ch = make_character("Gimli")
        resp = auth_client.post(reverse("weapon-add"), {"character_id": ch.id, "name": "Axe", "damage": 9}, format="json")

        assert resp.status_code == 200
        assert resp.json()["data"]["weapon"] == {"name": "Axe", "damage": 9}

    def test_add_weapon_negative_damage(self, auth_client, make_character):
        ch = make_character("Gimli")
        resp = auth_client.post(reverse("weapon-add"), {"character_id": ch.id, "name": "Axe", "damage": -1}, format="json")
        assert resp.status_code == 400


def test_skill_list(api_client, fireball):
    resp = api_client.get(reverse("skill-list"))
    assert resp.status_code == 200
    assert resp.json()["data"][0]["name"] == "Fireball"
