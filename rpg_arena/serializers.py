from rest_framework import serializers
from .models import Character, Skill, Weapon


# -----------------------------
# Characters / weapons / skills
# -----------------------------

class SkillSerializer(serializers.ModelSerializer):
    class Meta:
        model = Skill
        fields = ["id", "name", "damage", "character_class"]


class WeaponSerializer(serializers.ModelSerializer):
    class Meta:
        model = Weapon
        fields = ["name", "damage"]


class CharacterSerializer(serializers.ModelSerializer):
    weapon = serializers.SerializerMethodField()
    skills = SkillSerializer(many=True, read_only=True)

    class Meta:
        model = Character
        fields = [
            "id", "name", "hit_points", "strength", "defence", "intelligence",
            "character_class", "weapon", "skills", "fights", "victories", "defeats",
        ]

    def get_weapon(self, obj):
        weapon = getattr(obj, "weapon", None)
        return WeaponSerializer(weapon).data if weapon else None


class AddCharacterSerializer(serializers.ModelSerializer):
    class Meta:
        model = Character
        fields = ["name", "hit_points", "strength", "defence", "intelligence", "character_class"]


class UpdateCharacterSerializer(AddCharacterSerializer):
    pass


class AddCharacterSkillSerializer(serializers.Serializer):
    character_id = serializers.IntegerField()
    skill_id = serializers.IntegerField()


class AddWeaponSerializer(serializers.Serializer):
    character_id = serializers.IntegerField()
    name = serializers.CharField(max_length=120)
    damage = serializers.IntegerField(min_value=0)


# -----------------------------
# Fight requests
# -----------------------------

class WeaponAttackSerializer(serializers.Serializer):
    attacker_id = serializers.IntegerField()
    opponent_id = serializers.IntegerField()


class SkillAttackSerializer(WeaponAttackSerializer):
    skill_id = serializers.IntegerField()


class FightRequestSerializer(serializers.Serializer):
    character_ids = serializers.ListField(child=serializers.IntegerField())


# -----------------------------
# Fight results
# -----------------------------

class AttackResultSerializer(serializers.Serializer):
    attacker = serializers.CharField(source="attacker_name")
    opponent = serializers.CharField(source="defender_name")
    attacker_id = serializers.IntegerField()
    opponent_id = serializers.IntegerField(source="defender_id")
    action = serializers.CharField()
    damage = serializers.IntegerField()
    opponent_hp = serializers.IntegerField(source="defender_hit_points")
    attacker_victorious = serializers.BooleanField()


class FightResultSerializer(serializers.Serializer):
    winner_id = serializers.IntegerField()
    loser_ids = serializers.ListField(child=serializers.IntegerField())
    rounds = serializers.IntegerField()
    round_limit_reached = serializers.BooleanField()
    log = serializers.ListField(child=serializers.CharField(), source="messages")
    attacks = AttackResultSerializer(many=True, source="log")


class HighscoreSerializer(serializers.Serializer):
    rank = serializers.IntegerField()
    id = serializers.IntegerField()
    name = serializers.CharField()
    fights = serializers.IntegerField()
    victories = serializers.IntegerField()
    defeats = serializers.IntegerField()


def envelope(response, serializer_class, many=False) -> dict:
    """
    Shapes a ServiceResponse as {data, success, message}.
    """
    data = None
    if response.data is not None:
        data = serializer_class(response.data, many=many).data
    return {
        "data": data,
        "success": response.success,
        "message": response.message,
    }

