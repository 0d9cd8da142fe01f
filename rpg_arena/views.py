from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from .models import Skill
from .serializers import (
    AddCharacterSerializer,
    AddCharacterSkillSerializer,
    AddWeaponSerializer,
    AttackResultSerializer,
    CharacterSerializer,
    FightRequestSerializer,
    FightResultSerializer,
    HighscoreSerializer,
    SkillAttackSerializer,
    SkillSerializer,
    UpdateCharacterSerializer,
    WeaponAttackSerializer,
    envelope,
)
from .services import CharacterService, FightService, WeaponService


def _respond(response, serializer_class, many=False):
    """
    Same rule for every endpoint: no data -> 404, otherwise 200.
    """
    status = 404 if response.data is None else 200
    return Response(envelope(response, serializer_class, many=many), status=status)


def _invalid(serializer):
    return Response({"data": None, "success": False, "message": serializer.errors}, status=400)


# =========================
# FIGHT
# =========================

@api_view(["POST"])
@permission_classes([AllowAny])
def weapon_attack(request):
    payload = WeaponAttackSerializer(data=request.data)
    if not payload.is_valid():
        return _invalid(payload)

    response = FightService().weapon_attack(
        payload.validated_data["attacker_id"],
        payload.validated_data["opponent_id"],
    )
    return _respond(response, AttackResultSerializer)


@api_view(["POST"])
@permission_classes([AllowAny])
def skill_attack(request):
    payload = SkillAttackSerializer(data=request.data)
    if not payload.is_valid():
        return _invalid(payload)

    response = FightService().skill_attack(
        payload.validated_data["attacker_id"],
        payload.validated_data["opponent_id"],
        payload.validated_data["skill_id"],
    )
    return _respond(response, AttackResultSerializer)


@api_view(["POST"])
@permission_classes([AllowAny])
def fight(request):
    payload = FightRequestSerializer(data=request.data)
    if not payload.is_valid():
        return _invalid(payload)

    response = FightService().fight(payload.validated_data["character_ids"])
    return _respond(response, FightResultSerializer)


@api_view(["GET"])
@permission_classes([AllowAny])
def highscore(request):
    response = FightService().get_highscores()
    return _respond(response, HighscoreSerializer, many=True)


# =========================
# CHARACTERS
# =========================

@api_view(["GET", "POST"])
@permission_classes([IsAuthenticated])
def character_list(request):
    service = CharacterService(request.user)

    if request.method == "POST":
        payload = AddCharacterSerializer(data=request.data)
        if not payload.is_valid():
            return _invalid(payload)
        return _respond(service.add_character(payload.validated_data), CharacterSerializer, many=True)

    return _respond(service.get_all_characters(), CharacterSerializer, many=True)


@api_view(["GET", "PUT", "DELETE"])
@permission_classes([IsAuthenticated])
def character_detail(request, pk):
    service = CharacterService(request.user)

    if request.method == "PUT":
        payload = UpdateCharacterSerializer(data=request.data, partial=True)
        if not payload.is_valid():
            return _invalid(payload)
        return _respond(service.update_character(pk, payload.validated_data), CharacterSerializer)

    if request.method == "DELETE":
        return _respond(service.delete_character(pk), CharacterSerializer, many=True)

    return _respond(service.get_character_by_id(pk), CharacterSerializer)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def character_skill(request):
    payload = AddCharacterSkillSerializer(data=request.data)
    if not payload.is_valid():
        return _invalid(payload)

    response = CharacterService(request.user).add_character_skill(
        payload.validated_data["character_id"],
        payload.validated_data["skill_id"],
    )
    return _respond(response, CharacterSerializer)


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def add_weapon(request):
    payload = AddWeaponSerializer(data=request.data)
    if not payload.is_valid():
        return _invalid(payload)

    response = WeaponService(request.user).add_weapon(**payload.validated_data)
    return _respond(response, CharacterSerializer)


@api_view(["GET"])
@permission_classes([AllowAny])
def skill_list(request):
    skills = Skill.objects.all()
    return Response({"data": SkillSerializer(skills, many=True).data, "success": True, "message": ""})
