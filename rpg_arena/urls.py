from django.urls import path
from . import views

urlpatterns = [
    path("fight/weapon/", views.weapon_attack, name="fight-weapon"),
    path("fight/skill/", views.skill_attack, name="fight-skill"),
    path("fight/", views.fight, name="fight"),
    path("fight/highscore/", views.highscore, name="fight-highscore"),

    path("api/character/", views.character_list, name="character-list"),
    path("api/character/skill/", views.character_skill, name="character-skill"),
    path("api/character/<int:pk>/", views.character_detail, name="character-detail"),
    path("api/skill/", views.skill_list, name="skill-list"),

    path("weapon/", views.add_weapon, name="weapon-add"),
]
