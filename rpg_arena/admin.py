from django.contrib import admin
from django.core.exceptions import ValidationError
from django.forms.models import BaseInlineFormSet

from .models import Character, Skill, Weapon


# -----------------------------
# Helpers
# -----------------------------

class SkillClassInlineFormSet(BaseInlineFormSet):
    """
    Enforce on the character's skill inline:
    - a skill restricted to a class can only be learned by that class
    - no skill twice
    """
    def clean(self):
        super().clean()

        forms = [
            f for f in self.forms
            if hasattr(f, "cleaned_data")
            and f.cleaned_data
            and not f.cleaned_data.get("DELETE", False)
        ]

        skills = [f.cleaned_data.get("skill") for f in forms if f.cleaned_data.get("skill")]
        if len(skills) != len(set(s.id for s in skills)):
            raise ValidationError("Duplicate skills detected.")

        character = getattr(self, "instance", None)
        if not character or not getattr(character, "character_class", None):
            return

        for skill in skills:
            if not skill.allows(character.character_class):
                raise ValidationError(f"{character.character_class} cannot learn {skill.name}.")


# -----------------------------
# Skill Admin
# -----------------------------

@admin.register(Skill)
class SkillAdmin(admin.ModelAdmin):
    list_display = ("name", "damage", "character_class")
    list_filter = ("character_class",)
    search_fields = ("name",)


# -----------------------------
# Character Admin (with inline weapon + skills)
# -----------------------------

class WeaponInline(admin.StackedInline):
    model = Weapon
    extra = 0
    max_num = 1


class CharacterSkillInline(admin.TabularInline):
    model = Character.skills.through
    formset = SkillClassInlineFormSet
    extra = 0
    autocomplete_fields = ("skill",)


@admin.register(Character)
class CharacterAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "character_class", "hit_points", "fights", "victories", "defeats")
    list_filter = ("character_class",)
    search_fields = ("name", "owner__username")
    autocomplete_fields = ("owner",)
    exclude = ("skills",)

    # combat record belongs to the fight engine
    readonly_fields = ("fights", "victories", "defeats")

    inlines = [WeaponInline, CharacterSkillInline]


@admin.register(Weapon)
class WeaponAdmin(admin.ModelAdmin):
    list_display = ("name", "damage", "character")
    search_fields = ("name", "character__name")
    autocomplete_fields = ("character",)
