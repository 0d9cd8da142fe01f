from django.db import models
from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator


class RpgClass(models.TextChoices):
    KNIGHT = "Knight", "Knight"
    MAGE = "Mage", "Mage"
    CLERIC = "Cleric", "Cleric"


class Skill(models.Model):
    """
    A learnable attack. Characters reference skills through `Character.skills`;
    learning a skill never moves it away from anyone else.
    """
    name = models.CharField(max_length=120, unique=True)
    damage = models.IntegerField(default=0, validators=[MinValueValidator(0)])

    # empty = usable by every class
    character_class = models.CharField(max_length=20, choices=RpgClass.choices, blank=True, default="")

    class Meta:
        ordering = ["id"]

    def allows(self, character_class: str) -> bool:
        return not self.character_class or self.character_class == character_class

    def __str__(self):
        return self.name


class Character(models.Model):
    owner = models.ForeignKey(User, null=True, blank=True, related_name="characters", on_delete=models.CASCADE)

    name = models.CharField(max_length=100, default="Frodo")
    hit_points = models.IntegerField(default=100, validators=[MinValueValidator(0)])
    strength = models.IntegerField(default=10, validators=[MinValueValidator(0)])
    defence = models.IntegerField(default=10, validators=[MinValueValidator(0)])
    intelligence = models.IntegerField(default=10, validators=[MinValueValidator(0)])
    character_class = models.CharField(max_length=20, choices=RpgClass.choices, default=RpgClass.KNIGHT)

    skills = models.ManyToManyField(Skill, blank=True, related_name="characters")

    # combat record, written only by engine.records
    fights = models.IntegerField(default=0)
    victories = models.IntegerField(default=0)
    defeats = models.IntegerField(default=0)

    class Meta:
        ordering = ["id"]

    def clean(self):
        super().clean()
        if self.hit_points < 0:
            raise ValidationError("hit_points cannot be negative.")

    def __str__(self):
        return f"{self.name} ({self.character_class})"


class Weapon(models.Model):
    name = models.CharField(max_length=120)
    damage = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    character = models.OneToOneField(Character, on_delete=models.CASCADE, related_name="weapon")

    def __str__(self):
        return f"{self.name} (+{self.damage})"
