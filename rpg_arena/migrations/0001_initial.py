import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Skill",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120, unique=True)),
                ("damage", models.IntegerField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
                (
                    "character_class",
                    models.CharField(
                        blank=True,
                        choices=[("Knight", "Knight"), ("Mage", "Mage"), ("Cleric", "Cleric")],
                        default="",
                        max_length=20,
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Character",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(default="Frodo", max_length=100)),
                ("hit_points", models.IntegerField(default=100, validators=[django.core.validators.MinValueValidator(0)])),
                ("strength", models.IntegerField(default=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("defence", models.IntegerField(default=10, validators=[django.core.validators.MinValueValidator(0)])),
                ("intelligence", models.IntegerField(default=10, validators=[django.core.validators.MinValueValidator(0)])),
                (
                    "character_class",
                    models.CharField(
                        choices=[("Knight", "Knight"), ("Mage", "Mage"), ("Cleric", "Cleric")],
                        default="Knight",
                        max_length=20,
                    ),
                ),
                ("fights", models.IntegerField(default=0)),
                ("victories", models.IntegerField(default=0)),
                ("defeats", models.IntegerField(default=0)),
                (
                    "owner",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="characters",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                ("skills", models.ManyToManyField(blank=True, related_name="characters", to="rpg_arena.skill")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="Weapon",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                ("damage", models.IntegerField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
                (
                    "character",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="weapon",
                        to="rpg_arena.character",
                    ),
                ),
            ],
        ),
    ]
