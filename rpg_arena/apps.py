from django.apps import AppConfig

class RpgArenaConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "rpg_arena"

    def ready(self):
        from .log_config import configure_logging
        configure_logging()
