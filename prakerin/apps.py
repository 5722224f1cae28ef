from django.apps import AppConfig


class PrakerinConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "prakerin"
    verbose_name = "SIM Prakerin"

    def ready(self):
        # Connects change notifications and scope cache invalidation
        from . import signals  # noqa: F401
