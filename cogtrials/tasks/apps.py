from django.apps import AppConfig


class TasksConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "cogtrials.tasks"

    def ready(self):
        import cogtrials.tasks.signals  # noqa: F401
