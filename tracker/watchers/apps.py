from django.apps import AppConfig


class WatchersConfig(AppConfig):
    name = "tracker.watchers"
    verbose_name = "Watchers"

    def ready(self):
        from . import checks  # noqa: F401
