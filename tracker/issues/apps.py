from django.apps import AppConfig


class IssuesConfig(AppConfig):
    name = "tracker.issues"

    def ready(self):
        from tracker.watchers.registry import register

        from .models import Issue

        register(Issue)
