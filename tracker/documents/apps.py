from django.apps import AppConfig


class DocumentsConfig(AppConfig):
    name = "tracker.documents"

    def ready(self):
        from tracker.watchers.registry import register

        from .models import Document

        register(Document)
