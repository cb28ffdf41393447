from django.contrib import admin

from tracker.watchers.admin import WatchableAdmin

from .models import Document


@admin.register(Document)
class DocumentAdmin(WatchableAdmin):
    list_display = ["title", "created_at", "updated_at"]
    search_fields = ["title", "body"]
    readonly_fields = ["created_at", "updated_at"]
