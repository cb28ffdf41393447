from django.contrib import admin

from tracker.watchers.admin import WatchableAdmin

from .models import Issue


@admin.register(Issue)
class IssueAdmin(WatchableAdmin):
    list_display = ["title", "author", "is_private", "created_at"]
    list_filter = ["is_private", "created_at"]
    search_fields = ["title", "description"]
    raw_id_fields = ["author"]
    readonly_fields = ["created_at", "updated_at"]
