from django.contrib import admin
from django.contrib.contenttypes.admin import GenericTabularInline

from .forms import WatchableAdminForm
from .models import Watcher


@admin.register(Watcher)
class WatcherAdmin(admin.ModelAdmin):
    list_display = ["user", "content_type", "object_id", "created_at"]
    list_filter = ["content_type", "created_at"]
    search_fields = ["user__email", "user__username"]
    raw_id_fields = ["user"]
    readonly_fields = ["created_at"]
    list_select_related = ["user", "content_type"]
    date_hierarchy = "created_at"


class WatcherInline(GenericTabularInline):
    """Read-only list of watch records. Edit them with the picker."""

    model = Watcher
    fields = ["user", "created_at"]
    readonly_fields = ["user", "created_at"]
    extra = 0
    max_num = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class WatchableAdmin(admin.ModelAdmin):
    """Base admin for watchable models.

    Shows the current watch records inline and a "Watchers" picker that
    replaces them in bulk.
    """

    form = WatchableAdminForm
    inlines = [WatcherInline]

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        if "watcher_user_ids" in form.changed_data:
            form.save_watchers()
