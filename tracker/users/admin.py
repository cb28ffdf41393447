from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User

from .models import UserProfile


class UserProfileInline(admin.StackedInline):
    model = UserProfile
    can_delete = False
    readonly_fields = ["created_at"]
    fields = ["display_name", "mail_notification", "created_at"]


# Unregister the default User admin and re-register with our inline
admin.site.unregister(User)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    inlines = [UserProfileInline]
    list_display = [
        "email",
        "get_display_name",
        "get_mail_notification",
        "is_staff",
        "is_active",
        "date_joined",
    ]
    list_filter = [
        "is_staff",
        "is_superuser",
        "is_active",
        "profile__mail_notification",
    ]
    search_fields = ["email", "username", "profile__display_name"]

    @admin.display(description="Display name")
    def get_display_name(self, obj):
        try:
            return obj.profile.display_name or "—"
        except UserProfile.DoesNotExist:
            return "—"

    @admin.display(description="Mail notification")
    def get_mail_notification(self, obj):
        try:
            return obj.profile.get_mail_notification_display()
        except UserProfile.DoesNotExist:
            return "—"
