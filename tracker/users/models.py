from django.conf import settings
from django.db import models


class UserProfile(models.Model):
    """Extended profile for tracker users.

    Holds the display name and the mail notification preference that
    decides whether a watcher is sent change notifications at all.
    """

    class MailNotification(models.TextChoices):
        ALL = "all", "For any event on all my projects"
        SELECTED = "selected", "For any event on the selected projects only"
        ONLY_MY_EVENTS = (
            "only_my_events",
            "Only for things I watch or I'm involved in",
        )
        ONLY_ASSIGNED = (
            "only_assigned",
            "Only for things I am assigned to",
        )
        ONLY_OWNER = "only_owner", "Only for things I am the owner of"
        NONE = "none", "No events"

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    display_name = models.CharField(max_length=255, blank=True)
    mail_notification = models.CharField(
        max_length=20,
        choices=MailNotification.choices,
        default=MailNotification.ONLY_MY_EVENTS,
        help_text="'No events' suppresses all watcher mail.",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.display_name or self.user.email