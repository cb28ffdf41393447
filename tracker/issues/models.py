from django.conf import settings
from django.db import models
from django.urls import reverse

from tracker.watchers.models import Watchable


class Issue(Watchable):
    """A tracked issue. Private issues are only seen by their author and
    staff, which also limits who may watch them."""

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="authored_issues",
    )
    is_private = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"#{self.pk} {self.title}"

    def get_absolute_url(self):
        return reverse("issue_detail", kwargs={"pk": self.pk})

    def visible(self, user):
        if not self.is_private:
            return True
        if not user.is_authenticated:
            return False
        return user.is_staff or user.pk == self.author_id
