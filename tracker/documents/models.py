from django.db import models
from django.urls import reverse

from tracker.watchers.models import Watchable


class Document(Watchable):
    """A shared document. Documents have no visibility rule, so any user
    can watch them."""

    title = models.CharField(max_length=255)
    body = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["title"]

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        return reverse("document_detail", kwargs={"pk": self.pk})
