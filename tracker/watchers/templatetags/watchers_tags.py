from django import template
from django.urls import reverse

from tracker.watchers.registry import registry

register = template.Library()


@register.simple_tag
def watcher_url(obj, action, user=None):
    """URL of one of the watcher routes of a registered watchable.

    Usage: ``{% watcher_url issue "watch" %}`` or
    ``{% watcher_url issue "watcher_destroy" user %}``.
    """
    kwargs = {"pk": obj.pk}
    if action == "watcher_destroy":
        kwargs["user_id"] = getattr(user, "pk", user)
    return reverse(registry.url_name(type(obj), action), kwargs=kwargs)


@register.filter
def watched_by(obj, user):
    return obj.is_watched_by(user)
