"""Watch, unwatch and watcher management views.

These are bound once per watchable model by `WatchRegistry.urls`, which
passes the model class in as the `model` keyword argument.
"""

import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied
from django.http import Http404, HttpResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.utils.html import format_html
from django.views.decorators.http import require_http_methods, require_POST

from tracker.lib.ratelimiter import (
    ratelimit_manage_watchers,
    ratelimit_watch,
)

from .exceptions import DuplicateWatchRecord
from .forms import AddWatchersForm
from .registry import registry

logger = logging.getLogger(__name__)


def _get_watchable(request, model, pk):
    """Fetch the object, hiding it from users who can't see it."""
    obj = get_object_or_404(model, pk=pk)
    if not obj.is_visible_to(request.user):
        raise Http404
    return obj


def _watch_button(obj, watching):
    """HTMX fragment that replaces the watch/unwatch button."""
    action = "unwatch" if watching else "watch"
    url = reverse(
        registry.url_name(type(obj), action), kwargs={"pk": obj.pk}
    )
    return HttpResponse(
        format_html(
            '<button class="btn-watch" hx-post="{}" hx-swap="outerHTML">'
            "{}</button>",
            url,
            "Unwatch" if watching else "Watch",
        )
    )


def _toggle_response(request, obj, watching):
    if request.headers.get("HX-Request"):
        return _watch_button(obj, watching)

    msg = "Watching" if watching else "Stopped watching"
    messages.success(request, f"{msg} {obj}.")
    return redirect(obj.get_absolute_url())


@login_required
@require_POST
@ratelimit_watch
def watch(request, model, pk):
    """Make the current user a watcher of the object."""
    obj = _get_watchable(request, model, pk)
    try:
        obj.set_watcher(request.user, True)
    except DuplicateWatchRecord:
        # Double submit; the user is already watching.
        pass
    else:
        logger.info("%s started watching %s", request.user, obj)
    return _toggle_response(request, obj, watching=True)


@login_required
@require_http_methods(["POST", "DELETE"])
@ratelimit_watch
def unwatch(request, model, pk):
    """Remove the current user from the watchers of the object."""
    obj = _get_watchable(request, model, pk)
    if obj.set_watcher(request.user, False):
        logger.info("%s stopped watching %s", request.user, obj)
    return _toggle_response(request, obj, watching=False)


@login_required
@require_http_methods(["GET", "POST"])
@ratelimit_manage_watchers
def watcher_new(request, model, pk):
    """Show the add-watchers form, and add the selected users."""
    obj = _get_watchable(request, model, pk)
    if not request.user.has_perm("watchers.add_watcher"):
        raise PermissionDenied

    form = AddWatchersForm(request.POST or None, watchable=obj)
    if request.method == "POST" and form.is_valid():
        added = []
        for user in form.cleaned_data["user_ids"]:
            try:
                obj.add_watcher(user)
            except DuplicateWatchRecord:
                continue
            added.append(user)
        logger.info(
            "%s added %d watcher(s) to %s", request.user, len(added), obj
        )
        messages.success(
            request,
            f"Added {len(added)} watcher{'s' if len(added) != 1 else ''} "
            f"to {obj}.",
        )
        return redirect(obj.get_absolute_url())

    return render(
        request,
        "watchers/new.html",
        {
            "object": obj,
            "form": form,
            "action_url": reverse(
                registry.url_name(model, "watcher_new"), kwargs={"pk": pk}
            ),
        },
    )


@login_required
@require_http_methods(["POST", "DELETE"])
@ratelimit_manage_watchers
def watcher_destroy(request, model, pk, user_id):
    """Remove a specific user from the watchers of the object."""
    obj = _get_watchable(request, model, pk)
    if not request.user.has_perm("watchers.delete_watcher"):
        raise PermissionDenied

    user = get_object_or_404(get_user_model(), pk=user_id)
    if obj.remove_watcher(user):
        logger.info("%s removed watcher %s from %s", request.user, user, obj)
        messages.success(request, f"{user.email} is no longer watching.")
    else:
        messages.info(request, f"{user.email} was not watching.")

    if request.headers.get("HX-Request"):
        return HttpResponse("")
    return redirect(obj.get_absolute_url())
