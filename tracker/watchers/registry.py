"""Route registration for watchable models.

Each watchable model is registered once at startup, normally from its
app's ``AppConfig.ready()``::

    from tracker.watchers.registry import register

    register(Issue)                        # /issues/<pk>/watch/ ...
    register(Issue, route_prefix="tickets")  # /tickets/<pk>/watch/ ...

The root URLconf mounts ``registry.urls``, which gives every registered
model these routes:

    POST         <prefix>/<pk>/watch/
    POST/DELETE  <prefix>/<pk>/unwatch/
    GET/POST     <prefix>/<pk>/watchers/new/
    POST/DELETE  <prefix>/<pk>/watchers/<user_id>/
"""

import logging
import warnings

from django.core.exceptions import ImproperlyConfigured
from django.urls import path

from .exceptions import ConfigurationWarning
from .models import Watchable, has_visibility_rule

logger = logging.getLogger(__name__)

ACTIONS = ("watch", "unwatch", "watcher_new", "watcher_destroy")


def default_route_prefix(model):
    """Lowercased plural name of the model, e.g. `Issue` -> "issues".

    Models with irregular plurals should set ``verbose_name_plural``.
    """
    return str(model._meta.verbose_name_plural).lower().replace(" ", "_")


class WatchRegistry:
    def __init__(self):
        # route prefix -> model
        self._registry = {}

    def __contains__(self, model):
        return model in self._registry.values()

    def __iter__(self):
        return iter(self._registry.items())

    def register(self, model, route_prefix=None):
        """Register `model` as watchable and return its route prefix.

        Registering a model twice keeps the first registration.
        """
        if not isinstance(model, type) or not issubclass(model, Watchable):
            raise ImproperlyConfigured(
                f"{model!r} must subclass Watchable to be watchable."
            )
        if model._meta.abstract:
            raise ImproperlyConfigured(
                f"Abstract model {model.__name__} cannot be registered."
            )
        if model in self:
            return self.prefix_for(model)

        prefix = route_prefix or default_route_prefix(model)
        if prefix in self._registry:
            raise ImproperlyConfigured(
                f"Route prefix {prefix!r} is already used by "
                f"{self._registry[prefix].__name__}."
            )

        if not has_visibility_rule(model):
            warnings.warn(
                f"Let all users watch {model.__name__}. If this is "
                f"unintended, implement visible(user) on {model.__name__}.",
                ConfigurationWarning,
                stacklevel=2,
            )

        self._registry[prefix] = model
        logger.debug(
            "Registered %s as watchable at /%s/", model.__name__, prefix
        )
        return prefix

    def prefix_for(self, model):
        for prefix, registered in self._registry.items():
            if registered is model:
                return prefix
        raise LookupError(f"{model.__name__} is not registered as watchable.")

    def url_name(self, model, action):
        """URL name of one of the watcher routes of `model`."""
        if action not in ACTIONS:
            raise ValueError(f"Unknown watcher action {action!r}.")
        return f"{self.prefix_for(model)}_{action}"

    @property
    def urls(self):
        from . import views

        patterns = []
        for prefix, model in self._registry.items():
            kwargs = {"model": model}
            patterns += [
                path(
                    f"{prefix}/<int:pk>/watch/",
                    views.watch,
                    kwargs,
                    name=f"{prefix}_watch",
                ),
                path(
                    f"{prefix}/<int:pk>/unwatch/",
                    views.unwatch,
                    kwargs,
                    name=f"{prefix}_unwatch",
                ),
                path(
                    f"{prefix}/<int:pk>/watchers/new/",
                    views.watcher_new,
                    kwargs,
                    name=f"{prefix}_watcher_new",
                ),
                path(
                    f"{prefix}/<int:pk>/watchers/<int:user_id>/",
                    views.watcher_destroy,
                    kwargs,
                    name=f"{prefix}_watcher_destroy",
                ),
            ]
        return patterns


registry = WatchRegistry()
register = registry.register
