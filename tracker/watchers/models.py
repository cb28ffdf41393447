"""Watch records and the watchable capability.

Any model can be watched by users who want to hear about changes to it.
Subclass `Watchable` to get the `watchers` relation and the helpers
below, then register the model with `tracker.watchers.registry` to expose
its watch routes. A model that defines ``visible(user)`` restricts who
may watch it and who is notified; without one, every user may watch.
"""

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.contenttypes.fields import (
    GenericForeignKey,
    GenericRelation,
)
from django.contrib.contenttypes.models import ContentType
from django.db import IntegrityError, models, transaction

from tracker.users.models import UserProfile

from .exceptions import DuplicateWatchRecord

logger = logging.getLogger(__name__)


def has_visibility_rule(obj):
    """Return True if a watchable instance or class defines `visible`."""
    return callable(getattr(obj, "visible", None))


def _to_user_ids(values):
    """Convert ids to the user primary key type, so "1" and 1 match."""
    to_python = Watcher._meta.get_field("user").target_field.to_python
    return [to_python(value) for value in values]


class Watcher(models.Model):
    """A user watching a watchable object."""

    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveBigIntegerField()
    watchable = GenericForeignKey("content_type", "object_id")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="watches",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["content_type", "object_id", "user"],
                name="watcher_unique_per_user",
            ),
        ]
        indexes = [
            models.Index(
                fields=["content_type", "object_id"],
                name="watcher_watchable",
            ),
        ]

    def __str__(self):
        return f"{self.user} → {self.content_type.model} #{self.object_id}"


class WatchableQuerySet(models.QuerySet):
    def watched_by(self, user):
        """Objects watched by a user (or user id)."""
        user_id = getattr(user, "pk", user)
        if user_id is None:
            return self.none()
        return self.filter(watchers__user_id=user_id)


class Watchable(models.Model):
    """Abstract base for models users can watch.

    Deleting the object deletes its watch records.
    """

    watchers = GenericRelation(Watcher)

    objects = WatchableQuerySet.as_manager()

    class Meta:
        abstract = True

    def _watcher_lookup(self):
        return {
            "content_type": ContentType.objects.get_for_model(self),
            "object_id": self.pk,
        }

    def is_visible_to(self, user):
        return not has_visibility_rule(self) or self.visible(user)

    @property
    def watcher_users(self):
        """Users watching this object, as a queryset."""
        User = get_user_model()
        if self.pk is None:
            return User.objects.none()
        lookup = self._watcher_lookup()
        return User.objects.filter(
            watches__content_type=lookup["content_type"],
            watches__object_id=lookup["object_id"],
        )

    def possible_watcher_users(self):
        """Users who might be watchers or already are, ordered by email."""
        users = list(get_user_model().objects.order_by("email"))
        if has_visibility_rule(self):
            return [user for user in users if self.visible(user)]
        logger.warning(
            "Let all users watch %s. If this is unintended, implement "
            "visible(user) on %s.",
            self,
            type(self).__name__,
        )
        return users

    def addable_watcher_users(self):
        """Users who could watch this object but don't yet."""
        return set(self.possible_watcher_users()) - set(self.watcher_users)

    def add_watcher(self, user):
        """Make `user` watch this object.

        There is no existence check: the unique constraint on watch
        records rejects a second insert, which surfaces here as
        DuplicateWatchRecord and leaves the existing record in place.
        """
        try:
            with transaction.atomic():
                return Watcher.objects.create(watchable=self, user=user)
        except IntegrityError as e:
            if user is None or not self.watchers.filter(user=user).exists():
                raise
            raise DuplicateWatchRecord(
                f"{user} is already watching {self}"
            ) from e

    def remove_watcher(self, user):
        """Stop `user` watching this object.

        Returns None when `user` is not a user (None, anonymous, or
        anything else); otherwise the number of watch records deleted,
        which is 0 if the user was not watching.
        """
        if not isinstance(user, get_user_model()):
            return None
        deleted, _ = Watcher.objects.filter(
            user=user, **self._watcher_lookup()
        ).delete()
        return deleted

    def set_watcher(self, user, watching=True):
        if watching:
            return self.add_watcher(user)
        return self.remove_watcher(user)

    @property
    def watcher_user_ids(self):
        if self.pk is None:
            return []
        return list(self.watchers.values_list("user_id", flat=True))

    @watcher_user_ids.setter
    def watcher_user_ids(self, user_ids):
        self.set_watcher_user_ids(user_ids)

    def set_watcher_user_ids(self, user_ids):
        """Replace the watchers of this object with the given user ids.

        Ids may be ints or strings, as posted by a form. Lists and tuples
        are de-duplicated first, keeping the first occurrence of each id,
        so a resubmitted form cannot trip the unique constraint. Other
        iterables are passed through as given.
        """
        if isinstance(user_ids, (list, tuple)):
            user_ids = list(dict.fromkeys(_to_user_ids(user_ids)))
        self._replace_watcher_user_ids(user_ids)

    def _replace_watcher_user_ids(self, user_ids):
        if self.pk is None:
            raise ValueError(
                f"{type(self).__name__} must be saved before its watchers "
                "can be set."
            )
        user_ids = _to_user_ids(user_ids)
        with transaction.atomic():
            self.watchers.exclude(user_id__in=user_ids).delete()
            existing = set(self.watchers.values_list("user_id", flat=True))
            Watcher.objects.bulk_create(
                [
                    Watcher(watchable=self, user_id=user_id)
                    for user_id in user_ids
                    if user_id not in existing
                ]
            )

    def is_watched_by(self, user):
        """Return True if `user` watches this object. None is never a
        watcher, and neither is anyone once the object is deleted."""
        return user is not None and user.pk in self.watcher_user_ids

    def watcher_recipients(self):
        """Email addresses of the watchers to notify about a change.

        Inactive users, users who opted out of mail and users who can no
        longer see the object are left out.
        """
        notified = self.watcher_users.filter(is_active=True).exclude(
            profile__mail_notification=UserProfile.MailNotification.NONE
        )
        if has_visibility_rule(self):
            notified = [user for user in notified if self.visible(user)]
        return [user.email for user in notified if user.email]
