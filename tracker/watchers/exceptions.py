from django.db import IntegrityError


class DuplicateWatchRecord(IntegrityError):
    """The user already watches this object.

    Raised when the unique (watchable, user) constraint rejects an insert.
    Subclasses IntegrityError so callers handling database integrity
    failures keep working.
    """


class ConfigurationWarning(UserWarning):
    """A watchable model defines no `visible(user)` predicate, so every
    user may watch it and be notified about it."""
