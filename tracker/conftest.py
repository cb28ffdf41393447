"""Shared pytest fixtures for the tracker project."""

import pytest
from django.contrib.auth.models import Permission
from django.test import Client

from tracker.documents.models import Document
from tracker.issues.models import Issue
from tracker.users.factories import UserFactory, UserProfileFactory


def make_user(email, mail_notification="all", **extra):
    """An active user with a profile, unless `extra` says otherwise."""
    profile = UserProfileFactory(
        user=UserFactory(username=email, **extra),
        display_name=email.split("@")[0].title(),
        mail_notification=mail_notification,
    )
    return profile.user


@pytest.fixture
def client():
    return Client()


@pytest.fixture
def user(db):
    """An active user who wants every notification."""
    return make_user("alice@example.com")


@pytest.fixture
def other_user(db):
    """A second active user for watcher tests."""
    return make_user("bob@example.com")


@pytest.fixture
def inactive_user(db):
    return make_user("carol@example.com", is_active=False)


@pytest.fixture
def quiet_user(db):
    """An active user whose mail notification preference is "none"."""
    return make_user("dave@example.com", mail_notification="none")


@pytest.fixture
def staff_user(db):
    return make_user("erin@example.com", is_staff=True)


@pytest.fixture
def manager(db):
    """A user allowed to add and remove other users as watchers."""
    u = make_user("mallory@example.com")
    u.user_permissions.add(
        *Permission.objects.filter(
            content_type__app_label="watchers",
            codename__in=["add_watcher", "delete_watcher"],
        )
    )
    return u


@pytest.fixture
def document(db):
    """A document; documents have no visibility rule."""
    return Document.objects.create(title="Doc", body="Hello world.")


@pytest.fixture
def issue(user):
    """A public issue authored by `user`."""
    return Issue.objects.create(
        title="Login is broken",
        description="Steps to reproduce...",
        author=user,
    )


@pytest.fixture
def private_issue(user):
    """A private issue only `user` and staff can see."""
    return Issue.objects.create(
        title="Security report",
        description="Top secret.",
        author=user,
        is_private=True,
    )
