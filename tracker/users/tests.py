"""Tests for the users app: profiles and notification settings."""

from tracker.users.factories import UserFactory, UserProfileFactory
from tracker.users.models import UserProfile


class TestUserProfile:
    def test_default_preference_notifies(self, db):
        profile = UserProfile.objects.create(user=UserFactory())
        assert profile.mail_notification == "only_my_events"

    def test_str_falls_back_to_email(self, db):
        profile = UserProfileFactory(display_name="")
        assert str(profile) == profile.user.email


class TestSettingsView:
    def test_requires_login(self, client, db):
        r = client.get("/u/settings/")
        assert r.status_code == 302
        assert "/admin/login/" in r.url

    def test_shows_current_preference(self, client, user):
        client.force_login(user)
        r = client.get("/u/settings/")
        assert r.status_code == 200
        assert b"mail_notification" in r.content

    def test_opt_out_of_mail(self, client, user, document):
        document.add_watcher(user)
        client.force_login(user)
        r = client.post(
            "/u/settings/",
            {"display_name": "Alice", "mail_notification": "none"},
        )
        assert r.status_code == 302
        user.profile.refresh_from_db()
        assert user.profile.mail_notification == "none"
        assert document.watcher_recipients() == []

    def test_rejects_unknown_preference(self, client, user):
        client.force_login(user)
        r = client.post(
            "/u/settings/",
            {"display_name": "Alice", "mail_notification": "sometimes"},
        )
        assert r.status_code == 200
        user.profile.refresh_from_db()
        assert user.profile.mail_notification == "all"

    def test_creates_missing_profile(self, client, db):
        from django.contrib.auth.models import User

        u = User.objects.create_user(username="new@example.com")
        client.force_login(u)
        r = client.get("/u/settings/")
        assert r.status_code == 200
        assert UserProfile.objects.filter(user=u).exists()
