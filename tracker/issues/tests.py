"""Tests for issues: visibility rule and detail page."""

from django.contrib.auth.models import AnonymousUser

from tracker.issues.factories import IssueFactory


class TestIssueVisibility:
    def test_public_issue_visible_to_anyone(self, issue, other_user):
        assert issue.visible(other_user)
        assert issue.visible(AnonymousUser())

    def test_private_issue_visible_to_author(self, private_issue, user):
        assert private_issue.visible(user)

    def test_private_issue_visible_to_staff(self, private_issue, staff_user):
        assert private_issue.visible(staff_user)

    def test_private_issue_hidden_from_others(
        self, private_issue, other_user
    ):
        assert not private_issue.visible(other_user)
        assert not private_issue.visible(AnonymousUser())

    def test_making_issue_private_drops_recipients(
        self, db, user, other_user
    ):
        issue = IssueFactory(author=user)
        issue.add_watcher(user)
        issue.add_watcher(other_user)
        assert sorted(issue.watcher_recipients()) == sorted(
            [user.email, other_user.email]
        )

        issue.is_private = True
        issue.save()
        assert issue.watcher_recipients() == [user.email]


class TestIssueDetail:
    def test_shows_watchers(self, client, issue, other_user):
        issue.add_watcher(other_user)
        r = client.get(f"/issues/{issue.pk}/")
        assert r.status_code == 200
        assert other_user.email.encode() in r.content

    def test_shows_watch_button(self, client, issue, other_user):
        client.force_login(other_user)
        r = client.get(f"/issues/{issue.pk}/")
        assert f"/issues/{issue.pk}/watch/".encode() in r.content

    def test_shows_unwatch_button_to_watcher(self, client, issue, user):
        issue.add_watcher(user)
        client.force_login(user)
        r = client.get(f"/issues/{issue.pk}/")
        assert f"/issues/{issue.pk}/unwatch/".encode() in r.content

    def test_private_issue_hidden(self, client, private_issue, other_user):
        client.force_login(other_user)
        r = client.get(f"/issues/{private_issue.pk}/")
        assert r.status_code == 404

    def test_manager_sees_watcher_links(
        self, client, issue, manager, other_user
    ):
        issue.add_watcher(other_user)
        client.force_login(manager)
        r = client.get(f"/issues/{issue.pk}/")
        assert f"/issues/{issue.pk}/watchers/new/".encode() in r.content
        assert (
            f"/issues/{issue.pk}/watchers/{other_user.pk}/".encode()
            in r.content
        )


class TestIssueAdmin:
    def test_change_page_has_watcher_picker(self, client, issue, db):
        from django.contrib.auth.models import User

        admin = User.objects.create_superuser(
            "root@example.com", "root@example.com", "testpass"
        )
        client.force_login(admin)
        r = client.get(f"/admin/issues/issue/{issue.pk}/change/")
        assert r.status_code == 200
        assert b'name="watcher_user_ids"' in r.content
