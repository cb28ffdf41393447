"""Tests for documents, the watchable with no visibility rule."""

from django.contrib.auth.models import User

from tracker.conftest import make_user
from tracker.documents.factories import DocumentFactory
from tracker.documents.models import Document


class TestDocumentWatchers:
    def test_recipients_scenario(self, db):
        a = make_user("a@example.com", "all")
        b = make_user("b@example.com", "all", is_active=False)
        c = make_user("c@example.com", "none")
        doc = DocumentFactory(title="Doc")
        for u in (a, b, c):
            doc.add_watcher(u)

        assert doc.watcher_recipients() == [a.email]

    def test_anyone_can_watch(self, db):
        doc = DocumentFactory()
        users = [make_user(f"u{i}@example.com") for i in range(3)]
        assert doc.possible_watcher_users() == users

    def test_anonymous_can_view(self, client, document):
        r = client.get(f"/documents/{document.pk}/")
        assert r.status_code == 200
        assert b"Nobody is watching." in r.content


class TestDocumentAdmin:
    def test_picker_assigns_deduplicated_watchers(
        self, client, user, other_user
    ):
        admin = User.objects.create_superuser(
            "root@example.com", "root@example.com", "testpass"
        )
        client.force_login(admin)
        r = client.post(
            "/admin/documents/document/add/",
            {
                "title": "Runbook",
                "body": "Restart it.",
                "watcher_user_ids": [user.pk, other_user.pk, user.pk],
                "watchers-watcher-content_type-object_id-TOTAL_FORMS": "0",
                "watchers-watcher-content_type-object_id-INITIAL_FORMS": "0",
                "_save": "Save",
            },
        )
        assert r.status_code == 302
        doc = Document.objects.get(title="Runbook")
        assert sorted(doc.watcher_user_ids) == sorted(
            [user.pk, other_user.pk]
        )

    def test_inline_is_read_only(self, client, document, user):
        document.add_watcher(user)
        admin = User.objects.create_superuser(
            "root@example.com", "root@example.com", "testpass"
        )
        client.force_login(admin)
        r = client.get(f"/admin/documents/document/{document.pk}/change/")
        assert r.status_code == 200
        assert user.username in r.content.decode()
        assert b"watchers-watcher-content_type-object_id-0-user" not in (
            r.content
        )

    def test_picker_wins_over_inline_rows(
        self, client, document, user, other_user
    ):
        admin = User.objects.create_superuser(
            "root@example.com", "root@example.com", "testpass"
        )
        client.force_login(admin)
        prefix = "watchers-watcher-content_type-object_id"
        r = client.post(
            f"/admin/documents/document/{document.pk}/change/",
            {
                "title": document.title,
                "body": document.body,
                "watcher_user_ids": [user.pk],
                f"{prefix}-TOTAL_FORMS": "1",
                f"{prefix}-INITIAL_FORMS": "0",
                f"{prefix}-0-user": other_user.pk,
                "_save": "Save",
            },
        )
        assert r.status_code == 302
        assert document.watcher_user_ids == [user.pk]
