"""Tests for watchers: watch records, recipients, registry, views."""

import logging

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser, User
from django.core.exceptions import ImproperlyConfigured
from django.db import IntegrityError
from django.forms import modelform_factory
from django.template import Context, Template
from django.test import override_settings

from tracker.conftest import make_user
from tracker.documents.models import Document
from tracker.issues.models import Issue
from tracker.watchers.checks import check_watchable_visibility
from tracker.watchers.exceptions import (
    ConfigurationWarning,
    DuplicateWatchRecord,
)
from tracker.watchers.forms import AddWatchersForm, WatchableAdminForm
from tracker.watchers.models import Watchable, Watcher, has_visibility_rule
from tracker.watchers.registry import (
    WatchRegistry,
    default_route_prefix,
    registry,
)


class TestAddWatcher:
    def test_added_user_is_watching(self, document, user):
        document.add_watcher(user)
        assert document.is_watched_by(user)
        assert list(document.watcher_users) == [user]

    def test_second_add_raises_duplicate(self, document, user):
        document.add_watcher(user)
        with pytest.raises(DuplicateWatchRecord):
            document.add_watcher(user)
        assert document.watchers.count() == 1

    def test_duplicate_is_an_integrity_error(self, document, user):
        document.add_watcher(user)
        with pytest.raises(IntegrityError):
            document.add_watcher(user)

    def test_same_user_can_watch_different_objects(
        self, document, issue, user
    ):
        document.add_watcher(user)
        issue.add_watcher(user)
        assert document.is_watched_by(user)
        assert issue.is_watched_by(user)
        assert Watcher.objects.filter(user=user).count() == 2

    def test_records_are_scoped_by_type(self, db, user):
        doc = Document.objects.create(title="Same id")
        iss = Issue.objects.create(pk=doc.pk, title="Same id", author=user)
        doc.add_watcher(user)
        assert doc.is_watched_by(user)
        assert not iss.is_watched_by(user)


class TestRemoveWatcher:
    def test_removed_user_is_not_watching(self, document, user):
        document.add_watcher(user)
        assert document.remove_watcher(user) == 1
        assert not document.is_watched_by(user)

    def test_removing_non_watcher_is_not_an_error(self, document, user):
        assert document.remove_watcher(user) == 0
        assert not document.is_watched_by(user)

    def test_removing_twice_is_idempotent(self, document, user):
        document.add_watcher(user)
        document.remove_watcher(user)
        assert document.remove_watcher(user) == 0

    @pytest.mark.parametrize(
        "target", [None, AnonymousUser(), "alice@example.com", 1]
    )
    def test_non_user_is_a_no_op(self, document, user, target):
        document.add_watcher(user)
        assert document.remove_watcher(target) is None
        assert document.is_watched_by(user)
        assert document.watchers.count() == 1

    def test_leaves_other_watchers(self, document, user, other_user):
        document.add_watcher(user)
        document.add_watcher(other_user)
        document.remove_watcher(user)
        assert document.watcher_user_ids == [other_user.pk]

    def test_accepts_the_configured_user_model(self, document, user):
        document.add_watcher(user)
        watcher = get_user_model().objects.get(pk=user.pk)
        assert document.remove_watcher(watcher) == 1
        assert document.watcher_users.model is get_user_model()


class TestSetWatcher:
    def test_true_adds(self, document, user):
        document.set_watcher(user, True)
        assert document.is_watched_by(user)

    def test_defaults_to_watching(self, document, user):
        document.set_watcher(user)
        assert document.is_watched_by(user)

    def test_false_removes(self, document, user):
        document.add_watcher(user)
        document.set_watcher(user, False)
        assert not document.is_watched_by(user)

    def test_false_with_none_is_a_no_op(self, document):
        assert document.set_watcher(None, False) is None


class TestWatchedBy:
    def test_none_is_never_watching(self, document, user):
        document.add_watcher(user)
        assert document.is_watched_by(None) is False

    def test_anonymous_is_never_watching(self, document, user):
        document.add_watcher(user)
        assert not document.is_watched_by(AnonymousUser())

    def test_unsaved_object_has_no_watchers(self, db, user):
        assert Document(title="Draft").watcher_user_ids == []
        assert not Document(title="Draft").is_watched_by(user)

    def test_queryset_watched_by(self, db, user, other_user):
        watched = Document.objects.create(title="Watched")
        Document.objects.create(title="Ignored")
        watched.add_watcher(user)
        other = Document.objects.create(title="Someone else's")
        other.add_watcher(other_user)

        assert list(Document.objects.watched_by(user)) == [watched]
        assert list(Document.objects.watched_by(user.pk)) == [watched]

    def test_queryset_watched_by_anonymous_is_empty(self, document, user):
        document.add_watcher(user)
        assert not Document.objects.watched_by(AnonymousUser()).exists()
        assert not Document.objects.watched_by(None).exists()


class TestCascade:
    def test_deleting_object_deletes_watch_records(
        self, document, user, other_user
    ):
        document.add_watcher(user)
        document.add_watcher(other_user)
        document.delete()
        assert not Watcher.objects.exists()
        assert not document.is_watched_by(user)

    def test_deleting_object_keeps_other_records(self, db, user):
        kept = Document.objects.create(title="Kept")
        gone = Document.objects.create(title="Gone")
        kept.add_watcher(user)
        gone.add_watcher(user)
        gone.delete()
        assert kept.is_watched_by(user)
        assert Watcher.objects.count() == 1

    def test_deleting_user_deletes_watch_records(self, document, user):
        document.add_watcher(user)
        user.delete()
        assert document.watchers.count() == 0


class TestWatcherUserIds:
    def test_assigning_deduplicates(self, document, user, other_user):
        third = make_user("zed@example.com")
        document.watcher_user_ids = [
            user.pk,
            other_user.pk,
            other_user.pk,
            third.pk,
        ]
        assert sorted(document.watcher_user_ids) == sorted(
            [user.pk, other_user.pk, third.pk]
        )
        assert document.watchers.count() == 3

    def test_tuples_are_deduplicated(self, document, user):
        document.set_watcher_user_ids((user.pk, user.pk))
        assert document.watcher_user_ids == [user.pk]

    def test_string_ids_match_existing_watchers(self, document, user):
        document.add_watcher(user)
        document.watcher_user_ids = [str(user.pk)]
        assert document.watcher_user_ids == [user.pk]

    def test_string_and_int_ids_are_deduplicated(
        self, document, user, other_user
    ):
        document.add_watcher(user)
        document.watcher_user_ids = [
            user.pk,
            str(user.pk),
            str(other_user.pk),
        ]
        assert sorted(document.watcher_user_ids) == sorted(
            [user.pk, other_user.pk]
        )

    def test_assignment_replaces(self, document, user, other_user):
        document.add_watcher(user)
        document.watcher_user_ids = [other_user.pk]
        assert document.watcher_user_ids == [other_user.pk]

    def test_existing_watchers_are_kept(self, document, user, other_user):
        record = document.add_watcher(user)
        document.watcher_user_ids = [user.pk, other_user.pk]
        assert Watcher.objects.filter(pk=record.pk).exists()

    def test_empty_list_clears(self, document, user):
        document.add_watcher(user)
        document.watcher_user_ids = []
        assert document.watcher_user_ids == []

    def test_other_shapes_pass_through(self, document, user, other_user):
        document.set_watcher_user_ids({user.pk, other_user.pk})
        assert sorted(document.watcher_user_ids) == sorted(
            [user.pk, other_user.pk]
        )

    def test_repeated_ids_in_other_shapes_are_not_deduplicated(
        self, document, user
    ):
        with pytest.raises(IntegrityError):
            document.set_watcher_user_ids(iter([user.pk, user.pk]))
        assert document.watcher_user_ids == []

    def test_unsaved_object_raises(self, db, user):
        with pytest.raises(ValueError):
            Document(title="Draft").watcher_user_ids = [user.pk]


class TestPossibleWatcherUsers:
    def test_without_visibility_rule_everyone_can_watch(
        self, document, user, other_user, inactive_user
    ):
        assert document.possible_watcher_users() == [
            user,
            other_user,
            inactive_user,
        ]

    def test_without_visibility_rule_logs_warning(
        self, document, user, caplog
    ):
        with caplog.at_level(logging.WARNING, logger="tracker.watchers"):
            document.possible_watcher_users()
        assert "Let all users watch" in caplog.text
        assert "Document" in caplog.text

    def test_visibility_rule_filters(
        self, private_issue, user, other_user, staff_user
    ):
        possible = private_issue.possible_watcher_users()
        assert user in possible
        assert staff_user in possible
        assert other_user not in possible

    def test_visibility_rule_does_not_log(self, issue, caplog):
        with caplog.at_level(logging.WARNING, logger="tracker.watchers"):
            issue.possible_watcher_users()
        assert "Let all users watch" not in caplog.text


class TestAddableWatcherUsers:
    def test_excludes_current_watchers(self, document, user, other_user):
        document.add_watcher(user)
        assert document.addable_watcher_users() == {other_user}

    def test_never_overlaps_watchers(self, private_issue, user, staff_user):
        private_issue.add_watcher(staff_user)
        addable = private_issue.addable_watcher_users()
        assert addable.isdisjoint(set(private_issue.watcher_users))
        assert addable == {user}


class TestWatcherRecipients:
    def test_active_notified_watchers_only(
        self, document, user, inactive_user, quiet_user
    ):
        for u in (user, inactive_user, quiet_user):
            document.add_watcher(u)
        assert document.watcher_recipients() == [user.email]

    def test_excludes_users_who_cannot_see_object(
        self, private_issue, user, other_user
    ):
        private_issue.add_watcher(user)
        private_issue.add_watcher(other_user)
        assert private_issue.watcher_recipients() == [user.email]

    def test_user_without_profile_is_notified(self, document, db):
        u = User.objects.create_user(
            username="noprofile@example.com", email="noprofile@example.com"
        )
        document.add_watcher(u)
        assert document.watcher_recipients() == ["noprofile@example.com"]

    def test_drops_empty_email(self, document, user):
        user.email = ""
        user.save()
        document.add_watcher(user)
        assert document.watcher_recipients() == []

    @pytest.mark.parametrize(
        "preference",
        ["all", "selected", "only_my_events", "only_assigned", "only_owner"],
    )
    def test_every_preference_but_none_notifies(
        self, document, db, preference
    ):
        u = make_user(f"{preference}@example.com", preference)
        document.add_watcher(u)
        assert document.watcher_recipients() == [u.email]

    def test_no_watchers(self, document):
        assert document.watcher_recipients() == []


class TestVisibilityRule:
    def test_detects_predicate(self, issue, document):
        assert has_visibility_rule(issue)
        assert has_visibility_rule(Issue)
        assert not has_visibility_rule(document)

    def test_is_visible_to_defaults_open(self, document):
        assert document.is_visible_to(AnonymousUser())

    def test_is_visible_to_uses_predicate(self, private_issue, other_user):
        assert not private_issue.is_visible_to(other_user)
        assert not private_issue.is_visible_to(AnonymousUser())


class TestRegistry:
    def test_default_prefix_is_plural_lowercase(self):
        assert default_route_prefix(Issue) == "issues"
        assert default_route_prefix(Document) == "documents"

    def test_apps_register_their_models(self):
        assert Issue in registry
        assert Document in registry
        assert registry.prefix_for(Issue) == "issues"

    def test_route_prefix_override(self):
        r = WatchRegistry()
        assert r.register(Issue, route_prefix="tickets") == "tickets"
        assert r.url_name(Issue, "watch") == "tickets_watch"

    def test_registering_twice_is_a_no_op(self):
        r = WatchRegistry()
        r.register(Issue)
        assert r.register(Issue, route_prefix="tickets") == "issues"
        assert len(list(r)) == 1

    def test_prefix_clash_is_rejected(self):
        r = WatchRegistry()
        r.register(Issue, route_prefix="things")
        with pytest.raises(ImproperlyConfigured):
            r.register(Document, route_prefix="things")

    def test_non_watchable_is_rejected(self):
        with pytest.raises(ImproperlyConfigured):
            WatchRegistry().register(User)

    def test_abstract_model_is_rejected(self):
        with pytest.raises(ImproperlyConfigured):
            WatchRegistry().register(Watchable)

    def test_open_model_warns(self):
        with pytest.warns(ConfigurationWarning, match="Document"):
            WatchRegistry().register(Document)

    def test_unknown_action(self):
        with pytest.raises(ValueError):
            registry.url_name(Issue, "explode")

    def test_unregistered_model(self):
        with pytest.raises(LookupError):
            WatchRegistry().prefix_for(Issue)

    def test_urls_cover_every_action(self):
        r = WatchRegistry()
        r.register(Issue)
        names = {p.name for p in r.urls}
        assert names == {
            "issues_watch",
            "issues_unwatch",
            "issues_watcher_new",
            "issues_watcher_destroy",
        }


class TestChecks:
    def test_open_models_get_a_warning(self):
        messages = check_watchable_visibility(None)
        assert [m.id for m in messages] == ["watchers.W001"]
        assert messages[0].obj is Document

    @override_settings(WATCHERS_REQUIRE_VISIBILITY=True)
    def test_open_models_get_an_error_when_strict(self):
        messages = check_watchable_visibility(None)
        assert [m.id for m in messages] == ["watchers.E001"]


class TestForms:
    def test_add_form_offers_addable_users_only(
        self, document, user, other_user
    ):
        document.add_watcher(user)
        form = AddWatchersForm(watchable=document)
        assert list(form.fields["user_ids"].queryset) == [other_user]

    def test_add_form_rejects_current_watcher(self, document, user):
        document.add_watcher(user)
        form = AddWatchersForm({"user_ids": [user.pk]}, watchable=document)
        assert not form.is_valid()

    def test_admin_form_assigns_deduplicated_ids(
        self, document, user, other_user
    ):
        form_class = modelform_factory(
            Document, form=WatchableAdminForm, fields=["title", "body"]
        )
        form = form_class(
            {
                "title": document.title,
                "body": document.body,
                "watcher_user_ids": [user.pk, other_user.pk, user.pk],
            },
            instance=document,
        )
        assert form.is_valid(), form.errors
        form.save_watchers()
        assert sorted(document.watcher_user_ids) == sorted(
            [user.pk, other_user.pk]
        )


class TestTemplateTags:
    def test_watcher_url(self, issue, user):
        t = Template(
            "{% load watchers_tags %}"
            "{% watcher_url issue 'watch' %}|"
            "{% watcher_url issue 'watcher_destroy' user %}"
        )
        html = t.render(Context({"issue": issue, "user": user}))
        assert html == (
            f"/issues/{issue.pk}/watch/|"
            f"/issues/{issue.pk}/watchers/{user.pk}/"
        )

    def test_watched_by_filter(self, document, user, other_user):
        document.add_watcher(user)
        t = Template(
            "{% load watchers_tags %}"
            "{{ doc|watched_by:a }} {{ doc|watched_by:b }}"
        )
        html = t.render(Context({"doc": document, "a": user, "b": other_user}))
        assert html == "True False"


class TestWatchView:
    def test_requires_login(self, client, issue):
        r = client.post(f"/issues/{issue.pk}/watch/")
        assert r.status_code == 302
        assert "/admin/login/" in r.url
        assert not issue.watchers.exists()

    def test_get_not_allowed(self, client, user, issue):
        client.force_login(user)
        r = client.get(f"/issues/{issue.pk}/watch/")
        assert r.status_code == 405

    def test_watch(self, client, other_user, issue):
        client.force_login(other_user)
        r = client.post(f"/issues/{issue.pk}/watch/")
        assert r.status_code == 302
        assert r.url == issue.get_absolute_url()
        assert issue.is_watched_by(other_user)

    def test_watch_twice_is_harmless(self, client, user, document):
        document.add_watcher(user)
        client.force_login(user)
        r = client.post(f"/documents/{document.pk}/watch/")
        assert r.status_code == 302
        assert document.watchers.count() == 1

    def test_htmx_watch_returns_unwatch_button(self, client, user, issue):
        client.force_login(user)
        r = client.post(
            f"/issues/{issue.pk}/watch/",
            HTTP_HX_REQUEST="true",
        )
        assert r.status_code == 200
        assert b"Unwatch" in r.content
        assert f"/issues/{issue.pk}/unwatch/".encode() in r.content

    def test_cannot_watch_invisible_object(
        self, client, other_user, private_issue
    ):
        client.force_login(other_user)
        r = client.post(f"/issues/{private_issue.pk}/watch/")
        assert r.status_code == 404
        assert not private_issue.watchers.exists()

    def test_unknown_object(self, client, user, db):
        client.force_login(user)
        r = client.post("/issues/999999/watch/")
        assert r.status_code == 404


class TestUnwatchView:
    def test_unwatch(self, client, user, issue):
        issue.add_watcher(user)
        client.force_login(user)
        r = client.post(f"/issues/{issue.pk}/unwatch/")
        assert r.status_code == 302
        assert not issue.is_watched_by(user)

    def test_delete_verb(self, client, user, document):
        document.add_watcher(user)
        client.force_login(user)
        r = client.delete(f"/documents/{document.pk}/unwatch/")
        assert r.status_code == 302
        assert not document.is_watched_by(user)

    def test_unwatch_when_not_watching(self, client, user, issue):
        client.force_login(user)
        r = client.post(f"/issues/{issue.pk}/unwatch/")
        assert r.status_code == 302

    def test_htmx_unwatch_returns_watch_button(self, client, user, issue):
        issue.add_watcher(user)
        client.force_login(user)
        r = client.post(
            f"/issues/{issue.pk}/unwatch/",
            HTTP_HX_REQUEST="true",
        )
        assert b">Watch<" in r.content


class TestWatcherNewView:
    def test_requires_permission(self, client, user, issue):
        client.force_login(user)
        r = client.get(f"/issues/{issue.pk}/watchers/new/")
        assert r.status_code == 403

    def test_form_lists_addable_users(
        self, client, manager, other_user, issue
    ):
        issue.add_watcher(manager)
        client.force_login(manager)
        r = client.get(f"/issues/{issue.pk}/watchers/new/")
        assert r.status_code == 200
        assert other_user.email.encode() in r.content
        assert manager.email.encode() not in r.content

    def test_adds_selected_users(
        self, client, manager, user, other_user, issue
    ):
        client.force_login(manager)
        r = client.post(
            f"/issues/{issue.pk}/watchers/new/",
            {"user_ids": [user.pk, other_user.pk]},
        )
        assert r.status_code == 302
        assert issue.is_watched_by(user)
        assert issue.is_watched_by(other_user)

    def test_cannot_add_user_who_cannot_see_object(
        self, client, manager, other_user, private_issue
    ):
        manager.is_staff = True
        manager.save()
        client.force_login(manager)
        r = client.post(
            f"/issues/{private_issue.pk}/watchers/new/",
            {"user_ids": [other_user.pk]},
        )
        assert r.status_code == 200
        assert not private_issue.is_watched_by(other_user)


class TestWatcherDestroyView:
    def test_requires_permission(self, client, user, other_user, issue):
        issue.add_watcher(other_user)
        client.force_login(user)
        r = client.post(f"/issues/{issue.pk}/watchers/{other_user.pk}/")
        assert r.status_code == 403
        assert issue.is_watched_by(other_user)

    def test_removes_watcher(self, client, manager, other_user, issue):
        issue.add_watcher(other_user)
        client.force_login(manager)
        r = client.post(f"/issues/{issue.pk}/watchers/{other_user.pk}/")
        assert r.status_code == 302
        assert not issue.is_watched_by(other_user)

    def test_delete_verb_with_htmx(self, client, manager, other_user, issue):
        issue.add_watcher(other_user)
        client.force_login(manager)
        r = client.delete(
            f"/issues/{issue.pk}/watchers/{other_user.pk}/",
            HTTP_HX_REQUEST="true",
        )
        assert r.status_code == 200
        assert not issue.is_watched_by(other_user)

    def test_unknown_user(self, client, manager, issue):
        client.force_login(manager)
        r = client.post(f"/issues/{issue.pk}/watchers/999999/")
        assert r.status_code == 404
