"""Tests for shared lib: monitoring endpoints and the 429 view."""

import sentry_sdk
from django.conf import settings
from django.test import RequestFactory

from tracker.lib.views import ratelimited


class TestMonitoring:
    def test_heartbeat(self, client, db):
        r = client.get("/monitoring/heartbeat/")
        assert r.status_code == 200
        assert r.content == b"OK"

    def test_health_check(self, client, db):
        r = client.get("/monitoring/health-check/")
        assert r.status_code == 200
        assert r.json() == {"is_database_up": True}


class TestRatelimited:
    def test_returns_429(self, db):
        request = RequestFactory().post("/issues/1/watch/")
        r = ratelimited(request)
        assert r.status_code == 429
        assert b"Too many requests" in r.content


class TestSentrySettings:
    def test_defaults(self):
        assert settings.SENTRY_ENVIRONMENT == "development"
        assert settings.SENTRY_TRACES_SAMPLE_RATE == 0.0

    def test_not_initialised_without_dsn(self):
        assert settings.SENTRY_DSN == ""
        assert not sentry_sdk.get_client().is_active()
