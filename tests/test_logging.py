"""Tests for structured logging and the log console."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from storefront.logging_service import MAX_FEED_LIMIT, log_manager
from storefront.models import SystemLog, utcnow


def _record(**overrides):
    fields = {
        "component": "Catalog",
        "action": "test",
        "title": "Test entry",
        "user_summary": "Something happened.",
        "technical_details": "details",
    }
    fields.update(overrides)
    return log_manager.record(**fields)


def test_record_persists_entry(app):
    with app.app_context():
        record = _record(level="warn", result="warn")

        stored = SystemLog.query.order_by(SystemLog.id.desc()).first()
        assert stored.level == "warn"
        assert stored.correlation_id == record.correlation_id
        assert record.environment == "development"
        assert "Catalog" in log_manager.available_components


def test_record_rejects_unknown_level(app):
    with app.app_context():
        with pytest.raises(ValueError, match="Unsupported level"):
            _record(level="debug")


def test_retention_keeps_newest_entries(app):
    app.config["LOG_RETENTION"] = 3

    with app.app_context():
        for index in range(5):
            _record(title=f"Entry {index}")

        titles = [entry["title"] for entry in log_manager.fetch_logs()]

    assert titles == ["Entry 4", "Entry 3", "Entry 2"]


def test_fetch_logs_filters_and_clamps_limit(app):
    with app.app_context():
        _record(component="Cart", level="error", result="error", title="Cart broke")
        _record(component="Auth", title="Signed in")

        assert [entry["title"] for entry in log_manager.fetch_logs(level="error")] == ["Cart broke"]
        assert [entry["title"] for entry in log_manager.fetch_logs(component="Auth")] == ["Signed in"]
        assert [entry["title"] for entry in log_manager.fetch_logs(search="broke")] == ["Cart broke"]
        assert len(log_manager.fetch_logs(limit=10_000)) <= MAX_FEED_LIMIT


def test_request_logs_share_correlation_id(app, client):
    client.post(
        "/auth/register",
        data={
            "username": "newbie",
            "email": "newbie@example.com",
            "password": "secret1",
            "confirm_password": "secret1",
        },
    )

    with app.app_context():
        registered = log_manager.fetch_logs(component="Auth", search="registered")[0]
        signed_in = log_manager.fetch_logs(component="Session")[0]

    assert registered["action"] == "register"
    assert registered["request_path"] == "/auth/register"
    assert signed_in["action"] == "sign-in"
    assert registered["correlation_id"] == signed_in["correlation_id"]


def test_console_and_feed_require_sign_in(client, make_user, login):
    assert client.get("/logs/").status_code == 302

    make_user("boss", is_admin=True)
    login("boss")

    console = client.get("/logs/")
    assert console.status_code == 200
    assert b'data-page="logs"' in console.data

    feed = client.get("/logs/feed?component=Session")
    data = feed.get_json()
    assert feed.status_code == 200
    assert data["latest"] is not None
    assert all(entry["component"] == "Session" for entry in data["logs"])


def test_records_remember_request_path_and_account(app, client, make_user, login):
    user_id = make_user()
    login()
    client.get("/profile")

    with app.app_context():
        viewed = log_manager.fetch_logs(component="Profile")[0]
        mine = log_manager.fetch_logs(user_id=user_id)
        outside_request = _record(title="Background entry")

    assert viewed["request_path"] == "/profile"
    assert viewed["user_id"] == user_id
    assert mine and all(entry["user_id"] == user_id for entry in mine)
    assert outside_request.request_path is None
    assert outside_request.user_id is None


def test_feed_filters_by_account(client, make_user, login):
    shopper_id = make_user()
    login()
    client.get("/profile")
    client.post("/auth/logout")
    make_user("boss", is_admin=True)
    login("boss")

    data = client.get(f"/logs/feed?user_id={shopper_id}").get_json()

    assert data["logs"]
    assert all(entry["user_id"] == shopper_id for entry in data["logs"])


def test_timestamps_are_naive_utc(app):
    before = utcnow()
    with app.app_context():
        _record(title="Timed")
        stored = SystemLog.query.order_by(SystemLog.id.desc()).first()

    assert stored.timestamp.tzinfo is None
    assert stored.timestamp >= before - timedelta(seconds=1)
    assert abs(utcnow() - datetime.now(UTC).replace(tzinfo=None)) < timedelta(seconds=5)
