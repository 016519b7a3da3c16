"""Tests for newsletter sign-up."""

from __future__ import annotations

import pytest

from storefront.extensions import db
from storefront.newsletter.models import Subscriber
from storefront.newsletter.services import NewsletterError, list_subscribers, set_active, subscribe


def test_subscribe_normalizes_and_deduplicates(app):
    with app.app_context():
        subscriber, created = subscribe("  Reader@Example.COM ")
        again, created_again = subscribe("reader@example.com")

        assert created is True
        assert created_again is False
        assert subscriber.email == "reader@example.com"
        assert again.id == subscriber.id
        assert Subscriber.query.count() == 1


@pytest.mark.parametrize("email", ["", "reader", "reader@localhost", "@example.com"])
def test_subscribe_rejects_invalid_addresses(app, email):
    with app.app_context():
        with pytest.raises(NewsletterError, match="valid email"):
            subscribe(email)


def test_lapsed_subscriber_is_reactivated(app):
    with app.app_context():
        subscriber, _ = subscribe("reader@example.com")
        set_active(subscriber.id, False)

        again, created = subscribe("reader@example.com")

        assert created is True
        assert db.session.get(Subscriber, again.id).active is True
        assert [entry.email for entry in list_subscribers()] == ["reader@example.com"]


def test_footer_form_subscribes_anonymous_visitors(app, client):
    home = client.get("/")
    assert b"data-newsletter" in home.data

    response = client.post("/newsletter/subscribe", data={"email": "reader@example.com"})

    assert response.status_code == 200
    assert b"Thank you for subscribing to our newsletter." in response.data
    assert b'data-subscribed="yes"' in response.data
    with app.app_context():
        assert Subscriber.query.filter_by(email="reader@example.com").one().active is True


def test_footer_form_reports_invalid_email(client):
    response = client.post("/newsletter/subscribe", data={"email": "not-an-email"})

    assert response.status_code == 400
    assert b"Please enter a valid email address." in response.data
    assert b'data-subscribed="no"' in response.data
