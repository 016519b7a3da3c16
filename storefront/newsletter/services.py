"""Newsletter subscriptions."""
from __future__ import annotations

from sqlalchemy import func

from ..extensions import db
from .models import Subscriber


class NewsletterError(ValueError):
    """Raised when an address cannot be subscribed."""


def _normalize_email(email: str) -> str:
    email = (email or "").strip().lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise NewsletterError("Please enter a valid email address.")
    return email


def subscribe(email: str) -> tuple[Subscriber, bool]:
    """Subscribe ``email``; re-activates a lapsed address.

    Returns the subscriber and whether the address was newly subscribed.
    """

    email = _normalize_email(email)
    subscriber = Subscriber.query.filter(func.lower(Subscriber.email) == email).first()
    if subscriber is not None:
        if subscriber.active:
            return subscriber, False
        subscriber.active = True
    else:
        subscriber = Subscriber(email=email)
        db.session.add(subscriber)
    db.session.commit()
    return subscriber, True


def set_active(subscriber_id: int, active: bool) -> Subscriber:
    subscriber = db.session.get(Subscriber, subscriber_id)
    if subscriber is None:
        raise NewsletterError(f"Subscriber {subscriber_id} not found.")
    subscriber.active = active
    db.session.commit()
    return subscriber


def list_subscribers() -> list[Subscriber]:
    return Subscriber.query.order_by(Subscriber.created_at.desc(), Subscriber.id.desc()).all()
