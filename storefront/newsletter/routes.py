"""Routes for newsletter sign-up."""
from __future__ import annotations

from flask import render_template, request
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..logging_service import log_manager
from . import bp
from .services import NewsletterError, subscribe


def _render_result(feedback: dict[str, str], status: int):
    return (
        render_template(
            "newsletter/result.html",
            title="Newsletter — Storefront",
            feedback=feedback,
            subscribed=feedback["type"] == "success",
        ),
        status,
    )


@bp.route("/newsletter/subscribe", methods=["POST"])
def subscribe_view():
    """Sign an address up for the newsletter."""

    try:
        subscriber, created = subscribe(request.form.get("email", ""))
    except NewsletterError as exc:
        return _render_result({"type": "error", "message": str(exc)}, 400)
    except SQLAlchemyError as exc:
        db.session.rollback()
        log_manager.record(
            component="Newsletter",
            action="subscribe",
            level="error",
            result="error",
            title="Newsletter sign-up failed",
            user_summary="The subscription could not be saved.",
            technical_details=f"newsletter.subscribe raised {exc.__class__.__name__}: {exc}",
        )
        return _render_result(
            {"type": "error", "message": "Failed to subscribe to the newsletter. Try again."}, 500
        )

    if created:
        log_manager.record(
            component="Newsletter",
            action="subscribe",
            title="Newsletter subscription",
            user_summary="A visitor subscribed to the newsletter.",
            technical_details=f"newsletter.subscribe subscriber_id={subscriber.id}",
        )
    return _render_result({"type": "success", "message": "Thank you for subscribing to our newsletter."}, 200)
