"""Routes for reviewing the cart and placing orders."""
from __future__ import annotations

from flask import redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from ..auth.guard import guarded
from ..auth.session import session_manager
from ..cart.services import summarize_cart
from ..extensions import db
from ..logging_service import log_manager
from . import bp
from .services import (
    DEFAULT_SHIPPING_METHOD,
    FREE_SHIPPING_THRESHOLD,
    SHIPPING_METHODS,
    CheckoutError,
    place_order,
    quote,
)


def _render_checkout(user_id: int, method: str, feedback: dict[str, str] | None = None, status: int = 200):
    if method not in SHIPPING_METHODS:
        method = DEFAULT_SHIPPING_METHOD
    summary = summarize_cart(user_id)
    return (
        render_template(
            "checkout/checkout.html",
            title="Checkout — Storefront",
            summary=summary,
            quote=quote(summary, method).to_dict(),
            shipping_methods=[(key, label) for key, (label, _) in SHIPPING_METHODS.items()],
            shipping_method=method,
            free_shipping_threshold=FREE_SHIPPING_THRESHOLD,
            form=request.form,
            feedback=feedback,
            active_nav="checkout",
        ),
        status,
    )


@bp.route("/checkout", methods=["GET", "POST"])
@guarded
def checkout():
    """Review the cart and place an order."""

    user = session_manager.current_user()
    method = request.values.get("shipping_method", DEFAULT_SHIPPING_METHOD)

    if request.method == "GET":
        log_manager.record(
            component="Checkout",
            action="view",
            title="Checkout opened",
            user_summary="Checkout page displayed with the current cart.",
            technical_details=f"checkout.checkout rendered for user_id={user.id}",
        )
        return _render_checkout(user.id, method)

    try:
        order = place_order(user.id, request.form)
    except CheckoutError as exc:
        db.session.rollback()
        return _render_checkout(user.id, method, {"type": "error", "message": str(exc)}, 400)
    except SQLAlchemyError as exc:
        db.session.rollback()
        log_manager.record(
            component="Checkout",
            action="place-order",
            level="error",
            result="error",
            title="Order placement failed",
            user_summary="The order could not be saved. No payment was taken.",
            technical_details=f"checkout.place_order raised {exc.__class__.__name__}: {exc}",
        )
        return _render_checkout(
            user.id,
            method,
            {"type": "error", "message": "We were unable to place your order. Try again."},
            500,
        )

    log_manager.record(
        component="Checkout",
        action="place-order",
        title="Order placed",
        user_summary=f"Order #{order.id} placed with {len(order.items)} lines.",
        technical_details=(
            f"checkout.place_order created order_id={order.id}"
            f" total={order.total_amount} method={order.shipping_method}"
        ),
    )
    return redirect(url_for("profile.profile", order=order.id))
