"""Routes for managing the shopping cart."""
from __future__ import annotations

from flask import redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from ..auth.guard import guarded
from ..auth.session import session_manager
from ..extensions import db
from ..logging_service import log_manager
from ..utils import safe_next
from . import bp
from .services import (
    CartError,
    add_to_cart,
    clear_cart,
    remove_from_cart,
    summarize_cart,
    update_quantity,
)


def _render_cart(feedback: dict[str, str] | None = None, status: int = 200):
    user = session_manager.current_user()
    return (
        render_template(
            "cart/cart.html",
            title="Your Cart — Storefront",
            summary=summarize_cart(user.id),
            feedback=feedback,
            active_nav="cart",
        ),
        status,
    )


def _apply(action: str, operation, success_message: str):
    """Run a cart mutation and translate failures into feedback."""

    user = session_manager.current_user()
    try:
        operation(user.id)
    except CartError as exc:
        db.session.rollback()
        return _render_cart({"type": "error", "message": str(exc)}, status=400)
    except SQLAlchemyError as exc:
        db.session.rollback()
        log_manager.record(
            component="Cart",
            action=action,
            level="error",
            result="error",
            title="Cart update failed",
            user_summary="The cart could not be updated. Try again shortly.",
            technical_details=f"cart.{action} raised {exc.__class__.__name__}: {exc}",
        )
        return _render_cart(
            {"type": "error", "message": "We were unable to update your cart. Try again."},
            status=500,
        )

    log_manager.record(
        component="Cart",
        action=action,
        title="Cart updated",
        user_summary=success_message,
        technical_details=f"cart.{action} applied for user_id={user.id}",
    )
    return redirect(safe_next() or url_for("cart.view_cart"))


@bp.route("/cart")
@guarded
def view_cart():
    """Show the current cart."""

    return _render_cart()


@bp.route("/cart/add", methods=["POST"])
@guarded
def add():
    product_id = request.form.get("product_id", type=int)
    quantity = request.form.get("quantity", "1")
    if product_id is None:
        return _render_cart({"type": "error", "message": "Choose a product to add."}, status=400)
    return _apply(
        "add",
        lambda user_id: add_to_cart(user_id, product_id, quantity),
        "Item added to the cart.",
    )


@bp.route("/cart/items/<int:item_id>", methods=["POST"])
@guarded
def update(item_id: int):
    quantity = request.form.get("quantity")
    return _apply(
        "update",
        lambda user_id: update_quantity(user_id, item_id, quantity),
        "Cart quantity updated.",
    )


@bp.route("/cart/items/<int:item_id>/remove", methods=["POST"])
@guarded
def remove(item_id: int):
    return _apply(
        "remove",
        lambda user_id: remove_from_cart(user_id, item_id),
        "Item removed from the cart.",
    )


@bp.route("/cart/clear", methods=["POST"])
@guarded
def clear():
    return _apply("clear", clear_cart, "All items removed from the cart.")
