"""Routes for the shopper's wishlist."""
from __future__ import annotations

from flask import redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from ..auth.guard import guarded
from ..auth.session import session_manager
from ..catalog.panels import product_card
from ..extensions import db
from ..logging_service import log_manager
from ..utils import safe_next
from . import bp
from .services import WishlistError, add_to_wishlist, remove_from_wishlist, wishlist_items


def _render_wishlist(feedback: dict[str, str] | None = None, status: int = 200):
    user = session_manager.current_user()
    entries = [
        {"item_id": item.id, "card": product_card(item.product)}
        for item in wishlist_items(user.id)
        if item.product is not None
    ]
    return (
        render_template(
            "wishlist/wishlist.html",
            title="Wishlist — Storefront",
            entries=entries,
            feedback=feedback,
            active_nav="wishlist",
        ),
        status,
    )


@bp.route("/wishlist")
@guarded
def view_wishlist():
    """Show saved products."""

    return _render_wishlist()


@bp.route("/wishlist/add", methods=["POST"])
@guarded
def add():
    user = session_manager.current_user()
    product_id = request.form.get("product_id", type=int)
    if product_id is None:
        return _render_wishlist({"type": "error", "message": "Choose a product to save."}, 400)
    try:
        item, created = add_to_wishlist(user.id, product_id)
    except WishlistError as exc:
        db.session.rollback()
        return _render_wishlist({"type": "error", "message": str(exc)}, 400)
    except SQLAlchemyError as exc:
        db.session.rollback()
        log_manager.record(
            component="Wishlist",
            action="add",
            level="error",
            result="error",
            title="Wishlist update failed",
            user_summary="The product could not be saved. Try again shortly.",
            technical_details=f"wishlist.add raised {exc.__class__.__name__}: {exc}",
        )
        return _render_wishlist(
            {"type": "error", "message": "We were unable to update your wishlist. Try again."}, 500
        )

    if created:
        log_manager.record(
            component="Wishlist",
            action="add",
            title="Product saved",
            user_summary=f"{item.product.name} saved to the wishlist.",
            technical_details=f"wishlist.add product_id={product_id} user_id={user.id}",
        )
    return redirect(safe_next() or url_for("wishlist.view_wishlist"))


@bp.route("/wishlist/items/<int:item_id>/remove", methods=["POST"])
@guarded
def remove(item_id: int):
    user = session_manager.current_user()
    try:
        remove_from_wishlist(user.id, item_id)
    except WishlistError as exc:
        db.session.rollback()
        return _render_wishlist({"type": "error", "message": str(exc)}, 400)

    log_manager.record(
        component="Wishlist",
        action="remove",
        title="Product unsaved",
        user_summary="A product was removed from the wishlist.",
        technical_details=f"wishlist.remove item_id={item_id} user_id={user.id}",
    )
    return redirect(safe_next() or url_for("wishlist.view_wishlist"))
