"""Routes for the shopper's account page."""
from __future__ import annotations

from flask import render_template, request

from ..auth.guard import guarded
from ..auth.session import session_manager
from ..catalog.services import format_currency
from ..checkout.services import list_orders
from ..logging_service import log_manager
from . import bp


def _serialize_order(order) -> dict[str, object]:
    return {
        "id": order.id,
        "status": order.status,
        "placed": order.created_at.strftime("%b %d, %Y"),
        "total": format_currency(order.total_amount),
        "lines": [
            {
                "name": item.product_name,
                "quantity": item.quantity,
                "price": format_currency(item.price_at_purchase),
            }
            for item in order.items
        ],
    }


@bp.route("/profile")
@guarded
def profile():
    """Show account details and order history."""

    user = session_manager.current_user()
    orders = [_serialize_order(order) for order in list_orders(user.id)]
    placed_order = request.args.get("order", type=int)

    log_manager.record(
        component="Profile",
        action="view",
        title="Profile viewed",
        user_summary="Account details and order history displayed.",
        technical_details=f"profile.profile rendered {len(orders)} orders for user_id={user.id}",
    )
    return render_template(
        "profile/profile.html",
        title="Your Account — Storefront",
        user=user,
        orders=orders,
        placed_order=placed_order,
        active_nav="profile",
    )
