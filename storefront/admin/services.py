"""Aggregates for the back-office dashboard."""
from __future__ import annotations

from decimal import Decimal

from sqlalchemy import func

from ..auth.models import User
from ..catalog.models import Product
from ..catalog.services import format_currency
from ..checkout.models import Order
from ..extensions import db


def dashboard_metrics() -> dict[str, object]:
    """Return headline counts and revenue."""

    revenue = db.session.query(func.coalesce(func.sum(Order.total_amount), 0)).scalar()
    return {
        "products": Product.query.count(),
        "users": User.query.count(),
        "orders": Order.query.count(),
        "revenue": format_currency(Decimal(str(revenue))),
    }


def recent_orders(limit: int = 5) -> list[Order]:
    return Order.query.order_by(Order.created_at.desc(), Order.id.desc()).limit(limit).all()


def list_all_orders() -> list[Order]:
    return Order.query.order_by(Order.created_at.desc(), Order.id.desc()).all()


def list_users() -> list[User]:
    return User.query.order_by(User.created_at.desc(), User.id.desc()).all()
