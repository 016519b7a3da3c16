"""Database models for placed orders."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from ..extensions import db
from ..models import utcnow


class Order(db.Model):
    """An order placed from a shopper's cart."""

    __tablename__ = "orders"

    id: int = db.Column(db.Integer, primary_key=True)
    user_id: int = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    status: str = db.Column(db.String(20), nullable=False, default="pending")
    subtotal: Decimal = db.Column(db.Numeric(10, 2), nullable=False)
    shipping_cost: Decimal = db.Column(db.Numeric(10, 2), nullable=False)
    total_amount: Decimal = db.Column(db.Numeric(10, 2), nullable=False)
    shipping_method: str = db.Column(db.String(20), nullable=False)
    full_name: str = db.Column(db.String(120), nullable=False)
    address: str = db.Column(db.String(255), nullable=False)
    city: str = db.Column(db.String(120), nullable=False)
    postal_code: str = db.Column(db.String(20), nullable=False)
    country: str = db.Column(db.String(80), nullable=False)
    phone: str = db.Column(db.String(32), nullable=False)
    created_at: datetime = db.Column(db.DateTime, default=utcnow, nullable=False)

    items = db.relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Order {self.id} user={self.user_id} {self.total_amount}>"


class OrderItem(db.Model):
    """A product line captured at purchase time."""

    id: int = db.Column(db.Integer, primary_key=True)
    order_id: int = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    product_id: int = db.Column(db.Integer, nullable=False)
    product_name: str = db.Column(db.String(160), nullable=False)
    quantity: int = db.Column(db.Integer, nullable=False)
    price_at_purchase: Decimal = db.Column(db.Numeric(10, 2), nullable=False)

    order = db.relationship("Order", back_populates="items")
