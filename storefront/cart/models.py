"""Database models for shopping carts."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, UniqueConstraint

from ..extensions import db
from ..models import utcnow


class CartItem(db.Model):
    """A product line in a shopper's cart."""

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_item_user_product"),
        CheckConstraint("quantity >= 1", name="ck_cart_item_quantity_positive"),
    )

    id: int = db.Column(db.Integer, primary_key=True)
    user_id: int = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    product_id: int = db.Column(
        db.Integer, db.ForeignKey("product.id", ondelete="CASCADE"), nullable=False
    )
    quantity: int = db.Column(db.Integer, nullable=False, default=1)
    created_at: datetime = db.Column(db.DateTime, default=utcnow, nullable=False)

    product = db.relationship("Product", lazy="joined")

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<CartItem user={self.user_id} product={self.product_id} x{self.quantity}>"
