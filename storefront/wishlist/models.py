"""Database models for wishlists."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import UniqueConstraint

from ..extensions import db
from ..models import utcnow


class WishlistItem(db.Model):
    """A product a shopper saved for later."""

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_wishlist_item_user_product"),
    )

    id: int = db.Column(db.Integer, primary_key=True)
    user_id: int = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    product_id: int = db.Column(
        db.Integer, db.ForeignKey("product.id", ondelete="CASCADE"), nullable=False
    )
    created_at: datetime = db.Column(db.DateTime, default=utcnow, nullable=False)

    product = db.relationship("Product", lazy="joined")
