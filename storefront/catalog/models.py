"""Database models for the product catalog."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint

from ..extensions import db
from ..models import utcnow


class Product(db.Model):
    """A product offered in the storefront."""

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
        CheckConstraint(
            "discount_percentage >= 0 AND discount_percentage <= 100",
            name="ck_product_discount_range",
        ),
    )

    id: int = db.Column(db.Integer, primary_key=True)
    name: str = db.Column(db.String(160), nullable=False)
    description: str = db.Column(db.Text, nullable=False, default="")
    price: Decimal = db.Column(db.Numeric(10, 2), nullable=False)
    image_url: str = db.Column(db.String(500), nullable=False, default="")
    category: str = db.Column(db.String(64), nullable=False, index=True)
    subcategory: Optional[str] = db.Column(db.String(64))
    is_new: bool = db.Column(db.Boolean, nullable=False, default=False)
    is_popular: bool = db.Column(db.Boolean, nullable=False, default=False)
    is_sale: bool = db.Column(db.Boolean, nullable=False, default=False)
    discount_percentage: int = db.Column(db.Integer, nullable=False, default=0)
    created_at: datetime = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Product {self.id} {self.name}>"
