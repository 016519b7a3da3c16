"""Wishlist operations for signed-in shoppers."""
from __future__ import annotations

from ..catalog.models import Product
from ..catalog.services import get_product
from ..extensions import db
from .models import WishlistItem


class WishlistError(ValueError):
    """Raised when a wishlist change cannot be applied."""


def wishlist_items(user_id: int) -> list[WishlistItem]:
    """Saved items, most recent first."""

    return (
        WishlistItem.query.filter_by(user_id=user_id)
        .order_by(WishlistItem.created_at.desc(), WishlistItem.id.desc())
        .all()
    )


def wishlist_products(user_id: int) -> list[Product]:
    return [item.product for item in wishlist_items(user_id) if item.product is not None]


def add_to_wishlist(user_id: int, product_id: int) -> tuple[WishlistItem, bool]:
    """Save a product; return the item and whether it was newly added."""

    product = get_product(product_id)
    if product is None:
        raise WishlistError("That product is no longer available.")

    item = WishlistItem.query.filter_by(user_id=user_id, product_id=product.id).first()
    if item is not None:
        return item, False
    item = WishlistItem(user_id=user_id, product_id=product.id)
    db.session.add(item)
    db.session.commit()
    return item, True


def remove_from_wishlist(user_id: int, item_id: int) -> None:
    item = db.session.get(WishlistItem, item_id)
    if item is None or item.user_id != user_id:
        raise WishlistError("That item is not in your wishlist.")
    db.session.delete(item)
    db.session.commit()
