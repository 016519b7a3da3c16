"""Cart operations for signed-in shoppers."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..catalog.services import effective_price, format_currency, get_product
from ..extensions import db
from .models import CartItem

ZERO = Decimal("0.00")


class CartError(ValueError):
    """Raised when a cart change cannot be applied."""


@dataclass(frozen=True)
class CartLine:
    id: int
    product_id: int
    name: str
    image_url: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    @property
    def unit_price_display(self) -> str:
        return format_currency(self.unit_price)

    @property
    def line_total_display(self) -> str:
        return format_currency(self.line_total)


@dataclass(frozen=True)
class CartSummary:
    lines: tuple[CartLine, ...]
    total_items: int
    total_price: Decimal

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total_price_display(self) -> str:
        return format_currency(self.total_price)


def _parse_quantity(value: int | str | None) -> int:
    try:
        quantity = int(value if value not in (None, "") else 1)
    except (TypeError, ValueError) as exc:
        raise CartError("Quantity must be a whole number.") from exc
    if quantity < 1:
        raise CartError("Quantity must be at least 1.")
    return quantity


def cart_items(user_id: int) -> list[CartItem]:
    return CartItem.query.filter_by(user_id=user_id).order_by(CartItem.id).all()


def _owned_item(user_id: int, item_id: int) -> CartItem:
    item = db.session.get(CartItem, item_id)
    if item is None or item.user_id != user_id:
        raise CartError("That item is not in your cart.")
    return item


def add_to_cart(user_id: int, product_id: int, quantity: int | str | None = 1) -> CartItem:
    """Add a product, merging with an existing line for the same product."""

    quantity = _parse_quantity(quantity)
    product = get_product(product_id)
    if product is None:
        raise CartError("That product is no longer available.")

    item = CartItem.query.filter_by(user_id=user_id, product_id=product.id).first()
    if item is None:
        item = CartItem(user_id=user_id, product_id=product.id, quantity=quantity)
    else:
        item.quantity += quantity
    db.session.add(item)
    db.session.commit()
    return item


def update_quantity(user_id: int, item_id: int, quantity: int | str | None) -> CartItem:
    quantity = _parse_quantity(quantity)
    item = _owned_item(user_id, item_id)
    item.quantity = quantity
    db.session.add(item)
    db.session.commit()
    return item


def remove_from_cart(user_id: int, item_id: int) -> None:
    item = _owned_item(user_id, item_id)
    db.session.delete(item)
    db.session.commit()


def clear_cart(user_id: int, *, commit: bool = True) -> int:
    removed = CartItem.query.filter_by(user_id=user_id).delete(synchronize_session=False)
    if commit:
        db.session.commit()
    return removed


def summarize_cart(user_id: int) -> CartSummary:
    """Return cart lines with sale prices applied and running totals."""

    lines = []
    total_items = 0
    total_price = ZERO
    for item in cart_items(user_id):
        if item.product is None:
            continue
        unit_price = effective_price(item.product)
        line_total = unit_price * item.quantity
        lines.append(
            CartLine(
                id=item.id,
                product_id=item.product_id,
                name=item.product.name,
                image_url=item.product.image_url,
                quantity=item.quantity,
                unit_price=unit_price,
                line_total=line_total,
            )
        )
        total_items += item.quantity
        total_price += line_total
    return CartSummary(lines=tuple(lines), total_items=total_items, total_price=total_price)
