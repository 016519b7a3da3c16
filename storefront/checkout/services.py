"""Checkout helpers: shipping, validation and order placement."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping

from ..cart.services import CartSummary, clear_cart, summarize_cart
from ..catalog.services import format_currency, quantize_amount
from ..extensions import db
from .models import Order, OrderItem

FREE_SHIPPING_THRESHOLD = Decimal("50.00")
SHIPPING_METHODS: dict[str, tuple[str, Decimal]] = {
    "standard": ("Standard (5-7 days)", Decimal("5.00")),
    "express": ("Express (1-2 days)", Decimal("15.00")),
}
DEFAULT_SHIPPING_METHOD = "standard"

SHIPPING_FIELDS: tuple[tuple[str, str, int], ...] = (
    ("full_name", "Full name", 2),
    ("address", "Address", 5),
    ("city", "City", 2),
    ("postal_code", "Postal code", 5),
    ("country", "Country", 2),
    ("phone", "Phone number", 10),
)


class CheckoutError(ValueError):
    """Raised when an order cannot be placed."""


@dataclass(frozen=True)
class OrderQuote:
    subtotal: Decimal
    shipping_method: str
    shipping_cost: Decimal
    total: Decimal

    def to_dict(self) -> dict[str, str]:
        return {
            "subtotal": format_currency(self.subtotal),
            "shipping_method": SHIPPING_METHODS[self.shipping_method][0],
            "shipping_cost": format_currency(self.shipping_cost),
            "total": format_currency(self.total),
        }


def shipping_cost(subtotal: Decimal, method: str = DEFAULT_SHIPPING_METHOD) -> Decimal:
    """Return the shipping charge; orders at or above the threshold ship free."""

    if method not in SHIPPING_METHODS:
        raise CheckoutError(f"Unknown shipping method '{method}'.")
    if quantize_amount(subtotal) >= FREE_SHIPPING_THRESHOLD:
        return Decimal("0.00")
    return SHIPPING_METHODS[method][1]


def quote(summary: CartSummary, method: str = DEFAULT_SHIPPING_METHOD) -> OrderQuote:
    subtotal = quantize_amount(summary.total_price)
    cost = shipping_cost(subtotal, method)
    return OrderQuote(
        subtotal=subtotal,
        shipping_method=method,
        shipping_cost=cost,
        total=quantize_amount(subtotal + cost),
    )


def validate_shipping(form: Mapping[str, str]) -> dict[str, str]:
    """Return cleaned shipping details or raise on the first invalid field."""

    details: dict[str, str] = {}
    for key, label, minimum in SHIPPING_FIELDS:
        value = (form.get(key) or "").strip()
        if len(value) < minimum:
            raise CheckoutError(f"{label} must be at least {minimum} characters.")
        details[key] = value
    return details


def place_order(user_id: int, form: Mapping[str, str]) -> Order:
    """Turn the shopper's cart into an order and empty the cart."""

    summary = summarize_cart(user_id)
    if summary.is_empty:
        raise CheckoutError("Your cart is empty.")
    method = (form.get("shipping_method") or DEFAULT_SHIPPING_METHOD).strip()
    details = validate_shipping(form)
    totals = quote(summary, method)

    order = Order(
        user_id=user_id,
        status="pending",
        subtotal=totals.subtotal,
        shipping_cost=totals.shipping_cost,
        total_amount=totals.total,
        shipping_method=method,
        **details,
    )
    for line in summary.lines:
        order.items.append(
            OrderItem(
                product_id=line.product_id,
                product_name=line.name,
                quantity=line.quantity,
                price_at_purchase=line.unit_price,
            )
        )
    db.session.add(order)
    clear_cart(user_id, commit=False)
    db.session.commit()
    return order


def list_orders(user_id: int) -> list[Order]:
    return (
        Order.query.filter_by(user_id=user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
