"""Tests for shipping quotes and order placement."""

from __future__ import annotations

from decimal import Decimal
from urllib.parse import parse_qs, urlparse

import pytest

from storefront.cart.services import add_to_cart, summarize_cart
from storefront.checkout.models import Order
from storefront.checkout.services import (
    CheckoutError,
    list_orders,
    place_order,
    shipping_cost,
    validate_shipping,
)

SHIPPING = {
    "full_name": "Sam Shopper",
    "address": "12 Market Street",
    "city": "Springfield",
    "postal_code": "12345",
    "country": "US",
    "phone": "5551234567",
    "shipping_method": "standard",
}


def test_shipping_cost_by_method_and_threshold():
    assert shipping_cost(Decimal("20.00")) == Decimal("5.00")
    assert shipping_cost(Decimal("20.00"), "express") == Decimal("15.00")
    assert shipping_cost(Decimal("50.00"), "express") == Decimal("0.00")


def test_shipping_cost_rejects_unknown_method():
    with pytest.raises(CheckoutError, match="Unknown shipping method"):
        shipping_cost(Decimal("10.00"), "drone")


def test_validate_shipping_reports_short_fields():
    with pytest.raises(CheckoutError, match="Phone number must be at least 10"):
        validate_shipping({**SHIPPING, "phone": "555"})

    assert validate_shipping({**SHIPPING, "city": "  Springfield "})["city"] == "Springfield"


def test_place_order_snapshots_cart_and_clears_it(app, make_user, make_product):
    user_id = make_user()
    product_id = make_product("Desk Lamp", price="20.00")

    with app.app_context():
        add_to_cart(user_id, product_id, 2)
        order = place_order(user_id, SHIPPING)

        assert order.subtotal == Decimal("40.00")
        assert order.shipping_cost == Decimal("5.00")
        assert order.total_amount == Decimal("45.00")
        assert order.status == "pending"
        assert [(item.product_name, item.quantity) for item in order.items] == [("Desk Lamp", 2)]
        assert summarize_cart(user_id).is_empty
        assert [placed.id for placed in list_orders(user_id)] == [order.id]


def test_place_order_requires_items(app, make_user):
    user_id = make_user()

    with app.app_context():
        with pytest.raises(CheckoutError, match="Your cart is empty."):
            place_order(user_id, SHIPPING)


def test_checkout_page_shows_quote(client, make_user, make_product, login):
    make_user()
    product_id = make_product("Desk Lamp", price="20.00")
    login()
    client.post("/cart/add", data={"product_id": str(product_id)})

    response = client.get("/checkout?shipping_method=express")

    assert response.status_code == 200
    assert b'data-page="checkout"' in response.data
    assert b"$35.00" in response.data


def test_checkout_post_places_order_and_redirects_to_profile(app, client, make_user, make_product, login):
    user_id = make_user()
    product_id = make_product("Desk Lamp", price="60.00")
    login()
    client.post("/cart/add", data={"product_id": str(product_id)})

    response = client.post("/checkout", data=SHIPPING)

    assert response.status_code == 302
    location = urlparse(response.headers["Location"])
    assert location.path == "/profile"
    with app.app_context():
        order = Order.query.filter_by(user_id=user_id).one()
        assert order.shipping_cost == Decimal("0.00")
        order_id = order.id
    assert parse_qs(location.query)["order"] == [str(order_id)]

    profile = client.get(location.path + "?" + location.query)
    assert profile.status_code == 200
    assert f"Order #{order_id}".encode() in profile.data
    assert "1 × Desk Lamp @ $60.00".encode() in profile.data


def test_checkout_post_with_invalid_details_returns_400(client, make_user, make_product, login):
    make_user()
    product_id = make_product()
    login()
    client.post("/cart/add", data={"product_id": str(product_id)})

    response = client.post("/checkout", data={**SHIPPING, "address": "x"})

    assert response.status_code == 400
    assert b"Address must be at least 5 characters." in response.data
