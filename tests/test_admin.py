"""Tests for back-office pages and the admin quick navigation."""

from __future__ import annotations

from decimal import Decimal

from storefront.admin.quick_nav import build_quick_nav
from storefront.auth.session import ANONYMOUS, LOADING, Authenticated, SessionUser
from storefront.cart.services import add_to_cart
from storefront.catalog.models import Product
from storefront.checkout.services import place_order
from storefront.config import Config
from storefront.extensions import db
from storefront.newsletter.services import list_subscribers

SHIPPING = {
    "full_name": "Sam Shopper",
    "address": "12 Market Street",
    "city": "Springfield",
    "postal_code": "12345",
    "country": "US",
    "phone": "5551234567",
    "shipping_method": "standard",
}


def _url_for(endpoint: str) -> str:
    return f"/{endpoint}"


def test_quick_nav_lists_links_only_for_authenticated_sessions():
    config = {
        "ADMIN_QUICK_NAV_ENABLED": True,
        "ADMIN_QUICK_NAV_LINKS": Config.ADMIN_QUICK_NAV_LINKS,
    }
    user = SessionUser(id=1, username="boss", email="boss@example.com", is_admin=True)

    links = build_quick_nav(Authenticated(user), config, _url_for)

    assert [link["label"] for link in links] == ["Dashboard", "Products", "Logs"]
    assert build_quick_nav(ANONYMOUS, config, _url_for) == []
    assert build_quick_nav(LOADING, config, _url_for) == []


def test_quick_nav_can_be_disabled():
    user = SessionUser(id=1, username="boss", email="boss@example.com")
    config = {"ADMIN_QUICK_NAV_ENABLED": False, "ADMIN_QUICK_NAV_LINKS": Config.ADMIN_QUICK_NAV_LINKS}

    assert build_quick_nav(Authenticated(user), config, _url_for) == []


def test_quick_nav_hidden_from_non_administrators():
    config = {"ADMIN_QUICK_NAV_ENABLED": True, "ADMIN_QUICK_NAV_LINKS": Config.ADMIN_QUICK_NAV_LINKS}
    shopper = SessionUser(id=2, username="shopper", email="shopper@example.com")

    assert build_quick_nav(Authenticated(shopper), config, _url_for) == []


def test_quick_nav_rendered_for_administrators_only(client, make_user, login):
    assert b"data-admin-quick-nav" not in client.get("/").data

    make_user()
    login()
    assert b"data-admin-quick-nav" not in client.get("/").data

    client.post("/auth/logout")
    make_user("boss", is_admin=True)
    login("boss")

    assert b"data-admin-quick-nav" in client.get("/").data


def test_dashboard_shows_metrics(client, make_user, make_product, login):
    make_user("boss", is_admin=True)
    make_product()
    login("boss")

    response = client.get("/admin/dashboard")

    assert response.status_code == 200
    assert b'data-page="admin-dashboard"' in response.data
    assert client.get("/admin").status_code == 200


def test_non_admin_cannot_create_products(app, client, make_user, login):
    make_user()
    login()

    response = client.post("/admin/products", data={"name": "Lamp", "price": "10", "category": "home"})

    assert response.status_code == 403
    with app.app_context():
        assert Product.query.count() == 0


def test_admin_creates_and_deletes_products(app, client, make_user, login):
    make_user("boss", is_admin=True)
    login("boss")

    response = client.post(
        "/admin/products",
        data={"name": "Lamp", "price": "10.00", "category": "Home", "is_sale": "on", "discount_percentage": "10"},
    )
    assert response.status_code == 302

    with app.app_context():
        product = Product.query.one()
        assert product.category == "home"
        assert product.is_sale is True
        product_id = product.id

    listing = client.get("/admin/products")
    assert b"Lamp" in listing.data

    response = client.post(f"/admin/products/{product_id}/delete")
    assert response.status_code == 302
    with app.app_context():
        assert Product.query.count() == 0


def test_admin_product_validation_errors(client, make_user, login):
    make_user("boss", is_admin=True)
    login("boss")

    response = client.post("/admin/products", data={"name": "", "price": "10", "category": "home"})

    assert response.status_code == 400
    assert b"Product name is required." in response.data


def test_deleting_missing_product_returns_404(client, make_user, login):
    make_user("boss", is_admin=True)
    login("boss")

    assert client.post("/admin/products/404/delete").status_code == 404


def test_non_admin_cannot_view_dashboard_or_product_table(client, make_user, make_product, login):
    make_user()
    make_product("Secret Lamp")
    login()

    dashboard = client.get("/admin/dashboard")
    table = client.get("/admin/products")

    assert dashboard.status_code == 403
    assert b'data-metric="revenue"' not in dashboard.data
    assert table.status_code == 403
    assert b"Secret Lamp" not in table.data


def test_admin_rejects_prices_beyond_the_column_range(app, client, make_user, login):
    make_user("boss", is_admin=True)
    login("boss")

    huge = client.post("/admin/products", data={"name": "Lamp", "price": "1e30", "category": "home"})
    too_big = client.post(
        "/admin/products", data={"name": "Lamp", "price": "100000000", "category": "home"}
    )

    assert huge.status_code == 400
    assert b"Invalid price" in huge.data
    assert too_big.status_code == 400
    assert b"Price cannot exceed $99,999,999.99." in too_big.data
    with app.app_context():
        assert Product.query.count() == 0


def test_admin_edits_a_product(app, client, make_user, make_product, login):
    make_user("boss", is_admin=True)
    product_id = make_product("Desk Lamp", price="40.00")
    login("boss")

    form = client.get(f"/admin/products/{product_id}/edit")
    assert form.status_code == 200
    assert b'value="Desk Lamp"' in form.data

    response = client.post(
        f"/admin/products/{product_id}/edit",
        data={"name": "Floor Lamp", "price": "55.50", "category": "Lifestyle", "is_popular": "on"},
    )

    assert response.status_code == 302
    with app.app_context():
        product = db.session.get(Product, product_id)
        assert product.name == "Floor Lamp"
        assert product.price == Decimal("55.50")
        assert product.is_popular is True


def test_admin_edit_validation_and_missing_product(client, make_user, make_product, login):
    make_user("boss", is_admin=True)
    product_id = make_product()
    login("boss")

    invalid = client.post(
        f"/admin/products/{product_id}/edit",
        data={"name": "Lamp", "price": "-1", "category": "home"},
    )

    assert invalid.status_code == 400
    assert b"Price cannot be negative." in invalid.data
    assert client.get("/admin/products/404/edit").status_code == 404


def test_admin_lists_all_orders_and_users(app, client, make_user, make_product, login):
    shopper_id = make_user()
    make_user("boss", is_admin=True)
    product_id = make_product(price="20.00")
    with app.app_context():
        add_to_cart(shopper_id, product_id, 1)
        order_id = place_order(shopper_id, SHIPPING).id
    login("boss")

    orders = client.get("/admin/orders")
    users = client.get("/admin/users")

    assert orders.status_code == 200
    assert f'data-order-id="{order_id}"'.encode() in orders.data
    assert b"Sam Shopper" in orders.data
    assert users.status_code == 200
    assert f'data-user-id="{shopper_id}"'.encode() in users.data
    assert b"Administrator" in users.data


def test_admin_adds_and_lists_subscribers(app, client, make_user, login):
    make_user("boss", is_admin=True)
    login("boss")

    response = client.post("/admin/subscribers", data={"email": "Reader@Example.com"})
    assert response.status_code == 302

    listing = client.get("/admin/subscribers")
    assert b"reader@example.com" in listing.data

    duplicate = client.post("/admin/subscribers", data={"email": "reader@example.com"})
    assert duplicate.status_code == 400
    assert b"already subscribed" in duplicate.data

    invalid = client.post("/admin/subscribers", data={"email": "nope"})
    assert invalid.status_code == 400
    with app.app_context():
        assert [subscriber.email for subscriber in list_subscribers()] == ["reader@example.com"]
