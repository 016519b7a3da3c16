"""Tests for listing panels in both loading and loaded states."""

from __future__ import annotations

from decimal import Decimal

from flask import render_template_string

from storefront.catalog.models import Product
from storefront.catalog.panels import (
    DEFAULT_VIEW_ALL_LINK,
    SKELETON_CARD_COUNT,
    ProductCard,
    SkeletonCard,
    build_listing_panel,
)

PANEL_TEMPLATE = (
    "{% from 'components/listing_panel.html' import listing_panel with context %}"
    "{{ listing_panel(panel) }}"
)


def _product(product_id: int, name: str, price: str = "10.00", **extra) -> Product:
    fields = {"is_new": False, "is_popular": False, "is_sale": False, "discount_percentage": 0}
    fields.update(extra)
    return Product(
        id=product_id,
        name=name,
        price=Decimal(price),
        category="tech",
        image_url=f"/img/{product_id}.jpg",
        **fields,
    )


def test_loading_panel_has_exactly_eight_skeletons():
    panel = build_listing_panel("Trending", [_product(1, "Lamp")], is_loading=True)

    assert SKELETON_CARD_COUNT == 8
    assert len(panel.cards) == 8
    assert all(isinstance(card, SkeletonCard) for card in panel.cards)
    assert [card.index for card in panel.cards] == list(range(8))
    assert panel.keys == []


def test_loaded_panel_preserves_input_order_and_keys():
    products = [_product(3, "Chair"), _product(1, "Lamp"), _product(2, "Desk")]

    panel = build_listing_panel("Trending", products)

    assert not panel.is_loading
    assert panel.keys == [3, 1, 2]
    assert [card.name for card in panel.cards] == ["Chair", "Lamp", "Desk"]
    assert all(isinstance(card, ProductCard) for card in panel.cards)


def test_empty_panel_renders_no_cards():
    panel = build_listing_panel("Trending", [])

    assert panel.cards == ()
    assert panel.title == "Trending"


def test_view_all_link_defaults_to_catch_all_category():
    assert DEFAULT_VIEW_ALL_LINK == "/category/all"
    assert build_listing_panel("Trending", []).view_all_link == "/category/all"
    assert build_listing_panel("Tech", [], view_all_link="/category/tech").view_all_link == "/category/tech"


def test_sale_products_show_discounted_and_original_prices():
    card = build_listing_panel(
        "Sale", [_product(9, "Scarf", "89.00", is_sale=True, discount_percentage=25)]
    ).cards[0]

    assert card.price_display == "$66.75"
    assert card.original_price_display == "$89.00"
    assert card.badges == ("-25%",)
    assert card.url == "/product/9"


def test_rendered_loading_panel_contains_eight_skeletons(app):
    panel = build_listing_panel("Trending", [], is_loading=True)

    with app.test_request_context("/"):
        html = render_template_string(PANEL_TEMPLATE, panel=panel, current_user=None)

    assert html.count("data-skeleton=") == 8
    assert "data-key=" not in html
    assert 'href="/category/all"' in html


def test_rendered_loaded_panel_contains_one_card_per_product(app):
    panel = build_listing_panel("Trending", [_product(4, "Mug"), _product(2, "Bowl")])

    with app.test_request_context("/"):
        html = render_template_string(PANEL_TEMPLATE, panel=panel, current_user=None)

    assert html.count("data-key=") == 2
    assert html.index('data-key="4"') < html.index('data-key="2"')
    assert "data-skeleton=" not in html
    assert "Trending" in html
