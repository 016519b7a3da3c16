"""Routes for browsing products."""
from __future__ import annotations

from decimal import Decimal

from flask import abort, render_template, request

from ..catalog.panels import build_listing_panel
from ..catalog.services import (
    CATCH_ALL_CATEGORY,
    DEFAULT_SORT,
    FEEDS,
    SORT_OPTIONS,
    CatalogError,
    effective_price,
    feed_loader,
    filter_and_sort,
    format_currency,
    get_product,
    products_by_category,
    quantize_amount,
    related_products,
    search_products,
)
from ..logging_service import log_manager
from . import bp


def _price_arg(name: str) -> Decimal | None:
    raw = request.args.get(name, "").strip()
    if not raw:
        return None
    try:
        return quantize_amount(raw)
    except CatalogError:
        return None


def _flag_arg(name: str) -> bool:
    return request.args.get(name, "").lower() in {"1", "true", "on", "yes"}


@bp.route("/product/<int:product_id>")
def product_detail(product_id: int):
    """Show a single product with related items."""

    product = get_product(product_id)
    if product is None:
        log_manager.record(
            component="Catalog",
            action="view-product",
            level="warn",
            result="not-found",
            title="Product not found",
            user_summary="A visitor requested a product that does not exist.",
            technical_details=f"shop.product_detail found no product with id={product_id}",
        )
        abort(404)

    price = effective_price(product)
    related = build_listing_panel(
        "You may also like",
        related_products(product),
        view_all_link=f"/category/{product.category}",
    )
    log_manager.record(
        component="Catalog",
        action="view-product",
        title="Product viewed",
        user_summary=f"{product.name} opened.",
        technical_details=f"shop.product_detail rendered product_id={product.id}",
    )
    return render_template(
        "shop/product.html",
        title=f"{product.name} — Storefront",
        product=product,
        price_display=format_currency(price),
        original_price_display=(
            format_currency(product.price) if price != quantize_amount(product.price) else None
        ),
        related=related,
        active_nav="shop",
    )


@bp.route("/category/<category>")
def category(category: str):
    """List products in a category; ``all`` lists everything."""

    sort = request.args.get("sort", DEFAULT_SORT)
    if sort not in SORT_OPTIONS:
        sort = DEFAULT_SORT
    products = filter_and_sort(
        products_by_category(category),
        sort=sort,
        only_new=_flag_arg("new"),
        only_popular=_flag_arg("popular"),
        only_sale=_flag_arg("sale"),
        min_price=_price_arg("min_price"),
        max_price=_price_arg("max_price"),
    )
    label = "All Products" if category.lower() == CATCH_ALL_CATEGORY else category.capitalize()
    panel = build_listing_panel(label, products, view_all_link=f"/category/{CATCH_ALL_CATEGORY}")

    log_manager.record(
        component="Catalog",
        action="view-category",
        title="Category browsed",
        user_summary=f"{label} listing displayed with {len(products)} products.",
        technical_details=f"shop.category category={category!r} sort={sort}",
    )
    return render_template(
        "shop/category.html",
        title=f"{label} — Storefront",
        category=category,
        panel=panel,
        sort=sort,
        sort_options=[(key, option[0]) for key, option in SORT_OPTIONS.items()],
        active_nav="shop",
    )


@bp.route("/search")
def search():
    """Search the catalog by keyword."""

    query = request.args.get("q", "").strip()
    products = search_products(query)
    panel = build_listing_panel(
        f"Results for “{query}”" if query else "All Products",
        products,
    )
    log_manager.record(
        component="Catalog",
        action="search",
        title="Catalog searched",
        user_summary=f"Search returned {len(products)} products.",
        technical_details=f"shop.search q={query!r}",
    )
    return render_template(
        "shop/search.html",
        title="Search — Storefront",
        query=query,
        panel=panel,
        active_nav="shop",
    )


@bp.route("/fragments/listing/<feed>")
def listing_fragment(feed: str):
    """Render a filled listing panel for a deferred home page feed."""

    try:
        loader = feed_loader(feed)
    except CatalogError:
        abort(404)
    config = FEEDS[feed]
    panel = build_listing_panel(config["title"], loader(), view_all_link=config["view_all"])
    return render_template("components/listing_fragment.html", panel=panel)
