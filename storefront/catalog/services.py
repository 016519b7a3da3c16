"""Catalog queries, pricing helpers and default data."""
from __future__ import annotations

from datetime import timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Callable

from sqlalchemy import func, or_

from ..extensions import db
from ..models import utcnow
from .models import Product

CATCH_ALL_CATEGORY = "all"
FEED_LIMIT = 8
CENT = Decimal("0.01")
MAX_PRICE = Decimal("99999999.99")


class CatalogError(ValueError):
    """Raised when product data is invalid or missing."""


def quantize_amount(value: Decimal | float | int | str) -> Decimal:
    """Normalize values to two decimal places."""

    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, TypeError) as exc:
            raise CatalogError(f"Invalid price '{value}'") from exc
    if not amount.is_finite():
        raise CatalogError(f"Invalid price '{value}'")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise CatalogError(f"Invalid price '{value}'") from exc


def format_currency(value: Decimal | float | int) -> str:
    """Format amounts using USD formatting."""

    return f"${quantize_amount(value):,.2f}"


def discounted_price(price: Decimal, discount_percentage: int) -> Decimal:
    """Apply a percentage discount to ``price``."""

    factor = (Decimal(100) - Decimal(discount_percentage)) / Decimal(100)
    return quantize_amount(quantize_amount(price) * factor)


def effective_price(product: Product) -> Decimal:
    """Return the price a shopper pays right now."""

    if product.is_sale and product.discount_percentage:
        return discounted_price(product.price, product.discount_percentage)
    return quantize_amount(product.price)


def list_products() -> list[Product]:
    return Product.query.order_by(Product.id).all()


def get_product(product_id: int) -> Product | None:
    return db.session.get(Product, product_id)


def products_by_category(category: str) -> list[Product]:
    """Return products in ``category``; ``all`` returns the full catalog."""

    category = (category or "").strip().lower()
    if not category or category == CATCH_ALL_CATEGORY:
        return list_products()
    return (
        Product.query.filter(func.lower(Product.category) == category)
        .order_by(Product.id)
        .all()
    )


def list_categories() -> list[str]:
    rows = db.session.query(Product.category).distinct().order_by(Product.category).all()
    return [row[0] for row in rows]


def search_products(query: str) -> list[Product]:
    """Match ``query`` against name, description, category and subcategory."""

    query = (query or "").strip()
    if not query:
        return list_products()
    pattern = f"%{query}%"
    return (
        Product.query.filter(
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.category.ilike(pattern),
                Product.subcategory.ilike(pattern),
            )
        )
        .order_by(Product.id)
        .all()
    )


def new_arrivals(limit: int = FEED_LIMIT) -> list[Product]:
    return (
        Product.query.filter_by(is_new=True)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
        .all()
    )


def popular_products(limit: int = FEED_LIMIT) -> list[Product]:
    return Product.query.filter_by(is_popular=True).order_by(Product.id).limit(limit).all()


def sale_products(limit: int = FEED_LIMIT) -> list[Product]:
    return Product.query.filter_by(is_sale=True).order_by(Product.id).limit(limit).all()


FEEDS: dict[str, dict[str, Any]] = {
    "trending": {"title": "Trending Now", "loader": popular_products, "view_all": "/category/all"},
    "new-arrivals": {"title": "New Arrivals", "loader": new_arrivals, "view_all": "/category/all"},
    "sale": {"title": "On Sale", "loader": sale_products, "view_all": "/category/all"},
}


def feed_loader(name: str) -> Callable[[], list[Product]]:
    try:
        return FEEDS[name]["loader"]
    except KeyError as exc:
        raise CatalogError(f"Unknown feed '{name}'") from exc


def _clean_product_fields(
    *,
    name: str,
    price: Decimal | str | float,
    category: str,
    description: str = "",
    image_url: str = "",
    subcategory: str | None = None,
    is_new: bool = False,
    is_popular: bool = False,
    is_sale: bool = False,
    discount_percentage: int | str = 0,
) -> dict[str, Any]:
    """Validate product input and return column values."""

    name = (name or "").strip()
    category = (category or "").strip().lower()
    if not name:
        raise CatalogError("Product name is required.")
    if not category:
        raise CatalogError("Product category is required.")
    amount = quantize_amount(price)
    if amount < 0:
        raise CatalogError("Price cannot be negative.")
    if amount > MAX_PRICE:
        raise CatalogError(f"Price cannot exceed {format_currency(MAX_PRICE)}.")
    try:
        discount = int(discount_percentage or 0)
    except (TypeError, ValueError) as exc:
        raise CatalogError("Discount must be a whole number.") from exc
    if not 0 <= discount <= 100:
        raise CatalogError("Discount must be between 0 and 100.")

    return {
        "name": name,
        "description": (description or "").strip(),
        "price": amount,
        "image_url": (image_url or "").strip(),
        "category": category,
        "subcategory": (subcategory or "").strip() or None,
        "is_new": bool(is_new),
        "is_popular": bool(is_popular),
        "is_sale": bool(is_sale),
        "discount_percentage": discount,
    }


def create_product(*, commit: bool = True, **fields: Any) -> Product:
    """Validate and persist a product."""

    product = Product(**_clean_product_fields(**fields))
    db.session.add(product)
    if commit:
        db.session.commit()
    return product


def update_product(product_id: int, **fields: Any) -> Product:
    """Replace a product's editable fields."""

    product = get_product(product_id)
    if product is None:
        raise CatalogError(f"Product {product_id} not found.")
    for column, value in _clean_product_fields(**fields).items():
        setattr(product, column, value)
    db.session.commit()
    return product


def delete_product(product_id: int) -> Product:
    from ..cart.models import CartItem
    from ..wishlist.models import WishlistItem

    product = get_product(product_id)
    if product is None:
        raise CatalogError(f"Product {product_id} not found.")
    for model in (CartItem, WishlistItem):
        model.query.filter_by(product_id=product.id).delete(synchronize_session=False)
    db.session.delete(product)
    db.session.commit()
    return product


DEFAULT_PRODUCTS: tuple[dict[str, Any], ...] = (
    {
        "name": "Aurora Wireless Headphones",
        "description": "Over-ear noise cancelling headphones with a 40 hour battery.",
        "price": "249.99",
        "category": "tech",
        "subcategory": "audio",
        "is_new": True,
        "is_popular": True,
    },
    {
        "name": "Pulse Smart Watch",
        "description": "Fitness tracking, notifications and an always-on display.",
        "price": "199.00",
        "category": "tech",
        "subcategory": "wearables",
        "is_popular": True,
        "is_sale": True,
        "discount_percentage": 15,
    },
    {
        "name": "Nimbus Mechanical Keyboard",
        "description": "Hot-swappable switches in an aluminium frame.",
        "price": "139.50",
        "category": "tech",
        "subcategory": "accessories",
        "is_new": True,
    },
    {
        "name": "Vector 4K Action Camera",
        "description": "Waterproof action camera with image stabilisation.",
        "price": "329.00",
        "category": "tech",
        "subcategory": "cameras",
        "is_new": True,
        "is_sale": True,
        "discount_percentage": 10,
    },
    {
        "name": "Meridian Wool Overcoat",
        "description": "Tailored double-breasted coat in Italian wool.",
        "price": "420.00",
        "category": "fashion",
        "subcategory": "outerwear",
        "is_popular": True,
    },
    {
        "name": "Strata Leather Sneakers",
        "description": "Minimal low-top sneakers in full-grain leather.",
        "price": "165.00",
        "category": "fashion",
        "subcategory": "footwear",
        "is_new": True,
        "is_popular": True,
    },
    {
        "name": "Horizon Silk Scarf",
        "description": "Hand-rolled silk scarf with an abstract print.",
        "price": "89.00",
        "category": "fashion",
        "subcategory": "accessories",
        "is_sale": True,
        "discount_percentage": 25,
    },
    {
        "name": "Lumen Ceramic Table Lamp",
        "description": "Glazed ceramic lamp with a linen shade.",
        "price": "118.00",
        "category": "lifestyle",
        "subcategory": "home",
        "is_popular": True,
    },
    {
        "name": "Ember Pour-Over Set",
        "description": "Glass dripper, carafe and two stoneware cups.",
        "price": "64.00",
        "category": "lifestyle",
        "subcategory": "kitchen",
        "is_new": True,
    },
    {
        "name": "Drift Travel Duffel",
        "description": "Weekender bag in waxed canvas with leather trim.",
        "price": "210.00",
        "category": "lifestyle",
        "subcategory": "travel",
        "is_popular": True,
        "is_sale": True,
        "discount_percentage": 20,
    },
)


def ensure_catalog_defaults() -> int:
    """Seed the default catalog when no products exist; return rows added."""

    if Product.query.first() is not None:
        return 0

    base = utcnow()
    for offset, config in enumerate(DEFAULT_PRODUCTS):
        product = create_product(
            image_url=f"/static/img/products/{offset + 1}.jpg",
            commit=False,
            **config,
        )
        # later rows read as newer arrivals
        product.created_at = base - timedelta(minutes=len(DEFAULT_PRODUCTS) - offset)
    db.session.commit()
    return len(DEFAULT_PRODUCTS)


SORT_OPTIONS: dict[str, tuple[str, Callable[[Product], Any], bool]] = {
    "newest": ("Newest", lambda product: (product.created_at, product.id), True),
    "price-asc": ("Price: low to high", effective_price, False),
    "price-desc": ("Price: high to low", effective_price, True),
    "name-asc": ("Name: A to Z", lambda product: product.name.lower(), False),
    "name-desc": ("Name: Z to A", lambda product: product.name.lower(), True),
}
DEFAULT_SORT = "newest"


def filter_and_sort(
    products: list[Product],
    *,
    sort: str = DEFAULT_SORT,
    only_new: bool = False,
    only_popular: bool = False,
    only_sale: bool = False,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
) -> list[Product]:
    """Apply the category page filters and ordering."""

    def keep(product: Product) -> bool:
        price = effective_price(product)
        if min_price is not None and price < min_price:
            return False
        if max_price is not None and price > max_price:
            return False
        if only_new and not product.is_new:
            return False
        if only_popular and not product.is_popular:
            return False
        if only_sale and not product.is_sale:
            return False
        return True

    _, key, reverse = SORT_OPTIONS.get(sort, SORT_OPTIONS[DEFAULT_SORT])
    return sorted((product for product in products if keep(product)), key=key, reverse=reverse)


def related_products(product: Product, limit: int = 4) -> list[Product]:
    return (
        Product.query.filter(Product.category == product.category, Product.id != product.id)
        .order_by(Product.id)
        .limit(limit)
        .all()
    )
