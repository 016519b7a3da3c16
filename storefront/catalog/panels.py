"""View models for titled product grids.

A listing panel is a pure function of its inputs: while the caller's data is
still loading it holds a fixed number of skeleton cards, otherwise one card per
product in the order given. Fetching and error handling belong to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from .models import Product
from .services import effective_price, format_currency, quantize_amount

SKELETON_CARD_COUNT = 8
DEFAULT_VIEW_ALL_LINK = "/category/all"


@dataclass(frozen=True)
class SkeletonCard:
    """Placeholder shaped like a product card."""

    index: int
    image_block: bool = True
    text_lines: int = 2
    price_row: bool = True


@dataclass(frozen=True)
class ProductCard:
    key: int
    name: str
    url: str
    image_url: str
    price_display: str
    original_price_display: Optional[str]
    badges: tuple[str, ...]


Card = Union[SkeletonCard, ProductCard]


@dataclass(frozen=True)
class ListingPanel:
    title: str
    view_all_link: str
    is_loading: bool
    cards: tuple[Card, ...]
    class_name: Optional[str] = None

    @property
    def keys(self) -> list[int]:
        return [card.key for card in self.cards if isinstance(card, ProductCard)]


def _badges(product: Product) -> tuple[str, ...]:
    badges = []
    if product.is_new:
        badges.append("New")
    if product.is_sale and product.discount_percentage:
        badges.append(f"-{product.discount_percentage}%")
    return tuple(badges)


def product_card(product: Product) -> ProductCard:
    price = effective_price(product)
    on_sale = price != quantize_amount(product.price)
    return ProductCard(
        key=product.id,
        name=product.name,
        url=f"/product/{product.id}",
        image_url=product.image_url,
        price_display=format_currency(price),
        original_price_display=format_currency(product.price) if on_sale else None,
        badges=_badges(product),
    )


def build_listing_panel(
    title: str,
    products: Sequence[Product],
    *,
    is_loading: bool = False,
    view_all_link: str = DEFAULT_VIEW_ALL_LINK,
    class_name: Optional[str] = None,
) -> ListingPanel:
    """Build the panel shown for ``products``."""

    if is_loading:
        cards: tuple[Card, ...] = tuple(
            SkeletonCard(index=index) for index in range(SKELETON_CARD_COUNT)
        )
    else:
        cards = tuple(product_card(product) for product in products)

    return ListingPanel(
        title=title,
        view_all_link=view_all_link,
        is_loading=is_loading,
        cards=cards,
        class_name=class_name,
    )
