"""Static copy for help and legal pages."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ContentPage:
    slug: str
    title: str
    sections: tuple[tuple[str, str], ...]


HELP_PAGES: dict[str, ContentPage] = {
    page.slug: page
    for page in (
        ContentPage(
            "contact-us",
            "Contact Us",
            (
                ("Customer care", "Our team answers email within one business day."),
                ("Email", "support@storefront.example"),
                ("Hours", "Monday to Friday, 9am to 6pm."),
            ),
        ),
        ContentPage(
            "faqs",
            "Frequently Asked Questions",
            (
                ("Do I need an account to order?", "Yes. Sign in to keep a cart and check out."),
                ("Can I change an order?", "Orders can be changed while they are still pending."),
                ("Which payment methods do you accept?", "All major credit and debit cards."),
            ),
        ),
        ContentPage(
            "shipping",
            "Shipping Information",
            (
                ("Standard", "Delivered in 5-7 business days for $5.00."),
                ("Express", "Delivered in 1-2 business days for $15.00."),
                ("Free shipping", "Orders of $50.00 or more ship free with any method."),
            ),
        ),
        ContentPage(
            "track-order",
            "Track Your Order",
            (
                ("Order history", "Every order you place is listed on your profile page."),
                ("Status", "Orders move from pending to shipped once they leave our warehouse."),
            ),
        ),
        ContentPage(
            "size-guide",
            "Size Guide",
            (
                ("Apparel", "Measure chest, waist and hips and compare with the product chart."),
                ("Footwear", "Measure your foot from heel to toe and round up half a size."),
            ),
        ),
    )
}

LEGAL_PAGES: dict[str, ContentPage] = {
    page.slug: page
    for page in (
        ContentPage(
            "privacy-policy",
            "Privacy Policy",
            (
                ("What we collect", "Account details, order history and shipping addresses."),
                ("How we use it", "To fulfil orders and operate your account."),
            ),
        ),
        ContentPage(
            "terms-of-service",
            "Terms of Service",
            (
                ("Orders", "An order is accepted once it has been placed from your cart."),
                ("Pricing", "Prices include any active sale discount at the time of purchase."),
            ),
        ),
        ContentPage(
            "cookie-policy",
            "Cookie Policy",
            (
                ("Session cookie", "A signed cookie keeps you signed in and identifies your cart."),
                ("Third parties", "No advertising cookies are set."),
            ),
        ),
    )
}
