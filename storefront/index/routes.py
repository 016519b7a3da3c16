"""Routes for the storefront home page."""
from __future__ import annotations

from flask import current_app, render_template, url_for
from sqlalchemy.exc import SQLAlchemyError

from ..catalog.panels import ListingPanel, build_listing_panel
from ..catalog.services import FEEDS, list_categories
from ..extensions import db
from ..logging_service import log_manager
from . import bp

HOME_FEEDS = ("trending", "new-arrivals", "sale")


def _feed_panel(name: str, deferred: bool) -> ListingPanel | None:
    """Load a feed for the home page; failed feeds are left out."""

    feed = FEEDS[name]
    if deferred:
        return build_listing_panel(
            feed["title"], [], is_loading=True, view_all_link=feed["view_all"]
        )
    try:
        products = feed["loader"]()
    except SQLAlchemyError as exc:
        db.session.rollback()
        log_manager.record(
            component="Catalog",
            action="load-feed",
            level="error",
            result="error",
            title="Product feed unavailable",
            user_summary=f"The {feed['title']} section could not be loaded and was hidden.",
            technical_details=f"feed {name} raised {exc.__class__.__name__}: {exc}",
        )
        return None
    return build_listing_panel(feed["title"], products, view_all_link=feed["view_all"])


@bp.route("/")
def home():
    """Render the storefront landing page."""

    deferred = set(current_app.config.get("DEFERRED_FEEDS", ()))
    sections = []
    for name in HOME_FEEDS:
        panel = _feed_panel(name, name in deferred)
        if panel is None:
            continue
        sections.append(
            {
                "name": name,
                "panel": panel,
                "fragment_url": url_for("shop.listing_fragment", feed=name)
                if panel.is_loading
                else None,
            }
        )

    log_manager.record(
        component="Storefront",
        action="view",
        title="Homepage accessed",
        user_summary="Storefront landing page loaded.",
        technical_details=(
            f"index.home rendered {len(sections)} sections"
            f" ({len(deferred & set(HOME_FEEDS))} deferred)."
        ),
    )
    return render_template(
        "index/home.html",
        title="Storefront",
        sections=sections,
        categories=list_categories(),
        active_nav="home",
    )
