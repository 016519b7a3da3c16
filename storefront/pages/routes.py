"""Routes for help and legal pages."""
from __future__ import annotations

from flask import abort, render_template

from ..logging_service import log_manager
from . import bp
from .content import HELP_PAGES, LEGAL_PAGES, ContentPage


def _render(page: ContentPage | None, section: str):
    if page is None:
        abort(404)
    log_manager.record(
        component="Content",
        action="view",
        title=f"{page.title} viewed",
        user_summary=f"{section.capitalize()} page displayed.",
        technical_details=f"pages.{section} rendered slug={page.slug}",
    )
    return render_template(
        "pages/content.html",
        title=f"{page.title} — Storefront",
        page=page,
        section=section,
        active_nav=section,
    )


@bp.route("/help/<slug>")
def help_page(slug: str):
    return _render(HELP_PAGES.get(slug), "help")


@bp.route("/legal/<slug>")
def legal_page(slug: str):
    return _render(LEGAL_PAGES.get(slug), "legal")
