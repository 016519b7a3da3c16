"""Configuration-driven shortcut bar for the back-office."""
from __future__ import annotations

from typing import Any, Callable, Mapping

from ..auth.guard import RenderPage, evaluate_guard
from ..auth.session import Authenticated, SessionState


def build_quick_nav(
    state: SessionState,
    config: Mapping[str, Any],
    url_for: Callable[..., str],
) -> list[dict[str, str]]:
    """Return shortcut links, or nothing unless an administrator could open the admin pages."""

    if not config.get("ADMIN_QUICK_NAV_ENABLED", False):
        return []
    if not isinstance(state, Authenticated) or not state.user.is_admin:
        return []
    links = []
    for label, endpoint in config.get("ADMIN_QUICK_NAV_LINKS", ()):
        if isinstance(evaluate_guard(state, endpoint), RenderPage):
            links.append({"label": label, "href": url_for(endpoint)})
    return links
