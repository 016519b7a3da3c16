"""Routes for reviewing the structured logs."""
from __future__ import annotations

from flask import jsonify, render_template, request

from ..auth.guard import guarded, require_admin
from ..logging_service import log_manager
from . import bp


@bp.route("/")
@guarded
def console():
    """Render the log console."""
    require_admin("Logging")
    log_manager.record(
        component="Logging",
        action="view",
        title="Logging console accessed",
        user_summary="Log console opened for review.",
        technical_details="logging.console rendered the log viewer.",
    )
    return render_template(
        "logs/console.html",
        title="Storefront — Logs",
        logs=log_manager.fetch_logs(limit=50),
        active_nav="logs",
    )


@bp.route("/feed")
@guarded
def feed():
    """Return filtered logs as JSON data."""
    require_admin("Logging")
    level = request.args.get("level")
    component = request.args.get("component")
    search = request.args.get("search")
    limit = request.args.get("limit", type=int) or 50
    user_id = request.args.get("user_id", type=int)
    logs = log_manager.fetch_logs(
        level=level, component=component, search=search, user_id=user_id, limit=limit
    )
    return jsonify(
        {
            "logs": logs,
            "latest": log_manager.latest_timestamp(),
        }
    )
