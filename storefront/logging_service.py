"""Structured, database-backed event log for the storefront.

Every record carries the component and action that produced it plus where it
came from: a correlation id shared by all records of one request, the request
path and the signed-in account.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional
from uuid import uuid4

from flask import current_app, g, has_app_context, has_request_context, request

from .extensions import db
from .models import SystemLog

LOG_LEVELS = ("info", "warn", "error")
MAX_FEED_LIMIT = 200


@dataclass(frozen=True)
class LogRecord:
    """What :meth:`LogManager.record` wrote."""

    component: str
    action: str
    level: str
    result: str
    title: str
    user_summary: str
    technical_details: str
    correlation_id: str
    request_path: Optional[str]
    user_id: Optional[int]
    environment: str


@dataclass(frozen=True)
class _Origin:
    correlation_id: str
    request_path: Optional[str]
    user_id: Optional[int]


class LogManager:
    """Write and query storefront events."""

    def __init__(self) -> None:
        self.app = None
        self.available_levels = list(LOG_LEVELS)
        self.available_components: list[str] = []

    def init_app(self, app) -> None:
        self.app = app
        self.available_components = []
        app.before_request(self._assign_correlation_id)

    @staticmethod
    def _assign_correlation_id() -> None:
        g.correlation_id = uuid4().hex

    def register_component(self, component: str) -> None:
        if component not in self.available_components:
            self.available_components.append(component)
            self.available_components.sort()

    @property
    def _config(self):
        return current_app.config if has_app_context() else self.app.config

    @staticmethod
    def _origin(correlation_id: Optional[str]) -> _Origin:
        """Work out which request and account an event belongs to."""

        if not has_request_context():
            return _Origin(correlation_id or uuid4().hex, None, None)
        store = g.get("session_store")
        user = store.user if store is not None else None
        return _Origin(
            correlation_id or g.get("correlation_id") or uuid4().hex,
            request.path,
            user.id if user is not None else None,
        )

    def record(
        self,
        *,
        component: str,
        action: str,
        level: str = "info",
        result: str = "success",
        title: str,
        user_summary: str,
        technical_details: str,
        correlation_id: Optional[str] = None,
    ) -> LogRecord:
        """Persist an event and trim the table to ``LOG_RETENTION`` rows."""

        if level not in LOG_LEVELS:
            raise ValueError(f"Unsupported level '{level}'")

        self.register_component(component)
        config = self._config
        origin = self._origin(correlation_id)
        record = LogRecord(
            component=component,
            action=action,
            level=level,
            result=result,
            title=title,
            user_summary=user_summary,
            technical_details=technical_details,
            correlation_id=origin.correlation_id,
            request_path=origin.request_path,
            user_id=origin.user_id,
            environment=config.get("ENVIRONMENT", "development"),
        )
        db.session.add(SystemLog(**record.__dict__))
        self._trim(config.get("LOG_RETENTION", 200))
        db.session.commit()
        return record

    @staticmethod
    def _trim(retention: int) -> None:
        db.session.flush()
        excess = SystemLog.query.count() - retention
        if excess <= 0:
            return
        oldest = (
            db.session.query(SystemLog.id)
            .order_by(SystemLog.timestamp, SystemLog.id)
            .limit(excess)
            .subquery()
        )
        SystemLog.query.filter(SystemLog.id.in_(db.select(oldest.c.id))).delete(
            synchronize_session=False
        )

    def fetch_logs(
        self,
        *,
        level: Optional[str] = None,
        component: Optional[str] = None,
        search: Optional[str] = None,
        user_id: Optional[int] = None,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """Newest events first, optionally filtered."""

        query = SystemLog.query
        if level in LOG_LEVELS:
            query = query.filter_by(level=level)
        if component:
            query = query.filter_by(component=component)
        if user_id is not None:
            query = query.filter_by(user_id=user_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                db.or_(
                    SystemLog.title.ilike(pattern),
                    SystemLog.user_summary.ilike(pattern),
                    SystemLog.technical_details.ilike(pattern),
                    SystemLog.correlation_id.ilike(pattern),
                    SystemLog.request_path.ilike(pattern),
                )
            )
        limit = max(1, min(limit, MAX_FEED_LIMIT))
        rows = query.order_by(SystemLog.timestamp.desc(), SystemLog.id.desc()).limit(limit)
        return [row.serialize() for row in rows]

    def latest_timestamp(self) -> Optional[str]:
        latest = db.session.query(db.func.max(SystemLog.timestamp)).scalar()
        return latest.isoformat(timespec="seconds") if latest else None


log_manager = LogManager()
