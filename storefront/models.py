"""Database models shared across the storefront."""
from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Optional

from .extensions import db


def utcnow() -> datetime:
    """Naive UTC timestamp for ``DateTime`` columns."""

    return datetime.now(UTC).replace(tzinfo=None)


class SystemLog(db.Model):
    """One structured event written by :class:`~storefront.logging_service.LogManager`.

    Besides the event itself a row remembers where it came from: the request
    path and the signed-in account (if any), so the console can show every
    event a shopper triggered.
    """

    id: int = db.Column(db.Integer, primary_key=True)
    timestamp: datetime = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    component: str = db.Column(db.String(64), nullable=False, index=True)
    action: str = db.Column(db.String(64), nullable=False)
    level: str = db.Column(db.String(16), nullable=False, index=True)
    result: str = db.Column(db.String(32), nullable=False)
    title: str = db.Column(db.String(120), nullable=False)
    user_summary: str = db.Column(db.Text, nullable=False)
    technical_details: str = db.Column(db.Text, nullable=False)
    correlation_id: Optional[str] = db.Column(db.String(36), index=True)
    request_path: Optional[str] = db.Column(db.String(255))
    user_id: Optional[int] = db.Column(db.Integer, index=True)
    environment: str = db.Column(db.String(20), nullable=False, default="development")

    def serialize(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "component": self.component,
            "action": self.action,
            "level": self.level,
            "result": self.result,
            "title": self.title,
            "user_summary": self.user_summary,
            "technical_details": self.technical_details,
            "correlation_id": self.correlation_id,
            "request_path": self.request_path,
            "user_id": self.user_id,
            "environment": self.environment,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<SystemLog {self.level} {self.component}/{self.action} user={self.user_id}>"
