"""Database models for newsletter subscribers."""
from __future__ import annotations

from datetime import datetime

from ..extensions import db
from ..models import utcnow


class Subscriber(db.Model):
    id: int = db.Column(db.Integer, primary_key=True)
    email: str = db.Column(db.String(255), nullable=False, unique=True, index=True)
    active: bool = db.Column(db.Boolean, nullable=False, default=True)
    created_at: datetime = db.Column(db.DateTime, default=utcnow, nullable=False)

    def serialize(self) -> dict[str, object]:
        return {
            "id": self.id,
            "email": self.email,
            "active": self.active,
            "created_at": self.created_at.isoformat(timespec="seconds"),
        }
