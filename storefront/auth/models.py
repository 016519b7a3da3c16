"""Database models for storefront accounts."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..extensions import db
from ..models import utcnow


class User(db.Model):
    """A registered shopper or administrator."""

    id: int = db.Column(db.Integer, primary_key=True)
    username: str = db.Column(db.String(64), nullable=False, unique=True, index=True)
    email: str = db.Column(db.String(255), nullable=False, unique=True, index=True)
    password_hash: str = db.Column(db.String(255), nullable=False)
    full_name: Optional[str] = db.Column(db.String(120))
    is_admin: bool = db.Column(db.Boolean, nullable=False, default=False)
    created_at: datetime = db.Column(db.DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.username} admin={self.is_admin}>"
