"""Small request helpers shared by blueprints."""
from __future__ import annotations

from typing import Optional

from flask import request


def safe_next(field: str = "next") -> Optional[str]:
    """Return the posted local redirect target, ignoring off-site URLs."""

    target = request.form.get(field, "")
    if target.startswith("/") and not target.startswith("//"):
        return target
    return None
