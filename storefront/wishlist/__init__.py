"""Saved-for-later products blueprint."""
from flask import Blueprint

bp = Blueprint(
    "wishlist",
    __name__,
    template_folder="templates",
)

from . import routes  # noqa: E402,F401
