"""Authentication and session blueprint."""
from flask import Blueprint

bp = Blueprint(
    "auth",
    __name__,
    template_folder="templates",
    static_folder="static",
)

from . import commands, routes  # noqa: E402,F401
