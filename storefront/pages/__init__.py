"""Help and legal content blueprint."""
from flask import Blueprint

bp = Blueprint(
    "pages",
    __name__,
    template_folder="templates",
    static_folder="static",
)

from . import routes  # noqa: E402,F401
