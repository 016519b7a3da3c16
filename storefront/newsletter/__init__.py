"""Newsletter sign-up blueprint."""
from flask import Blueprint

bp = Blueprint(
    "newsletter",
    __name__,
    template_folder="templates",
)

from . import routes  # noqa: E402,F401
