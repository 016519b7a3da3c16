"""Routes for signing in, registering and signing out."""
from __future__ import annotations

from flask import redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..logging_service import log_manager
from . import bp
from .services import AuthenticationError, RegistrationError, authenticate, register_user
from .session import ANONYMOUS, Loading, session_manager


def _render_auth_page(feedback: dict[str, str] | None = None, *, active_tab: str = "login"):
    return render_template(
        "auth/auth.html",
        title="Storefront — Sign in",
        feedback=feedback,
        active_tab=active_tab,
        form=request.form,
        active_nav="auth",
    )


@bp.route("/auth")
def auth_page():
    """Render the sign-in and registration forms."""

    if session_manager.current().is_authenticated:
        return redirect(url_for("index.home"))

    log_manager.record(
        component="Auth",
        action="view",
        title="Sign-in page opened",
        user_summary="Sign-in and registration forms displayed.",
        technical_details="auth.auth_page rendered for an unauthenticated session.",
    )
    return _render_auth_page()


@bp.route("/auth/login", methods=["POST"])
def login():
    """Verify credentials and bind the account to the session."""

    store = session_manager.current()
    previous = store.state
    store.begin_loading()
    try:
        user = authenticate(request.form.get("username", ""), request.form.get("password", ""))
    except AuthenticationError as exc:
        store.set_state(ANONYMOUS if isinstance(previous, Loading) else previous)
        log_manager.record(
            component="Auth",
            action="login",
            level="warn",
            result="rejected",
            title="Sign-in rejected",
            user_summary="A sign-in attempt used unknown credentials.",
            technical_details=f"auth.login rejected username={request.form.get('username', '')!r}: {exc}",
        )
        return _render_auth_page({"type": "error", "message": str(exc)})
    except Exception:
        store.set_state(ANONYMOUS if isinstance(previous, Loading) else previous)
        raise

    session_manager.sign_in(user)
    return redirect(url_for("index.home"))


@bp.route("/auth/register", methods=["POST"])
def register():
    """Create an account and sign it in."""

    form = request.form
    try:
        user = register_user(
            username=form.get("username", ""),
            email=form.get("email", ""),
            password=form.get("password", ""),
            confirm_password=form.get("confirm_password", ""),
            full_name=form.get("full_name"),
        )
    except RegistrationError as exc:
        return _render_auth_page({"type": "error", "message": str(exc)}, active_tab="register")
    except SQLAlchemyError as exc:
        db.session.rollback()
        log_manager.record(
            component="Auth",
            action="register",
            level="error",
            result="error",
            title="Registration failed",
            user_summary="The account could not be saved. Try again shortly.",
            technical_details=f"auth.register raised {exc.__class__.__name__}: {exc}",
        )
        return _render_auth_page(
            {"type": "error", "message": "We were unable to create your account. Try again."},
            active_tab="register",
        )

    log_manager.record(
        component="Auth",
        action="register",
        title="Account registered",
        user_summary=f"New account {user.username} created.",
        technical_details=f"auth.register persisted user_id={user.id}",
    )
    session_manager.sign_in(user)
    return redirect(url_for("index.home"))


@bp.route("/auth/logout", methods=["POST"])
def logout():
    """Sign the current account out."""

    session_manager.sign_out()
    return redirect(url_for("index.home"))
