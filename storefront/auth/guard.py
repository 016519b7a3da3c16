"""Route guard that keeps signed-out visitors away from protected pages."""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Mapping, Optional, Union

from flask import Flask, abort, current_app, make_response, redirect, render_template, request

from ..logging_service import log_manager
from .session import Anonymous, Authenticated, Loading, SessionState, SessionUser, session_manager

DEFAULT_AUTH_PATH = "/auth"


@dataclass(frozen=True)
class ShowLoading:
    """The session is still resolving; show an indicator and wait."""


@dataclass(frozen=True)
class RedirectTo:
    location: str
    replace: bool = True


@dataclass(frozen=True)
class RenderPage:
    endpoint: Optional[str]
    params: Mapping[str, Any] = field(default_factory=dict)


GuardOutcome = Union[ShowLoading, RedirectTo, RenderPage]


def evaluate_guard(
    state: SessionState,
    endpoint: Optional[str],
    params: Optional[Mapping[str, Any]] = None,
    *,
    auth_path: str = DEFAULT_AUTH_PATH,
) -> GuardOutcome:
    """Decide what a guarded route should do for ``state``."""

    if isinstance(state, Loading):
        return ShowLoading()
    if isinstance(state, Anonymous):
        return RedirectTo(auth_path)
    if isinstance(state, Authenticated):
        return RenderPage(endpoint, dict(params or {}))
    raise TypeError(f"Unsupported session state {state!r}")


def _no_store(response):
    response.headers["Cache-Control"] = "no-store"
    return response


def guarded(view: Callable[..., Any]) -> Callable[..., Any]:
    """Only run ``view`` for authenticated sessions."""

    @wraps(view)
    def wrapper(**view_args: Any):
        config = current_app.config
        store = session_manager.current()
        outcome = evaluate_guard(
            store.state,
            request.endpoint,
            view_args,
            auth_path=config.get("AUTH_PATH", DEFAULT_AUTH_PATH),
        )

        if isinstance(outcome, ShowLoading):
            response = make_response(
                render_template("guard/loading.html", title="Checking your session"), 200
            )
            response.headers["Refresh"] = str(config.get("GUARD_LOADING_REFRESH", 1))
            return _no_store(response)

        if isinstance(outcome, RedirectTo):
            log_manager.record(
                component="Guard",
                action="redirect",
                level="warn",
                result="redirect",
                title="Protected page requires sign-in",
                user_summary="A signed-out visitor was sent to the sign-in page.",
                technical_details=(
                    f"{request.method} {request.path} ({request.endpoint})"
                    f" redirected to {outcome.location}"
                ),
            )
            return _no_store(redirect(outcome.location, code=302))

        return _no_store(make_response(view(**outcome.params)))

    wrapper.guarded = True
    return wrapper


def require_admin(component: str = "Admin") -> SessionUser:
    """Abort with 403 unless the signed-in account is an administrator.

    Call it inside a guarded view: the guard settles who the visitor is, this
    settles what they may see.
    """

    user = session_manager.current_user()
    if user is None or not user.is_admin:
        log_manager.record(
            component=component,
            action="authorize",
            level="warn",
            result="forbidden",
            title="Administrator access refused",
            user_summary="A non-administrator tried to open a back-office page.",
            technical_details=(
                f"{request.method} {request.path} refused for"
                f" user_id={getattr(user, 'id', None)}"
            ),
        )
        abort(403)
    return user


def is_guarded(view: Callable[..., Any]) -> bool:
    return bool(getattr(view, "guarded", False))


def guarded_rules(app: Flask) -> list:
    """Return the URL rules whose views sit behind the guard."""

    return [
        rule
        for rule in app.url_map.iter_rules()
        if is_guarded(app.view_functions.get(rule.endpoint))
    ]
