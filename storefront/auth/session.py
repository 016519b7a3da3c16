"""Observable per-visitor session state.

Every visitor owns one :class:`SessionStore`. All of that visitor's requests
read the same store, so guarded pages requested at the same time always see
the same state. The store moves between three states:

* ``Loading`` - the session has not been resolved yet;
* ``Authenticated(user)`` - a signed-in account;
* ``Anonymous`` - resolved, nobody signed in.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Callable, ClassVar, Optional, Union
from uuid import uuid4

from flask import current_app, g, has_app_context
from flask import session as cookie_session
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..logging_service import log_manager
from .models import User

SESSION_ID_KEY = "sid"
USER_ID_KEY = "user_id"


def _now() -> datetime:
    """Return the current UTC timestamp."""

    return datetime.now(UTC)


@dataclass(frozen=True)
class SessionUser:
    """Immutable snapshot of the signed-in account."""

    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    is_admin: bool = False

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            is_admin=bool(user.is_admin),
        )

    @property
    def display_name(self) -> str:
        return self.full_name or self.username


@dataclass(frozen=True)
class Loading:
    is_loading: ClassVar[bool] = True
    is_authenticated: ClassVar[bool] = False


@dataclass(frozen=True)
class Authenticated:
    user: SessionUser

    is_loading: ClassVar[bool] = False
    is_authenticated: ClassVar[bool] = True


@dataclass(frozen=True)
class Anonymous:
    is_loading: ClassVar[bool] = False
    is_authenticated: ClassVar[bool] = False


SessionState = Union[Loading, Authenticated, Anonymous]
SESSION_STATE_TYPES = (Loading, Authenticated, Anonymous)

LOADING = Loading()
ANONYMOUS = Anonymous()

Listener = Callable[["SessionStore", SessionState, SessionState], None]


class SessionStore:
    """Hold one visitor's session state and notify subscribers of changes."""

    def __init__(self, session_id: str, state: SessionState = LOADING) -> None:
        self.session_id = session_id
        self._state: SessionState = state
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self.loading_since: Optional[datetime] = _now() if isinstance(state, Loading) else None
        self.last_seen: datetime = _now()

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def is_authenticated(self) -> bool:
        return self.state.is_authenticated

    @property
    def user(self) -> Optional[SessionUser]:
        state = self.state
        return state.user if isinstance(state, Authenticated) else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener(store, previous, current)``; return an unsubscribe callable."""

        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def set_state(
        self, state: SessionState, *, expected: Optional[SessionState] = None
    ) -> bool:
        """Move to ``state``; return False when nothing changed.

        When ``expected`` is given the transition only happens if the store is
        still in that state.
        """

        if not isinstance(state, SESSION_STATE_TYPES):
            raise TypeError(f"Unsupported session state {state!r}")

        with self._lock:
            previous = self._state
            if expected is not None and previous != expected:
                return False
            if previous == state:
                return False
            self._state = state
            self.loading_since = _now() if isinstance(state, Loading) else None
            listeners = list(self._listeners)

        for listener in listeners:
            listener(self, previous, state)
        return True

    def begin_loading(self) -> bool:
        return self.set_state(LOADING)

    def login(self, user: SessionUser) -> bool:
        return self.set_state(Authenticated(user))

    def logout(self) -> bool:
        return self.set_state(ANONYMOUS)

    def touch(self) -> None:
        self.last_seen = _now()

    def idle_for(self, now: Optional[datetime] = None) -> timedelta:
        return (now or _now()) - self.last_seen

    def loading_expired(self, timeout: float) -> bool:
        with self._lock:
            if not isinstance(self._state, Loading) or self.loading_since is None:
                return False
            return _now() - self.loading_since >= timedelta(seconds=timeout)

    def expire_loading(self, timeout: float) -> bool:
        """Settle a store that has been loading for too long as anonymous."""

        if not self.loading_expired(timeout):
            return False
        return self.set_state(ANONYMOUS, expected=LOADING)


class SessionRegistry:
    """Thread-safe mapping of session ids to their stores.

    Stores untouched for ``idle_timeout`` seconds are pruned whenever a new
    store is created, and the least recently seen stores are evicted once the
    registry holds ``max_size`` entries. Either bound may be ``None``.
    """

    def __init__(
        self, idle_timeout: Optional[float] = None, max_size: Optional[int] = None
    ) -> None:
        self.idle_timeout = idle_timeout
        self.max_size = max_size
        self._stores: dict[str, SessionStore] = {}
        self._lock = threading.Lock()

    def get(self, session_id: str) -> Optional[SessionStore]:
        with self._lock:
            return self._stores.get(session_id)

    def get_or_create(self, session_id: str) -> tuple[SessionStore, bool]:
        with self._lock:
            store = self._stores.get(session_id)
            if store is not None:
                store.touch()
                return store, False
            self._prune_locked()
            if self.max_size is not None:
                while self._stores and len(self._stores) >= self.max_size:
                    oldest = min(self._stores.values(), key=lambda item: item.last_seen)
                    del self._stores[oldest.session_id]
            store = SessionStore(session_id)
            self._stores[session_id] = store
            return store, True

    def prune(self) -> int:
        """Drop idle stores; return how many were removed."""

        with self._lock:
            return self._prune_locked()

    def _prune_locked(self) -> int:
        if self.idle_timeout is None:
            return 0
        now = _now()
        limit = timedelta(seconds=self.idle_timeout)
        idle = [key for key, store in self._stores.items() if store.idle_for(now) >= limit]
        for key in idle:
            del self._stores[key]
        return len(idle)

    def discard(self, session_id: str) -> None:
        with self._lock:
            self._stores.pop(session_id, None)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._stores

    def __len__(self) -> int:
        with self._lock:
            return len(self._stores)


def _log_transition(store: SessionStore, previous: SessionState, current: SessionState) -> None:
    """Record sign-in and sign-out transitions."""

    if not has_app_context():
        return
    if isinstance(current, Authenticated):
        log_manager.record(
            component="Session",
            action="sign-in",
            title="Session authenticated",
            user_summary=f"{current.user.username} is now signed in.",
            technical_details=(
                f"session {store.session_id[:8]} moved from"
                f" {type(previous).__name__} to Authenticated(user_id={current.user.id})"
            ),
        )
    elif isinstance(previous, Authenticated):
        log_manager.record(
            component="Session",
            action="sign-out",
            title="Session ended",
            user_summary=f"{previous.user.username} is no longer signed in.",
            technical_details=(
                f"session {store.session_id[:8]} moved from Authenticated"
                f" to {type(current).__name__}"
            ),
        )


class SessionManager:
    """Resolve the visitor's :class:`SessionStore` for each request."""

    def __init__(self) -> None:
        self.app = None
        self._listeners: list[Listener] = [_log_transition]

    def init_app(self, app) -> None:
        """Attach a fresh registry to the Flask app."""
        self.app = app
        app.extensions["session_registry"] = SessionRegistry(
            idle_timeout=app.config.get("SESSION_IDLE_TIMEOUT"),
            max_size=app.config.get("SESSION_REGISTRY_LIMIT"),
        )
        app.before_request(self._bind_request)

    def subscribe(self, listener: Listener) -> None:
        """Subscribe ``listener`` to every store created from now on."""
        self._listeners.append(listener)

    @property
    def registry(self) -> SessionRegistry:
        return current_app.extensions["session_registry"]

    def store_for(self, session_id: str) -> Optional[SessionStore]:
        return self.registry.get(session_id)

    def current(self) -> SessionStore:
        """Return the store for the visitor behind the active request."""

        store = g.get("session_store")
        if store is None:
            store = self._prepare_request()
        return store

    def current_user(self) -> Optional[SessionUser]:
        return self.current().user

    def _bind_request(self) -> None:
        self._prepare_request()

    def _prepare_request(self) -> SessionStore:
        session_id = cookie_session.get(SESSION_ID_KEY)
        if not session_id:
            session_id = uuid4().hex
            cookie_session[SESSION_ID_KEY] = session_id

        store, created = self.registry.get_or_create(session_id)
        if created:
            for listener in self._listeners:
                store.subscribe(listener)
            self._settle(store)
        elif store.expire_loading(current_app.config.get("SESSION_LOADING_TIMEOUT", 10)):
            log_manager.record(
                component="Session",
                action="loading-timeout",
                level="warn",
                result="warn",
                title="Session check timed out",
                user_summary="A pending sign-in did not finish in time; the visitor is treated as signed out.",
                technical_details=f"session {session_id[:8]} stayed in Loading past the timeout.",
            )

        g.session_store = store
        return store

    def _settle(self, store: SessionStore) -> None:
        """Resolve a loading store from the signed cookie."""

        state: SessionState = ANONYMOUS
        user_id = cookie_session.get(USER_ID_KEY)
        if user_id is not None:
            try:
                user = db.session.get(User, user_id)
            except SQLAlchemyError as exc:
                db.session.rollback()
                user = None
                log_manager.record(
                    component="Session",
                    action="resolve",
                    level="error",
                    result="error",
                    title="Session lookup failed",
                    user_summary="The visitor's sign-in could not be restored and was treated as signed out.",
                    technical_details=f"User lookup raised {exc.__class__.__name__}: {exc}",
                )
            if user is not None:
                state = Authenticated(SessionUser.from_user(user))
            else:
                cookie_session.pop(USER_ID_KEY, None)
        store.set_state(state, expected=LOADING)

    def sign_in(self, user: User) -> SessionStore:
        """Bind ``user`` to the visitor's cookie and store."""

        store = self.current()
        cookie_session[USER_ID_KEY] = user.id
        store.login(SessionUser.from_user(user))
        return store

    def sign_out(self) -> SessionStore:
        """Sign the visitor out and forget their store."""

        store = self.current()
        cookie_session.pop(USER_ID_KEY, None)
        store.logout()
        self.registry.discard(store.session_id)
        cookie_session.pop(SESSION_ID_KEY, None)
        return store


session_manager = SessionManager()
