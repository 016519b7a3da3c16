"""Account registration and credential checks."""
from __future__ import annotations

from sqlalchemy import func
from werkzeug.security import check_password_hash, generate_password_hash

from ..extensions import db
from .models import User

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


class RegistrationError(ValueError):
    """Raised when a new account cannot be created."""


class AuthenticationError(ValueError):
    """Raised when submitted credentials do not match an account."""


def find_user_by_username(username: str) -> User | None:
    """Return the account with the given username, ignoring case."""

    if not username:
        return None
    return User.query.filter(func.lower(User.username) == username.strip().lower()).first()


def find_user_by_email(email: str) -> User | None:
    """Return the account with the given email, ignoring case."""

    if not email:
        return None
    return User.query.filter(func.lower(User.email) == email.strip().lower()).first()


def _validate_registration(username: str, email: str, password: str, confirm: str | None) -> None:
    if len(username) < MIN_USERNAME_LENGTH:
        raise RegistrationError(
            f"Username must be at least {MIN_USERNAME_LENGTH} characters."
        )
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise RegistrationError("Please enter a valid email address.")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise RegistrationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )
    if confirm is not None and confirm != password:
        raise RegistrationError("Passwords do not match.")


def register_user(
    *,
    username: str,
    email: str,
    password: str,
    confirm_password: str | None = None,
    full_name: str | None = None,
    is_admin: bool = False,
) -> User:
    """Create and persist a new account."""

    username = (username or "").strip()
    email = (email or "").strip()
    password = password or ""
    _validate_registration(username, email, password, confirm_password)

    if find_user_by_username(username) or find_user_by_email(email):
        raise RegistrationError("Username or email already exists.")

    user = User(
        username=username,
        email=email,
        password_hash=generate_password_hash(password),
        full_name=(full_name or "").strip() or None,
        is_admin=is_admin,
    )
    db.session.add(user)
    db.session.commit()
    return user


def authenticate(username: str, password: str) -> User:
    """Return the account matching the credentials or raise."""

    if not username or not password:
        raise AuthenticationError("Username and password are required.")
    user = find_user_by_username(username)
    if user is None or not check_password_hash(user.password_hash, password):
        raise AuthenticationError("Invalid username or password.")
    return user


def promote_admin(username: str) -> User:
    """Grant administrator rights to an existing account."""

    user = find_user_by_username(username)
    if user is None:
        raise AuthenticationError(f"No account named '{username}'.")
    if not user.is_admin:
        user.is_admin = True
        db.session.add(user)
        db.session.commit()
    return user
