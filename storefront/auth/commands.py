"""Flask CLI commands for account administration."""
from __future__ import annotations

import click

from . import bp
from .services import AuthenticationError, RegistrationError, promote_admin, register_user


@bp.cli.command("promote-admin")
@click.argument("username")
def promote_admin_command(username: str) -> None:
    """Grant administrator rights to USERNAME."""

    try:
        user = promote_admin(username)
    except AuthenticationError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"{user.username} is now an administrator.")


@bp.cli.command("create-admin")
@click.argument("username")
@click.argument("email")
@click.password_option()
def create_admin_command(username: str, email: str, password: str) -> None:
    """Create a new administrator account."""

    try:
        user = register_user(username=username, email=email, password=password, is_admin=True)
    except RegistrationError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Administrator {user.username} created.")
