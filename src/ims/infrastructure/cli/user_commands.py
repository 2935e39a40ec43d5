"""CLI commands for user accounts (ADMIN only)."""

from __future__ import annotations

import click

from ims.domain.exceptions import DomainException
from ims.domain.model.user import Role
from ims.infrastructure.cli.context import CliState, pass_state

_ROLE_CHOICE = click.Choice([r.value for r in Role], case_sensitive=False)


@click.command("add")
@click.option("--username", required=True, help="Login name.")
@click.option("--email", required=True, help="Email address.")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True,
              help="Initial password.")
@click.option("--role", type=_ROLE_CHOICE, default=Role.CUSTOMER.value, show_default=True)
@click.option("--full-name", default="", help="Display name.")
@pass_state
def user_add(
    state: CliState, username: str, email: str, password: str, role: str, full_name: str
) -> None:
    """Create a user account."""
    try:
        user = state.services.users.create(
            username, email, password, Role(role.upper()), full_name, actor=state.actor
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User {user.id} '{user.username}' created ({user.role.value})")


@click.command("list")
@pass_state
def user_list(state: CliState) -> None:
    """List user accounts."""
    try:
        users = state.services.users.list_all(actor=state.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not users:
        click.echo("No users found.")
        return
    for u in users:
        flag = "" if u.enabled else " (disabled)"
        click.echo(f"{u.id}  {u.username:<16} {u.email:<28} {u.role.value}{flag}")


@click.command("toggle")
@click.option("--id", "user_id", required=True, help="User ID.")
@pass_state
def user_toggle(state: CliState, user_id: str) -> None:
    """Enable a disabled account or disable an enabled one."""
    try:
        user = state.services.users.toggle_enabled(user_id, actor=state.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User {user.username} {'enabled' if user.enabled else 'disabled'}")


@click.command("change-password")
@click.option("--id", "user_id", required=True, help="User ID.")
@click.option("--current", prompt=True, hide_input=True, help="Current password.")
@click.option("--new", "new_password", prompt=True, hide_input=True,
              confirmation_prompt=True, help="New password.")
@pass_state
def user_change_password(
    state: CliState, user_id: str, current: str, new_password: str
) -> None:
    """Change a user's password."""
    try:
        state.services.users.change_password(
            user_id, current, new_password, actor=state.actor
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Password changed")


@click.command("reset-password")
@click.option("--id", "user_id", required=True, help="User ID.")
@pass_state
def user_reset_password(state: CliState, user_id: str) -> None:
    """Replace a user's password with a random one."""
    try:
        password = state.services.users.reset_password(user_id, actor=state.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"New password: {password}")


@click.command("delete")
@click.option("--id", "user_id", required=True, help="User ID.")
@pass_state
def user_delete(state: CliState, user_id: str) -> None:
    """Delete a user account."""
    try:
        state.services.users.delete(user_id, actor=state.actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"User {user_id} deleted")
