"""Commands: rolegate create-user / grant-role / access - Manage user access."""

import asyncio
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from rolegate.core.errors import AppException, NotFoundError, RoleAlreadyAssignedError
from rolegate.core.permissions.schemas import RoleRecord


console = Console()


async def _create_user(email: str, name: str | None, verified: bool) -> UUID:
    from rolegate.core.database import async_engine, async_session_factory
    from rolegate.modules.roles.repos import RoleRepository
    from rolegate.modules.users.repos import UserRepository
    from rolegate.modules.users.services import UserService

    try:
        async with async_session_factory() as session:
            service = UserService(UserRepository(session), RoleRepository(session))
            user = await service.create_user(email, name=name, email_verified=verified)
            await session.commit()
            return user.id
    finally:
        await async_engine.dispose()


async def _grant_role(email: str, role_name: str) -> None:
    from rolegate.core.database import async_engine, async_session_factory
    from rolegate.modules.roles.repos import RoleRepository
    from rolegate.modules.users.repos import UserRepository
    from rolegate.modules.users.services import UserService

    try:
        async with async_session_factory() as session:
            role_repo = RoleRepository(session)
            service = UserService(UserRepository(session), role_repo)

            user = await service.get_user_by_email(email)
            role = await role_repo.get_by_name(role_name)
            if not role:
                raise NotFoundError("Role not found", resource="role", resource_id=role_name)

            await service.assign_role(user.id, role.id)
            await session.commit()
    finally:
        await async_engine.dispose()


async def _load_access(email: str) -> tuple[list[RoleRecord], set[str]]:
    from rolegate.core.database import async_engine, async_session_factory
    from rolegate.core.permissions.evaluator import AccessEvaluator
    from rolegate.core.permissions.store import SQLAlchemyPermissionStore
    from rolegate.modules.roles.repos import RoleRepository
    from rolegate.modules.users.repos import UserRepository
    from rolegate.modules.users.services import UserService

    try:
        async with async_session_factory() as session:
            service = UserService(UserRepository(session), RoleRepository(session))
            user = await service.get_user_by_email(email)

            evaluator = AccessEvaluator(SQLAlchemyPermissionStore(session))
            roles = await evaluator.get_user_roles(user.id)
            permissions = await evaluator.get_user_permissions(user.id)
            return roles, permissions
    finally:
        await async_engine.dispose()


def create_user(
    email: str = typer.Argument(..., help="Email of the user to register"),
    name: str | None = typer.Option(None, "--name", "-n", help="Display name"),
    verified: bool = typer.Option(
        False, "--verified", help="Mark the email as verified"
    ),
) -> None:
    """Register a user that was authenticated upstream.

    Needed before roles can be granted to them from the command line.
    """
    try:
        user_id = asyncio.run(_create_user(email, name, verified))
    except (AppException, SQLAlchemyError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    console.print(f"[green]✓[/green] Created user [cyan]{email}[/cyan] ({user_id})")


def grant_role(
    email: str = typer.Argument(..., help="Email of the user"),
    role: str = typer.Argument(..., help="Name of the role to grant"),
) -> None:
    """Grant a role directly to a user.

    Use it to bootstrap the first administrator.
    """
    try:
        asyncio.run(_grant_role(email, role))
    except RoleAlreadyAssignedError:
        console.print(
            f"[yellow]Warning:[/yellow] {email} already has role '{role}'."
        )
        raise typer.Exit(0) from None
    except (AppException, SQLAlchemyError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    console.print(f"[green]✓[/green] Granted [cyan]{role}[/cyan] to {email}")


def access(
    email: str = typer.Argument(..., help="Email of the user"),
) -> None:
    """Show a user's direct roles and effective permissions."""
    try:
        roles, permissions = asyncio.run(_load_access(email))
    except (AppException, SQLAlchemyError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    roles_table = Table(title=f"Roles for {email}", show_header=True)
    roles_table.add_column("Role", style="cyan", no_wrap=True)
    roles_table.add_column("Description")
    for role in roles:
        roles_table.add_row(role.name, role.description or "")

    permissions_table = Table(title="Effective permissions", show_header=True)
    permissions_table.add_column("Code", style="green", no_wrap=True)
    for code in sorted(permissions):
        permissions_table.add_row(code)

    console.print()
    if roles:
        console.print(roles_table)
    else:
        console.print("[yellow]No roles assigned.[/yellow]")
    console.print()
    console.print(permissions_table)
    console.print()
