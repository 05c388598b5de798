"""Commands: rolegate init-db / seed - Create tables and default RBAC data."""

import asyncio

import typer
from rich.console import Console
from sqlalchemy.exc import SQLAlchemyError

from rolegate.core.constants import (
    MANAGE_PERMISSIONS,
    MANAGE_ROLES,
    MANAGE_USERS,
    VIEW_DASHBOARD,
)


console = Console()

DEFAULT_PERMISSIONS: dict[str, str] = {
    MANAGE_USERS: "Manage users and assign roles",
    MANAGE_ROLES: "Manage roles and role hierarchy",
    MANAGE_PERMISSIONS: "Manage permissions and assignments",
    VIEW_DASHBOARD: "Access to dashboard",
}

# (name, description, parent name, directly granted codes); parents come first
DEFAULT_ROLES: list[tuple[str, str, str | None, list[str]]] = [
    (
        "admin",
        "Administrator with full system access",
        None,
        [MANAGE_USERS, MANAGE_ROLES, MANAGE_PERMISSIONS, VIEW_DASHBOARD],
    ),
    ("user", "Standard user with basic access", None, [VIEW_DASHBOARD]),
    ("moderator", "Moderator with elevated permissions", "user", []),
]


async def _create_tables() -> None:
    from rolegate.core.database import Base, async_engine

    # Register every table on the metadata
    import rolegate.core.permissions.models  # noqa: F401
    import rolegate.modules.users.models  # noqa: F401

    try:
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await async_engine.dispose()


async def _seed() -> list[tuple[str, str]]:
    from rolegate.core.database import async_engine, async_session_factory
    from rolegate.core.permissions.models import Permission, Role, RolePermission
    from rolegate.modules.permissions.repos import PermissionRepository
    from rolegate.modules.roles.repos import RoleRepository

    created: list[tuple[str, str]] = []

    try:
        async with async_session_factory() as session:
            permission_repo = PermissionRepository(session)
            role_repo = RoleRepository(session)

            permissions: dict[str, Permission] = {}
            for code, description in DEFAULT_PERMISSIONS.items():
                permission = await permission_repo.get_by_code(code)
                if not permission:
                    permission = await permission_repo.create(
                        Permission(code=code, description=description)
                    )
                    created.append(("permission", code))
                permissions[code] = permission

            roles: dict[str, Role] = {}
            for name, description, parent_name, codes in DEFAULT_ROLES:
                role = await role_repo.get_by_name(name)
                if not role:
                    role = await role_repo.create(
                        Role(
                            name=name,
                            description=description,
                            parent_role_id=roles[parent_name].id if parent_name else None,
                        )
                    )
                    created.append(("role", name))
                roles[name] = role

                for code in codes:
                    permission_id = permissions[code].id
                    if not await permission_repo.get_grant(role.id, permission_id):
                        await permission_repo.add_grant(
                            RolePermission(role_id=role.id, permission_id=permission_id)
                        )
                        created.append(("grant", f"{name} -> {code}"))

            await session.commit()
    finally:
        await async_engine.dispose()

    return created


def init_db() -> None:
    """Create all database tables.

    Existing tables are left untouched.
    """
    try:
        asyncio.run(_create_tables())
    except (SQLAlchemyError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    console.print("[green]✓[/green] Database tables created")


def seed() -> None:
    """Create the default permissions and roles.

    Safe to run repeatedly: anything that already exists is kept.
    """
    try:
        with console.status("[bold green]Seeding default roles and permissions..."):
            created = asyncio.run(_seed())
    except (SQLAlchemyError, OSError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None

    if not created:
        console.print("[yellow]Nothing to do:[/yellow] default data already present.")
        return

    for kind, name in created:
        console.print(f"[green]✓[/green] Created {kind} [cyan]{name}[/cyan]")
