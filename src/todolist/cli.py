"""Operator CLI.

Bootstraps a deployment: creates the schema, tenants and the first
administrator of a tenant, and serves the API.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

import pydantic
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from sqlalchemy.ext.asyncio import AsyncSession

from todolist import __version__
from todolist.config import settings
from todolist.core.auth.backend import hash_password
from todolist.core.database import Database
from todolist.core.errors import AppException, ConflictError, NotFoundError
from todolist.core.utils import suggest_subdomain


if TYPE_CHECKING:
    from todolist.modules.tenants.models import Tenant
    from todolist.modules.users.models import User


T = TypeVar("T")

console = Console()

app = typer.Typer(
    name="todolist",
    help="Manage the multi-tenant to-do API.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def build_database() -> Database:
    """Database handle for CLI commands."""
    return Database.from_settings(settings)


def _run(work: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run ``work`` in one committed session, then dispose of the engine."""

    async def runner() -> T:
        database = build_database()
        try:
            async with database.session_factory() as session:
                result = await work(session)
                await session.commit()
                return result
        finally:
            await database.shutdown()

    try:
        return asyncio.run(runner())
    except AppException as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(code=1) from e


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(code=1)


@app.command("init-db")
def init_db(
    drop: bool = typer.Option(
        False, "--drop", help="Drop existing tables first (destroys data)."
    ),
) -> None:
    """Create all tables. Deployments should prefer the migrations."""

    async def runner() -> None:
        database = build_database()
        try:
            if drop:
                await database.drop_schema()
            await database.create_schema()
        finally:
            await database.shutdown()

    asyncio.run(runner())
    console.print("[green]Database schema created.[/green]")


@app.command("create-tenant")
def create_tenant(
    name: str = typer.Argument(..., help="Display name of the tenant."),
    subdomain: str | None = typer.Option(
        None, "--subdomain", "-s", help="Subdomain label. Derived from the name if omitted."
    ),
    primary_color: str | None = typer.Option(
        None, "--color", help="Brand color as #rgb or #rrggbb."
    ),
) -> None:
    """Create a tenant reachable at <subdomain>.<main domain>."""
    from todolist.modules.tenants.repos import TenantRepository  # noqa: PLC0415
    from todolist.modules.tenants.schemas import TenantCreate  # noqa: PLC0415
    from todolist.modules.tenants.services import TenantService  # noqa: PLC0415

    try:
        data = TenantCreate(
            name=name,
            subdomain=subdomain or suggest_subdomain(name),
            primary_color=primary_color,
        )
    except pydantic.ValidationError as e:
        raise _fail(_describe(e)) from e

    async def work(session: AsyncSession) -> "Tenant":
        service = TenantService(TenantRepository(session), session, cache=None)
        return await service.create_tenant(data)

    tenant = _run(work)
    console.print(
        f"[green]Created tenant[/green] [bold]{tenant.name}[/bold] "
        f"at [cyan]{tenant.subdomain}.{settings.main_domain}[/cyan] ({tenant.id})"
    )


@app.command("create-admin")
def create_admin(
    subdomain: str = typer.Argument(..., help="Subdomain of the tenant."),
    email: str = typer.Option(..., "--email", "-e", help="Administrator email."),
    name: str = typer.Option(..., "--name", "-n", help="Administrator display name."),
    password: str = typer.Option(
        ...,
        "--password",
        "-p",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Administrator password.",
    ),
) -> None:
    """Create an ADMIN user inside a tenant."""
    from todolist.modules.tenants.repos import TenantRepository  # noqa: PLC0415
    from todolist.modules.users.models import Role  # noqa: PLC0415
    from todolist.modules.users.repos import UserRepository  # noqa: PLC0415
    from todolist.modules.users.schemas import RegisterRequest  # noqa: PLC0415

    try:
        data = RegisterRequest(email=email, password=password, name=name)
    except pydantic.ValidationError as e:
        raise _fail(_describe(e)) from e

    async def work(session: AsyncSession) -> "User":
        tenant = await TenantRepository(session).get_by_subdomain(subdomain.lower())
        if tenant is None:
            raise NotFoundError(
                f"No tenant with subdomain '{subdomain}'",
                resource="tenant",
                resource_id=subdomain,
            )

        users = UserRepository(session)
        if await users.get_by_email(data.email, tenant.id):
            raise ConflictError(
                f"{data.email} is already registered in '{tenant.subdomain}'",
                error_code="email_exists",
            )

        return await users.create(
            {
                "email": data.email,
                "password_hash": hash_password(data.password),
                "name": data.name,
                "role": Role.ADMIN,
            },
            tenant.id,
        )

    user = _run(work)
    console.print(
        f"[green]Created admin[/green] [bold]{user.email}[/bold] "
        f"in [cyan]{subdomain.lower()}[/cyan] ({user.id})"
    )


@app.command("list-tenants")
def list_tenants() -> None:
    """List all tenants, active or not."""
    from todolist.modules.tenants.repos import TenantRepository  # noqa: PLC0415

    async def work(session: AsyncSession) -> "list[Tenant]":
        return await TenantRepository(session).list_all()

    tenants = _run(work)
    if not tenants:
        console.print("[yellow]No tenants found.[/yellow]")
        return

    table = Table(title="Tenants", show_header=True)
    table.add_column("Subdomain", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("ID", no_wrap=True)
    table.add_column("Status", no_wrap=True)

    for tenant in tenants:
        table.add_row(
            tenant.subdomain,
            tenant.name,
            str(tenant.id),
            "[green]active[/green]" if tenant.is_active else "[red]inactive[/red]",
        )

    console.print()
    console.print(table)
    console.print()


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address."),
    port: int = typer.Option(8000, "--port", help="Bind port."),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes."),
) -> None:
    """Run the API with uvicorn."""
    import uvicorn  # noqa: PLC0415

    uvicorn.run(
        "todolist.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """Multi-tenant to-do API operator CLI."""
    if version:
        console.print(f"[bold cyan]todolist[/bold cyan] version {__version__}")
        raise typer.Exit()


def _describe(error: pydantic.ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in error.errors()
    )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
