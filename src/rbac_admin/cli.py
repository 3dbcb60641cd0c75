"""rbac-admin command line interface."""

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from rbac_admin import __version__
from rbac_admin.config import settings
from rbac_admin.core.errors import AppException
from rbac_admin.core.logging import configure_logging
from rbac_admin.core.permissions.menu import MenuNode


if TYPE_CHECKING:
    from rbac_admin.seeding import SeedCatalog


console = Console()

app = typer.Typer(
    name="rbac-admin",
    help="Seed the access catalog and inspect user sessions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """rbac-admin - Access catalog maintenance."""
    if version:
        console.print(f"[bold cyan]rbac-admin[/bold cyan] version {__version__}")
        raise typer.Exit()


def _load(file: Path | None) -> "SeedCatalog":
    from rbac_admin.seeding import load_seed_file

    path = file or Path(settings.seed_file)
    try:
        return load_seed_file(path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command(name="check-catalog")
def check_catalog(
    file: Path | None = typer.Option(
        None, "--file", "-f", help="Seed file to check (defaults to SEED_FILE)."
    ),
) -> None:
    """Validate a seed file without touching the database.

    Checks permission parent chains, group grants, menu permissions and
    parents, and user group references.
    """
    from rbac_admin.seeding import check_seed

    catalog = _load(file)
    problems = check_seed(catalog)

    if not problems:
        console.print(
            f"[green]✓[/green] Catalog is consistent: "
            f"{len(catalog.permissions)} permissions, {len(catalog.groups)} groups, "
            f"{len(catalog.menus)} menus, {len(catalog.users)} users"
        )
        return

    table = Table(title="Catalog Problems", show_header=True)
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Problem", style="red")
    for i, problem in enumerate(problems, start=1):
        table.add_row(str(i), problem)

    console.print()
    console.print(table)
    console.print()
    raise typer.Exit(1)


async def _seed(file: Path | None, create_tables: bool) -> None:
    from rbac_admin import models  # noqa: F401
    from rbac_admin.core.database import Base, async_engine, async_session_factory
    from rbac_admin.seeding import apply_seed

    catalog = _load(file)
    try:
        if create_tables:
            async with async_engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

        async with async_session_factory() as session:
            report = await apply_seed(session, catalog)
            await session.commit()
    finally:
        await async_engine.dispose()

    table = Table(title="Seed Applied", show_header=True)
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Created", style="green", justify="right")
    table.add_column("Updated", justify="right")
    for kind in ("permissions", "groups", "menus", "users"):
        table.add_row(kind, str(report.created[kind]), str(report.updated[kind]))

    console.print()
    console.print(table)
    console.print()


@app.command()
def seed(
    file: Path | None = typer.Option(
        None, "--file", "-f", help="Seed file to apply (defaults to SEED_FILE)."
    ),
    create_tables: bool = typer.Option(
        False, "--create-tables", help="Create missing tables first."
    ),
) -> None:
    """Create or update permissions, groups, menus and users from a seed file."""
    try:
        asyncio.run(_seed(file, create_tables))
    except AppException as e:
        console.print(f"[red]Error:[/red] {e.message}")
        for problem in e.details.get("problems", []):
            console.print(f"  [red]•[/red] {problem}")
        raise typer.Exit(1) from e


def _add_nodes(branch: Tree, nodes: tuple[MenuNode, ...]) -> None:
    for node in nodes:
        child = branch.add(
            f"[bold]{node.name}[/bold] [dim]{node.path}[/dim] "
            f"[cyan]{node.permission_code}[/cyan]"
        )
        _add_nodes(child, node.children)


async def _session(email: str) -> None:
    from rbac_admin.core.database import async_engine, async_session_factory
    from rbac_admin.core.permissions.repos import AccessRepository
    from rbac_admin.core.permissions.session import SessionState
    from rbac_admin.modules.users.repos import UserRepository

    try:
        async with async_session_factory() as db:
            user = await UserRepository(db).get_by_email(email)
            if user is None:
                console.print(f"[red]Error:[/red] No user with email {email}")
                raise typer.Exit(1)

            state = SessionState(user.id)
            view = await state.refresh(AccessRepository(db))
    finally:
        await async_engine.dispose()

    console.print(
        f"\n[bold cyan]{view.user.display_name}[/bold cyan] <{view.user.email}>\n"
    )

    table = Table(title="Effective Permissions", show_header=False)
    table.add_column("Code", style="green")
    for code in view.effective_permissions:
        table.add_row(code)
    console.print(table)

    menu = Tree("[bold]Menu[/bold]")
    _add_nodes(menu, view.menu_tree)
    console.print()
    console.print(menu)
    console.print()


@app.command()
def session(
    email: str = typer.Argument(..., help="Email of the user to inspect."),
) -> None:
    """Show a user's effective permissions and menu tree."""
    try:
        asyncio.run(_session(email))
    except AppException as e:
        console.print(f"[red]Error:[/red] {e.message} ({e.error_code})")
        raise typer.Exit(1) from e


def main() -> None:
    """Entry point for the CLI."""
    configure_logging(settings.log_level)
    app()


if __name__ == "__main__":
    main()
