"""Full Fuel CLI application using Typer.

This module provides command-line utilities for the Full Fuel backend:
secret generation for deployment configuration, running the API server
and promoting a user to admin.
"""

import asyncio
import secrets

import typer
from rich.console import Console

from fullfuel_auth import AuthError
from fullfuel_identity import UserRole
from fullfuel_identity.application.commands import UpdateUserRoleCommand
from fullfuel_identity.domain.user import UserNotFoundError
from fullfuel_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
)

app = typer.Typer(
    name="fullfuel",
    help="Full Fuel TV backend CLI",
    no_args_is_help=True,
)
console = Console()


# Create secrets subcommand group
secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

# Create admin subcommand group
admin_app = typer.Typer(
    name="admin",
    help="User administration",
    no_args_is_help=True,
)
app.add_typer(admin_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for Full Fuel configuration.

    Generates the secrets the server needs:
    - JWT_SECRET_KEY: Secret for signing session tokens
    - POSTGRES_PASSWORD: Database password

    Copy the output to your .env file.
    """
    console.print("\n[bold green]Full Fuel Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    # Generate JWT secret (64 bytes is plenty for HS256)
    jwt_secret = secrets.token_urlsafe(64)
    console.print(f"[cyan]JWT_SECRET_KEY[/cyan]={jwt_secret}")

    # Generate database password (32 bytes = strong random password)
    db_password = secrets.token_urlsafe(32)
    console.print(f"[cyan]POSTGRES_PASSWORD[/cyan]={db_password}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]⚠  Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]GOOGLE_CLIENT_ID comes from the Google Cloud console and is "
        "not generated here.[/dim]\n"
    )


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Bind address (default: API_HOST)"),
    port: int | None = typer.Option(None, help="Port (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    from fullfuel.presentation.api.config import get_api_settings

    settings = get_api_settings()
    uvicorn.run(
        "fullfuel.presentation.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_config=None,
    )


async def _promote(email: str) -> UserRole:
    from fullfuel.presentation.api.config import get_api_settings
    from fullfuel.presentation.api.dependencies import (
        build_engine,
        build_session_maker,
        create_tables,
    )

    engine = build_engine(get_api_settings())
    try:
        await create_tables(engine)
        async with build_session_maker(engine)() as session:
            repo = UserRepositorySQLAlchemy(session)
            user = await repo.find_by_email(email)
            if user is None:
                raise UserNotFoundError(email)

            command = UpdateUserRoleCommand(user_repository=repo)
            user = await command.execute(user_id=user.id, new_role=UserRole.ADMIN)
            await session.commit()
            return user.role
    finally:
        await engine.dispose()


@admin_app.command("promote")
def promote(email: str = typer.Argument(..., help="Email of the user")) -> None:
    """Give an existing user the admin role."""
    try:
        role = asyncio.run(_promote(email))
    except AuthError as e:
        console.print(f"[red]✗[/red] {e.message}")
        raise typer.Exit(code=1) from e

    console.print(f"[green]✓[/green] {email} now has role [bold]{role.value}[/bold]")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
