"""
Recipeshare - CLI Entry Point.

Usage:
    recipeshare serve              Start the web server
    recipeshare health             Check configuration
    recipeshare db                 Check database connection and tables
    recipeshare seed-categories    Insert the default recipe categories
    recipeshare --help             Show help
"""

import logging

import typer
from rich.console import Console

app = typer.Typer(
    name="recipeshare",
    help="Recipeshare - publish, browse and like recipes.",
    add_completion=False,
)
console = Console()

TABLES = [
    "users",
    "categories",
    "ingredients",
    "published_recipes",
    "liked_recipes",
    "followings",
]

DEFAULT_CATEGORIES = [
    "Hommikusöök",
    "Supid",
    "Pearoad",
    "Salatid",
    "Magustoidud",
    "Küpsetised",
    "Joogid",
]


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the web server."""
    import uvicorn
    from recipeshare.config import settings

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    console.print("\n[bold green]Recipeshare[/bold green]")
    console.print(f"Starting server on http://{host}:{port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "recipeshare.web.app:app",
        host=host,
        port=port,
        reload=reload,
    )


@app.command()
def health() -> None:
    """Check system health and configuration."""
    from recipeshare.config import get_settings

    console.print("\n[bold]Recipeshare Health Check[/bold]\n")

    try:
        settings = get_settings()
    except Exception as e:
        console.print(f"\n[red]FAIL Configuration error: {e}[/red]")
        console.print("[dim]Make sure you have a .env file with required variables.[/dim]")
        raise typer.Exit(1)

    console.print("[green]OK[/green] Configuration loaded")
    console.print(f"   Environment: {settings.recipeshare_env}")
    console.print(f"   Log level: {settings.log_level}")
    console.print(f"   Image bucket: {settings.recipe_images_bucket}")

    if settings.supabase_url.startswith("https://"):
        console.print("[green]OK[/green] Supabase URL configured")
    else:
        console.print("[red]FAIL[/red] Supabase URL missing or invalid")
        raise typer.Exit(1)

    if settings.is_production and not settings.session_cookie_secure:
        console.print("[yellow]WARN[/yellow] Session cookies are not marked secure in production")

    console.print("\n[green]All checks passed![/green]")


@app.command()
def db() -> None:
    """Check database connection and schema."""
    from recipeshare.db.client import get_service_client

    console.print("\n[bold]Database Connection Check[/bold]\n")

    client = get_service_client()
    failed = False

    console.print("[bold]Table Status:[/bold]")
    for table in TABLES:
        try:
            result = client.table(table).select("*", count="exact").limit(0).execute()
            console.print(f"  [green]OK[/green] {table}: {result.count} rows")
        except Exception as e:
            failed = True
            console.print(f"  [red]FAIL[/red] {table}: {e}")

    if failed:
        console.print("\n[red]Some tables are missing. Apply migrations/001_recipe_schema.sql.[/red]")
        raise typer.Exit(1)

    console.print("\n[green]Database check complete![/green]")


@app.command("seed-categories")
def seed_categories(
    names: list[str] = typer.Argument(None, help="Category names (defaults to the built-in list)"),
) -> None:
    """Insert recipe categories that do not exist yet."""
    from recipeshare.db.client import get_service_client
    from recipeshare.db.recipes import seed_categories as seed

    inserted = seed(get_service_client(), names or DEFAULT_CATEGORIES)
    console.print(f"[green]OK[/green] {inserted} categories inserted")


@app.command()
def version() -> None:
    """Show version information."""
    from recipeshare import __version__

    console.print(f"Recipeshare version {__version__}")


if __name__ == "__main__":
    app()
