"""
UniPlace Command Line Interface

Provides CLI commands for operating the placement engine: database setup,
eligibility checks, applications, recruiter status changes and notifications.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="uniplace",
    help="Campus placement eligibility and application tracking CLI",
    add_completion=False,
)
console = Console()


def _connect():
    """Start logging and return the placement service, exiting if MongoDB is down."""
    from uniplace.data.database import get_database_manager
    from uniplace.services import get_placement_service
    from uniplace.utils.logger import setup_logging

    setup_logging()

    if not get_database_manager().check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB. Run 'init-db' first.[/red]")
        raise typer.Exit(1)

    return get_placement_service()


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(1)


def _finish(service) -> None:
    # Let queued notifications land before the process exits
    service.dispatcher.drain(timeout=5.0)
    service.dispatcher.shutdown()


@app.command()
def version():
    """Show application version."""
    from uniplace import __app_name__, __version__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show system information and configuration."""
    from uniplace.utils.config import get_settings

    settings = get_settings()

    table = Table(title="UniPlace Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Database Host", settings.database.host)
    table.add_row("Database Name", settings.database.name)
    table.add_row("Require Resume", str(settings.eligibility.require_resume))
    table.add_row("Enforce Deadline", str(settings.eligibility.enforce_deadline))
    table.add_row("Enforce Transitions", str(settings.lifecycle.enforce_transitions))
    table.add_row("Notifications", str(settings.notifications.enabled))
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def init_db():
    """Initialize the database with required collections and indexes."""
    import asyncio

    from uniplace.data.database import get_database_manager
    from uniplace.utils.logger import setup_logging

    setup_logging()
    console.print("[yellow]Initializing database...[/yellow]")

    db_manager = get_database_manager()

    console.print("  Checking database connection...")
    if not db_manager.check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB.[/red]")
        console.print("[dim]Make sure MongoDB is running and connection settings are correct.[/dim]")
        raise typer.Exit(1)

    console.print("  [green]✓[/green] Connected to MongoDB")

    console.print("  Creating indexes...")
    try:
        asyncio.run(db_manager.ensure_indexes())
    except Exception as e:
        console.print(f"[red]Error initializing database: {e}[/red]")
        raise typer.Exit(1)
    finally:
        db_manager.close_all()
    console.print("  [green]✓[/green] Indexes created")

    console.print("\n[green]Database initialized successfully![/green]")


@app.command()
def classify_branch(
    branch: str = typer.Argument(..., help="Free-text branch, e.g. 'B.Tech CSE'"),
):
    """Show how a branch string is classified."""
    from uniplace.core.eligibility import categories_for, classify

    category = classify(branch)
    if category is None:
        console.print(f"[yellow]'{branch}' does not map to a known branch category.[/yellow]")
        return

    console.print(f"[bold]{branch}[/bold] -> [cyan]{category}[/cyan]")
    others = sorted(categories_for(branch) - {category})
    if others:
        console.print(f"  [dim]Also matches: {', '.join(others)}[/dim]")


@app.command()
def check_eligibility(
    student_id: str = typer.Argument(..., help="Student ID"),
    posting_id: str = typer.Argument(..., help="Posting ID"),
):
    """Check whether a student may apply to a posting."""
    from uniplace.core.exceptions import PlacementError

    service = _connect()
    try:
        verdict = service.get_eligibility(student_id, posting_id)
    except PlacementError as e:
        _fail(e)

    if verdict.eligible:
        console.print("[green]✓ Eligible[/green]")
    else:
        console.print(f"[red]✗ Not eligible:[/red] {verdict.reason}")


@app.command()
def apply(
    student_id: str = typer.Argument(..., help="Student ID"),
    posting_id: str = typer.Argument(..., help="Posting ID"),
):
    """Submit an application on behalf of a student."""
    from uniplace.core.exceptions import PlacementError

    service = _connect()
    try:
        application = service.apply(student_id, posting_id)
    except PlacementError as e:
        _fail(e)
    finally:
        _finish(service)

    console.print(f"[green]✓ Application submitted[/green] ID: [cyan]{application.id}[/cyan]")
    console.print(f"  {application.posting_title} at {application.company_name}")


@app.command()
def set_status(
    application_id: str = typer.Argument(..., help="Application ID"),
    status: str = typer.Argument(..., help="New status, e.g. 'Shortlisted'"),
    actor: str = typer.Option(..., "--actor", "-a", help="ID of the recruiter or admin"),
    feedback: Optional[str] = typer.Option(None, "--feedback", "-f", help="Note for the student"),
):
    """Move an application to a new status."""
    from uniplace.core.exceptions import PlacementError

    service = _connect()
    try:
        application = service.update_application_status(
            application_id, status, actor, feedback=feedback
        )
    except PlacementError as e:
        _fail(e)
    finally:
        _finish(service)

    console.print(
        f"[green]✓[/green] Application [cyan]{application.id}[/cyan] is now "
        f"[bold]{application.status}[/bold]"
    )


@app.command()
def stop_posting(
    posting_id: str = typer.Argument(..., help="Posting ID"),
    actor: str = typer.Option(..., "--actor", "-a", help="ID of the recruiter or admin"),
):
    """Stop recruiting on a posting."""
    from uniplace.core.exceptions import PlacementError

    service = _connect()
    try:
        posting = service.stop_posting(posting_id, actor)
    except PlacementError as e:
        _fail(e)
    finally:
        _finish(service)

    console.print(f"[green]✓[/green] Recruiting stopped for [cyan]{posting.title}[/cyan]")


@app.command()
def notifications(
    user_id: str = typer.Argument(..., help="User ID"),
    unread: bool = typer.Option(False, "--unread", "-u", help="Only unread notifications"),
):
    """List a user's notifications."""
    from uniplace.core.exceptions import PlacementError

    service = _connect()
    try:
        items = service.get_notifications(user_id, unread_only=unread)
    except PlacementError as e:
        _fail(e)

    if not items:
        console.print("[yellow]No notifications.[/yellow]")
        return

    table = Table(title=f"Notifications for {user_id}")
    table.add_column("When", style="dim")
    table.add_column("Type", justify="center")
    table.add_column("Message", style="cyan")
    table.add_column("Read", justify="center")

    type_styles = {"success": "green", "error": "red", "warning": "yellow", "info": "blue"}
    for item in items:
        style = type_styles.get(item.type, "white")
        table.add_row(
            item.created_at.strftime("%Y-%m-%d %H:%M"),
            f"[{style}]{item.type}[/{style}]",
            item.message,
            "✓" if item.read else "",
        )

    console.print(table)


if __name__ == "__main__":
    app()
