"""Admin commands for init, backup and maintenance."""

import shutil
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

import requests
from rich.table import Table

from ledgerise.commands.common import console, fail
from ledgerise.config import create_default_config, get_config_path, get_notification_settings
from ledgerise.domain.errors import LedgeriseError
from ledgerise.domain.models import UserId
from ledgerise.domain.reconcile import ReconciliationPlan
from ledgerise.notifications import send_password_reset_email
from ledgerise.services.reconcile import resolve_duplicate_email
from ledgerise.store.schema import get_db_path, init_database


def backup_command(
    output_dir: str | None = None,
) -> None:
    """Backup database and configuration files."""
    db_path = get_db_path()
    config_path = get_config_path()

    if not db_path.exists():
        fail("Database not found. Run 'ledgerise init' first.")

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = Path.home() / ".ledgerise" / "backups"

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    db_backup = backup_dir / f"ledgerise_{timestamp}.db"
    config_backup = backup_dir / f"config_{timestamp}.toml"

    try:
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        if config_path.exists():
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except OSError as e:
        fail(f"Backup failed: {e}")


def run_migration(db_path: Path) -> None:
    """Run database migrations on existing database."""
    console.print(f"[cyan]Running migrations on {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Migrations complete")
    console.print("[dim]Database schema is up to date[/dim]")


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Initialize new database and config."""
    if db_path.exists():
        db_path.unlink()

    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Database initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")
    console.print("[dim]Next: 'ledgerise signup EMAIL' then 'ledgerise onboard --income AMOUNT'[/dim]")


def init_command(force: bool = False, migrate: bool = False) -> None:
    """Initialize ledgerise database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        if migrate:
            if not db_exists:
                console.print("[red]No database found to migrate[/red]", style="bold")
                console.print(f"[dim]Expected location: {db_path}[/dim]")
                sys.exit(1)
            run_migration(db_path)
            return

        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'ledgerise init --force' to overwrite[/yellow]")
            console.print("[yellow]Or 'ledgerise init --migrate' to update database schema only[/yellow]")
            sys.exit(1)

        run_full_init(db_path, config_path)

    except sqlite3.Error as e:
        fail(f"Database error: {e}")
    except OSError as e:
        fail(f"Filesystem error: {e}")


def render_reconciliation(plan: ReconciliationPlan) -> None:
    """Print the users considered and what happens to each."""
    if not plan.users:
        console.print(f"[yellow]{plan.message or 'No users found for this email.'}[/yellow]")
        return

    title = "Dry run" if plan.dry_run else "Applied"
    table = Table(title=f"{title}: {plan.normalized_email}")
    table.add_column("User", justify="right")
    table.add_column("Email", style="cyan")
    table.add_column("Months", justify="right")
    table.add_column("Categories", justify="right")
    table.add_column("Allocations", justify="right")
    table.add_column("Sessions", justify="right")
    table.add_column("Action", justify="center")

    for summary in plan.users:
        if summary.user_id == plan.keep_user_id:
            action = "[green]keep[/green]"
        elif summary.user_id in plan.skipped_user_ids:
            action = "[yellow]skip (has data)[/yellow]"
        elif plan.dry_run:
            action = "[red]would delete[/red]"
        else:
            action = "[red]deleted[/red]"

        table.add_row(
            str(summary.user_id),
            summary.email or "[dim]-[/dim]",
            str(summary.budget_months),
            str(summary.categories),
            str(summary.allocations),
            str(summary.sessions),
            action,
        )

    console.print(table)

    if plan.primary_account_id is not None:
        console.print(f"[dim]Primary password account: {plan.primary_account_id}[/dim]")
    if plan.account_ids_to_delete:
        verb = "Would delete" if plan.dry_run else "Deleted"
        console.print(f"[dim]{verb} {len(plan.account_ids_to_delete)} extra password accounts[/dim]")
    if plan.message:
        console.print(f"[yellow]{plan.message}[/yellow]")
    if plan.dry_run:
        console.print("\n[dim]Re-run with --apply to make these changes[/dim]")


def resolve_email_command(
    email: str,
    apply: bool = False,
    allow_delete_with_data: bool = False,
    keep: int | None = None,
) -> None:
    """Merge duplicate users that share an email."""
    try:
        plan = resolve_duplicate_email(
            email,
            dry_run=not apply,
            allow_delete_with_data=allow_delete_with_data,
            keep_user_id=UserId(keep) if keep is not None else None,
        )
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    render_reconciliation(plan)


def send_reset_command(email: str, url: str) -> None:
    """Send a password-reset link."""
    try:
        message_id = send_password_reset_email(email, url, get_notification_settings())
    except LedgeriseError as e:
        fail(str(e))
    except requests.RequestException as e:
        fail(f"Email API error: {e}")

    console.print(f"[green]✓ Sent password reset email to {email}[/green]")
    if message_id:
        console.print(f"[dim]Message id: {message_id}[/dim]")
