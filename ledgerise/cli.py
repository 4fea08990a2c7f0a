"""CLI entry point for ledgerise."""

import logging

import typer

from ledgerise.commands.account import currency_command, onboard_command, signup_command
from ledgerise.commands.admin import backup_command, init_command, resolve_email_command, send_reset_command
from ledgerise.commands.budget import allocate_command, month_command, unallocate_command
from ledgerise.commands.categories import (
    add_command,
    edit_command,
    list_command,
    remove_command,
    reorder_command,
    seed_command,
)
from ledgerise.commands.report import history_command, insights_command
from ledgerise.config import get_log_level
from ledgerise.log import configure_logging

app = typer.Typer(
    name="ledgerise",
    help="Ledgerise - Monthly budgeting with a savings-first rule",
    add_completion=False,
)
categories_app = typer.Typer(help="Manage your spending categories.")
admin_app = typer.Typer(help="Administrative maintenance commands.")
app.add_typer(categories_app, name="categories")
app.add_typer(admin_app, name="admin")


def current_user(ctx: typer.Context) -> str | None:
    return ctx.obj.get("user") if ctx.obj else None


@app.callback()
def main(
    ctx: typer.Context,
    user: str = typer.Option(None, "--user", "-u", envvar="LEDGERISE_USER", help="Email of the user to act as"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Ledgerise - Monthly budgeting with a savings-first rule."""
    configure_logging(logging.DEBUG if verbose else get_log_level())
    ctx.obj = {"user": user, "verbose": verbose}


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
    migrate: bool = typer.Option(False, "--migrate", help="Update the database schema only"),
) -> None:
    """Initialize ledgerise database and configuration."""
    init_command(force, migrate)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: ~/.ledgerise/backups)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command()
def signup(
    email: str,
    currency: str = typer.Option(None, "--currency", help="Currency code (SLE, USD, GBP, EUR, NGN)"),
    name: str = typer.Option(None, "--name", help="Display name"),
) -> None:
    """Create a new user."""
    signup_command(email, currency.upper() if currency else None, name)


@app.command()
def onboard(
    ctx: typer.Context,
    income: str = typer.Option(..., "--income", help="This month's income"),
    currency: str = typer.Option(None, "--currency", help="Currency code (SLE, USD, GBP, EUR, NGN)"),
) -> None:
    """Seed default categories and set this month's income."""
    onboard_command(current_user(ctx), income, currency)


@app.command()
def currency(
    ctx: typer.Context,
    code: str = typer.Argument(None, help="New currency code; omit to show the current one"),
) -> None:
    """Show or change your currency."""
    currency_command(current_user(ctx), code)


@categories_app.command(name="list")
def categories_list(ctx: typer.Context) -> None:
    """List your categories."""
    list_command(current_user(ctx))


@categories_app.command(name="add")
def categories_add(
    ctx: typer.Context,
    name: str,
    color: str = typer.Option(None, "--color", help="Hex color (#RRGGBB)"),
) -> None:
    """Add a category."""
    add_command(current_user(ctx), name, color)


@categories_app.command(name="edit")
def categories_edit(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Category name or list index"),
    name: str = typer.Option(None, "--name", help="New name"),
    color: str = typer.Option(None, "--color", help="New hex color (#RRGGBB)"),
) -> None:
    """Rename or recolor a category."""
    edit_command(current_user(ctx), ref, name, color)


@categories_app.command(name="remove")
def categories_remove(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Category name or list index"),
) -> None:
    """Delete a category and its allocations."""
    remove_command(current_user(ctx), ref)


@categories_app.command(name="reorder")
def categories_reorder(
    ctx: typer.Context,
    refs: list[str] = typer.Argument(..., help="Categories (names or indexes) in their new order"),
) -> None:
    """Move categories to the top, in the given order."""
    reorder_command(current_user(ctx), refs)


@categories_app.command(name="seed")
def categories_seed(ctx: typer.Context) -> None:
    """Add the default categories that are missing."""
    seed_command(current_user(ctx))


@app.command()
def month(
    ctx: typer.Context,
    month: str = typer.Option(None, "--month", help="Month (YYYY-MM, default: current)"),
    income: str = typer.Option(None, "--income", help="Set the month's income"),
    savings_rate: float = typer.Option(None, "--savings-rate", help="Set the savings rate in percent"),
    reason: str = typer.Option(None, "--reason", help="Why the savings rate is below 20%"),
    copy_previous: bool = typer.Option(False, "--copy-previous", help="Copy allocations from the previous month"),
    copy_from: str = typer.Option(None, "--copy-from", help="Copy allocations from month (YYYY-MM)"),
) -> None:
    """Show your budget for a month."""
    month_command(current_user(ctx), month, income, savings_rate, reason, copy_previous, copy_from)


@app.command()
def allocate(
    ctx: typer.Context,
    category: str = typer.Argument(..., help="Category name or list index"),
    amount: str = typer.Argument(..., help="Amount to allocate (0 removes)"),
    month: str = typer.Option(None, "--month", help="Month (YYYY-MM, default: current)"),
) -> None:
    """Set a category's allocation for a month."""
    allocate_command(current_user(ctx), category, amount, month)


@app.command()
def unallocate(
    ctx: typer.Context,
    category: str = typer.Argument(..., help="Category name or list index"),
    month: str = typer.Option(None, "--month", help="Month (YYYY-MM, default: current)"),
) -> None:
    """Remove a category's allocation from a month."""
    unallocate_command(current_user(ctx), category, month)


@app.command()
def history(
    ctx: typer.Context,
    export: str = typer.Option(None, "--export", help="Write the history to a CSV file"),
) -> None:
    """Show your budget history."""
    history_command(current_user(ctx), export)


@app.command()
def insights(
    ctx: typer.Context,
    histogram: bool = typer.Option(True, help="Show histogram of top categories"),
) -> None:
    """Show savings and spending insights."""
    insights_command(current_user(ctx), histogram)


@admin_app.command(name="resolve-email")
def admin_resolve_email(
    email: str,
    apply: bool = typer.Option(False, "--apply", help="Make the changes (default is a dry run)"),
    allow_delete_with_data: bool = typer.Option(
        False, "--allow-delete-with-data", help="Also delete duplicates that have budget data"
    ),
    keep: int = typer.Option(None, "--keep", help="User id to keep"),
) -> None:
    """Merge duplicate users that share an email."""
    resolve_email_command(email, apply, allow_delete_with_data, keep)


@admin_app.command(name="send-reset")
def admin_send_reset(email: str, url: str) -> None:
    """Email a password-reset link."""
    send_reset_command(email, url)


if __name__ == "__main__":
    app()
