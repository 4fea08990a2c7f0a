"""Sign-up, onboarding and currency commands."""

import sqlite3

from ledgerise.commands.common import console, fail, format_money, parse_money, require_database, resolve_context
from ledgerise.config import get_default_currency, get_default_user, set_default_user
from ledgerise.domain.errors import LedgeriseError
from ledgerise.domain.models import CURRENCIES
from ledgerise.services.users import complete_onboarding, create_user, needs_onboarding, update_currency


def signup_command(email: str, currency: str | None = None, name: str | None = None) -> None:
    """Create a user and make it the default if none is configured."""
    require_database()

    try:
        user = create_user(email, currency or get_default_currency(), name)
        if not get_default_user():
            set_default_user(user.email or email)
            console.print(f"[dim]Set {user.email} as the default user[/dim]")
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓ Created account for {user.email}[/green]")
    console.print("[dim]Next: 'ledgerise onboard --income AMOUNT'[/dim]")


def onboard_command(user_email: str | None, income: str, currency: str | None = None) -> None:
    """Seed default categories and record this month's income."""
    ctx, user = resolve_context(user_email)

    income_minor = parse_money(income)
    if income_minor is None:
        fail("Invalid income amount")

    chosen_currency = (currency or user.currency).upper()

    try:
        if not needs_onboarding(ctx):
            console.print("[yellow]Already onboarded; updating this month's income[/yellow]")
        complete_onboarding(ctx, income_minor, chosen_currency)
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓ Onboarding complete. Income: {format_money(income_minor, chosen_currency)}[/green]")
    console.print("[dim]Run 'ledgerise month' to see this month's budget[/dim]")


def currency_command(user_email: str | None, code: str | None = None) -> None:
    """Show or change the preferred currency."""
    ctx, user = resolve_context(user_email)

    if code is None:
        console.print(f"[bold]Currency:[/bold] {user.currency} ({CURRENCIES.get(user.currency, '?')})")
        console.print(f"[dim]Supported: {', '.join(CURRENCIES)}[/dim]")
        return

    try:
        update_currency(ctx, code.upper())
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓ Currency set to {code.upper()}[/green]")
