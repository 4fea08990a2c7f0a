"""Helpers shared by the command modules."""

import math
import sys
from datetime import date
from typing import NoReturn

from rich.console import Console

from ledgerise.config import get_default_user
from ledgerise.dates import current_month, parse_month
from ledgerise.domain.models import CURRENCIES, Category, Money, Month, User
from ledgerise.services.context import Context
from ledgerise.services.users import find_user_by_email
from ledgerise.store.schema import database_exists

console = Console()


def fail(message: str) -> NoReturn:
    """Print an error in red and exit with status 1."""
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)


def require_database() -> None:
    if not database_exists():
        fail("Database not found. Run 'ledgerise init' first.")


def parse_money(amount_str: str) -> Money | None:
    """Parse a major-unit amount string to minor units.

    Args:
        amount_str: String containing an amount such as "12.50".

    Returns:
        Money amount in minor units, or None if invalid or negative.
    """
    try:
        major = float(amount_str)
    except ValueError:
        return None
    if not math.isfinite(major) or major < 0:
        return None
    return Money(round(major * 100))


def format_money(amount: int | float, currency: str) -> str:
    """Format minor units with the currency symbol (e.g., "Le1,250.00")."""
    symbol = CURRENCIES.get(currency, currency)
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount) / 100:,.2f}"


def resolve_month(month: str | None, today: date) -> tuple[int, int]:
    """Turn a --month option into (year, month), defaulting to the current month."""
    if not month:
        return current_month(today)
    try:
        return parse_month(Month(month))
    except ValueError:
        fail(f"Invalid month: {month} (expected YYYY-MM)")


def resolve_user(user_email: str | None) -> User:
    """Find the user commands act as.

    The --user option (or LEDGERISE_USER) wins over the config file's user.
    """
    require_database()
    email = user_email or get_default_user()
    if not email:
        fail("No user selected. Pass --user, set LEDGERISE_USER or run 'ledgerise signup'.")
    user = find_user_by_email(email)
    if user is None:
        fail(f"No user found for {email}")
    return user


def resolve_context(user_email: str | None) -> tuple[Context, User]:
    user = resolve_user(user_email)
    return Context(user_id=user.id), user


def resolve_category(categories: list[Category], ref: str) -> Category:
    """Look a category up by exact name or 1-based list index."""
    for category in categories:
        if category.name == ref.strip():
            return category

    if ref.isdigit():
        idx = int(ref) - 1
        if idx < 0 or idx >= len(categories):
            fail(f"Invalid index: {ref}")
        return categories[idx]

    fail(f"Category not found: {ref}")
