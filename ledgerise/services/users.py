"""User profile, sign-up and onboarding operations."""

import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path

from ledgerise.dates import current_month
from ledgerise.domain.budget import DEFAULT_SAVINGS_RATE, validate_income
from ledgerise.domain.errors import ConflictError, ValidationError
from ledgerise.domain.models import (
    CURRENCIES,
    DEFAULT_CURRENCY,
    PASSWORD_PROVIDER,
    Category,
    Money,
    User,
)
from ledgerise.domain.reconcile import normalize_email
from ledgerise.services.categories import seed_categories
from ledgerise.services.context import Context
from ledgerise.store.queries import (
    get_accounts_by_provider,
    get_all_users,
    get_budget_month_by_period,
    get_budget_months,
    get_categories,
    get_user,
    insert_account,
    insert_budget_month,
    insert_user,
    transaction,
    update_income,
    update_user_currency,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserProfile:
    """User joined with their categories in sort order."""

    user: User
    categories: list[Category] = field(default_factory=list)


def validate_currency(currency: str) -> str:
    """Raises ValidationError unless the code is a supported currency."""
    if currency not in CURRENCIES:
        raise ValidationError("Invalid currency")
    return currency


def email_in_use(conn: sqlite3.Connection, email: str) -> bool:
    """Case-insensitive check against user emails and password credentials."""
    normalized = normalize_email(email)
    if not normalized:
        return False
    if any(normalize_email(user.email or "") == normalized for user in get_all_users(conn)):
        return True
    return any(
        normalize_email(account.provider_account_id) == normalized
        for account in get_accounts_by_provider(conn, PASSWORD_PROVIDER)
    )


def is_email_in_use(email: str, db_path: Path | None = None) -> bool:
    with transaction(db_path, immediate=False) as conn:
        return email_in_use(conn, email)


def create_user(
    email: str,
    currency: str = DEFAULT_CURRENCY,
    name: str | None = None,
    secret: str | None = None,
    db_path: Path | None = None,
) -> User:
    """Register a user with a password credential.

    The email is stored normalized. The secret is whatever the authentication
    provider hands over; it is stored as-is and never read here.

    Raises:
        ValidationError: On an empty email or unsupported currency.
        ConflictError: If the email is already in use.
    """
    normalized = normalize_email(email)
    if not normalized:
        raise ValidationError("Email is required")
    validate_currency(currency)

    with transaction(db_path) as conn:
        if email_in_use(conn, normalized):
            raise ConflictError("An account with this email already exists")
        user = insert_user(conn, normalized, currency, name)
        insert_account(conn, user.id, PASSWORD_PROVIDER, normalized, secret)

    logger.info("Created user %s", user.id)
    return user


def find_user_by_email(email: str, db_path: Path | None = None) -> User | None:
    """Oldest user whose normalized email matches, or None."""
    normalized = normalize_email(email)
    if not normalized:
        return None
    with transaction(db_path, immediate=False) as conn:
        matches = [u for u in get_all_users(conn) if normalize_email(u.email or "") == normalized]
    if len(matches) > 1:
        logger.warning("%d users share the email %s; using the oldest", len(matches), normalized)
    return matches[0] if matches else None


def get_current_user(ctx: Context) -> UserProfile | None:
    """The caller with their categories, or None when anonymous or unknown."""
    if ctx.user_id is None:
        return None
    with transaction(ctx.db_path, immediate=False) as conn:
        user = get_user(conn, ctx.user_id)
        if user is None:
            return None
        return UserProfile(user=user, categories=get_categories(conn, ctx.user_id))


def needs_onboarding(ctx: Context) -> bool:
    """True when the caller has no categories or no budget months yet."""
    if ctx.user_id is None:
        return False
    with transaction(ctx.db_path, immediate=False) as conn:
        categories = get_categories(conn, ctx.user_id)
        budget_months = get_budget_months(conn, ctx.user_id)
    return not categories or not budget_months


def complete_onboarding(ctx: Context, income: Money, currency: str) -> None:
    """Set currency, seed default categories and record this month's income.

    Raises:
        ValidationError: On negative income or an unsupported currency.
    """
    user_id = ctx.require_user()
    validate_income(income)
    validate_currency(currency)
    year, month = current_month(ctx.today)

    with transaction(ctx.db_path) as conn:
        update_user_currency(conn, user_id, currency)
        seed_categories(conn, user_id)

        existing = get_budget_month_by_period(conn, user_id, year, month)
        if existing is None:
            insert_budget_month(conn, user_id, year, month, income, DEFAULT_SAVINGS_RATE)
        else:
            update_income(conn, existing.id, income)

    logger.info("Completed onboarding for user %s", user_id)


def update_currency(ctx: Context, currency: str) -> None:
    """Change the caller's preferred currency.

    Raises:
        ValidationError: If the code isn't one of the supported currencies.
    """
    user_id = ctx.require_user()
    validate_currency(currency)
    with transaction(ctx.db_path) as conn:
        update_user_currency(conn, user_id, currency)
    logger.info("Set currency of user %s to %s", user_id, currency)
