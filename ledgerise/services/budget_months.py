"""Budget month operations: lazy creation, income and savings rate."""

import logging
import sqlite3

from ledgerise.domain.budget import (
    DEFAULT_SAVINGS_RATE,
    default_income_for,
    sort_allocations,
    validate_income,
    validate_period,
    validate_savings_rate,
)
from ledgerise.domain.errors import NotFoundError
from ledgerise.domain.models import (
    AllocationDetail,
    BudgetMonth,
    BudgetMonthDetail,
    BudgetMonthId,
    Category,
    CategoryId,
    Money,
    UserId,
)
from ledgerise.services.context import Context
from ledgerise.store.queries import (
    get_allocations,
    get_budget_month,
    get_budget_month_by_period,
    get_budget_months,
    get_category,
    insert_budget_month,
    transaction,
    update_income,
    update_savings_rate,
)

logger = logging.getLogger(__name__)


def get_owned_month(conn: sqlite3.Connection, user_id: UserId, budget_month_id: BudgetMonthId) -> BudgetMonth:
    """Load a budget month the user owns.

    Raises:
        NotFoundError: If it doesn't exist or belongs to someone else.
    """
    budget_month = get_budget_month(conn, budget_month_id)
    if budget_month is None or budget_month.user_id != user_id:
        raise NotFoundError("Budget month not found")
    return budget_month


def load_allocation_details(
    conn: sqlite3.Connection,
    budget_month_id: BudgetMonthId,
    category_cache: dict[CategoryId, Category | None] | None = None,
) -> list[AllocationDetail]:
    """Join a month's allocations with their categories, by sort order.

    Args:
        conn: Open connection.
        budget_month_id: Month to load.
        category_cache: Shared lookup so repeated categories are fetched once.

    Returns:
        AllocationDetail list sorted by category sort order.
    """
    cache = category_cache if category_cache is not None else {}
    details = []
    for allocation in get_allocations(conn, budget_month_id):
        if allocation.category_id not in cache:
            cache[allocation.category_id] = get_category(conn, allocation.category_id)
        details.append(AllocationDetail(allocation=allocation, category=cache[allocation.category_id]))
    return sort_allocations(details)


def load_month_details(conn: sqlite3.Connection, user_id: UserId) -> list[BudgetMonthDetail]:
    """Every budget month of a user with allocations, newest first."""
    cache: dict[CategoryId, Category | None] = {}
    return [
        BudgetMonthDetail(budget_month=bm, allocations=load_allocation_details(conn, bm.id, cache))
        for bm in get_budget_months(conn, user_id)
    ]


def get_month(ctx: Context, year: int, month: int) -> BudgetMonthDetail | None:
    """Fetch a month with its allocations without creating anything.

    Returns:
        BudgetMonthDetail, or None when anonymous or the month doesn't exist.
    """
    if ctx.user_id is None:
        return None

    with transaction(ctx.db_path, immediate=False) as conn:
        budget_month = get_budget_month_by_period(conn, ctx.user_id, year, month)
        if budget_month is None:
            return None
        return BudgetMonthDetail(budget_month, load_allocation_details(conn, budget_month.id))


def get_or_create_month(ctx: Context, year: int, month: int) -> BudgetMonthDetail:
    """Fetch a month, creating it on first access.

    A new month starts with the income of the most recent earlier month on
    record (0 if none) and the default savings rate.

    Raises:
        ValidationError: If year or month are out of range.
    """
    user_id = ctx.require_user()
    validate_period(year, month)

    with transaction(ctx.db_path) as conn:
        budget_month = get_budget_month_by_period(conn, user_id, year, month)
        if budget_month is None:
            income = default_income_for(get_budget_months(conn, user_id), year, month)
            budget_month = insert_budget_month(conn, user_id, year, month, income, DEFAULT_SAVINGS_RATE)
            logger.info("Created budget month %04d-%02d for user %s (income %d)", year, month, user_id, income)

        return BudgetMonthDetail(budget_month, load_allocation_details(conn, budget_month.id))


def set_income(ctx: Context, budget_month_id: BudgetMonthId, income: Money) -> BudgetMonth:
    """Change a month's income.

    Raises:
        ValidationError: If income is negative.
        NotFoundError: If the month isn't the caller's.
    """
    user_id = ctx.require_user()
    validate_income(income)

    with transaction(ctx.db_path) as conn:
        get_owned_month(conn, user_id, budget_month_id)
        update_income(conn, budget_month_id, income)
        updated = get_owned_month(conn, user_id, budget_month_id)

    logger.info("Set income of budget month %s to %d", budget_month_id, income)
    return updated


def set_savings_rate(
    ctx: Context,
    budget_month_id: BudgetMonthId,
    savings_rate: float,
    reason: str | None = None,
) -> BudgetMonth:
    """Change a month's savings rate.

    Below the 20% floor a reason of at least 10 characters is required and
    stored; at or above it any stored reason is cleared.

    Raises:
        ValidationError: On an out-of-range rate or a missing reason.
        NotFoundError: If the month isn't the caller's.
    """
    user_id = ctx.require_user()
    adjustment_reason = validate_savings_rate(savings_rate, reason)

    with transaction(ctx.db_path) as conn:
        get_owned_month(conn, user_id, budget_month_id)
        update_savings_rate(conn, budget_month_id, savings_rate, adjustment_reason)
        updated = get_owned_month(conn, user_id, budget_month_id)

    logger.info("Set savings rate of budget month %s to %.2f", budget_month_id, savings_rate)
    return updated


def list_months(ctx: Context) -> list[BudgetMonthDetail]:
    """All of the caller's months with allocations, newest first (empty when anonymous)."""
    if ctx.user_id is None:
        return []
    with transaction(ctx.db_path, immediate=False) as conn:
        return load_month_details(conn, ctx.user_id)
