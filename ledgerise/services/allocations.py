"""Allocation ledger: per-category amounts within a budget month.

At most one row exists per (budget month, category) and a zero amount means
no row at all. The savings category never gets a row.
"""

import logging
import sqlite3

from ledgerise.domain.budget import ensure_allocatable, plan_allocation_write, validate_allocation_amount
from ledgerise.domain.errors import NotFoundError
from ledgerise.domain.models import (
    Allocation,
    AllocationDetail,
    AllocationId,
    BudgetMonthId,
    Category,
    CategoryId,
    Money,
    UserId,
)
from ledgerise.services.budget_months import get_owned_month, load_allocation_details
from ledgerise.services.categories import get_owned_category
from ledgerise.services.context import Context
from ledgerise.store.queries import (
    delete_allocation,
    get_allocation,
    get_allocation_for,
    get_budget_month,
    insert_allocation,
    transaction,
    update_allocation_amount,
)

logger = logging.getLogger(__name__)


def write_allocation(
    conn: sqlite3.Connection,
    budget_month_id: BudgetMonthId,
    category_id: CategoryId,
    amount: Money,
) -> Allocation | None:
    """Insert, update or delete the row for one (month, category) pair.

    Callers have already checked ownership and the savings rule.

    Returns:
        The stored Allocation, or None when the amount was zero.
    """
    existing = get_allocation_for(conn, budget_month_id, category_id)
    action = plan_allocation_write(existing, amount)

    if action == "insert":
        return insert_allocation(conn, budget_month_id, category_id, amount)
    if action == "update":
        assert existing is not None
        update_allocation_amount(conn, existing.id, amount)
        return get_allocation(conn, existing.id)
    if action == "delete":
        assert existing is not None
        delete_allocation(conn, existing.id)
    return None


def _allocatable_category(conn: sqlite3.Connection, user_id: UserId, category_id: CategoryId) -> Category:
    category = get_owned_category(conn, user_id, category_id)
    ensure_allocatable(category)
    return category


def set_allocation(
    ctx: Context,
    budget_month_id: BudgetMonthId,
    category_id: CategoryId,
    amount: Money,
) -> Allocation | None:
    """Set the amount allocated to a category for a month.

    Args:
        ctx: Caller context.
        budget_month_id: Target month.
        category_id: Target category.
        amount: Amount in minor units; 0 removes the allocation.

    Returns:
        The stored Allocation, or None when the amount was zero.

    Raises:
        ValidationError: If amount is negative.
        NotFoundError: If the month or category isn't the caller's.
        StateError: If the category is the savings category.
    """
    user_id = ctx.require_user()
    validate_allocation_amount(amount)

    with transaction(ctx.db_path) as conn:
        get_owned_month(conn, user_id, budget_month_id)
        _allocatable_category(conn, user_id, category_id)
        allocation = write_allocation(conn, budget_month_id, category_id, amount)

    logger.info("Allocated %d to category %s in budget month %s", amount, category_id, budget_month_id)
    return allocation


def remove_allocation(ctx: Context, allocation_id: AllocationId) -> None:
    """Delete an allocation by id.

    Raises:
        NotFoundError: If it doesn't exist or its month isn't the caller's.
    """
    user_id = ctx.require_user()

    with transaction(ctx.db_path) as conn:
        allocation = get_allocation(conn, allocation_id)
        if allocation is None:
            raise NotFoundError("Allocation not found")
        budget_month = get_budget_month(conn, allocation.budget_month_id)
        if budget_month is None or budget_month.user_id != user_id:
            raise NotFoundError("Allocation not found")
        delete_allocation(conn, allocation_id)

    logger.info("Deleted allocation %s", allocation_id)


def remove_from_month(ctx: Context, budget_month_id: BudgetMonthId, category_id: CategoryId) -> bool:
    """Remove a category's allocation from a month if there is one.

    Returns:
        True if a row was deleted, False if there was nothing to delete.

    Raises:
        NotFoundError: If the month or category isn't the caller's.
        StateError: If the category is the savings category.
    """
    user_id = ctx.require_user()

    with transaction(ctx.db_path) as conn:
        get_owned_month(conn, user_id, budget_month_id)
        _allocatable_category(conn, user_id, category_id)
        existing = get_allocation_for(conn, budget_month_id, category_id)
        if existing:
            delete_allocation(conn, existing.id)

    return existing is not None


def list_allocations(ctx: Context, budget_month_id: BudgetMonthId) -> list[AllocationDetail]:
    """A month's allocations joined with categories, by sort order.

    Returns an empty list when anonymous or when the month isn't the caller's.
    """
    if ctx.user_id is None:
        return []

    with transaction(ctx.db_path, immediate=False) as conn:
        budget_month = get_budget_month(conn, budget_month_id)
        if budget_month is None or budget_month.user_id != ctx.user_id:
            return []
        return load_allocation_details(conn, budget_month_id)
