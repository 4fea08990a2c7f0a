"""Copy a month's spending allocations into another month."""

import logging
import sqlite3

from ledgerise.dates import is_editable_month, month_label
from ledgerise.domain.budget import find_previous_month
from ledgerise.domain.errors import NoPreviousMonthError, StateError
from ledgerise.domain.models import BudgetMonth, BudgetMonthId, UserId
from ledgerise.services.allocations import write_allocation
from ledgerise.services.budget_months import get_owned_month
from ledgerise.services.context import Context
from ledgerise.store.queries import get_allocations, get_budget_months, get_category, transaction

logger = logging.getLogger(__name__)


def _copy_allocations(
    conn: sqlite3.Connection, user_id: UserId, source_id: BudgetMonthId, target_id: BudgetMonthId
) -> int:
    """Upsert every non-savings allocation of the source into the target."""
    copied = 0
    for allocation in get_allocations(conn, source_id):
        category = get_category(conn, allocation.category_id)
        if category is None or category.is_savings or category.user_id != user_id:
            continue
        write_allocation(conn, target_id, allocation.category_id, allocation.amount)
        copied += 1
    return copied


def copy_allocations(ctx: Context, from_month_id: BudgetMonthId, to_month_id: BudgetMonthId) -> int:
    """Copy allocations between two of the caller's months.

    Existing target rows for the same categories are overwritten, so running
    it twice gives the same result.

    Returns:
        Number of allocations copied.

    Raises:
        NotFoundError: If either month isn't the caller's.
    """
    user_id = ctx.require_user()

    with transaction(ctx.db_path) as conn:
        get_owned_month(conn, user_id, to_month_id)
        get_owned_month(conn, user_id, from_month_id)
        copied = _copy_allocations(conn, user_id, from_month_id, to_month_id)

    logger.info("Copied %d allocations from budget month %s to %s", copied, from_month_id, to_month_id)
    return copied


def copy_from_previous(ctx: Context, budget_month_id: BudgetMonthId) -> tuple[BudgetMonth, int]:
    """Copy allocations from the most recent earlier month on record.

    Returns:
        Tuple of (source month, number of allocations copied).

    Raises:
        NotFoundError: If the target month isn't the caller's.
        StateError: If the target is outside the editable window.
        NoPreviousMonthError: If there is no earlier month to copy from.
    """
    user_id = ctx.require_user()

    with transaction(ctx.db_path) as conn:
        target = get_owned_month(conn, user_id, budget_month_id)
        if not is_editable_month(target.year, target.month, ctx.today):
            raise StateError(f"Cannot copy into {month_label(target.year, target.month)}: month is not editable")

        source = find_previous_month(get_budget_months(conn, user_id), target.year, target.month)
        if source is None:
            raise NoPreviousMonthError("No previous month found to copy from")

        copied = _copy_allocations(conn, user_id, source.id, target.id)

    logger.info(
        "Copied %d allocations from %04d-%02d into %04d-%02d for user %s",
        copied,
        source.year,
        source.month,
        target.year,
        target.month,
        user_id,
    )
    return source, copied
