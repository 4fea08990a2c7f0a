"""Pure functions for budget month and allocation rules.

This module contains the functional core for budget operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in minor units (Money type).
"""

from dataclasses import dataclass
from datetime import date
from typing import Literal

from ledgerise.dates import is_editable_month, month_index
from ledgerise.domain.errors import StateError, ValidationError
from ledgerise.domain.models import (
    Allocation,
    AllocationDetail,
    BudgetMonth,
    BudgetMonthDetail,
    Category,
    Money,
)

# Saving less than this share of income requires a written reason
MIN_SAVINGS_RATE = 0.20
DEFAULT_SAVINGS_RATE = 0.20
MIN_REASON_LENGTH = 10

AllocationWrite = Literal["insert", "update", "delete", "noop"]


@dataclass(frozen=True)
class MonthSummary:
    """Immutable derived figures for one budget month."""

    income: Money
    savings_rate: float
    savings_amount: Money
    non_savings_total: Money
    total_allocated: Money
    remaining: Money
    is_over_budget: bool
    is_editable: bool


def validate_period(year: int, month: int) -> None:
    """Validate a (year, month) pair.

    Raises:
        ValidationError: If year is not four digits or month is not 1-12.
    """
    if not 1000 <= year <= 9999:
        raise ValidationError("Year must be a four digit number")
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")


def validate_income(income: Money) -> None:
    """Raises ValidationError if income is negative."""
    if income < 0:
        raise ValidationError("Income cannot be negative")


def validate_allocation_amount(amount: Money) -> None:
    """Raises ValidationError if amount is negative."""
    if amount < 0:
        raise ValidationError("Amount cannot be negative")


def ensure_allocatable(category: Category) -> None:
    """Raises StateError for the savings category, whose amount is derived."""
    if category.is_savings:
        raise StateError("Savings allocation is calculated automatically")


def validate_savings_rate(savings_rate: float, reason: str | None) -> str | None:
    """Validate a savings rate change and work out the reason to store.

    Args:
        savings_rate: New rate as a fraction (0.0 to 1.0).
        reason: Justification supplied by the user, if any.

    Returns:
        The trimmed reason when the rate is below MIN_SAVINGS_RATE, else None
        (a rate at or above the floor clears any earlier reason).

    Raises:
        ValidationError: If the rate is out of range, or below the floor
            without a reason of at least MIN_REASON_LENGTH characters.
    """
    if not 0 <= savings_rate <= 1:
        raise ValidationError("Savings rate must be between 0% and 100%")

    if savings_rate >= MIN_SAVINGS_RATE:
        return None

    trimmed = (reason or "").strip()
    if len(trimmed) < MIN_REASON_LENGTH:
        raise ValidationError(
            f"Please provide a reason (at least {MIN_REASON_LENGTH} characters) "
            f"for saving less than {MIN_SAVINGS_RATE:.0%}"
        )
    return trimmed


def calculate_savings_amount(income: Money, savings_rate: float) -> Money:
    """Savings contribution for a month, rounded to the nearest minor unit.

    Args:
        income: Monthly income in minor units.
        savings_rate: Rate as a fraction.

    Returns:
        Savings amount in minor units.
    """
    return Money(round(income * savings_rate))


def find_previous_month(months: list[BudgetMonth], year: int, month: int) -> BudgetMonth | None:
    """Find the most recent month strictly before (year, month).

    This is the latest earlier month on record, not necessarily the calendar
    month immediately before.

    Args:
        months: Candidate budget months (any order).
        year: Target year.
        month: Target month.

    Returns:
        The closest earlier BudgetMonth, or None if there is none.
    """
    target = month_index(year, month)
    earlier = [m for m in months if month_index(m.year, m.month) < target]
    if not earlier:
        return None
    return max(earlier, key=lambda m: month_index(m.year, m.month))


def default_income_for(months: list[BudgetMonth], year: int, month: int) -> Money:
    """Income a newly created month starts with: the previous month's, else 0."""
    previous = find_previous_month(months, year, month)
    return previous.income if previous else Money(0)


def sort_months_descending(months: list[BudgetMonth]) -> list[BudgetMonth]:
    """Sort months newest first."""
    return sorted(months, key=lambda m: month_index(m.year, m.month), reverse=True)


def sort_allocations(allocations: list[AllocationDetail]) -> list[AllocationDetail]:
    """Sort allocations by their category's sort order."""
    return sorted(allocations, key=lambda a: a.sort_order)


def plan_allocation_write(existing: Allocation | None, amount: Money) -> AllocationWrite:
    """Decide how to persist an allocation amount.

    A zero amount means "no row", so it deletes any existing allocation.

    Args:
        existing: Current allocation for the (month, category) pair, if any.
        amount: Requested amount in minor units.

    Returns:
        One of "insert", "update", "delete" or "noop".
    """
    if amount == 0:
        return "delete" if existing else "noop"
    return "update" if existing else "insert"


def calculate_non_savings_total(allocations: list[AllocationDetail]) -> Money:
    """Sum allocations whose category exists and is not the savings category."""
    return Money(
        sum(a.allocation.amount for a in allocations if a.category is not None and not a.category.is_savings)
    )


def summarize_month(detail: BudgetMonthDetail, today: date) -> MonthSummary:
    """Compute the derived figures shown for a budget month.

    Args:
        detail: Budget month with its allocations.
        today: The current day, for the editable flag.

    Returns:
        MonthSummary with savings, totals and remaining income.
    """
    budget_month = detail.budget_month
    savings_amount = calculate_savings_amount(budget_month.income, budget_month.savings_rate)
    non_savings_total = calculate_non_savings_total(detail.allocations)
    total_allocated = Money(savings_amount + non_savings_total)
    remaining = Money(budget_month.income - total_allocated)

    return MonthSummary(
        income=budget_month.income,
        savings_rate=budget_month.savings_rate,
        savings_amount=savings_amount,
        non_savings_total=non_savings_total,
        total_allocated=total_allocated,
        remaining=remaining,
        is_over_budget=remaining < 0,
        is_editable=is_editable_month(budget_month.year, budget_month.month, today),
    )
