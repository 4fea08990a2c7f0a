"""Pure functions for insights and history rollups.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in minor units (Money type).
"""

from dataclasses import dataclass, field

from ledgerise.dates import month_index
from ledgerise.domain.budget import (
    MIN_SAVINGS_RATE,
    calculate_non_savings_total,
    calculate_savings_amount,
)
from ledgerise.domain.models import BudgetMonthDetail, CategoryId, Money

TOP_CATEGORY_LIMIT = 5


@dataclass(frozen=True)
class MonthlyData:
    """Immutable per-month figures for trends and history."""

    year: int
    month: int
    income: Money
    savings_rate: float
    savings_amount: Money
    non_savings_total: Money
    total_allocated: Money
    adjustment_reason: str | None


@dataclass(frozen=True)
class CategoryTotal:
    """Immutable total allocated to a category across all months."""

    category_id: CategoryId
    name: str
    color: str
    total: Money


@dataclass(frozen=True)
class Insights:
    """Immutable insights over a user's whole budget history."""

    average_income: float = 0.0
    average_savings_rate: float = 0.0
    average_savings_amount: float = 0.0
    total_saved: Money = Money(0)
    total_months: int = 0
    months_with_low_savings: list[MonthlyData] = field(default_factory=list)
    top_categories: list[CategoryTotal] = field(default_factory=list)
    monthly_trends: list[MonthlyData] = field(default_factory=list)


def create_monthly_data(detail: BudgetMonthDetail) -> MonthlyData:
    """Derive savings and allocation totals for one month.

    Args:
        detail: Budget month with its allocations.

    Returns:
        MonthlyData for the month.
    """
    bm = detail.budget_month
    savings_amount = calculate_savings_amount(bm.income, bm.savings_rate)
    non_savings_total = calculate_non_savings_total(detail.allocations)

    return MonthlyData(
        year=bm.year,
        month=bm.month,
        income=bm.income,
        savings_rate=bm.savings_rate,
        savings_amount=savings_amount,
        non_savings_total=non_savings_total,
        total_allocated=Money(savings_amount + non_savings_total),
        adjustment_reason=bm.adjustment_reason,
    )


def create_monthly_trends(details: list[BudgetMonthDetail], newest_first: bool = False) -> list[MonthlyData]:
    """Per-month figures sorted by (year, month).

    Args:
        details: Budget months with allocations, any order.
        newest_first: Sort descending (history view) instead of ascending.

    Returns:
        List of MonthlyData.
    """
    ordered = sorted(
        details,
        key=lambda d: month_index(d.budget_month.year, d.budget_month.month),
        reverse=newest_first,
    )
    return [create_monthly_data(detail) for detail in ordered]


def calculate_category_totals(details: list[BudgetMonthDetail]) -> list[CategoryTotal]:
    """Accumulate non-savings allocations per category, largest first.

    Args:
        details: Budget months with allocations.

    Returns:
        CategoryTotal list sorted by total descending.
    """
    totals: dict[CategoryId, CategoryTotal] = {}

    for detail in details:
        for line in detail.allocations:
            category = line.category
            if category is None or category.is_savings:
                continue

            existing = totals.get(category.id)
            running = existing.total if existing else 0
            totals[category.id] = CategoryTotal(
                category_id=category.id,
                name=category.name,
                color=category.color,
                total=Money(running + line.allocation.amount),
            )

    return sorted(totals.values(), key=lambda t: t.total, reverse=True)


def create_insights(details: list[BudgetMonthDetail]) -> Insights:
    """Compute averages, low-savings months and top categories.

    Args:
        details: Every budget month of the user with its allocations.

    Returns:
        Insights; all zeros and empty lists when there are no months.
    """
    if not details:
        return Insights()

    trends = create_monthly_trends(details)
    total_months = len(trends)
    total_saved = Money(sum(m.savings_amount for m in trends))

    return Insights(
        average_income=sum(m.income for m in trends) / total_months,
        average_savings_rate=sum(m.savings_rate for m in trends) / total_months,
        average_savings_amount=total_saved / total_months,
        total_saved=total_saved,
        total_months=total_months,
        months_with_low_savings=[m for m in trends if m.savings_rate < MIN_SAVINGS_RATE],
        top_categories=calculate_category_totals(details)[:TOP_CATEGORY_LIMIT],
        monthly_trends=trends,
    )


def calculate_histogram_bar_length(amount: Money, max_amount: Money, bar_width: int) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)
