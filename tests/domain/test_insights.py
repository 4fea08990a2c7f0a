"""Tests for ledgerise.domain.insights pure functions."""

import pytest

from ledgerise.domain.insights import (
    Insights,
    calculate_category_totals,
    calculate_histogram_bar_length,
    create_insights,
    create_monthly_data,
    create_monthly_trends,
)
from ledgerise.domain.models import (
    Allocation,
    AllocationDetail,
    AllocationId,
    BudgetMonth,
    BudgetMonthDetail,
    BudgetMonthId,
    Category,
    CategoryId,
    Money,
    UserId,
)

SAVINGS = Category(CategoryId(1), UserId(1), "Savings", "#6366f1", True, True, 0)
FOOD = Category(CategoryId(2), UserId(1), "Food", "#f59e0b", False, False, 1)
FUN = Category(CategoryId(3), UserId(1), "Fun", "#06b6d4", False, False, 2)


def detail(
    id: int,
    year: int,
    month: int,
    income: int,
    rate: float,
    lines: list[tuple[Category, int]] | None = None,
    reason: str | None = None,
) -> BudgetMonthDetail:
    budget_month = BudgetMonth(
        id=BudgetMonthId(id),
        user_id=UserId(1),
        year=year,
        month=month,
        income=Money(income),
        savings_rate=rate,
        adjustment_reason=reason,
    )
    allocations = [
        AllocationDetail(
            allocation=Allocation(AllocationId(id * 100 + i), BudgetMonthId(id), category.id, Money(amount)),
            category=category,
        )
        for i, (category, amount) in enumerate(lines or [])
    ]
    return BudgetMonthDetail(budget_month=budget_month, allocations=allocations)


class TestCreateMonthlyData:
    """Tests for create_monthly_data."""

    def test_derives_savings_and_totals(self) -> None:
        data = create_monthly_data(detail(1, 2025, 1, 100000, 0.2, [(FOOD, 30000), (SAVINGS, 5)]))

        assert data.savings_amount == 20000
        assert data.non_savings_total == 30000
        assert data.total_allocated == 50000

    def test_keeps_adjustment_reason(self) -> None:
        data = create_monthly_data(detail(1, 2025, 1, 1000, 0.1, reason="Unexpected medical expense"))
        assert data.adjustment_reason == "Unexpected medical expense"


class TestCreateMonthlyTrends:
    """Tests for create_monthly_trends."""

    def test_ascending_by_default(self) -> None:
        details = [detail(1, 2025, 3, 1, 0.2), detail(2, 2024, 12, 1, 0.2), detail(3, 2025, 1, 1, 0.2)]
        trends = create_monthly_trends(details)
        assert [(t.year, t.month) for t in trends] == [(2024, 12), (2025, 1), (2025, 3)]

    def test_newest_first(self) -> None:
        details = [detail(1, 2024, 12, 1, 0.2), detail(2, 2025, 3, 1, 0.2)]
        trends = create_monthly_trends(details, newest_first=True)
        assert [(t.year, t.month) for t in trends] == [(2025, 3), (2024, 12)]


class TestCalculateCategoryTotals:
    """Tests for calculate_category_totals."""

    def test_sums_across_months_largest_first(self) -> None:
        details = [
            detail(1, 2025, 1, 0, 0.2, [(FOOD, 100), (FUN, 300)]),
            detail(2, 2025, 2, 0, 0.2, [(FOOD, 250)]),
        ]
        totals = calculate_category_totals(details)
        assert [(t.name, t.total) for t in totals] == [("Food", 350), ("Fun", 300)]

    def test_excludes_savings(self) -> None:
        totals = calculate_category_totals([detail(1, 2025, 1, 0, 0.2, [(SAVINGS, 1000)])])
        assert totals == []


class TestCreateInsights:
    """Tests for create_insights."""

    def test_no_months(self) -> None:
        """Should return all zeros and empty lists."""
        insights = create_insights([])

        assert insights == Insights()
        assert insights.total_months == 0
        assert insights.average_income == 0
        assert insights.total_saved == 0
        assert insights.top_categories == []

    def test_two_month_example(self) -> None:
        """1000 at 20% and 2000 at 10% should average 1500 and save 400."""
        insights = create_insights(
            [
                detail(1, 2025, 1, 1000, 0.2),
                detail(2, 2025, 2, 2000, 0.1, reason="Unexpected medical expense"),
            ]
        )

        assert insights.total_months == 2
        assert insights.average_income == 1500
        assert insights.total_saved == 400
        assert insights.average_savings_amount == 200
        assert insights.average_savings_rate == pytest.approx(0.15)
        assert len(insights.months_with_low_savings) == 1
        assert insights.months_with_low_savings[0].month == 2

    def test_top_categories_limited_to_five(self) -> None:
        categories = [Category(CategoryId(10 + i), UserId(1), f"C{i}", "#000000", False, False, i) for i in range(7)]
        insights = create_insights([detail(1, 2025, 1, 0, 0.2, [(c, 100 * (i + 1)) for i, c in enumerate(categories)])])

        assert len(insights.top_categories) == 5
        assert insights.top_categories[0].name == "C6"


class TestCalculateHistogramBarLength:
    """Tests for calculate_histogram_bar_length."""

    def test_max_amount_fills_bar(self) -> None:
        assert calculate_histogram_bar_length(Money(500), Money(500), 30) == 30

    def test_half(self) -> None:
        assert calculate_histogram_bar_length(Money(250), Money(500), 30) == 15

    def test_zero_max(self) -> None:
        assert calculate_histogram_bar_length(Money(0), Money(0), 30) == 0
