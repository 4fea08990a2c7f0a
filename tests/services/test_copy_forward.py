"""Tests for ledgerise.services.copy_forward against a temporary database."""

from pathlib import Path

import pytest

from ledgerise.domain.errors import NoPreviousMonthError, NotFoundError, StateError
from ledgerise.domain.models import BudgetMonthId, Category, Money
from ledgerise.services.allocations import list_allocations, set_allocation
from ledgerise.services.budget_months import get_or_create_month
from ledgerise.services.categories import create_category, list_categories, seed_default_categories
from ledgerise.services.context import Context
from ledgerise.services.copy_forward import copy_allocations, copy_from_previous
from ledgerise.store.queries import insert_allocation, transaction


@pytest.fixture
def food(ctx: Context) -> Category:
    return create_category(ctx, "Food")


@pytest.fixture
def fun(ctx: Context) -> Category:
    return create_category(ctx, "Fun")


def amounts(ctx: Context, budget_month_id: BudgetMonthId) -> dict[str, int]:
    return {
        line.category.name: line.allocation.amount
        for line in list_allocations(ctx, budget_month_id)
        if line.category
    }


class TestCopyFromPrevious:
    """Tests for copy_from_previous."""

    def test_copies_previous_allocations(self, ctx: Context, food: Category, fun: Category) -> None:
        may = get_or_create_month(ctx, 2025, 5).budget_month
        set_allocation(ctx, may.id, food.id, Money(100))
        set_allocation(ctx, may.id, fun.id, Money(50))
        june = get_or_create_month(ctx, 2025, 6).budget_month

        source, copied = copy_from_previous(ctx, june.id)

        assert source.id == may.id
        assert copied == 2
        assert amounts(ctx, june.id) == {"Food": 100, "Fun": 50}

    def test_uses_most_recent_earlier_month(self, ctx: Context, food: Category) -> None:
        january = get_or_create_month(ctx, 2025, 1).budget_month
        march = get_or_create_month(ctx, 2025, 3).budget_month
        set_allocation(ctx, january.id, food.id, Money(100))
        set_allocation(ctx, march.id, food.id, Money(300))
        june = get_or_create_month(ctx, 2025, 6).budget_month

        source, _ = copy_from_previous(ctx, june.id)

        assert (source.year, source.month) == (2025, 3)
        assert amounts(ctx, june.id) == {"Food": 300}

    def test_overwrites_and_keeps_other_rows(self, ctx: Context, food: Category, fun: Category) -> None:
        may = get_or_create_month(ctx, 2025, 5).budget_month
        set_allocation(ctx, may.id, food.id, Money(100))
        june = get_or_create_month(ctx, 2025, 6).budget_month
        set_allocation(ctx, june.id, food.id, Money(999))
        set_allocation(ctx, june.id, fun.id, Money(25))

        copy_from_previous(ctx, june.id)
        copy_from_previous(ctx, june.id)

        assert amounts(ctx, june.id) == {"Food": 100, "Fun": 25}

    def test_skips_savings_rows(self, ctx: Context, db_path: Path, food: Category) -> None:
        seed_default_categories(ctx)
        savings = next(c for c in list_categories(ctx) if c.is_savings)
        may = get_or_create_month(ctx, 2025, 5).budget_month
        set_allocation(ctx, may.id, food.id, Money(100))
        with transaction(db_path) as conn:
            insert_allocation(conn, may.id, savings.id, Money(5000))
        june = get_or_create_month(ctx, 2025, 6).budget_month

        _, copied = copy_from_previous(ctx, june.id)

        assert copied == 1
        assert amounts(ctx, june.id) == {"Food": 100}

    def test_no_previous_month(self, ctx: Context) -> None:
        june = get_or_create_month(ctx, 2025, 6).budget_month

        with pytest.raises(NoPreviousMonthError, match="No previous month found to copy from"):
            copy_from_previous(ctx, june.id)

    def test_no_previous_month_is_not_found_and_state_error(self, ctx: Context) -> None:
        june = get_or_create_month(ctx, 2025, 6).budget_month

        with pytest.raises(NotFoundError):
            copy_from_previous(ctx, june.id)
        with pytest.raises(StateError):
            copy_from_previous(ctx, june.id)

    def test_past_month_not_editable(self, ctx: Context) -> None:
        get_or_create_month(ctx, 2025, 3)
        april = get_or_create_month(ctx, 2025, 4).budget_month

        with pytest.raises(StateError, match="not editable"):
            copy_from_previous(ctx, april.id)

    def test_future_month_within_window(self, ctx: Context, food: Category) -> None:
        june = get_or_create_month(ctx, 2025, 6).budget_month
        set_allocation(ctx, june.id, food.id, Money(100))
        next_june = get_or_create_month(ctx, 2026, 6).budget_month

        _, copied = copy_from_previous(ctx, next_june.id)

        assert copied == 1

    def test_other_users_month_not_found(self, ctx: Context, other_ctx: Context) -> None:
        theirs = get_or_create_month(other_ctx, 2025, 6).budget_month

        with pytest.raises(NotFoundError):
            copy_from_previous(ctx, theirs.id)


class TestCopyAllocations:
    """Tests for copy_allocations."""

    def test_copies_between_months(self, ctx: Context, food: Category, fun: Category) -> None:
        january = get_or_create_month(ctx, 2025, 1).budget_month
        set_allocation(ctx, january.id, food.id, Money(100))
        set_allocation(ctx, january.id, fun.id, Money(50))
        june = get_or_create_month(ctx, 2025, 6).budget_month

        assert copy_allocations(ctx, january.id, june.id) == 2
        assert amounts(ctx, june.id) == {"Food": 100, "Fun": 50}

    def test_source_must_be_owned(self, ctx: Context, other_ctx: Context) -> None:
        theirs_category = create_category(other_ctx, "Theirs")
        theirs = get_or_create_month(other_ctx, 2025, 5).budget_month
        set_allocation(other_ctx, theirs.id, theirs_category.id, Money(100))
        june = get_or_create_month(ctx, 2025, 6).budget_month

        with pytest.raises(NotFoundError):
            copy_allocations(ctx, theirs.id, june.id)

        assert amounts(ctx, june.id) == {}
