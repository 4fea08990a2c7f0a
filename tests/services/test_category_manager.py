"""Tests for ledgerise.services.categories against a temporary database."""

from pathlib import Path

import pytest

from ledgerise.domain.categories import DEFAULT_CATEGORIES, DEFAULT_CATEGORY_COLOR
from ledgerise.domain.errors import AuthenticationError, ConflictError, NotFoundError, StateError, ValidationError
from ledgerise.domain.models import CategoryId, Money
from ledgerise.services.allocations import set_allocation
from ledgerise.services.budget_months import get_or_create_month
from ledgerise.services.categories import (
    create_category,
    list_categories,
    remove_category,
    reorder_categories,
    seed_default_categories,
    update_category_details,
)
from ledgerise.services.context import Context
from ledgerise.store.queries import get_allocations, transaction


class TestCreateCategory:
    """Tests for create_category."""

    def test_creates_with_trimmed_name_and_default_color(self, ctx: Context) -> None:
        category = create_category(ctx, "  Groceries  ")

        assert category.name == "Groceries"
        assert category.color == DEFAULT_CATEGORY_COLOR
        assert not category.is_savings
        assert not category.is_default

    def test_sort_order_appends(self, ctx: Context) -> None:
        first = create_category(ctx, "Rent")
        second = create_category(ctx, "Food", "#f59e0b")

        assert second.sort_order == first.sort_order + 1
        assert second.color == "#f59e0b"

    def test_duplicate_name_rejected(self, ctx: Context) -> None:
        create_category(ctx, "Rent")

        with pytest.raises(ConflictError):
            create_category(ctx, " Rent ")

    def test_same_name_for_different_users(self, ctx: Context, other_ctx: Context) -> None:
        """Name uniqueness is per user."""
        create_category(ctx, "Rent")
        create_category(other_ctx, "Rent")

        assert [c.name for c in list_categories(other_ctx)] == ["Rent"]

    def test_invalid_color_rejected(self, ctx: Context) -> None:
        with pytest.raises(ValidationError):
            create_category(ctx, "Rent", "blue")
        with pytest.raises(ValidationError):
            create_category(ctx, "Food", "#aabbcc\n")

        assert list_categories(ctx) == []

    def test_empty_name_rejected(self, ctx: Context) -> None:
        with pytest.raises(ValidationError):
            create_category(ctx, "   ")

    def test_requires_user(self, anonymous_ctx: Context) -> None:
        with pytest.raises(AuthenticationError):
            create_category(anonymous_ctx, "Rent")


class TestListCategories:
    """Tests for list_categories."""

    def test_anonymous_gets_empty_list(self, anonymous_ctx: Context) -> None:
        assert list_categories(anonymous_ctx) == []

    def test_only_own_categories(self, ctx: Context, other_ctx: Context) -> None:
        create_category(ctx, "Mine")
        create_category(other_ctx, "Theirs")

        assert [c.name for c in list_categories(ctx)] == ["Mine"]


class TestUpdateCategory:
    """Tests for update_category_details."""

    def test_rename_and_recolor(self, ctx: Context) -> None:
        category = create_category(ctx, "Rent")

        updated = update_category_details(ctx, category.id, name=" Housing ", color="#000000")

        assert updated.name == "Housing"
        assert updated.color == "#000000"

    def test_rename_to_existing_name_rejected(self, ctx: Context) -> None:
        create_category(ctx, "Rent")
        food = create_category(ctx, "Food")

        with pytest.raises(ConflictError):
            update_category_details(ctx, food.id, name="Rent")

    def test_rename_to_own_name_allowed(self, ctx: Context) -> None:
        rent = create_category(ctx, "Rent")
        assert update_category_details(ctx, rent.id, name="Rent").name == "Rent"

    def test_savings_cannot_be_renamed(self, ctx: Context) -> None:
        seed_default_categories(ctx)
        savings = next(c for c in list_categories(ctx) if c.is_savings)

        with pytest.raises(StateError):
            update_category_details(ctx, savings.id, name="Rainy day")

    def test_savings_can_be_recolored(self, ctx: Context) -> None:
        seed_default_categories(ctx)
        savings = next(c for c in list_categories(ctx) if c.is_savings)

        assert update_category_details(ctx, savings.id, color="#123456").color == "#123456"

    def test_other_users_category_not_found(self, ctx: Context, other_ctx: Context) -> None:
        theirs = create_category(other_ctx, "Theirs")

        with pytest.raises(NotFoundError, match="Category not found"):
            update_category_details(ctx, theirs.id, name="Mine now")


class TestRemoveCategory:
    """Tests for remove_category."""

    def test_cascades_to_allocations(self, ctx: Context, db_path: Path) -> None:
        fun = create_category(ctx, "Fun")
        food = create_category(ctx, "Food")
        june = get_or_create_month(ctx, 2025, 6)
        july = get_or_create_month(ctx, 2025, 7)
        set_allocation(ctx, june.budget_month.id, fun.id, Money(5000))
        set_allocation(ctx, july.budget_month.id, fun.id, Money(6000))
        set_allocation(ctx, july.budget_month.id, food.id, Money(1000))

        removed = remove_category(ctx, fun.id)

        assert removed == 2
        assert [c.name for c in list_categories(ctx)] == ["Food"]
        with transaction(db_path, immediate=False) as conn:
            remaining = get_allocations(conn, july.budget_month.id) + get_allocations(conn, june.budget_month.id)
        assert [a.category_id for a in remaining] == [food.id]

    def test_savings_cannot_be_deleted(self, ctx: Context) -> None:
        seed_default_categories(ctx)
        savings = next(c for c in list_categories(ctx) if c.is_savings)

        with pytest.raises(StateError):
            remove_category(ctx, savings.id)

    def test_missing_category(self, ctx: Context) -> None:
        with pytest.raises(NotFoundError):
            remove_category(ctx, CategoryId(12345))


class TestReorderCategories:
    """Tests for reorder_categories."""

    def test_sets_positions(self, ctx: Context) -> None:
        a = create_category(ctx, "A")
        b = create_category(ctx, "B")
        c = create_category(ctx, "C")

        reorder_categories(ctx, [c.id, a.id, b.id])

        assert [x.name for x in list_categories(ctx)] == ["C", "A", "B"]

    def test_foreign_id_rejected_without_partial_write(self, ctx: Context, other_ctx: Context) -> None:
        a = create_category(ctx, "A")
        b = create_category(ctx, "B")
        theirs = create_category(other_ctx, "Theirs")

        with pytest.raises(NotFoundError):
            reorder_categories(ctx, [b.id, theirs.id, a.id])

        assert [x.name for x in list_categories(ctx)] == ["A", "B"]

    def test_empty_list_rejected(self, ctx: Context) -> None:
        with pytest.raises(ValidationError):
            reorder_categories(ctx, [])


class TestSeedDefaultCategories:
    """Tests for seed_default_categories."""

    def test_creates_defaults(self, ctx: Context) -> None:
        created = seed_default_categories(ctx)

        assert len(created) == len(DEFAULT_CATEGORIES)
        assert all(c.is_default for c in created)
        assert sum(c.is_savings for c in created) == 1

    def test_idempotent(self, ctx: Context) -> None:
        seed_default_categories(ctx)

        assert seed_default_categories(ctx) == []
        assert len(list_categories(ctx)) == len(DEFAULT_CATEGORIES)

    def test_keeps_existing_same_name(self, ctx: Context) -> None:
        create_category(ctx, "Fun", "#000000")

        created = seed_default_categories(ctx)

        assert "Fun" not in [c.name for c in created]
        fun = next(c for c in list_categories(ctx) if c.name == "Fun")
        assert fun.color == "#000000"
