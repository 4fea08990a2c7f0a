"""Tests for ledgerise.domain.categories pure functions."""

import pytest

from ledgerise.domain.categories import (
    DEFAULT_CATEGORIES,
    MAX_REORDER_SIZE,
    SAVINGS_CATEGORY_NAME,
    missing_default_categories,
    next_sort_order,
    normalize_category_name,
    validate_color,
    validate_reorder,
)
from ledgerise.domain.errors import ValidationError
from ledgerise.domain.models import Category, CategoryId, UserId


class TestNormalizeCategoryName:
    """Tests for normalize_category_name."""

    def test_trims_whitespace(self) -> None:
        assert normalize_category_name("  Groceries ") == "Groceries"

    def test_empty_after_trim(self) -> None:
        """Should reject whitespace-only names."""
        with pytest.raises(ValidationError, match="required"):
            normalize_category_name("   ")

    def test_fifty_characters_allowed(self) -> None:
        assert normalize_category_name("x" * 50) == "x" * 50

    def test_fifty_one_characters_rejected(self) -> None:
        with pytest.raises(ValidationError):
            normalize_category_name("x" * 51)


class TestValidateColor:
    """Tests for validate_color."""

    @pytest.mark.parametrize("color", ["#6366f1", "#ABCDEF", "#000000"])
    def test_valid(self, color: str) -> None:
        assert validate_color(color) == color

    @pytest.mark.parametrize("color", ["6366f1", "#fff", "#gggggg", "#6366f1 ", "#6366f1\n", "red"])
    def test_invalid(self, color: str) -> None:
        with pytest.raises(ValidationError):
            validate_color(color)


class TestNextSortOrder:
    """Tests for next_sort_order."""

    def test_empty(self) -> None:
        """First category gets sort order 0."""
        assert next_sort_order([]) == 0

    def test_one_past_max(self) -> None:
        categories = [
            Category(CategoryId(1), UserId(1), "A", "#000000", False, False, 4),
            Category(CategoryId(2), UserId(1), "B", "#000000", False, False, 2),
        ]
        assert next_sort_order(categories) == 5


class TestValidateReorder:
    """Tests for validate_reorder."""

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_reorder([])

    def test_max_size_allowed(self) -> None:
        validate_reorder(list(range(MAX_REORDER_SIZE)))

    def test_over_max_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_reorder(list(range(MAX_REORDER_SIZE + 1)))


class TestDefaultCategories:
    """Tests for the preset categories."""

    def test_exactly_one_savings_default(self) -> None:
        savings = [d for d in DEFAULT_CATEGORIES if d.is_savings]
        assert len(savings) == 1
        assert savings[0].name == SAVINGS_CATEGORY_NAME
        assert savings[0].sort_order == 0

    def test_missing_all(self) -> None:
        assert missing_default_categories(set()) == list(DEFAULT_CATEGORIES)

    def test_skips_existing_names(self) -> None:
        missing = missing_default_categories({"Savings", "Fun"})
        names = [d.name for d in missing]
        assert "Savings" not in names
        assert "Fun" not in names
        assert len(missing) == len(DEFAULT_CATEGORIES) - 2
