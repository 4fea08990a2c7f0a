"""Pure functions for category rules.

This module contains the functional core for category management:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
"""

import re
from dataclasses import dataclass

from ledgerise.domain.errors import ValidationError
from ledgerise.domain.models import Category

MAX_CATEGORY_NAME_LENGTH = 50
MAX_REORDER_SIZE = 100
DEFAULT_CATEGORY_COLOR = "#6366f1"

_HEX_COLOR = re.compile(r"#[0-9A-Fa-f]{6}")


@dataclass(frozen=True)
class DefaultCategory:
    """Preset category created during onboarding."""

    name: str
    color: str
    is_savings: bool
    sort_order: int


SAVINGS_CATEGORY_NAME = "Savings"

DEFAULT_CATEGORIES: tuple[DefaultCategory, ...] = (
    DefaultCategory(SAVINGS_CATEGORY_NAME, "#6366f1", True, 0),
    DefaultCategory("Transport & Food", "#f59e0b", False, 1),
    DefaultCategory("Utilities", "#10b981", False, 2),
    DefaultCategory("Partner & Child Support", "#ec4899", False, 3),
    DefaultCategory("Subscriptions", "#8b5cf6", False, 4),
    DefaultCategory("Fun", "#06b6d4", False, 5),
    DefaultCategory("Remittance", "#f97316", False, 6),
)


def normalize_category_name(name: str) -> str:
    """Trim and validate a category name.

    Args:
        name: Raw name as typed by the user.

    Returns:
        The trimmed name.

    Raises:
        ValidationError: If the name is empty or too long.
    """
    trimmed = name.strip()
    if not trimmed:
        raise ValidationError("Category name is required")
    if len(trimmed) > MAX_CATEGORY_NAME_LENGTH:
        raise ValidationError(f"Category name must be {MAX_CATEGORY_NAME_LENGTH} characters or less")
    return trimmed


def validate_color(color: str) -> str:
    """Validate a #RRGGBB color.

    Raises:
        ValidationError: If the color is not a six digit hex color.
    """
    if not _HEX_COLOR.fullmatch(color):
        raise ValidationError("Please enter a valid hex color")
    return color


def next_sort_order(categories: list[Category]) -> int:
    """Sort order for a new category: one past the highest existing value."""
    return max((c.sort_order for c in categories), default=-1) + 1


def validate_reorder(category_ids: list[int]) -> None:
    """Validate the size of a reorder request.

    Raises:
        ValidationError: If the list is empty or longer than MAX_REORDER_SIZE.
    """
    if not category_ids or len(category_ids) > MAX_REORDER_SIZE:
        raise ValidationError("Invalid category order")


def missing_default_categories(existing_names: set[str]) -> list[DefaultCategory]:
    """Return the default categories whose names don't exist yet.

    Args:
        existing_names: Names of the user's current categories.

    Returns:
        Defaults to create, in sort order.
    """
    return [default for default in DEFAULT_CATEGORIES if default.name not in existing_names]
