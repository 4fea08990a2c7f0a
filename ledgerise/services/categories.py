"""Category operations for the current user."""

import logging
import sqlite3

from ledgerise.domain.categories import (
    DEFAULT_CATEGORY_COLOR,
    missing_default_categories,
    next_sort_order,
    normalize_category_name,
    validate_color,
    validate_reorder,
)
from ledgerise.domain.errors import ConflictError, NotFoundError, StateError
from ledgerise.domain.models import Category, CategoryId, UserId
from ledgerise.services.context import Context
from ledgerise.store.queries import (
    delete_allocations_for_category,
    delete_category,
    get_categories,
    get_category,
    get_category_by_name,
    insert_category,
    set_category_sort_order,
    transaction,
    update_category,
)

logger = logging.getLogger(__name__)


def get_owned_category(conn: sqlite3.Connection, user_id: UserId, category_id: CategoryId) -> Category:
    """Load a category the user owns.

    Raises:
        NotFoundError: If it doesn't exist or belongs to someone else.
    """
    category = get_category(conn, category_id)
    if category is None or category.user_id != user_id:
        raise NotFoundError("Category not found")
    return category


def _ensure_name_available(
    conn: sqlite3.Connection, user_id: UserId, name: str, category_id: CategoryId | None = None
) -> None:
    existing = get_category_by_name(conn, user_id, name)
    if existing and existing.id != category_id:
        raise ConflictError("A category with this name already exists")


def list_categories(ctx: Context) -> list[Category]:
    """List the caller's categories by sort order (empty when anonymous)."""
    if ctx.user_id is None:
        return []
    with transaction(ctx.db_path, immediate=False) as conn:
        return get_categories(conn, ctx.user_id)


def create_category(ctx: Context, name: str, color: str | None = None) -> Category:
    """Create a spending category at the end of the list.

    Args:
        ctx: Caller context.
        name: Category name (trimmed, 1-50 characters).
        color: #RRGGBB color; defaults to the brand indigo.

    Returns:
        The new Category.

    Raises:
        ValidationError: On a bad name or color.
        ConflictError: If the user already has a category with this name.
    """
    user_id = ctx.require_user()
    clean_name = normalize_category_name(name)
    clean_color = validate_color(color if color is not None else DEFAULT_CATEGORY_COLOR)

    with transaction(ctx.db_path) as conn:
        _ensure_name_available(conn, user_id, clean_name)
        sort_order = next_sort_order(get_categories(conn, user_id))
        category = insert_category(conn, user_id, clean_name, clean_color, sort_order)

    logger.info("Created category %r for user %s", category.name, user_id)
    return category


def update_category_details(
    ctx: Context,
    category_id: CategoryId,
    name: str | None = None,
    color: str | None = None,
) -> Category:
    """Rename and/or recolor a category.

    Raises:
        NotFoundError: If the category isn't the caller's.
        StateError: If renaming the savings category.
        ValidationError: On a bad name or color.
        ConflictError: If another category already has the new name.
    """
    user_id = ctx.require_user()

    with transaction(ctx.db_path) as conn:
        category = get_owned_category(conn, user_id, category_id)

        if category.is_savings and name:
            raise StateError("Cannot rename the Savings category")

        clean_name = None
        if name is not None:
            clean_name = normalize_category_name(name)
            _ensure_name_available(conn, user_id, clean_name, category_id)

        clean_color = validate_color(color) if color is not None else None

        update_category(conn, category_id, clean_name, clean_color)
        updated = get_category(conn, category_id)

    assert updated is not None
    logger.info("Updated category %s for user %s", category_id, user_id)
    return updated


def remove_category(ctx: Context, category_id: CategoryId) -> int:
    """Delete a category together with all of its allocations.

    Returns:
        Number of allocations removed.

    Raises:
        NotFoundError: If the category isn't the caller's.
        StateError: If it is the savings category.
    """
    user_id = ctx.require_user()

    with transaction(ctx.db_path) as conn:
        category = get_owned_category(conn, user_id, category_id)
        if category.is_savings:
            raise StateError("Cannot delete the Savings category")

        removed = delete_allocations_for_category(conn, category_id)
        delete_category(conn, category_id)

    logger.info("Deleted category %r (%d allocations) for user %s", category.name, removed, user_id)
    return removed


def reorder_categories(ctx: Context, category_ids: list[CategoryId]) -> None:
    """Set sort_order to each id's position in the list.

    Raises:
        ValidationError: If the list is empty or has more than 100 ids.
        NotFoundError: If any id isn't one of the caller's categories.
    """
    user_id = ctx.require_user()
    validate_reorder(category_ids)

    with transaction(ctx.db_path) as conn:
        for category_id in category_ids:
            get_owned_category(conn, user_id, category_id)

        for index, category_id in enumerate(category_ids):
            set_category_sort_order(conn, category_id, index)

    logger.info("Reordered %d categories for user %s", len(category_ids), user_id)


def seed_categories(conn: sqlite3.Connection, user_id: UserId) -> list[Category]:
    """Create the default categories that don't exist yet, inside a transaction."""
    existing = {c.name for c in get_categories(conn, user_id)}
    return [
        insert_category(
            conn,
            user_id,
            default.name,
            default.color,
            default.sort_order,
            is_savings=default.is_savings,
            is_default=True,
        )
        for default in missing_default_categories(existing)
    ]


def seed_default_categories(ctx: Context) -> list[Category]:
    """Create Savings and the preset spending categories, skipping existing names.

    Returns:
        Categories that were created (empty when all already exist).
    """
    user_id = ctx.require_user()
    with transaction(ctx.db_path) as conn:
        created = seed_categories(conn, user_id)

    if created:
        logger.info("Seeded %d default categories for user %s", len(created), user_id)
    return created
