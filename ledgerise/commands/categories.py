"""Category management commands."""

import sqlite3

from rich.table import Table

from ledgerise.commands.common import console, fail, resolve_category, resolve_context
from ledgerise.domain.errors import LedgeriseError
from ledgerise.services.categories import (
    create_category,
    list_categories,
    remove_category,
    reorder_categories,
    seed_default_categories,
    update_category_details,
)


def list_command(user_email: str | None) -> None:
    """List categories in display order."""
    ctx, _ = resolve_context(user_email)

    try:
        categories = list_categories(ctx)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if not categories:
        console.print("[yellow]No categories yet. Run 'ledgerise categories seed' to add the defaults.[/yellow]")
        return

    table = Table(title="Categories")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="white")
    table.add_column("Color")
    table.add_column("Flags", style="dim")

    for idx, category in enumerate(categories, 1):
        flags = []
        if category.is_savings:
            flags.append("savings")
        if category.is_default:
            flags.append("default")
        swatch = f"[{category.color}]■[/{category.color}] {category.color}"
        table.add_row(str(idx), category.name, swatch, ", ".join(flags))

    console.print(table)


def add_command(user_email: str | None, name: str, color: str | None = None) -> None:
    ctx, _ = resolve_context(user_email)

    try:
        category = create_category(ctx, name, color)
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓ Added category {category.name}[/green]")


def edit_command(user_email: str | None, ref: str, name: str | None = None, color: str | None = None) -> None:
    """Rename or recolor a category."""
    ctx, _ = resolve_context(user_email)

    if name is None and color is None:
        fail("Nothing to change. Pass --name and/or --color.")

    try:
        category = resolve_category(list_categories(ctx), ref)
        updated = update_category_details(ctx, category.id, name=name, color=color)
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓ Updated category {updated.name}[/green]")


def remove_command(user_email: str | None, ref: str) -> None:
    """Delete a category and its allocations in every month."""
    ctx, _ = resolve_context(user_email)

    try:
        category = resolve_category(list_categories(ctx), ref)
        removed = remove_category(ctx, category.id)
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print(f"[green]✓ Removed category {category.name}[/green]")
    if removed:
        console.print(f"[dim]Also removed {removed} allocations[/dim]")


def reorder_command(user_email: str | None, refs: list[str]) -> None:
    """Put the given categories first, in that order."""
    ctx, _ = resolve_context(user_email)

    try:
        categories = list_categories(ctx)
        ordered = [resolve_category(categories, ref) for ref in refs]
        ordered_ids = [c.id for c in ordered]
        rest = [c.id for c in categories if c.id not in ordered_ids]
        reorder_categories(ctx, ordered_ids + rest)
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    console.print("[green]✓ Categories reordered[/green]")


def seed_command(user_email: str | None) -> None:
    """Add whichever default categories are missing."""
    ctx, _ = resolve_context(user_email)

    try:
        created = seed_default_categories(ctx)
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if created:
        console.print(f"[green]✓ Added {len(created)} default categories[/green]")
    else:
        console.print("[dim]All default categories already exist[/dim]")
