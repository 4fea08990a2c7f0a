"""Budget month and allocation commands."""

import sqlite3

from rich.table import Table

from ledgerise.commands.common import (
    console,
    fail,
    format_money,
    parse_money,
    resolve_category,
    resolve_context,
    resolve_month,
)
from ledgerise.dates import month_label
from ledgerise.domain.budget import MIN_SAVINGS_RATE, ensure_allocatable, summarize_month
from ledgerise.domain.errors import LedgeriseError
from ledgerise.domain.models import BudgetMonthDetail
from ledgerise.services.allocations import remove_from_month, set_allocation
from ledgerise.services.budget_months import get_month, get_or_create_month, set_income, set_savings_rate
from ledgerise.services.categories import list_categories
from ledgerise.services.context import Context
from ledgerise.services.copy_forward import copy_allocations, copy_from_previous


def format_rate(rate: float) -> str:
    return f"{rate * 100:g}%"


def show_month_status(ctx: Context, detail: BudgetMonthDetail, currency: str) -> None:
    """Render a month's income, savings and allocations.

    Args:
        ctx: Caller context (its day decides whether the month is editable).
        detail: Budget month with allocations.
        currency: Currency code for amounts.
    """
    budget_month = detail.budget_month
    summary = summarize_month(detail, ctx.today)
    label = month_label(budget_month.year, budget_month.month)

    editable = "" if summary.is_editable else " [dim](read-only)[/dim]"
    console.print(f"[bold cyan]{label} Budget[/bold cyan]{editable}\n")

    console.print(f"[bold]Income:[/bold]          {format_money(summary.income, currency)}")
    rate_display = format_rate(summary.savings_rate)
    if summary.savings_rate < MIN_SAVINGS_RATE:
        rate_display = f"[yellow]{rate_display}[/yellow]"
    console.print(f"[bold]Savings:[/bold]         {format_money(summary.savings_amount, currency)} ({rate_display})")
    if budget_month.adjustment_reason:
        console.print(f"[dim]  Reason: {budget_month.adjustment_reason}[/dim]")
    console.print(f"[bold]Total Allocated:[/bold] {format_money(summary.total_allocated, currency)}")

    if summary.is_over_budget:
        console.print(
            f"[bold]Over budget:[/bold]     [red]{format_money(abs(summary.remaining), currency)} "
            "(allocated more than you earn!)[/red]"
        )
    elif summary.remaining > 0:
        console.print(f"[bold]Remaining:[/bold]       [yellow]{format_money(summary.remaining, currency)}[/yellow]")
    else:
        console.print(f"[bold]Remaining:[/bold]       [green]{format_money(0, currency)} (fully allocated)[/green]")

    if not detail.allocations:
        console.print("\n[dim]No categories allocated yet[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Category", style="white")
    table.add_column("Allocated", justify="right")
    table.add_column("% of income", justify="right", style="dim")

    for allocation_detail in detail.allocations:
        name = allocation_detail.category.name if allocation_detail.category else "[dim](deleted)[/dim]"
        amount = allocation_detail.allocation.amount
        share = f"{amount / summary.income * 100:.0f}%" if summary.income else "-"
        table.add_row(name, format_money(amount, currency), share)

    console.print()
    console.print(table)


def month_command(
    user_email: str | None,
    month: str | None = None,
    income: str | None = None,
    savings_rate: float | None = None,
    reason: str | None = None,
    copy_previous: bool = False,
    copy_from: str | None = None,
) -> None:
    """Show a budget month, applying any requested changes first."""
    ctx, user = resolve_context(user_email)
    year, month_num = resolve_month(month, ctx.today)

    income_minor = None
    if income is not None:
        income_minor = parse_money(income)
        if income_minor is None:
            fail("Invalid income amount")

    source_period = resolve_month(copy_from, ctx.today) if copy_from else None

    try:
        detail = get_or_create_month(ctx, year, month_num)
        budget_month_id = detail.budget_month.id

        if income_minor is not None:
            set_income(ctx, budget_month_id, income_minor)
            console.print(f"[green]✓ Income set to {format_money(income_minor, user.currency)}[/green]")

        if savings_rate is not None:
            set_savings_rate(ctx, budget_month_id, savings_rate / 100, reason)
            console.print(f"[green]✓ Savings rate set to {format_rate(savings_rate / 100)}[/green]")

        if copy_previous:
            source, copied = copy_from_previous(ctx, budget_month_id)
            console.print(
                f"[green]✓ Copied {copied} allocations from {month_label(source.year, source.month)}[/green]"
            )

        if source_period is not None:
            source_detail = get_month(ctx, *source_period)
            if source_detail is None:
                fail(f"No budget for {month_label(*source_period)}")
            copied = copy_allocations(ctx, source_detail.budget_month.id, budget_month_id)
            console.print(f"[green]✓ Copied {copied} allocations from {month_label(*source_period)}[/green]")

        refreshed = get_month(ctx, year, month_num)
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if income_minor is not None or savings_rate is not None or copy_previous or source_period is not None:
        console.print()
    show_month_status(ctx, refreshed or detail, user.currency)


def allocate_command(user_email: str | None, category_ref: str, amount: str, month: str | None = None) -> None:
    """Set a category's allocation for a month (0 removes it)."""
    ctx, user = resolve_context(user_email)
    year, month_num = resolve_month(month, ctx.today)

    amount_minor = parse_money(amount)
    if amount_minor is None:
        fail("Invalid amount")

    try:
        category = resolve_category(list_categories(ctx), category_ref)
        detail = get_or_create_month(ctx, year, month_num)
        allocation = set_allocation(ctx, detail.budget_month.id, category.id, amount_minor)
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    label = month_label(year, month_num)
    if allocation is None:
        console.print(f"[green]✓ Removed {category.name} from {label}[/green]")
    else:
        console.print(f"[green]✓ {category.name} allocated {format_money(allocation.amount, user.currency)} for {label}[/green]")


def unallocate_command(user_email: str | None, category_ref: str, month: str | None = None) -> None:
    """Remove a category's allocation from a month."""
    ctx, _ = resolve_context(user_email)
    year, month_num = resolve_month(month, ctx.today)

    try:
        category = resolve_category(list_categories(ctx), category_ref)
        ensure_allocatable(category)
        detail = get_month(ctx, year, month_num)
        removed = detail is not None and remove_from_month(ctx, detail.budget_month.id, category.id)
    except LedgeriseError as e:
        fail(str(e))
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    label = month_label(year, month_num)
    if removed:
        console.print(f"[green]✓ Removed {category.name} from {label}[/green]")
    else:
        console.print(f"[dim]{category.name} has no allocation in {label}[/dim]")
