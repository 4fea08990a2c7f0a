"""History and insights commands."""

import sqlite3
from pathlib import Path

import pandas as pd
from rich.table import Table

from ledgerise.commands.common import console, fail, format_money, resolve_context
from ledgerise.dates import format_month, month_label
from ledgerise.domain.budget import MIN_SAVINGS_RATE
from ledgerise.domain.insights import MonthlyData, calculate_histogram_bar_length
from ledgerise.domain.models import Money
from ledgerise.services.insights import get_history, get_insights

HISTORY_COLUMNS = [
    "month",
    "income",
    "savings_rate",
    "savings_amount",
    "spending_allocated",
    "total_allocated",
    "adjustment_reason",
]


def history_frame(history: list[MonthlyData]) -> pd.DataFrame:
    """Tabulate monthly figures with amounts in major units.

    Args:
        history: Monthly figures, in the order they should appear.

    Returns:
        DataFrame with one row per month and HISTORY_COLUMNS as columns.
    """
    rows = [
        {
            "month": format_month(m.year, m.month),
            "income": m.income / 100,
            "savings_rate": m.savings_rate,
            "savings_amount": m.savings_amount / 100,
            "spending_allocated": m.non_savings_total / 100,
            "total_allocated": m.total_allocated / 100,
            "adjustment_reason": m.adjustment_reason or "",
        }
        for m in history
    ]
    return pd.DataFrame(rows, columns=HISTORY_COLUMNS)


def history_command(user_email: str | None, export: str | None = None) -> None:
    """Show every budget month, newest first, optionally exporting to CSV."""
    ctx, user = resolve_context(user_email)

    try:
        history = get_history(ctx) or []
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if not history:
        console.print("[dim]No budget months yet[/dim]")
        return

    if export:
        export_path = Path(export).expanduser()
        try:
            history_frame(history).to_csv(export_path, index=False)
        except OSError as e:
            fail(f"Export failed: {e}")
        console.print(f"[green]✓ Exported {len(history)} months to {export_path}[/green]")
        return

    table = Table(title="Budget History")
    table.add_column("Month", style="cyan")
    table.add_column("Income", justify="right")
    table.add_column("Savings", justify="right")
    table.add_column("Rate", justify="right")
    table.add_column("Allocated", justify="right")
    table.add_column("Reason", style="dim")

    for m in history:
        rate = f"{m.savings_rate * 100:g}%"
        if m.savings_rate < MIN_SAVINGS_RATE:
            rate = f"[yellow]{rate}[/yellow]"
        table.add_row(
            month_label(m.year, m.month),
            format_money(m.income, user.currency),
            format_money(m.savings_amount, user.currency),
            rate,
            format_money(m.total_allocated, user.currency),
            m.adjustment_reason or "",
        )

    console.print(table)


def insights_command(user_email: str | None, histogram: bool = True) -> None:
    """Show averages, low-savings months and top spending categories."""
    ctx, user = resolve_context(user_email)
    currency = user.currency

    try:
        insights = get_insights(ctx)
    except sqlite3.Error as e:
        fail(f"Database error: {e}")

    if insights is None or insights.total_months == 0:
        console.print("[dim]No budget months yet[/dim]")
        return

    console.print(f"[bold cyan]Insights over {insights.total_months} months[/bold cyan]\n")
    console.print(f"[bold]Average income:[/bold]       {format_money(insights.average_income, currency)}")
    console.print(f"[bold]Average savings rate:[/bold] {insights.average_savings_rate * 100:.1f}%")
    console.print(f"[bold]Average saved:[/bold]        {format_money(insights.average_savings_amount, currency)}")
    console.print(f"[bold]Total saved:[/bold]          [green]{format_money(insights.total_saved, currency)}[/green]")

    if insights.months_with_low_savings:
        console.print("\n[bold yellow]Months below the 20% savings target:[/bold yellow]\n")
        for m in insights.months_with_low_savings:
            reason = f" [dim]({m.adjustment_reason})[/dim]" if m.adjustment_reason else ""
            console.print(f"  {month_label(m.year, m.month):20} {m.savings_rate * 100:g}%{reason}")

    if insights.top_categories:
        console.print("\n[bold]Top categories:[/bold]\n")
        max_amount = Money(max(t.total for t in insights.top_categories))
        bar_width = 30
        for total in insights.top_categories:
            amount_display = format_money(total.total, currency)
            if histogram:
                bar = "█" * calculate_histogram_bar_length(total.total, max_amount, bar_width)
                console.print(f"  {total.name:20} {amount_display:>14} [{total.color}]{bar}[/{total.color}]")
            else:
                console.print(f"  {total.name}: {amount_display}")
