"""Read-only insights and history for the current user."""

from ledgerise.domain.insights import Insights, MonthlyData, create_insights, create_monthly_trends
from ledgerise.services.budget_months import load_month_details
from ledgerise.services.context import Context
from ledgerise.store.queries import transaction


def get_insights(ctx: Context) -> Insights | None:
    """Averages, low-savings months and top categories (None when anonymous)."""
    if ctx.user_id is None:
        return None
    with transaction(ctx.db_path, immediate=False) as conn:
        details = load_month_details(conn, ctx.user_id)
    return create_insights(details)


def get_history(ctx: Context) -> list[MonthlyData] | None:
    """Per-month figures newest first (None when anonymous)."""
    if ctx.user_id is None:
        return None
    with transaction(ctx.db_path, immediate=False) as conn:
        details = load_month_details(conn, ctx.user_id)
    return create_monthly_trends(details, newest_first=True)
