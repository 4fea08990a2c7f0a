"""Administrative merge of duplicate users sharing a normalized email.

This is never exposed to end users. Run it while nobody else is writing to
the affected accounts.
"""

import dataclasses
import logging
import sqlite3
from pathlib import Path

from ledgerise.domain.errors import ValidationError
from ledgerise.domain.models import PASSWORD_PROVIDER, User, UserId
from ledgerise.domain.reconcile import (
    ReconciliationPlan,
    UserSummary,
    normalize_email,
    plan_reconciliation,
)
from ledgerise.store.queries import (
    delete_account,
    delete_allocations_for_month,
    delete_budget_month,
    delete_categories_for_user,
    delete_refresh_tokens_for_session,
    delete_session,
    delete_user,
    get_accounts_by_provider,
    get_accounts_for_user,
    get_all_users,
    get_allocations,
    get_budget_months,
    get_categories,
    get_session_ids_for_user,
    transaction,
    update_account_owner,
    update_user_email,
)

logger = logging.getLogger(__name__)


def summarize_user(conn: sqlite3.Connection, user: User) -> UserSummary:
    """Count a user's budget data and auth records."""
    budget_months = get_budget_months(conn, user.id)
    return UserSummary(
        user_id=user.id,
        email=user.email,
        budget_months=len(budget_months),
        categories=len(get_categories(conn, user.id)),
        allocations=sum(len(get_allocations(conn, bm.id)) for bm in budget_months),
        password_accounts=len(get_accounts_for_user(conn, user.id, PASSWORD_PROVIDER)),
        sessions=len(get_session_ids_for_user(conn, user.id)),
        created_at=user.created_at,
    )


def purge_user(conn: sqlite3.Connection, user_id: UserId) -> None:
    """Delete a user and everything that hangs off it."""
    for budget_month in get_budget_months(conn, user_id):
        delete_allocations_for_month(conn, budget_month.id)
        delete_budget_month(conn, budget_month.id)

    delete_categories_for_user(conn, user_id)

    for account in get_accounts_for_user(conn, user_id):
        delete_account(conn, account.id)

    for session_id in get_session_ids_for_user(conn, user_id):
        delete_refresh_tokens_for_session(conn, session_id)
        delete_session(conn, session_id)

    delete_user(conn, user_id)


def resolve_duplicate_email(
    email: str,
    dry_run: bool = True,
    allow_delete_with_data: bool = False,
    keep_user_id: UserId | None = None,
    db_path: Path | None = None,
) -> ReconciliationPlan:
    """Merge users that share an email address.

    In dry-run mode (the default) only the plan is returned. When applied,
    the kept user's email is normalized, the primary password credential is
    pointed at the kept user, the other matching credentials are deleted and
    every deletable duplicate is removed with all of its data. Duplicates
    that own data are skipped unless allow_delete_with_data is set.

    Args:
        email: Email to resolve (any case, surrounding spaces allowed).
        dry_run: Report the plan without changing anything.
        allow_delete_with_data: Delete duplicates even if they have data.
        keep_user_id: Force which user survives (ignored if not a match).
        db_path: Path to the database file. If None, uses default location.

    Returns:
        ReconciliationPlan, with deleted_user_ids filled in when applied.

    Raises:
        ValidationError: If the email is empty.
        sqlite3.Error: If database operation fails (nothing is applied).
    """
    normalized = normalize_email(email)
    if not normalized:
        raise ValidationError("Email is required")

    with transaction(db_path, immediate=not dry_run) as conn:
        users = [u for u in get_all_users(conn) if normalize_email(u.email or "") == normalized]
        accounts = [
            a
            for a in get_accounts_by_provider(conn, PASSWORD_PROVIDER)
            if normalize_email(a.provider_account_id) == normalized
        ]
        summaries = [summarize_user(conn, user) for user in users]

        plan = plan_reconciliation(
            normalized,
            summaries,
            accounts,
            dry_run=dry_run,
            allow_delete_with_data=allow_delete_with_data,
            keep_user_id=keep_user_id,
        )

        if dry_run or plan.keep_user_id is None:
            return plan

        keep_user = next(u for u in users if u.id == plan.keep_user_id)
        if keep_user.email != normalized:
            update_user_email(conn, keep_user.id, normalized)

        if plan.primary_account_id is not None:
            update_account_owner(conn, plan.primary_account_id, keep_user.id, normalized)

        for account_id in plan.account_ids_to_delete:
            delete_account(conn, account_id)

        for user_id in plan.users_to_delete:
            logger.warning("Deleting duplicate user %s (%s)", user_id, normalized)
            purge_user(conn, user_id)

    if plan.skipped_user_ids:
        logger.warning("Skipped %d duplicate users that still have data", len(plan.skipped_user_ids))

    return dataclasses.replace(plan, dry_run=False, deleted_user_ids=list(plan.users_to_delete))
