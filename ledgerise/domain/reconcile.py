"""Pure planning functions for merging duplicate accounts.

Given summaries of every user that shares a normalized email, these functions
decide which user survives, which credential becomes the primary one and which
duplicates may be deleted. Applying the plan is left to the caller.
"""

from dataclasses import dataclass, field

from ledgerise.domain.models import Account, AccountId, UserId


@dataclass(frozen=True)
class UserSummary:
    """Immutable record counts for one candidate user."""

    user_id: UserId
    email: str | None
    budget_months: int
    categories: int
    allocations: int
    password_accounts: int
    sessions: int
    created_at: float

    @property
    def has_data(self) -> bool:
        return self.budget_months > 0 or self.categories > 0 or self.allocations > 0


@dataclass(frozen=True)
class ReconciliationPlan:
    """Immutable outcome of a duplicate-email resolution."""

    normalized_email: str
    users: list[UserSummary] = field(default_factory=list)
    keep_user_id: UserId | None = None
    primary_account_id: AccountId | None = None
    duplicate_user_ids: list[UserId] = field(default_factory=list)
    users_to_delete: list[UserId] = field(default_factory=list)
    skipped_user_ids: list[UserId] = field(default_factory=list)
    account_ids_to_delete: list[AccountId] = field(default_factory=list)
    dry_run: bool = True
    deleted_user_ids: list[UserId] = field(default_factory=list)
    message: str | None = None


def normalize_email(email: str) -> str:
    """Trim and lowercase an email address."""
    return email.strip().lower()


def pick_user_to_keep(summaries: list[UserSummary], preferred_user_id: UserId | None = None) -> UserSummary:
    """Choose the surviving user.

    The preferred user wins when it is among the candidates. Otherwise the
    user with the most budget months, then allocations, then categories, then
    the earliest created one (lowest id on a tie).

    Args:
        summaries: Candidate users (at least one).
        preferred_user_id: Explicit choice from the operator.

    Returns:
        The UserSummary to keep.
    """
    if preferred_user_id is not None:
        for summary in summaries:
            if summary.user_id == preferred_user_id:
                return summary

    return min(
        summaries,
        key=lambda s: (-s.budget_months, -s.allocations, -s.categories, s.created_at, s.user_id),
    )


def pick_primary_account(accounts: list[Account], keep_user_id: UserId) -> Account | None:
    """Newest credential of the kept user, else the newest credential overall."""
    own = [a for a in accounts if a.user_id == keep_user_id]
    candidates = own or accounts
    if not candidates:
        return None
    return max(candidates, key=lambda a: (a.created_at, a.id))


def plan_reconciliation(
    normalized_email: str,
    summaries: list[UserSummary],
    accounts: list[Account],
    dry_run: bool = True,
    allow_delete_with_data: bool = False,
    keep_user_id: UserId | None = None,
) -> ReconciliationPlan:
    """Build the reconciliation plan for one email address.

    Args:
        normalized_email: Email after normalize_email.
        summaries: Summaries of every user with that email.
        accounts: Password credentials with that email.
        dry_run: Whether the plan will only be reported.
        allow_delete_with_data: Also delete duplicates that own data.
        keep_user_id: Operator's choice of user to keep.

    Returns:
        ReconciliationPlan; a no-op plan with a message when nobody matches.
    """
    if not summaries:
        return ReconciliationPlan(
            normalized_email=normalized_email,
            dry_run=dry_run,
            message="No users found for this email.",
        )

    keep = pick_user_to_keep(summaries, keep_user_id)
    duplicates = [s for s in summaries if s.user_id != keep.user_id]
    primary = pick_primary_account(accounts, keep.user_id)

    deletable = [s for s in duplicates if allow_delete_with_data or not s.has_data]
    skipped = [s for s in duplicates if not allow_delete_with_data and s.has_data]

    return ReconciliationPlan(
        normalized_email=normalized_email,
        users=summaries,
        keep_user_id=keep.user_id,
        primary_account_id=primary.id if primary else None,
        duplicate_user_ids=[s.user_id for s in duplicates],
        users_to_delete=[s.user_id for s in deletable],
        skipped_user_ids=[s.user_id for s in skipped],
        account_ids_to_delete=[a.id for a in accounts if primary is None or a.id != primary.id],
        dry_run=dry_run,
    )
