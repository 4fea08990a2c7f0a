"""Domain type definitions for ledgerise.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in minor units (cents, pence, ...)
- Month: Month in YYYY-MM format (command line input only)
- UserId, CategoryId, BudgetMonthId, AllocationId, AccountId: row identifiers

The frozen dataclasses mirror the stored records. None of them carries a
savings amount: that value is always derived from income and savings rate.
"""

from dataclasses import dataclass, field
from typing import NewType

# Money amounts are stored as minor units to avoid floating point drift in sums
Money = NewType("Money", int)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

UserId = NewType("UserId", int)
CategoryId = NewType("CategoryId", int)
BudgetMonthId = NewType("BudgetMonthId", int)
AllocationId = NewType("AllocationId", int)
AccountId = NewType("AccountId", int)

# Supported currency codes and their display symbols
CURRENCIES: dict[str, str] = {
    "SLE": "Le",
    "USD": "$",
    "GBP": "£",
    "EUR": "€",
    "NGN": "₦",
}

DEFAULT_CURRENCY = "SLE"

PASSWORD_PROVIDER = "password"


@dataclass(frozen=True)
class User:
    """Immutable user record."""

    id: UserId
    email: str | None
    currency: str
    created_at: float
    name: str | None = None


@dataclass(frozen=True)
class Account:
    """Immutable credential record owned by the authentication provider."""

    id: AccountId
    user_id: UserId
    provider: str
    provider_account_id: str
    created_at: float


@dataclass(frozen=True)
class Category:
    """Immutable spending category."""

    id: CategoryId
    user_id: UserId
    name: str
    color: str
    is_savings: bool
    is_default: bool
    sort_order: int


@dataclass(frozen=True)
class BudgetMonth:
    """Immutable budget month record."""

    id: BudgetMonthId
    user_id: UserId
    year: int
    month: int
    income: Money
    savings_rate: float
    adjustment_reason: str | None = None


@dataclass(frozen=True)
class Allocation:
    """Immutable allocation of an amount to one category within one month."""

    id: AllocationId
    budget_month_id: BudgetMonthId
    category_id: CategoryId
    amount: Money


@dataclass(frozen=True)
class AllocationDetail:
    """Allocation joined with its category (None if the category is gone)."""

    allocation: Allocation
    category: Category | None

    @property
    def sort_order(self) -> int:
        return self.category.sort_order if self.category else 0


@dataclass(frozen=True)
class BudgetMonthDetail:
    """Budget month joined with its allocations, ordered by category."""

    budget_month: BudgetMonth
    allocations: list[AllocationDetail] = field(default_factory=list)
