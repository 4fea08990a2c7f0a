"""Domain models and types for ledgerise.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from ledgerise.domain.errors import (
    AuthenticationError,
    ConflictError,
    LedgeriseError,
    NoPreviousMonthError,
    NotFoundError,
    NotificationError,
    StateError,
    ValidationError,
)
from ledgerise.domain.models import (
    Account,
    AccountId,
    Allocation,
    AllocationDetail,
    AllocationId,
    BudgetMonth,
    BudgetMonthDetail,
    BudgetMonthId,
    Category,
    CategoryId,
    Money,
    Month,
    User,
    UserId,
)

__all__ = [
    # Types
    "Money",
    "Month",
    "UserId",
    "CategoryId",
    "BudgetMonthId",
    "AllocationId",
    "AccountId",
    # Records
    "User",
    "Account",
    "Category",
    "BudgetMonth",
    "Allocation",
    "AllocationDetail",
    "BudgetMonthDetail",
    # Errors
    "LedgeriseError",
    "ValidationError",
    "ConflictError",
    "StateError",
    "NotFoundError",
    "NoPreviousMonthError",
    "AuthenticationError",
    "NotificationError",
]
