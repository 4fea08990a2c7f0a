"""Database query functions.

Every function takes an open connection so that an operation can run all of
its reads and writes inside one transaction (see `transaction`).
"""

import sqlite3
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ledgerise.domain.models import (
    Account,
    AccountId,
    Allocation,
    AllocationId,
    BudgetMonth,
    BudgetMonthId,
    Category,
    CategoryId,
    Money,
    User,
    UserId,
)
from ledgerise.store.schema import get_db_path


@contextmanager
def transaction(db_path: Path | None = None, immediate: bool = True) -> Iterator[sqlite3.Connection]:
    """Open a connection and run the block as a single transaction.

    Commits when the block finishes and rolls back on any exception. Write
    transactions start with BEGIN IMMEDIATE so check-then-write sequences see
    no interleaved writers.

    Args:
        db_path: Path to the database file. If None, uses default location.
        immediate: Take the write lock up front (use False for reads).

    Yields:
        Database connection with row_factory configured.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path, isolation_level=None)
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA foreign_keys = ON")
        conn.execute("BEGIN IMMEDIATE" if immediate else "BEGIN")
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")
    finally:
        conn.close()


def _to_user(row: sqlite3.Row) -> User:
    return User(
        id=UserId(row["id"]),
        email=row["email"],
        currency=row["currency"],
        created_at=row["created_at"],
        name=row["name"],
    )


def _to_account(row: sqlite3.Row) -> Account:
    return Account(
        id=AccountId(row["id"]),
        user_id=UserId(row["user_id"]),
        provider=row["provider"],
        provider_account_id=row["provider_account_id"],
        created_at=row["created_at"],
    )


def _to_category(row: sqlite3.Row) -> Category:
    return Category(
        id=CategoryId(row["id"]),
        user_id=UserId(row["user_id"]),
        name=row["name"],
        color=row["color"],
        is_savings=bool(row["is_savings"]),
        is_default=bool(row["is_default"]),
        sort_order=row["sort_order"],
    )


def _to_budget_month(row: sqlite3.Row) -> BudgetMonth:
    return BudgetMonth(
        id=BudgetMonthId(row["id"]),
        user_id=UserId(row["user_id"]),
        year=row["year"],
        month=row["month"],
        income=Money(row["income"]),
        savings_rate=row["savings_rate"],
        adjustment_reason=row["adjustment_reason"],
    )


def _to_allocation(row: sqlite3.Row) -> Allocation:
    return Allocation(
        id=AllocationId(row["id"]),
        budget_month_id=BudgetMonthId(row["budget_month_id"]),
        category_id=CategoryId(row["category_id"]),
        amount=Money(row["amount"]),
    )


# Users


def insert_user(conn: sqlite3.Connection, email: str | None, currency: str, name: str | None = None) -> User:
    """Insert a user and return it."""
    cursor = conn.execute(
        "INSERT INTO users (email, name, currency, created_at) VALUES (?, ?, ?, ?)",
        (email, name, currency, time.time()),
    )
    user = get_user(conn, UserId(cursor.lastrowid))
    assert user is not None
    return user


def get_user(conn: sqlite3.Connection, user_id: UserId) -> User | None:
    """Get a user by id, or None."""
    row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    return _to_user(row) if row else None


def get_all_users(conn: sqlite3.Connection) -> list[User]:
    """Get every user ordered by id."""
    rows = conn.execute("SELECT * FROM users ORDER BY id").fetchall()
    return [_to_user(row) for row in rows]


def update_user_email(conn: sqlite3.Connection, user_id: UserId, email: str) -> None:
    conn.execute("UPDATE users SET email = ? WHERE id = ?", (email, user_id))


def update_user_currency(conn: sqlite3.Connection, user_id: UserId, currency: str) -> None:
    conn.execute("UPDATE users SET currency = ? WHERE id = ?", (currency, user_id))


def delete_user(conn: sqlite3.Connection, user_id: UserId) -> None:
    conn.execute("DELETE FROM users WHERE id = ?", (user_id,))


# Accounts, sessions and refresh tokens


def insert_account(
    conn: sqlite3.Connection,
    user_id: UserId,
    provider: str,
    provider_account_id: str,
    secret: str | None = None,
) -> Account:
    """Insert a credential record and return it."""
    cursor = conn.execute(
        "INSERT INTO accounts (user_id, provider, provider_account_id, secret, created_at) VALUES (?, ?, ?, ?, ?)",
        (user_id, provider, provider_account_id, secret, time.time()),
    )
    row = conn.execute("SELECT * FROM accounts WHERE id = ?", (cursor.lastrowid,)).fetchone()
    return _to_account(row)


def get_accounts_by_provider(conn: sqlite3.Connection, provider: str) -> list[Account]:
    """Get all credentials of one provider ordered by id."""
    rows = conn.execute("SELECT * FROM accounts WHERE provider = ? ORDER BY id", (provider,)).fetchall()
    return [_to_account(row) for row in rows]


def get_accounts_for_user(conn: sqlite3.Connection, user_id: UserId, provider: str | None = None) -> list[Account]:
    """Get a user's credentials, optionally limited to one provider."""
    if provider is None:
        rows = conn.execute("SELECT * FROM accounts WHERE user_id = ? ORDER BY id", (user_id,)).fetchall()
    else:
        rows = conn.execute(
            "SELECT * FROM accounts WHERE user_id = ? AND provider = ? ORDER BY id",
            (user_id, provider),
        ).fetchall()
    return [_to_account(row) for row in rows]


def update_account_owner(
    conn: sqlite3.Connection, account_id: AccountId, user_id: UserId, provider_account_id: str
) -> None:
    """Point a credential at a user and set its account identifier."""
    conn.execute(
        "UPDATE accounts SET user_id = ?, provider_account_id = ? WHERE id = ?",
        (user_id, provider_account_id, account_id),
    )


def delete_account(conn: sqlite3.Connection, account_id: AccountId) -> None:
    conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))


def insert_session(conn: sqlite3.Connection, user_id: UserId, expires_at: float) -> int:
    """Insert a session and return its id."""
    cursor = conn.execute(
        "INSERT INTO sessions (user_id, expires_at, created_at) VALUES (?, ?, ?)",
        (user_id, expires_at, time.time()),
    )
    return int(cursor.lastrowid or 0)


def get_session_ids_for_user(conn: sqlite3.Connection, user_id: UserId) -> list[int]:
    rows = conn.execute("SELECT id FROM sessions WHERE user_id = ? ORDER BY id", (user_id,)).fetchall()
    return [row[0] for row in rows]


def delete_session(conn: sqlite3.Connection, session_id: int) -> None:
    conn.execute("DELETE FROM sessions WHERE id = ?", (session_id,))


def insert_refresh_token(conn: sqlite3.Connection, session_id: int, expires_at: float) -> int:
    """Insert a refresh token and return its id."""
    cursor = conn.execute(
        "INSERT INTO refresh_tokens (session_id, expires_at, created_at) VALUES (?, ?, ?)",
        (session_id, expires_at, time.time()),
    )
    return int(cursor.lastrowid or 0)


def delete_refresh_tokens_for_session(conn: sqlite3.Connection, session_id: int) -> int:
    """Delete a session's refresh tokens, returning how many were removed."""
    cursor = conn.execute("DELETE FROM refresh_tokens WHERE session_id = ?", (session_id,))
    return cursor.rowcount


# Categories


def get_categories(conn: sqlite3.Connection, user_id: UserId) -> list[Category]:
    """Get a user's categories ordered by sort order."""
    rows = conn.execute(
        "SELECT * FROM categories WHERE user_id = ? ORDER BY sort_order, id",
        (user_id,),
    ).fetchall()
    return [_to_category(row) for row in rows]


def get_category(conn: sqlite3.Connection, category_id: CategoryId) -> Category | None:
    row = conn.execute("SELECT * FROM categories WHERE id = ?", (category_id,)).fetchone()
    return _to_category(row) if row else None


def get_category_by_name(conn: sqlite3.Connection, user_id: UserId, name: str) -> Category | None:
    """Exact (case-sensitive) name lookup within one user's categories."""
    row = conn.execute(
        "SELECT * FROM categories WHERE user_id = ? AND name = ?",
        (user_id, name),
    ).fetchone()
    return _to_category(row) if row else None


def insert_category(
    conn: sqlite3.Connection,
    user_id: UserId,
    name: str,
    color: str,
    sort_order: int,
    is_savings: bool = False,
    is_default: bool = False,
) -> Category:
    """Insert a category and return it."""
    cursor = conn.execute(
        """
        INSERT INTO categories (user_id, name, color, is_savings, is_default, sort_order)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (user_id, name, color, int(is_savings), int(is_default), sort_order),
    )
    category = get_category(conn, CategoryId(cursor.lastrowid))
    assert category is not None
    return category


def update_category(
    conn: sqlite3.Connection,
    category_id: CategoryId,
    name: str | None = None,
    color: str | None = None,
) -> None:
    """Update the name and/or color of a category."""
    if name is not None:
        conn.execute("UPDATE categories SET name = ? WHERE id = ?", (name, category_id))
    if color is not None:
        conn.execute("UPDATE categories SET color = ? WHERE id = ?", (color, category_id))


def set_category_sort_order(conn: sqlite3.Connection, category_id: CategoryId, sort_order: int) -> None:
    conn.execute("UPDATE categories SET sort_order = ? WHERE id = ?", (sort_order, category_id))


def delete_category(conn: sqlite3.Connection, category_id: CategoryId) -> None:
    conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))


def delete_categories_for_user(conn: sqlite3.Connection, user_id: UserId) -> int:
    cursor = conn.execute("DELETE FROM categories WHERE user_id = ?", (user_id,))
    return cursor.rowcount


# Budget months


def get_budget_month(conn: sqlite3.Connection, budget_month_id: BudgetMonthId) -> BudgetMonth | None:
    row = conn.execute("SELECT * FROM budget_months WHERE id = ?", (budget_month_id,)).fetchone()
    return _to_budget_month(row) if row else None


def get_budget_month_by_period(conn: sqlite3.Connection, user_id: UserId, year: int, month: int) -> BudgetMonth | None:
    """Get the budget month for (user, year, month), or None."""
    row = conn.execute(
        "SELECT * FROM budget_months WHERE user_id = ? AND year = ? AND month = ?",
        (user_id, year, month),
    ).fetchone()
    return _to_budget_month(row) if row else None


def get_budget_months(conn: sqlite3.Connection, user_id: UserId) -> list[BudgetMonth]:
    """Get all of a user's budget months, newest first."""
    rows = conn.execute(
        "SELECT * FROM budget_months WHERE user_id = ? ORDER BY year DESC, month DESC",
        (user_id,),
    ).fetchall()
    return [_to_budget_month(row) for row in rows]


def insert_budget_month(
    conn: sqlite3.Connection,
    user_id: UserId,
    year: int,
    month: int,
    income: Money,
    savings_rate: float,
) -> BudgetMonth:
    """Insert a budget month and return it."""
    cursor = conn.execute(
        "INSERT INTO budget_months (user_id, year, month, income, savings_rate) VALUES (?, ?, ?, ?, ?)",
        (user_id, year, month, income, savings_rate),
    )
    budget_month = get_budget_month(conn, BudgetMonthId(cursor.lastrowid))
    assert budget_month is not None
    return budget_month


def update_income(conn: sqlite3.Connection, budget_month_id: BudgetMonthId, income: Money) -> None:
    conn.execute("UPDATE budget_months SET income = ? WHERE id = ?", (income, budget_month_id))


def update_savings_rate(
    conn: sqlite3.Connection,
    budget_month_id: BudgetMonthId,
    savings_rate: float,
    adjustment_reason: str | None,
) -> None:
    conn.execute(
        "UPDATE budget_months SET savings_rate = ?, adjustment_reason = ? WHERE id = ?",
        (savings_rate, adjustment_reason, budget_month_id),
    )


def delete_budget_month(conn: sqlite3.Connection, budget_month_id: BudgetMonthId) -> None:
    conn.execute("DELETE FROM budget_months WHERE id = ?", (budget_month_id,))


# Allocations


def get_allocation(conn: sqlite3.Connection, allocation_id: AllocationId) -> Allocation | None:
    row = conn.execute("SELECT * FROM allocations WHERE id = ?", (allocation_id,)).fetchone()
    return _to_allocation(row) if row else None


def get_allocation_for(
    conn: sqlite3.Connection, budget_month_id: BudgetMonthId, category_id: CategoryId
) -> Allocation | None:
    """Get the single allocation for a (budget month, category) pair."""
    row = conn.execute(
        "SELECT * FROM allocations WHERE budget_month_id = ? AND category_id = ?",
        (budget_month_id, category_id),
    ).fetchone()
    return _to_allocation(row) if row else None


def get_allocations(conn: sqlite3.Connection, budget_month_id: BudgetMonthId) -> list[Allocation]:
    rows = conn.execute(
        "SELECT * FROM allocations WHERE budget_month_id = ? ORDER BY id",
        (budget_month_id,),
    ).fetchall()
    return [_to_allocation(row) for row in rows]


def insert_allocation(
    conn: sqlite3.Connection, budget_month_id: BudgetMonthId, category_id: CategoryId, amount: Money
) -> Allocation:
    cursor = conn.execute(
        "INSERT INTO allocations (budget_month_id, category_id, amount) VALUES (?, ?, ?)",
        (budget_month_id, category_id, amount),
    )
    allocation = get_allocation(conn, AllocationId(cursor.lastrowid))
    assert allocation is not None
    return allocation


def update_allocation_amount(conn: sqlite3.Connection, allocation_id: AllocationId, amount: Money) -> None:
    conn.execute("UPDATE allocations SET amount = ? WHERE id = ?", (amount, allocation_id))


def delete_allocation(conn: sqlite3.Connection, allocation_id: AllocationId) -> None:
    conn.execute("DELETE FROM allocations WHERE id = ?", (allocation_id,))


def delete_allocations_for_category(conn: sqlite3.Connection, category_id: CategoryId) -> int:
    """Delete every allocation referencing a category, returning the count."""
    cursor = conn.execute("DELETE FROM allocations WHERE category_id = ?", (category_id,))
    return cursor.rowcount


def delete_allocations_for_month(conn: sqlite3.Connection, budget_month_id: BudgetMonthId) -> int:
    cursor = conn.execute("DELETE FROM allocations WHERE budget_month_id = ?", (budget_month_id,))
    return cursor.rowcount
