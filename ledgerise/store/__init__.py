"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

# Re-export schema functions
# Re-export all query functions
from ledgerise.store.queries import (
    delete_account,
    delete_allocation,
    delete_allocations_for_category,
    delete_allocations_for_month,
    delete_budget_month,
    delete_categories_for_user,
    delete_category,
    delete_refresh_tokens_for_session,
    delete_session,
    delete_user,
    get_accounts_by_provider,
    get_accounts_for_user,
    get_all_users,
    get_allocation,
    get_allocation_for,
    get_allocations,
    get_budget_month,
    get_budget_month_by_period,
    get_budget_months,
    get_categories,
    get_category,
    get_category_by_name,
    get_session_ids_for_user,
    get_user,
    insert_account,
    insert_allocation,
    insert_budget_month,
    insert_category,
    insert_refresh_token,
    insert_session,
    insert_user,
    set_category_sort_order,
    transaction,
    update_account_owner,
    update_allocation_amount,
    update_category,
    update_income,
    update_savings_rate,
    update_user_currency,
    update_user_email,
)
from ledgerise.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Connection
    "transaction",
    # Users
    "insert_user",
    "get_user",
    "get_all_users",
    "update_user_email",
    "update_user_currency",
    "delete_user",
    # Auth records
    "insert_account",
    "get_accounts_by_provider",
    "get_accounts_for_user",
    "update_account_owner",
    "delete_account",
    "insert_session",
    "get_session_ids_for_user",
    "delete_session",
    "insert_refresh_token",
    "delete_refresh_tokens_for_session",
    # Categories
    "get_categories",
    "get_category",
    "get_category_by_name",
    "insert_category",
    "update_category",
    "set_category_sort_order",
    "delete_category",
    "delete_categories_for_user",
    # Budget months
    "get_budget_month",
    "get_budget_month_by_period",
    "get_budget_months",
    "insert_budget_month",
    "update_income",
    "update_savings_rate",
    "delete_budget_month",
    # Allocations
    "get_allocation",
    "get_allocation_for",
    "get_allocations",
    "insert_allocation",
    "update_allocation_amount",
    "delete_allocation",
    "delete_allocations_for_category",
    "delete_allocations_for_month",
]
