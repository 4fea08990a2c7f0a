"""Shared fixtures: a fresh SQLite database per test and callers bound to it."""

from datetime import date
from pathlib import Path

import pytest

from ledgerise.domain.models import User
from ledgerise.services.context import Context
from ledgerise.services.users import create_user
from ledgerise.store.schema import init_database

TODAY = date(2025, 6, 15)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "ledgerise.db"
    init_database(path)
    return path


@pytest.fixture
def user(db_path: Path) -> User:
    return create_user("alice@example.com", "USD", "Alice", db_path=db_path)


@pytest.fixture
def other_user(db_path: Path) -> User:
    return create_user("bob@example.com", "GBP", "Bob", db_path=db_path)


@pytest.fixture
def ctx(db_path: Path, user: User) -> Context:
    return Context(user_id=user.id, db_path=db_path, today=TODAY)


@pytest.fixture
def other_ctx(db_path: Path, other_user: User) -> Context:
    return Context(user_id=other_user.id, db_path=db_path, today=TODAY)


@pytest.fixture
def anonymous_ctx(db_path: Path) -> Context:
    return Context(user_id=None, db_path=db_path, today=TODAY)
