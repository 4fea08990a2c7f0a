"""Caller context passed explicitly into every operation."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from ledgerise.domain.errors import AuthenticationError
from ledgerise.domain.models import UserId


@dataclass(frozen=True)
class Context:
    """Who is calling, which database to use and what day it is.

    Attributes:
        user_id: Authenticated user, or None for an anonymous caller.
        db_path: Database file. If None, uses default location.
        today: The current day; drives the editable-month window.
    """

    user_id: UserId | None
    db_path: Path | None = None
    today: date = field(default_factory=date.today)

    def require_user(self) -> UserId:
        """Return the user id or raise AuthenticationError."""
        if self.user_id is None:
            raise AuthenticationError("Not authenticated")
        return self.user_id
