"""Account record shared by the serialization layer and the CLI."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional


@dataclass
class Account:
    """Represents one user account's stored attributes.

    The record holds values verbatim: nothing is hashed, normalised or checked
    here. Registration, login and profile updates happen elsewhere and simply
    assign to the fields.
    """

    account_id: int
    username: str
    password: str
    created_at: Optional[datetime] = None
    is_active: bool = False
    email: Optional[str] = None
    phone_number: Optional[str] = None
    last_login: Optional[datetime] = None

    def copy(self, **changes: Any) -> "Account":
        """Return an independent record with ``changes`` applied."""

        return replace(self, **changes)

    def __repr__(self) -> str:
        return (
            f"Account(account_id={self.account_id!r}, username={self.username!r}, "
            f"password='***', created_at={self.created_at!r}, "
            f"is_active={self.is_active!r}, email={self.email!r}, "
            f"phone_number={self.phone_number!r}, last_login={self.last_login!r})"
        )


__all__ = ["Account"]
