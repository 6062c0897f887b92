"""JSON encoding for :class:`~accounts.models.Account` records."""
from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)

from .models import Account

logger = logging.getLogger("accounts.serialization")

FIELD_STYLES = ("snake", "pascal")


class AccountFormatError(ValueError):
    """Raised when a payload cannot be decoded into an :class:`Account`."""


class AccountPayload(BaseModel):
    """Wire shape of an account.

    Keys may use either naming style; ``CreatedAtRenamed`` is read as
    ``created_at`` but never written. Only the shape of the payload is
    checked, not its contents.
    """

    model_config = ConfigDict(strict=True, populate_by_name=True, extra="ignore")

    account_id: int = Field(validation_alias=AliasChoices("account_id", "AccountId"), serialization_alias="AccountId")
    username: str = Field(validation_alias=AliasChoices("username", "Username"), serialization_alias="Username")
    password: str = Field(validation_alias=AliasChoices("password", "Password"), serialization_alias="Password")
    created_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("created_at", "CreatedAt", "CreatedAtRenamed", "created_at_renamed"),
        serialization_alias="CreatedAt",
    )
    is_active: bool = Field(
        default=False,
        validation_alias=AliasChoices("is_active", "IsActive"),
        serialization_alias="IsActive",
    )
    email: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("email", "Email"),
        serialization_alias="Email",
    )
    phone_number: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("phone_number", "PhoneNumber"),
        serialization_alias="PhoneNumber",
    )
    last_login: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("last_login", "LastLogin"),
        serialization_alias="LastLogin",
    )

    @model_validator(mode="before")
    @classmethod
    def _reject_conflicting_keys(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known: Dict[str, str] = {}
        for name, field in cls.model_fields.items():
            for key in field.validation_alias.choices:  # type: ignore[union-attr]
                known[key] = name
        seen: Dict[str, Any] = {}
        for key, value in data.items():
            name = known.get(key)
            if name is None:
                logger.debug("Ignoring unknown account key %r", key)
                continue
            if name in seen:
                previous = seen[name]
                if type(previous) is not type(value) or previous != value:
                    raise ValueError(f"Conflicting values supplied for field '{name}'")
            seen[name] = value
        return data

    @field_validator("created_at", "last_login", mode="before")
    @classmethod
    def _parse_timestamp(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"not a valid ISO-8601 timestamp: {value!r}") from exc

    @field_serializer("created_at", "last_login", when_used="json")
    def _format_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value is not None else None

    @classmethod
    def from_account(cls, account: Account) -> "AccountPayload":
        return cls.model_construct(**{name: getattr(account, name) for name in cls.model_fields})

    def to_account(self) -> Account:
        return Account(**{name: getattr(self, name) for name in type(self).model_fields})


def _format_validation_error(exc: ValidationError) -> str:
    missing: List[str] = []
    problems: List[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        if error["type"] == "missing":
            missing.append(location)
        elif location:
            problems.append(f"Field '{location}': {error['msg']}")
        else:
            problems.append(error["msg"])
    if missing:
        problems.insert(0, f"Missing required account fields: {', '.join(missing)}")
    return "; ".join(problems)


def _check_style(style: str) -> None:
    if style not in FIELD_STYLES:
        raise ValueError(f"Unknown field style '{style}'; expected one of: {', '.join(FIELD_STYLES)}")


def account_to_dict(
    account: Account,
    *,
    style: str = "snake",
    include_absent: bool = True,
) -> Dict[str, Any]:
    """Render ``account`` as a JSON-compatible dictionary.

    ``style`` selects the key names (``"snake"`` or ``"pascal"``). Absent
    optional values become ``None`` unless ``include_absent`` is false, in
    which case their keys are left out.
    """

    _check_style(style)
    return AccountPayload.from_account(account).model_dump(
        mode="json",
        by_alias=style == "pascal",
        exclude_none=not include_absent,
    )


def account_from_dict(data: Any) -> Account:
    """Build an :class:`Account` from a decoded JSON object."""

    if not isinstance(data, dict):
        raise AccountFormatError("Account payload must be a JSON object")
    try:
        payload = AccountPayload.model_validate(data)
    except ValidationError as exc:
        raise AccountFormatError(_format_validation_error(exc)) from exc
    return payload.to_account()


def dumps_account(
    account: Account,
    *,
    style: str = "snake",
    include_absent: bool = True,
    indent: Optional[int] = None,
) -> str:
    payload = account_to_dict(account, style=style, include_absent=include_absent)
    return json.dumps(payload, indent=indent)


def loads_account(text: str) -> Account:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise AccountFormatError(f"Invalid JSON: {exc.msg}") from exc
    return account_from_dict(data)


def load_accounts(path: Path) -> List[Account]:
    """Load accounts from a JSON file holding one object or a list of objects."""

    with path.open("r", encoding="utf-8") as handle:
        try:
            raw = json.load(handle)
        except json.JSONDecodeError as exc:
            raise AccountFormatError(f"{path} does not contain valid JSON: {exc.msg}") from exc

    if isinstance(raw, list):
        items = raw
    else:
        items = [raw]

    accounts = []
    for index, item in enumerate(items):
        try:
            accounts.append(account_from_dict(item))
        except AccountFormatError as exc:
            raise AccountFormatError(f"Account #{index} in {path}: {exc}") from exc

    logger.debug("Loaded %d account(s) from %s", len(accounts), path)
    return accounts


def dump_accounts(
    accounts: Iterable[Account],
    path: Path,
    *,
    style: str = "snake",
    include_absent: bool = True,
    indent: Optional[int] = 2,
) -> None:
    """Write ``accounts`` to ``path`` as a JSON list."""

    payload = [account_to_dict(account, style=style, include_absent=include_absent) for account in accounts]
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=indent)
        handle.write("\n")
    logger.debug("Wrote %d account(s) to %s", len(payload), path)


__all__ = [
    "AccountFormatError",
    "AccountPayload",
    "FIELD_STYLES",
    "account_from_dict",
    "account_to_dict",
    "dump_accounts",
    "dumps_account",
    "load_accounts",
    "loads_account",
]
