"""Account record and its JSON boundary."""

from __future__ import annotations

from .config import SerializationConfig, load_serialization_config, resolve_config_path
from .models import Account
from .serialization import (
    AccountFormatError,
    account_from_dict,
    account_to_dict,
    dump_accounts,
    dumps_account,
    load_accounts,
    loads_account,
)


__all__ = [
    "Account",
    "AccountFormatError",
    "SerializationConfig",
    "account_from_dict",
    "account_to_dict",
    "dump_accounts",
    "dumps_account",
    "load_accounts",
    "load_serialization_config",
    "loads_account",
    "resolve_config_path",
]
