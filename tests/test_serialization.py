from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from accounts.models import Account
from accounts.serialization import (
    AccountFormatError,
    account_from_dict,
    account_to_dict,
    dump_accounts,
    dumps_account,
    load_accounts,
    loads_account,
)


@pytest.fixture()
def alice() -> Account:
    return Account(
        1,
        "alice",
        "p@ss",
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        is_active=True,
        email="alice@example.com",
    )


def test_snake_case_encoding(alice: Account) -> None:
    assert account_to_dict(alice) == {
        "account_id": 1,
        "username": "alice",
        "password": "p@ss",
        "created_at": "2024-01-01T00:00:00+00:00",
        "is_active": True,
        "email": "alice@example.com",
        "phone_number": None,
        "last_login": None,
    }


def test_pascal_case_encoding_omitting_absent(alice: Account) -> None:
    assert account_to_dict(alice, style="pascal", include_absent=False) == {
        "AccountId": 1,
        "Username": "alice",
        "Password": "p@ss",
        "CreatedAt": "2024-01-01T00:00:00+00:00",
        "IsActive": True,
        "Email": "alice@example.com",
    }


def test_unknown_style_is_rejected(alice: Account) -> None:
    with pytest.raises(ValueError):
        account_to_dict(alice, style="kebab")


@pytest.mark.parametrize("style", ["snake", "pascal"])
def test_decoding_reverses_encoding(alice: Account, style: str) -> None:
    alice.last_login = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    assert account_from_dict(account_to_dict(alice, style=style)) == alice


def test_decoding_second_variant_with_renamed_creation_key() -> None:
    account = account_from_dict(
        {
            "AccountId": 2,
            "Username": "bob",
            "Password": "x",
            "CreatedAtRenamed": None,
            "IsActive": False,
            "LastLogin": "2024-06-01T12:00:00Z",
        }
    )

    assert account.created_at is None
    assert account.last_login == datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
    assert account.email is None
    assert account.phone_number is None


def test_renamed_creation_key_populates_created_at() -> None:
    account = account_from_dict(
        {"account_id": 3, "username": "c", "password": "p", "created_at_renamed": "2024-01-01T00:00:00"}
    )

    assert account.created_at == datetime(2024, 1, 1)
    assert "CreatedAtRenamed" not in account_to_dict(account, style="pascal")


def test_missing_optional_keys_read_as_absent() -> None:
    account = account_from_dict({"account_id": 7, "username": "eve", "password": "pw"})

    assert account == Account(7, "eve", "pw")


def test_unknown_keys_are_ignored() -> None:
    account = account_from_dict({"account_id": 7, "username": "eve", "password": "pw", "role": "admin"})

    assert account.username == "eve"


def test_empty_strings_pass_through() -> None:
    account = account_from_dict({"account_id": 8, "username": "", "password": "", "email": ""})

    assert account.username == ""
    assert account.email == ""


def test_missing_required_fields_are_reported() -> None:
    with pytest.raises(AccountFormatError) as excinfo:
        account_from_dict({"username": "eve"})

    assert "account_id" in str(excinfo.value)
    assert "password" in str(excinfo.value)


@pytest.mark.parametrize(
    "payload",
    [
        {"account_id": "1", "username": "a", "password": "p"},
        {"account_id": True, "username": "a", "password": "p"},
        {"account_id": 1, "username": None, "password": "p"},
        {"account_id": 1, "username": "a", "password": "p", "is_active": "yes"},
        {"account_id": 1, "username": "a", "password": "p", "email": 42},
        {"account_id": 1, "username": "a", "password": "p", "created_at": "yesterday"},
        {"account_id": 1, "username": "a", "password": "p", "last_login": 1717243200},
    ],
)
def test_malformed_payloads_raise_format_error(payload: dict) -> None:
    with pytest.raises(AccountFormatError):
        account_from_dict(payload)


def test_non_object_payload_is_rejected() -> None:
    with pytest.raises(AccountFormatError):
        account_from_dict(["not", "an", "object"])  # type: ignore[arg-type]


def test_conflicting_duplicate_keys_are_rejected() -> None:
    with pytest.raises(AccountFormatError):
        account_from_dict(
            {
                "account_id": 1,
                "username": "a",
                "password": "p",
                "CreatedAt": "2024-01-01T00:00:00",
                "CreatedAtRenamed": "2023-01-01T00:00:00",
            }
        )


def test_format_error_is_a_value_error() -> None:
    assert issubclass(AccountFormatError, ValueError)


def test_dumps_and_loads(alice: Account) -> None:
    text = dumps_account(alice, style="pascal")

    assert json.loads(text)["Username"] == "alice"
    assert loads_account(text) == alice


def test_loads_rejects_invalid_json() -> None:
    with pytest.raises(AccountFormatError):
        loads_account("{not json")


def test_dump_and_load_file(tmp_path: Path, alice: Account) -> None:
    bob = Account(2, "bob", "x", last_login=datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))
    path = tmp_path / "nested" / "accounts.json"

    dump_accounts([alice, bob], path, style="pascal")

    assert load_accounts(path) == [alice, bob]


def test_load_single_object_file(tmp_path: Path) -> None:
    path = tmp_path / "account.json"
    path.write_text(json.dumps({"account_id": 9, "username": "solo", "password": "pw"}), encoding="utf-8")

    assert load_accounts(path) == [Account(9, "solo", "pw")]


def test_load_reports_position_of_bad_entry(tmp_path: Path) -> None:
    path = tmp_path / "accounts.json"
    path.write_text(
        json.dumps([{"account_id": 1, "username": "a", "password": "p"}, {"account_id": 2}]),
        encoding="utf-8",
    )

    with pytest.raises(AccountFormatError) as excinfo:
        load_accounts(path)

    assert "Account #1" in str(excinfo.value)


@pytest.mark.parametrize(
    "first, second",
    [
        (("AccountId", True), ("account_id", 1)),
        (("account_id", 1), ("AccountId", True)),
        (("is_active", 1), ("IsActive", True)),
        (("IsActive", True), ("is_active", 1)),
    ],
)
def test_values_of_different_types_conflict_in_either_order(first: tuple, second: tuple) -> None:
    payload = {"username": "a", "password": "p", first[0]: first[1], second[0]: second[1]}
    payload.setdefault("account_id", 1)

    with pytest.raises(AccountFormatError) as excinfo:
        account_from_dict(payload)

    assert "Conflicting values" in str(excinfo.value)


def test_repeated_identical_values_are_accepted() -> None:
    account = account_from_dict(
        {"account_id": 4, "AccountId": 4, "username": "d", "password": "p", "is_active": True, "IsActive": True}
    )

    assert account.account_id == 4
    assert account.is_active is True


def test_payload_model_reports_field_names() -> None:
    with pytest.raises(AccountFormatError) as excinfo:
        account_from_dict({"account_id": 1, "username": "a", "password": "p", "is_active": "yes"})

    assert "is_active" in str(excinfo.value)
