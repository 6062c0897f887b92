"""Command-line interface for inspecting and converting account files."""

from __future__ import annotations
import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

from .config import SerializationConfig, load_config_from_env
from .models import Account
from .serialization import (
    FIELD_STYLES,
    AccountFormatError,
    account_to_dict,
    dump_accounts,
    load_accounts,
)

logger = logging.getLogger("accounts.cli")

_KNOWN_COMMANDS = {"show", "convert"}


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="accounts", description="Account record utilities")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    show_parser = subparsers.add_parser("show", help="List the accounts stored in a JSON file")
    show_parser.add_argument("path", type=Path, help="JSON file holding one account or a list of accounts")

    convert_parser = subparsers.add_parser("convert", help="Re-encode accounts using another field style")
    convert_parser.add_argument("path", type=Path, help="JSON file holding one account or a list of accounts")
    convert_parser.add_argument(
        "--style",
        choices=FIELD_STYLES,
        default=None,
        help="Key naming style for the output (default: from configuration)",
    )
    convert_parser.add_argument(
        "--omit-absent",
        action="store_true",
        help="Leave out keys whose value is absent instead of writing null",
    )
    convert_parser.add_argument("--compact", action="store_true", help="Write single-line JSON")
    convert_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write to this file instead of standard output",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]

    # A bare path is shorthand for "show PATH".
    positional = [arg for arg in args_list if not arg.startswith("-")]
    if positional and positional[0] not in _KNOWN_COMMANDS:
        if not any(flag in args_list for flag in ("-h", "--help")):
            index = args_list.index(positional[0])
            args_list = [*args_list[:index], "show", *args_list[index:]]

    args = parser.parse_args(args_list)
    if args.command is None:
        parser.error("a command or an accounts file is required")
    return args


def _format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def _show_accounts(accounts: List[Account]) -> None:
    if not accounts:
        print("No accounts found.")
        return

    print(f"{len(accounts)} account(s) found:")
    print(f"{'ID':>4}  {'Username':<20}  {'Active':<6}  {'Email':<28}  {'Created':<23}  Last login")
    print("-" * 110)
    for account in accounts:
        active = "yes" if account.is_active else "no"
        email = account.email if account.email is not None else "-"
        created = _format_timestamp(account.created_at)
        last_login = _format_timestamp(account.last_login)
        print(
            f"{account.account_id:>4}  {account.username:<20}  {active:<6}  {email:<28}  "
            f"{created:<23}  {last_login}"
        )


def _convert_accounts(
    accounts: List[Account],
    *,
    config: SerializationConfig,
    style: str | None,
    omit_absent: bool,
    compact: bool,
    output: Path | None,
) -> None:
    field_style = style or config.field_style
    include_absent = config.include_absent and not omit_absent
    indent = None if compact else config.indent

    if output is not None:
        dump_accounts(accounts, output, style=field_style, include_absent=include_absent, indent=indent)
        logger.info("Wrote %d account(s) to %s", len(accounts), output)
        return

    payload = [account_to_dict(account, style=field_style, include_absent=include_absent) for account in accounts]
    print(json.dumps(payload, indent=indent))


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI usage."""

    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        accounts = load_accounts(args.path)
        if args.command == "show":
            _show_accounts(accounts)
        elif args.command == "convert":
            _convert_accounts(
                accounts,
                config=load_config_from_env(),
                style=args.style,
                omit_absent=args.omit_absent,
                compact=args.compact,
                output=args.output,
            )
    except (AccountFormatError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
