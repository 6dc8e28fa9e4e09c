"""Console interface for the shared ledger."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from ledger_core.accounts import Accounts
from ledger_core.exceptions import (
    PersistenceError,
    RationalParseError,
    RecordNotFoundError,
    ValidationError,
)
from ledger_core.rational import format_rational, parse_rational
from ledger_core.serialization import accounts_from_json, accounts_to_json, serialize_accounts
from ledger_core.services import LedgerService
from ledger_core.storage import JSONStorage

DEFAULT_LEDGER = "default"


def _parse_amount(value: str) -> str:
    try:
        parse_rational(value)
    except RationalParseError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc
    return value


def _parse_share(value: str) -> Tuple[str, str]:
    name, sep, weight = value.rpartition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Invalid share '{value}'. Expected NAME=WEIGHT.")
    return name, _parse_amount(weight)


def _parse_decimals(value: str) -> int:
    try:
        decimals = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Decimals must be an integer") from exc
    if decimals < 0:
        raise argparse.ArgumentTypeError("Decimals must not be negative")
    return decimals


def _format_purchase(accounts: Accounts, index: int, decimals: int) -> str:
    purchase = accounts.purchases[index]
    shares = ", ".join(
        f"{name} {format_rational(weight, decimals)}"
        for name, weight in accounts.named_shares(purchase)
        if weight != 0
    )
    return (
        f"[{index}] {purchase.description}: {accounts.payer_name(purchase)} paid "
        f"{format_rational(purchase.amount, decimals)}\n"
        f"  Shares: {shares or '-'}"
    )


def handle_user(args: argparse.Namespace, service: LedgerService) -> None:
    if args.command == "add":
        service.add_user(args.ledger, args.name)
        print(f"User {args.name} added.")
    elif args.command == "remove":
        service.remove_user(args.ledger, args.name)
        print(f"User {args.name} removed.")
    elif args.command == "list":
        users = service.get(args.ledger).users
        if not users:
            print("No users found.")
            return
        for name in users:
            print(name)


def handle_purchase(args: argparse.Namespace, service: LedgerService) -> None:
    if args.command == "add":
        accounts, index = service.add_purchase(
            args.ledger, args.description, args.payer, args.amount, dict(args.shares)
        )
        print("Purchase added:\n" + _format_purchase(accounts, index, args.decimals))
    elif args.command == "list":
        accounts = service.get(args.ledger)
        if not accounts.purchases:
            print("No purchases found.")
            return
        for index in range(len(accounts.purchases)):
            print(_format_purchase(accounts, index, args.decimals))
    elif args.command == "remove":
        service.remove_purchase(args.ledger, args.index)
        print(f"Purchase {args.index} removed.")
    else:
        if args.command == "share":
            changes = {"benef_to_shares": {args.name: args.weight}}
        elif args.command == "payer":
            changes = {"who": args.name}
        elif args.command == "amount":
            changes = {"amount": args.amount}
        else:
            changes = {"descr": args.description}
        accounts = service.update_purchase(args.ledger, args.index, changes)
        print("Purchase updated:\n" + _format_purchase(accounts, args.index, args.decimals))


def handle_balance(args: argparse.Namespace, service: LedgerService) -> None:
    accounts = service.get(args.ledger)
    if not accounts.users:
        print("No users found.")
        return
    for line in accounts.balance_lines(args.decimals):
        print(line)


def handle_export(args: argparse.Namespace, service: LedgerService) -> None:
    accounts = service.get(args.ledger)
    try:
        args.path.write_text(accounts_to_json(accounts) + "\n", encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Unable to write to {args.path}") from exc
    print(f"Ledger {args.ledger} exported to {args.path}.")


def handle_import(args: argparse.Namespace, service: LedgerService) -> None:
    try:
        text = args.path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Unable to read from {args.path}") from exc
    accounts = accounts_from_json(text)
    service.replace(args.ledger, serialize_accounts(accounts).to_dict())
    print(
        f"Ledger {args.ledger} imported from {args.path}: "
        f"{len(accounts.users)} users, {len(accounts.purchases)} purchases."
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shared Ledger CLI")
    parser.add_argument(
        "--data-dir",
        default=Path(os.getenv("SHARED_LEDGER_DATA_DIR", "data")),
        type=Path,
        help="Directory to store JSON ledgers (default: $SHARED_LEDGER_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--ledger",
        default=DEFAULT_LEDGER,
        help=f"Title of the ledger to work on (default: {DEFAULT_LEDGER})",
    )
    parser.add_argument(
        "--decimals",
        default=2,
        type=_parse_decimals,
        help="Maximum decimals when printing amounts (default: 2)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="entity", required=True)

    user_parser = subparsers.add_parser("user", help="Manage users")
    user_sub = user_parser.add_subparsers(dest="command", required=True)
    user_add = user_sub.add_parser("add", help="Add a user")
    user_add.add_argument("name")
    user_remove = user_sub.add_parser("remove", help="Remove a user without purchases or shares")
    user_remove.add_argument("name")
    user_sub.add_parser("list", help="List users")

    purchase_parser = subparsers.add_parser("purchase", help="Manage purchases")
    purchase_sub = purchase_parser.add_subparsers(dest="command", required=True)

    purchase_add = purchase_sub.add_parser("add", help="Add a purchase")
    purchase_add.add_argument("description")
    purchase_add.add_argument("payer")
    purchase_add.add_argument("amount", type=_parse_amount)
    purchase_add.add_argument(
        "--share",
        dest="shares",
        action="append",
        type=_parse_share,
        default=[],
        metavar="NAME=WEIGHT",
    )

    purchase_sub.add_parser("list", help="List purchases")

    purchase_share = purchase_sub.add_parser("share", help="Set a user's weight in a purchase")
    purchase_share.add_argument("index", type=int)
    purchase_share.add_argument("name")
    purchase_share.add_argument("weight", type=_parse_amount)

    purchase_payer = purchase_sub.add_parser("payer", help="Change who paid a purchase")
    purchase_payer.add_argument("index", type=int)
    purchase_payer.add_argument("name")

    purchase_amount = purchase_sub.add_parser("amount", help="Change the amount of a purchase")
    purchase_amount.add_argument("index", type=int)
    purchase_amount.add_argument("amount", type=_parse_amount)

    purchase_describe = purchase_sub.add_parser("describe", help="Change a purchase description")
    purchase_describe.add_argument("index", type=int)
    purchase_describe.add_argument("description")

    purchase_remove = purchase_sub.add_parser("remove", help="Remove a purchase")
    purchase_remove.add_argument("index", type=int)

    subparsers.add_parser("balance", help="Print each user's balance")
    subparsers.add_parser("ledgers", help="List saved ledgers")

    export_parser = subparsers.add_parser("export", help="Write the ledger to a JSON file")
    export_parser.add_argument("path", type=Path)
    import_parser = subparsers.add_parser("import", help="Replace the ledger from a JSON file")
    import_parser.add_argument("path", type=Path)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        service = LedgerService(JSONStorage(args.data_dir))
        if args.entity == "user":
            handle_user(args, service)
        elif args.entity == "purchase":
            handle_purchase(args, service)
        elif args.entity == "balance":
            handle_balance(args, service)
        elif args.entity == "ledgers":
            titles = service.titles()
            print("\n".join(titles) if titles else "No ledgers found.")
        elif args.entity == "export":
            handle_export(args, service)
        elif args.entity == "import":
            handle_import(args, service)
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown entity: {args.entity}")
            return 2
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
