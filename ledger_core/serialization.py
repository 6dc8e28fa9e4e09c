"""Conversion between the sparse ledger document and the dense :class:`Accounts`."""

from __future__ import annotations

import json
import logging
from fractions import Fraction
from typing import Dict, List, Optional

from .accounts import Accounts
from .exceptions import ValidationError
from .models import Purchase, SerializedAccounts, SerializedPurchase
from .rational import ZERO, format_rational, parse_rational
from .validators import find_user, validate_description, validate_user_name

__all__ = [
    "accounts_from_json",
    "accounts_to_json",
    "decimal_text",
    "parse_accounts",
    "serialize_accounts",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_DECIMALS = 12


def parse_accounts(serialized: SerializedAccounts) -> Accounts:
    """Resolve names to indices and expand sparse shares into dense vectors."""
    users = sorted(set(serialized.users))
    for name in users:
        validate_user_name(name)

    purchases: List[Purchase] = []
    for entry in serialized.purchases:
        description = validate_description(entry.descr)
        payer = find_user(users, entry.who)
        amount = parse_rational(entry.amount)
        shares = [ZERO] * len(users)
        for name, weight in entry.benef_to_shares.items():
            shares[find_user(users, name)] = parse_rational(weight)
        purchases.append(Purchase(description, payer, amount, shares))
    return Accounts(users, purchases)


def serialize_accounts(
    accounts: Accounts, max_decimals: Optional[int] = None
) -> SerializedAccounts:
    """Project the ledger to its sparse form, keeping only non-zero weights."""
    users = accounts.users
    purchases = []
    for purchase in accounts.purchases:
        benef_to_shares: Dict[str, str] = {
            name: decimal_text(weight, max_decimals)
            for name, weight in zip(users, purchase.shares)
            if weight != 0
        }
        purchases.append(
            SerializedPurchase(
                descr=purchase.description,
                who=users[purchase.payer],
                amount=decimal_text(purchase.amount, max_decimals),
                benef_to_shares=benef_to_shares,
            )
        )
    return SerializedAccounts(users=list(users), purchases=purchases)


def decimal_text(value: Fraction, max_decimals: Optional[int] = None) -> str:
    """Render ``value`` exactly when it has a finite decimal expansion.

    Other values (thirds, sevenths...) are rounded to ``max_decimals``.
    """
    decimals = _exact_decimals(value)
    if decimals is not None:
        return format_rational(value, decimals)
    limit = DEFAULT_MAX_DECIMALS if max_decimals is None else max_decimals
    logger.warning("Value %s has no finite decimal form; rounding to %d decimals", value, limit)
    return format_rational(value, limit)


def accounts_from_json(text: str) -> Accounts:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Malformed JSON ledger document: {exc}") from exc
    return parse_accounts(SerializedAccounts.from_dict(data))


def accounts_to_json(accounts: Accounts, max_decimals: Optional[int] = None) -> str:
    return json.dumps(serialize_accounts(accounts, max_decimals).to_dict(), indent=2)


def _exact_decimals(value: Fraction) -> Optional[int]:
    denominator = value.denominator
    twos = fives = 0
    while denominator % 2 == 0:
        denominator //= 2
        twos += 1
    while denominator % 5 == 0:
        denominator //= 5
        fives += 1
    if denominator != 1:
        return None
    return max(twos, fives)
