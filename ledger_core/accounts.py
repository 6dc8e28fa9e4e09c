"""In-memory ledger of users and purchases, with balance computation."""

from __future__ import annotations

import logging
from bisect import bisect_left
from fractions import Fraction
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .exceptions import DuplicateUserError, UserHasDataError, ValidationError
from .models import Purchase
from .rational import ZERO, coerce_rational, format_rational
from .validators import (
    find_user,
    validate_description,
    validate_purchase_index,
    validate_user_name,
)

__all__ = ["Accounts"]

logger = logging.getLogger(__name__)


class Accounts:
    """Sorted users plus purchases whose share vectors follow the user order.

    Every mutation validates its inputs before touching state, so a failed
    call leaves the ledger unchanged. Purchases are copied on the way in and
    on the way out; edits go through the ledger operations only.
    """

    def __init__(
        self,
        users: Optional[Iterable[str]] = None,
        purchases: Optional[Iterable[Purchase]] = None,
    ) -> None:
        self._users: List[str] = list(users or [])
        self._purchases: List[Purchase] = [purchase.copy() for purchase in purchases or []]
        self._check_layout()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Accounts):
            return NotImplemented
        return self._users == other._users and self._purchases == other._purchases

    def __repr__(self) -> str:
        return f"Accounts(users={self._users!r}, purchases={self._purchases!r})"

    # Read access ----------------------------------------------------------
    @property
    def users(self) -> Tuple[str, ...]:
        return tuple(self._users)

    @property
    def purchases(self) -> Tuple[Purchase, ...]:
        return tuple(purchase.copy() for purchase in self._purchases)

    def user_index(self, name: str) -> int:
        return find_user(self._users, name)

    def purchase(self, purchase_index: int) -> Purchase:
        index = validate_purchase_index(purchase_index, len(self._purchases))
        return self._purchases[index].copy()

    def payer_name(self, purchase: Purchase) -> str:
        return self._users[purchase.payer]

    def named_shares(self, purchase: Purchase) -> Iterator[Tuple[str, Fraction]]:
        return zip(self._users, purchase.shares)

    # Users ----------------------------------------------------------------
    def add_user(self, name: str) -> int:
        """Insert ``name`` at its sorted position with a zero share everywhere."""
        name = validate_user_name(name)
        index = bisect_left(self._users, name)
        if index < len(self._users) and self._users[index] == name:
            raise DuplicateUserError(name)

        self._users.insert(index, name)
        for purchase in self._purchases:
            purchase.shares.insert(index, ZERO)
            if purchase.payer >= index:
                purchase.payer += 1
        logger.debug("Added user %s at index %d", name, index)
        return index

    def remove_user(self, name: str) -> None:
        """Remove a user who neither paid anything nor holds a positive share."""
        index = find_user(self._users, name)
        for purchase in self._purchases:
            if purchase.payer == index or purchase.shares[index] > 0:
                raise UserHasDataError(name)

        del self._users[index]
        for purchase in self._purchases:
            del purchase.shares[index]
            if purchase.payer > index:
                purchase.payer -= 1
        logger.debug("Removed user %s from index %d", name, index)

    # Purchases ------------------------------------------------------------
    def add_purchase(self, description: str, payer: str, amount: object) -> int:
        """Append a purchase with all-zero shares and return its index."""
        validate_user_name(payer)
        description = validate_description(description)
        payer_index = find_user(self._users, payer)
        amount = coerce_rational(amount)

        self._purchases.append(
            Purchase(
                description=description,
                payer=payer_index,
                amount=amount,
                shares=[ZERO] * len(self._users),
            )
        )
        return len(self._purchases) - 1

    def set_share(self, purchase_index: int, user: str, weight: object) -> None:
        user_index = find_user(self._users, user)
        index = validate_purchase_index(purchase_index, len(self._purchases))
        weight = coerce_rational(weight)
        self._purchases[index].shares[user_index] = weight

    def set_shares(self, purchase_index: int, weights: Mapping[str, object]) -> None:
        """Set several weights at once; names not in ``weights`` keep theirs."""
        index = validate_purchase_index(purchase_index, len(self._purchases))
        resolved = [
            (find_user(self._users, name), coerce_rational(weight))
            for name, weight in weights.items()
        ]
        shares = self._purchases[index].shares
        for user_index, weight in resolved:
            shares[user_index] = weight

    def change_payer(self, purchase_index: int, payer: str) -> None:
        payer_index = find_user(self._users, payer)
        index = validate_purchase_index(purchase_index, len(self._purchases))
        self._purchases[index].payer = payer_index

    def change_amount(self, purchase_index: int, amount: object) -> None:
        index = validate_purchase_index(purchase_index, len(self._purchases))
        self._purchases[index].amount = coerce_rational(amount)

    def change_description(self, purchase_index: int, description: str) -> None:
        index = validate_purchase_index(purchase_index, len(self._purchases))
        self._purchases[index].description = validate_description(description)

    def remove_purchase(self, purchase_index: int) -> Purchase:
        """Drop a purchase; later purchases move down one index."""
        index = validate_purchase_index(purchase_index, len(self._purchases))
        return self._purchases.pop(index)

    # Balances -------------------------------------------------------------
    def user_balances(self) -> List[Fraction]:
        """Per-user balance in user order; positive means the group owes them."""
        balances = [ZERO] * len(self._users)
        for index, purchase in enumerate(self._purchases):
            total_shares = purchase.total_shares()
            if total_shares == 0:
                logger.warning(
                    "Purchase %d (%s) is ignored: shares sum to zero",
                    index,
                    purchase.description,
                )
                continue
            for user_index, share in enumerate(purchase.shares):
                balances[user_index] -= purchase.amount * share / total_shares
            balances[purchase.payer] += purchase.amount
        return balances

    def balances(self) -> Dict[str, Fraction]:
        return dict(zip(self._users, self.user_balances()))

    def ignored_purchases(self) -> List[int]:
        """Indices of purchases left out of the balances for zero total shares."""
        return [
            index
            for index, purchase in enumerate(self._purchases)
            if purchase.total_shares() == 0
        ]

    def balance_lines(self, max_decimals: int = 2) -> List[str]:
        return [
            f"{user} has a balance of: {format_rational(balance, max_decimals)}"
            for user, balance in zip(self._users, self.user_balances())
        ]

    def _check_layout(self) -> None:
        for name in self._users:
            validate_user_name(name)
        if any(a >= b for a, b in zip(self._users, self._users[1:])):
            raise ValidationError("users must be unique and sorted")
        for purchase in self._purchases:
            if len(purchase.shares) != len(self._users):
                raise ValidationError(
                    f"purchase {purchase.description!r} needs exactly one share per user"
                )
            if not 0 <= purchase.payer < len(self._users):
                raise ValidationError(
                    f"purchase {purchase.description!r} has no valid payer"
                )
