"""Persistence-backed access to named ledgers for the front ends."""

from __future__ import annotations

import threading
from fractions import Fraction
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypeVar

from .accounts import Accounts
from .exceptions import PersistenceError, RecordNotFoundError, ValidationError
from .models import SerializedAccounts
from .serialization import parse_accounts, serialize_accounts
from .storage import JSONStorage
from .validators import validate_share_mapping, validate_title

T = TypeVar("T")

PURCHASE_FIELDS = {"descr", "who", "amount", "benef_to_shares"}


class LedgerService:
    """Loads, mutates and saves ledgers stored as ``<title>.json``.

    Each edit runs under one lock against a freshly loaded ledger, which is
    saved only if every step succeeded.
    """

    def __init__(self, storage: JSONStorage, suffix: str = ".json") -> None:
        self._storage = storage
        self._suffix = suffix
        self._lock = threading.Lock()

    # Public API -----------------------------------------------------------
    def titles(self) -> List[str]:
        return self._storage.list(self._suffix)

    def exists(self, title: str) -> bool:
        return validate_title(title) in self.titles()

    def get(self, title: str) -> Accounts:
        """Return the stored ledger; an unknown title yields an empty one."""
        with self._lock:
            return self._load(title)

    def replace(self, title: str, document: Any) -> Accounts:
        accounts = parse_accounts(SerializedAccounts.from_dict(document))
        with self._lock:
            self._persist(title, accounts)
        return accounts

    def delete(self, title: str) -> None:
        with self._lock:
            if not self._storage.delete(self._resource(title)):
                raise RecordNotFoundError(f"Ledger {title} not found")

    def add_user(self, title: str, name: str) -> Accounts:
        return self._edit(title, lambda accounts: accounts.add_user(name))

    def remove_user(self, title: str, name: str) -> Accounts:
        return self._edit(title, lambda accounts: accounts.remove_user(name))

    def add_purchase(
        self,
        title: str,
        descr: str,
        who: str,
        amount: object,
        shares: Optional[Mapping[str, object]] = None,
    ) -> Tuple[Accounts, int]:
        """Add a purchase together with its shares.

        Returns the saved ledger and the new purchase index, both taken under
        the same lock as the write.
        """
        weights = validate_share_mapping(shares)

        def apply(accounts: Accounts) -> int:
            index = accounts.add_purchase(descr, who, amount)
            accounts.set_shares(index, weights)
            return index

        return self._transaction(title, apply)

    def update_purchase(self, title: str, index: int, changes: Mapping[str, Any]) -> Accounts:
        """Partially update a purchase from ``descr``/``who``/``amount``/``benef_to_shares``."""
        unknown = set(changes) - PURCHASE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown purchase fields: {', '.join(sorted(unknown))}")

        def apply(accounts: Accounts) -> None:
            accounts.purchase(index)
            if "descr" in changes:
                accounts.change_description(index, changes["descr"])
            if "who" in changes:
                accounts.change_payer(index, changes["who"])
            if "amount" in changes:
                accounts.change_amount(index, changes["amount"])
            if "benef_to_shares" in changes:
                accounts.set_shares(index, validate_share_mapping(changes["benef_to_shares"]))

        return self._edit(title, apply)

    def remove_purchase(self, title: str, index: int) -> Accounts:
        return self._edit(title, lambda accounts: accounts.remove_purchase(index))

    def balances(self, title: str) -> Dict[str, Fraction]:
        return self.get(title).balances()

    # Internal helpers -----------------------------------------------------
    def _edit(self, title: str, apply: Callable[[Accounts], object]) -> Accounts:
        return self._transaction(title, apply)[0]

    def _transaction(self, title: str, apply: Callable[[Accounts], T]) -> Tuple[Accounts, T]:
        with self._lock:
            accounts = self._load(title)
            result = apply(accounts)
            self._persist(title, accounts)
            return accounts, result

    def _load(self, title: str) -> Accounts:
        document = self._storage.load(self._resource(title))
        if document is None:
            return Accounts()
        try:
            return parse_accounts(SerializedAccounts.from_dict(document))
        except (ValidationError, RecordNotFoundError) as exc:
            raise PersistenceError(f"Stored ledger {title} is invalid: {exc}") from exc

    def _persist(self, title: str, accounts: Accounts) -> None:
        self._storage.save(self._resource(title), serialize_accounts(accounts).to_dict())

    def _resource(self, title: str) -> str:
        return validate_title(title) + self._suffix
