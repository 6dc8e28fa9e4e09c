"""Data models for the shared ledger domain."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from fractions import Fraction
from typing import Any, Dict, List

from .exceptions import ValidationError

__all__ = ["Purchase", "SerializedAccounts", "SerializedPurchase"]


@dataclass
class Purchase:
    """One expense: who fronted ``amount`` and each user's weight in it.

    ``payer`` and the positions of ``shares`` are user indices into the
    owning ledger's sorted user list.
    """

    description: str
    payer: int
    amount: Fraction
    shares: List[Fraction] = field(default_factory=list)

    def total_shares(self) -> Fraction:
        return sum(self.shares, Fraction(0))

    def copy(self) -> "Purchase":
        return replace(self, shares=list(self.shares))


@dataclass(frozen=True)
class SerializedPurchase:
    descr: str
    who: str
    amount: str
    benef_to_shares: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "descr": self.descr,
            "who": self.who,
            "amount": self.amount,
            "benef_to_shares": dict(self.benef_to_shares),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SerializedPurchase":
        if not isinstance(data, dict):
            raise ValidationError("each purchase must be a mapping")
        for key in ("descr", "who", "amount"):
            if not isinstance(data.get(key), str):
                raise ValidationError(f"purchase field '{key}' must be a string")
        shares = data.get("benef_to_shares", {})
        if not isinstance(shares, dict):
            raise ValidationError("purchase field 'benef_to_shares' must be a mapping")
        for name, weight in shares.items():
            if not isinstance(name, str) or not isinstance(weight, str):
                raise ValidationError("benef_to_shares must map user names to decimal strings")
        return cls(
            descr=data["descr"],
            who=data["who"],
            amount=data["amount"],
            benef_to_shares=dict(shares),
        )


@dataclass(frozen=True)
class SerializedAccounts:
    """Sparse, human-editable form of a ledger; users may repeat."""

    users: List[str] = field(default_factory=list)
    purchases: List[SerializedPurchase] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the ledger document to JSON-friendly natives."""
        return {
            "users": list(self.users),
            "purchases": [purchase.to_dict() for purchase in self.purchases],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SerializedAccounts":
        """Hydrate a ledger document, checking only its shape."""
        if not isinstance(data, dict):
            raise ValidationError("ledger document must be a mapping")
        users = data.get("users", [])
        purchases = data.get("purchases", [])
        if not isinstance(users, list) or not all(isinstance(user, str) for user in users):
            raise ValidationError("'users' must be a list of strings")
        if not isinstance(purchases, list):
            raise ValidationError("'purchases' must be a list")
        return cls(
            users=list(users),
            purchases=[SerializedPurchase.from_dict(purchase) for purchase in purchases],
        )
