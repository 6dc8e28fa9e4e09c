"""Core ledger package for the shared expense tracker."""

from .accounts import Accounts
from .exceptions import (
    DuplicateUserError,
    EmptyDescriptionError,
    EmptyInputError,
    EmptyNameError,
    InvalidDenominatorError,
    InvalidNumeratorError,
    InvalidPurchaseIndexError,
    PersistenceError,
    RationalParseError,
    RecordNotFoundError,
    UnknownUserError,
    UserHasDataError,
    ValidationError,
)
from .models import Purchase, SerializedAccounts, SerializedPurchase
from .rational import format_rational, parse_rational
from .serialization import accounts_from_json, accounts_to_json, parse_accounts, serialize_accounts
from .services import LedgerService
from .storage import JSONStorage

__all__ = [
    "Accounts",
    "Purchase",
    "SerializedAccounts",
    "SerializedPurchase",
    "LedgerService",
    "JSONStorage",
    "format_rational",
    "parse_rational",
    "parse_accounts",
    "serialize_accounts",
    "accounts_from_json",
    "accounts_to_json",
    "ValidationError",
    "EmptyNameError",
    "EmptyDescriptionError",
    "DuplicateUserError",
    "UserHasDataError",
    "RationalParseError",
    "EmptyInputError",
    "InvalidNumeratorError",
    "InvalidDenominatorError",
    "RecordNotFoundError",
    "UnknownUserError",
    "InvalidPurchaseIndexError",
    "PersistenceError",
]
