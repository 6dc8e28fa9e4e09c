"""Validation helpers shared across the ledger core and its front ends."""

from __future__ import annotations

import re
from bisect import bisect_left
from typing import Mapping, Optional, Sequence

from .exceptions import (
    EmptyDescriptionError,
    EmptyNameError,
    InvalidPurchaseIndexError,
    UnknownUserError,
    ValidationError,
)

TITLE_PATTERN = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]{0,99}$")


def validate_user_name(value: object) -> str:
    if not isinstance(value, str):
        raise ValidationError("user name must be a string")
    if not value:
        raise EmptyNameError()
    return value


def validate_description(value: object) -> str:
    if not isinstance(value, str):
        raise ValidationError("description must be a string")
    if not value:
        raise EmptyDescriptionError()
    return value


def validate_title(value: object) -> str:
    """Ledger titles double as file names, so keep them to a safe alphabet."""
    if not isinstance(value, str):
        raise ValidationError("title must be a string")
    if not TITLE_PATTERN.fullmatch(value):
        raise ValidationError(
            "title must be 1-100 letters, digits, '-', '_' or '.' and not start with '.'"
        )
    return value


def find_user(users: Sequence[str], name: object) -> int:
    """Binary-search ``name`` in the sorted ``users``; raise when absent."""
    if isinstance(name, str):
        index = bisect_left(users, name)
        if index < len(users) and users[index] == name:
            return index
    raise UnknownUserError(str(name))


def validate_purchase_index(index: object, count: int) -> int:
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidPurchaseIndexError(index)
    if index < 0 or index >= count:
        raise InvalidPurchaseIndexError(index)
    return index


def validate_share_mapping(raw: Optional[object]) -> Mapping[object, object]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValidationError("benef_to_shares must be a mapping of user name to weight")
    return raw
