"""Domain-specific exceptions for the shared ledger core."""

from __future__ import annotations


class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class EmptyNameError(ValidationError):
    """Raised when a user name is the empty string."""

    def __init__(self) -> None:
        super().__init__("Cannot use the empty string as a user name")


class EmptyDescriptionError(ValidationError):
    """Raised when a purchase description is the empty string."""

    def __init__(self) -> None:
        super().__init__("Cannot use the empty string as a description")


class DuplicateUserError(ValidationError):
    """Raised when adding a user that is already present."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot insert user {name} twice")


class UserHasDataError(ValidationError):
    """Raised when removing a user who paid a purchase or holds shares."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot remove user {name}: they paid a purchase or hold shares")


class RationalParseError(ValidationError):
    """Raised when decimal text cannot be converted to an exact rational."""

    def __init__(self, text: object, details: str) -> None:
        self.text = text
        self.details = details
        super().__init__(f"Could not parse rational {text!r}: {details}")


class EmptyInputError(RationalParseError):
    def __init__(self, text: object) -> None:
        super().__init__(text, "empty input")


class InvalidNumeratorError(RationalParseError):
    def __init__(self, text: object, segment: str) -> None:
        self.segment = segment
        super().__init__(text, f"invalid integer part {segment!r}")


class InvalidDenominatorError(RationalParseError):
    def __init__(self, text: object, segment: str) -> None:
        self.segment = segment
        super().__init__(text, f"invalid fractional part {segment!r}")


class RecordNotFoundError(LookupError):
    """Raised when a user or purchase cannot be located."""


class UnknownUserError(RecordNotFoundError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown user: {name}")


class InvalidPurchaseIndexError(RecordNotFoundError):
    def __init__(self, index: object) -> None:
        self.index = index
        super().__init__(f"Purchase {index} does not exist")


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""
