"""Shared fixtures for the shared ledger tests."""

from fractions import Fraction

import pytest

from ledger_core.accounts import Accounts
from ledger_core.models import Purchase
from ledger_core.services import LedgerService
from ledger_core.storage import JSONStorage


def _purchase(description, payer, amount, shares):
    return Purchase(
        description=description,
        payer=payer,
        amount=Fraction(amount),
        shares=[Fraction(share) for share in shares],
    )


@pytest.fixture
def accounts():
    """Three users and two purchases: ham paid by Eska, wine paid by Simon."""
    return Accounts(
        ["Eska", "Shuba", "Simon"],
        [
            _purchase("jambon", 0, 15, [1, 2, 1]),
            _purchase("vin", 2, 10, [0, 2, 1]),
        ],
    )


@pytest.fixture
def purchase_factory():
    """Build a dense purchase from plain numbers."""
    return _purchase


@pytest.fixture
def storage(tmp_path):
    return JSONStorage(tmp_path / "data")


@pytest.fixture
def service(storage):
    return LedgerService(storage)
