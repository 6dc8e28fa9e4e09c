"""Tests for the sparse document <-> dense ledger adapter."""

import json
from fractions import Fraction

import pytest

from ledger_core.accounts import Accounts
from ledger_core.exceptions import (
    EmptyDescriptionError,
    EmptyNameError,
    InvalidNumeratorError,
    RationalParseError,
    UnknownUserError,
    ValidationError,
)
from ledger_core.models import SerializedAccounts
from ledger_core.serialization import (
    accounts_from_json,
    accounts_to_json,
    decimal_text,
    parse_accounts,
    serialize_accounts,
)


def _document(**overrides):
    document = {
        "users": ["Simon", "Shuba", "Eska", "Simon"],
        "purchases": [
            {
                "descr": "jambon",
                "who": "Simon",
                "amount": "15",
                "benef_to_shares": {"Simon": "1", "Shuba": "2"},
            }
        ],
    }
    document.update(overrides)
    return document


class TestParseAccounts:
    """Loading the sparse form into the dense ledger."""

    def test_sorts_dedups_and_expands_shares(self):
        accounts = parse_accounts(SerializedAccounts.from_dict(_document()))

        assert accounts.users == ("Eska", "Shuba", "Simon")
        purchase = accounts.purchase(0)
        assert purchase.payer == 2
        assert purchase.amount == 15
        assert purchase.shares == [0, 2, 1]

    def test_unknown_payer(self):
        document = _document()
        document["purchases"][0]["who"] = "Nobody"
        with pytest.raises(UnknownUserError):
            parse_accounts(SerializedAccounts.from_dict(document))

    def test_unknown_beneficiary(self):
        document = _document()
        document["purchases"][0]["benef_to_shares"]["Nobody"] = "1"
        with pytest.raises(UnknownUserError):
            parse_accounts(SerializedAccounts.from_dict(document))

    def test_bad_amount(self):
        document = _document()
        document["purchases"][0]["amount"] = "quinze"
        with pytest.raises(InvalidNumeratorError):
            parse_accounts(SerializedAccounts.from_dict(document))

    def test_bad_weight(self):
        document = _document()
        document["purchases"][0]["benef_to_shares"]["Eska"] = "1.x"
        with pytest.raises(RationalParseError):
            parse_accounts(SerializedAccounts.from_dict(document))

    def test_empty_user_name(self):
        with pytest.raises(EmptyNameError):
            parse_accounts(SerializedAccounts.from_dict(_document(users=["", "Simon", "Shuba"])))

    def test_empty_description(self):
        document = _document()
        document["purchases"][0]["descr"] = ""
        with pytest.raises(EmptyDescriptionError):
            parse_accounts(SerializedAccounts.from_dict(document))

    def test_missing_keys_default_to_empty(self):
        accounts = parse_accounts(SerializedAccounts.from_dict({}))
        assert accounts == Accounts()

    @pytest.mark.parametrize(
        "document",
        [
            [],
            {"users": "Simon"},
            {"users": [1, 2]},
            {"users": ["Simon"], "purchases": {}},
            {"users": ["Simon"], "purchases": [{"descr": "x", "who": "Simon", "amount": 5}]},
            {
                "users": ["Simon"],
                "purchases": [
                    {"descr": "x", "who": "Simon", "amount": "5", "benef_to_shares": {"Simon": 1}}
                ],
            },
            {"users": {}},
            {"users": ""},
            {"purchases": 0},
            {"users": {}, "purchases": {}},
            {
                "users": ["Simon"],
                "purchases": [{"descr": "x", "who": "Simon", "amount": "5", "benef_to_shares": []}],
            },
        ],
    )
    def test_malformed_documents(self, document):
        with pytest.raises(ValidationError):
            SerializedAccounts.from_dict(document)


class TestSerializeAccounts:
    """Projecting the dense ledger back to the sparse form."""

    def test_only_non_zero_weights_are_written(self, accounts):
        document = serialize_accounts(accounts).to_dict()

        assert document == {
            "users": ["Eska", "Shuba", "Simon"],
            "purchases": [
                {
                    "descr": "jambon",
                    "who": "Eska",
                    "amount": "15",
                    "benef_to_shares": {"Eska": "1", "Shuba": "2", "Simon": "1"},
                },
                {
                    "descr": "vin",
                    "who": "Simon",
                    "amount": "10",
                    "benef_to_shares": {"Shuba": "2", "Simon": "1"},
                },
            ],
        }

    def test_round_trip(self, accounts):
        accounts.change_amount(1, "-12.345")
        accounts.set_share(0, "Shuba", "0.125")
        restored = parse_accounts(serialize_accounts(accounts))
        assert restored == accounts

    def test_json_round_trip(self, accounts):
        text = accounts_to_json(accounts)
        assert json.loads(text)["users"] == ["Eska", "Shuba", "Simon"]
        assert accounts_from_json(text) == accounts

    def test_malformed_json(self):
        with pytest.raises(ValidationError):
            accounts_from_json("{users: ")


class TestDecimalText:
    def test_exact_values_are_written_in_full(self):
        assert decimal_text(Fraction(1, 1024)) == "0.0009765625"
        assert decimal_text(Fraction(-7, 4)) == "-1.75"

    def test_repeating_values_are_rounded(self, caplog):
        assert decimal_text(Fraction(1, 3), 4) == "0.3333"
        assert decimal_text(Fraction(2, 3)) == "0.666666666667"
        assert "no finite decimal form" in caplog.text
