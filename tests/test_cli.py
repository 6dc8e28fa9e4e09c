"""Tests for the console front end."""

import json

import pytest

from shared_ledger.cli import build_parser, main


@pytest.fixture
def run(tmp_path):
    data_dir = tmp_path / "data"

    def _run(*argv):
        return main(["--data-dir", str(data_dir), "--ledger", "trip", *argv])

    return _run


def _populate(run):
    for name in ("Simon", "Shuba", "Eska"):
        assert run("user", "add", name) == 0
    assert run("purchase", "add", "jambon", "Eska", "15",
               "--share", "Eska=1", "--share", "Shuba=2", "--share", "Simon=1") == 0
    assert run("purchase", "add", "vin", "Simon", "10",
               "--share", "Shuba=2", "--share", "Simon=1") == 0


class TestCli:
    def test_balance(self, run, capsys):
        _populate(run)
        capsys.readouterr()

        assert run("balance") == 0
        out = capsys.readouterr().out
        assert out.splitlines() == [
            "Eska has a balance of: 11.25",
            "Shuba has a balance of: -14.17",
            "Simon has a balance of: 2.92",
        ]

    def test_balance_reports_ignored_purchase(self, run, capsys, caplog):
        _populate(run)
        assert run("purchase", "add", "cadeau", "Shuba", "50") == 0
        capsys.readouterr()

        assert run("--decimals", "4", "balance") == 0
        captured = capsys.readouterr()
        assert "Shuba has a balance of: -14.1667" in captured.out
        assert "Purchase 2 (cadeau) is ignored" in caplog.text
        assert "ignored" not in captured.out
        assert "Purchase 2 ignored" not in captured.err

    def test_user_list_is_sorted(self, run, capsys):
        _populate(run)
        capsys.readouterr()
        assert run("user", "list") == 0
        assert capsys.readouterr().out.splitlines() == ["Eska", "Shuba", "Simon"]

    def test_purchase_edits(self, run, capsys):
        _populate(run)
        assert run("purchase", "share", "1", "Eska", "0.5") == 0
        assert run("purchase", "payer", "1", "Shuba") == 0
        assert run("purchase", "amount", "1", "12.5") == 0
        assert run("purchase", "describe", "1", "vin rouge") == 0
        assert run("purchase", "remove", "0") == 0
        capsys.readouterr()

        assert run("purchase", "list") == 0
        out = capsys.readouterr().out
        assert "[0] vin rouge: Shuba paid 12.5" in out
        assert "Shares: Eska 0.5, Shuba 2, Simon 1" in out

    def test_validation_errors_exit_with_one(self, run, capsys):
        _populate(run)
        capsys.readouterr()

        assert run("user", "add", "Eska") == 1
        assert "Cannot insert user Eska twice" in capsys.readouterr().err
        assert run("user", "remove", "Shuba") == 1
        assert run("user", "remove", "Nobody") == 1
        assert "Unknown user: Nobody" in capsys.readouterr().err
        assert run("purchase", "remove", "7") == 1
        assert "Purchase 7 does not exist" in capsys.readouterr().err

    def test_bad_amount_is_an_argument_error(self, run):
        with pytest.raises(SystemExit) as excinfo:
            run("purchase", "add", "pain", "Eska", "deux")
        assert excinfo.value.code == 2

    def test_bad_share_syntax(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["purchase", "add", "pain", "Eska", "2", "--share", "Eska"])

    def test_export_import_and_ledgers(self, run, tmp_path, capsys):
        _populate(run)
        export_path = tmp_path / "trip.json"
        assert run("export", str(export_path)) == 0
        document = json.loads(export_path.read_text(encoding="utf-8"))
        assert document["users"] == ["Eska", "Shuba", "Simon"]

        data_dir = str(tmp_path / "data")
        assert main(["--data-dir", data_dir, "--ledger", "copy", "import", str(export_path)]) == 0
        capsys.readouterr()
        assert main(["--data-dir", data_dir, "ledgers"]) == 0
        assert capsys.readouterr().out.splitlines() == ["copy", "trip"]

    def test_import_missing_file(self, run, tmp_path, capsys):
        assert run("import", str(tmp_path / "missing.json")) == 1
        assert "Storage error" in capsys.readouterr().err
