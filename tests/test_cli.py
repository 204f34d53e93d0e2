"""Tests for the command-line interface."""

import io
import json

import pytest

from resale_intake import cli
from resale_intake.exceptions import OracleTimeout, SchemaViolation
from resale_intake.normalization import NormalizedIntakeRecord

RECORD = NormalizedIntakeRecord(
    brand="Rick Owens",
    item_name="Pony Hair Ramone",
    category_path="Mens > Shoes > Sneakers",
    condition="9",
    price="900",
    intake_cost=300,
)


@pytest.fixture(autouse=True)
def no_vendor_directory(mocker):
    mocker.patch("resale_intake.cli.VendorDirectory.from_env", return_value=None)


def test_cli_json_output(mocker, monkeypatch, capsys):
    normalize = mocker.patch("resale_intake.cli.normalize_intake", return_value=RECORD)
    monkeypatch.setattr("sys.argv", ["resale-intake", "Rick Owens Ramone", "--json", "--provider", "openai"])

    assert cli.main() == 0

    output = json.loads(capsys.readouterr().out)
    assert output["itemName"] == "Pony Hair Ramone"
    assert "consignmentPayoutPct" not in output
    assert normalize.call_args.kwargs["provider"] == "openai"


def test_cli_reads_stdin(mocker, monkeypatch, capsys):
    normalize = mocker.patch("resale_intake.cli.normalize_intake", return_value=RECORD)
    monkeypatch.setattr("sys.argv", ["resale-intake"])
    monkeypatch.setattr("sys.stdin", io.StringIO("Rick Owens\nRamone"))

    assert cli.main() == 0

    assert normalize.call_args.args[0] == "Rick Owens\nRamone"
    out = capsys.readouterr().out
    assert "Rick Owens Pony Hair Ramone Sneakers" in out
    assert "9/10" in out


def test_cli_retryable_error_exit_code(mocker, monkeypatch, capsys):
    mocker.patch("resale_intake.cli.normalize_intake", side_effect=OracleTimeout("timed out"))
    monkeypatch.setattr("sys.argv", ["resale-intake", "Coat"])

    assert cli.main() == 2
    assert "timed out" in capsys.readouterr().err


def test_cli_validation_error_exit_code(mocker, monkeypatch):
    mocker.patch("resale_intake.cli.normalize_intake", side_effect=SchemaViolation("bad output"))
    monkeypatch.setattr("sys.argv", ["resale-intake", "Coat"])

    assert cli.main() == 1
