"""
Unit Tests: Command-line scorer
-------------------------------
Runs familyfund.cli.main against the in-memory test database.
"""

import json

import pytest

from familyfund import cli


@pytest.fixture
def cli_db(monkeypatch, session_factory):
    monkeypatch.setattr(cli, "SessionLocal", session_factory)
    monkeypatch.setattr(cli, "init_db", lambda: None)


def _report(out: str) -> dict:
    """The report is the last, pretty-printed JSON object on stdout."""
    return json.loads(out[out.rindex("{\n"):])


BASE_ARGS = [
    "--actor", "user_1",
    "--family", "fam_1",
    "--amount", "120",
    "--payment-date", "2020-01-01T00:00:00+00:00",
    "--channel", "message",
    "--confidence", "0.6",
]


def test_cli_prints_report(cli_db, capsys):
    assert cli.main(BASE_ARGS + ["--no-proof"]) == 0
    report = _report(capsys.readouterr().out)
    assert report["score"] == 100
    assert report["reasons"] == [
        "Proofless claim (manual entry)",
        "Low parser confidence (60%)",
        "Payment is over 90 days old",
    ]
    assert report["proof_id"] is None


def test_cli_submit_stores_claim(cli_db, capsys):
    assert cli.main(BASE_ARGS + ["--submit"]) == 0
    first = _report(capsys.readouterr().out)
    assert first["proof_id"] is not None

    assert cli.main(BASE_ARGS) == 0
    second = _report(capsys.readouterr().out)
    assert "Rapid submission (less than 5 mins since last)" in second["reasons"]


def test_cli_rejects_bad_confidence(cli_db, capsys):
    assert cli.main(BASE_ARGS[:-1] + ["1.7"]) == 2
    assert "parser_confidence" in capsys.readouterr().err


MESSAGE_ARGS = [
    "--actor", "user_1",
    "--family", "fam_1",
    "--channel", "message",
    "--message",
    "TKR95B5UK3 Confirmed. Ksh355.00 sent to SHEILA  OPONDO 0705424188 on 27/11/25 at 8:14 AM.",
]


def test_cli_parses_message_and_rejects_resubmission(cli_db, capsys):
    assert cli.main(MESSAGE_ARGS + ["--submit"]) == 0
    report = _report(capsys.readouterr().out)
    assert report["proof_id"] is not None
    assert not any(reason.startswith("Low parser") for reason in report["reasons"])

    assert cli.main(MESSAGE_ARGS + ["--submit"]) == 2
    assert "Transaction reference already used" in capsys.readouterr().err


def test_cli_requires_amount_without_parseable_message(cli_db, capsys):
    args = ["--actor", "user_1", "--family", "fam_1", "--channel", "manual", "--payment-date", "2026-10-01"]
    assert cli.main(args) == 2
    assert "amount" in capsys.readouterr().err
