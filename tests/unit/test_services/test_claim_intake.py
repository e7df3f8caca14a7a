"""
Unit Tests: Claim Intake & Duplicate Detection
----------------------------------------------
prepare_claim turns a pasted payment message into evidence; submit_claim
refuses a reused transaction reference or an already-submitted message.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from familyfund.models.claim import ClaimSubmission, SubmissionChannel
from familyfund.services.intake import prepare_claim
from familyfund.services.submissions import score_claim, submit_claim
from familyfund.utils.db import ProofOfPayment
from familyfund.utils.errors import DuplicateSubmissionError, InvalidEvidenceError
from familyfund.utils.hashing import message_hash

MPESA_MESSAGE = (
    "TKT95BDMTY Confirmed. Ksh1,000.00 sent to ARNOLD  TEZI 0799174938 on 29/11/25 at 2:24 PM. "
    "New M-PESA balance is Ksh15,647.18."
)


@pytest.fixture
def make_submission():
    def _make(**overrides) -> ClaimSubmission:
        fields = {
            "actor_id": "user_1",
            "family_id": "fam_1",
            "submission_channel": SubmissionChannel.MESSAGE,
            "has_proof": True,
            "raw_message": MPESA_MESSAGE,
        }
        fields.update(overrides)
        return ClaimSubmission(**fields)

    return _make


# --------------------------------------
# 📨 Intake
# --------------------------------------
def test_message_fills_missing_fields(make_submission):
    prepared = prepare_claim(make_submission())

    assert prepared.evidence.amount == Decimal("1000.00")
    assert prepared.evidence.payment_date == datetime(2025, 11, 29, 14, 24, tzinfo=timezone.utc)
    assert prepared.evidence.parser_confidence == 1.0
    assert prepared.transaction_ref == "TKT95BDMTY"
    assert prepared.message_hash == message_hash(MPESA_MESSAGE)


def test_client_values_win_over_parsed_ones(make_submission):
    prepared = prepare_claim(make_submission(amount=Decimal("900"), transaction_ref=" MYREF12345 "))
    assert prepared.evidence.amount == Decimal("900")
    assert prepared.transaction_ref == "MYREF12345"


def test_server_parse_replaces_client_confidence(make_submission):
    prepared = prepare_claim(make_submission(parser_confidence=0.3))
    assert prepared.evidence.parser_confidence == 1.0


def test_unparseable_message_is_scored_as_unparsed(make_submission, db_session, now):
    submission = make_submission(
        raw_message="sent the money, check your phone",
        amount=Decimal("100"),
        payment_date=now,
        parser_confidence=0.95,
    )
    prepared = prepare_claim(submission)

    assert prepared.evidence.parser_confidence is None
    assert prepared.transaction_ref is None
    assert prepared.message_hash is not None
    report = score_claim(prepared.evidence, db_session, now=now)
    assert report.reasons == ["Message could not be parsed automatically"]


def test_unparseable_message_without_amount_is_invalid(make_submission):
    with pytest.raises(InvalidEvidenceError, match="amount"):
        prepare_claim(make_submission(raw_message="hello"))


def test_message_on_image_channel_is_only_hashed(make_submission, now):
    prepared = prepare_claim(
        make_submission(submission_channel=SubmissionChannel.IMAGE, amount=Decimal("50"), payment_date=now)
    )
    assert prepared.evidence.parser_confidence is None
    assert prepared.transaction_ref is None
    assert prepared.message_hash == message_hash(MPESA_MESSAGE)


def test_submission_without_message_passes_through(make_submission, now):
    prepared = prepare_claim(
        make_submission(raw_message=None, amount=Decimal("50"), payment_date=now, parser_confidence=0.9)
    )
    assert prepared.evidence.parser_confidence == 0.9
    assert prepared.message_hash is None
    assert prepared.parsed is None


# --------------------------------------
# 🚫 Duplicates
# --------------------------------------
def test_reused_reference_is_rejected_across_families(make_evidence, db_session, now):
    submit_claim(make_evidence(), db_session, now=now, transaction_ref="TKT95BDMTY")

    with pytest.raises(DuplicateSubmissionError, match="Transaction reference already used") as exc_info:
        submit_claim(make_evidence(family_id="fam_2"), db_session, now=now, transaction_ref="TKT95BDMTY")
    assert exc_info.value.field == "transaction_ref"
    assert exc_info.value.existing_id is not None


def test_resubmitted_message_is_rejected(make_submission, db_session, now):
    first = prepare_claim(make_submission())
    submit_claim(first.evidence, db_session, now=now, message_hash=first.message_hash)

    repasted_text = "  " + MPESA_MESSAGE.replace(". New M-PESA", ".\n\nNEW M-PESA") + "\n"
    repasted = prepare_claim(make_submission(raw_message=repasted_text))
    with pytest.raises(DuplicateSubmissionError, match="This message has already been submitted"):
        submit_claim(repasted.evidence, db_session, now=now, message_hash=repasted.message_hash)


def test_rejected_duplicate_is_not_stored(make_evidence, db_session, now):
    submit_claim(make_evidence(), db_session, now=now, transaction_ref="REF0000001")
    with pytest.raises(DuplicateSubmissionError):
        submit_claim(make_evidence(), db_session, now=now, transaction_ref="REF0000001")

    assert db_session.query(ProofOfPayment).count() == 1


def test_claims_without_reference_or_message_are_never_duplicates(make_evidence, db_session, now):
    first = submit_claim(make_evidence(), db_session, now=now)
    second = submit_claim(make_evidence(), db_session, now=now)
    assert second.proof_id != first.proof_id
