"""
Claim Submission Service
------------------------
Workflow around the risk engine: reject resubmitted payments, score a claim
against the stored history, derive the routing decision and (optionally)
persist the claim.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from familyfund.models.claim import ClaimEvidence
from familyfund.models.fraud import RiskReport
from familyfund.fraud_engine.decision_policy import build_report, get_claim_status
from familyfund.fraud_engine.history import SqlSubmissionHistory
from familyfund.fraud_engine.scoring import assess_risk
from familyfund.utils.db import find_proof_by_message_hash, find_proof_by_reference, save_proof
from familyfund.utils.errors import DuplicateSubmissionError
from familyfund.utils.logger import logger

DUPLICATE_REF_MESSAGE = "Transaction reference already used"
ALREADY_SUBMITTED_MESSAGE = "This message has already been submitted"


def score_claim(evidence: ClaimEvidence, db: Session, now: Optional[datetime] = None) -> RiskReport:
    """Score without storing anything."""
    now = now or datetime.now(timezone.utc)
    assessment = assess_risk(evidence, SqlSubmissionHistory(db), now=now)
    return build_report(evidence, assessment)


def check_duplicates(
    db: Session,
    transaction_ref: Optional[str] = None,
    message_hash: Optional[str] = None,
) -> None:
    """
    Raise DuplicateSubmissionError if the reference or the message is
    already on file. Both checks span all families.
    """
    if transaction_ref:
        existing = find_proof_by_reference(db, transaction_ref)
        if existing is not None:
            logger.warning(f"[DUPLICATE] 🚫 Reference {transaction_ref} already used by proof {existing}")
            raise DuplicateSubmissionError(DUPLICATE_REF_MESSAGE, field="transaction_ref", existing_id=existing)

    if message_hash:
        existing = find_proof_by_message_hash(db, message_hash)
        if existing is not None:
            logger.warning(f"[DUPLICATE] 🚫 Message already submitted as proof {existing}")
            raise DuplicateSubmissionError(ALREADY_SUBMITTED_MESSAGE, field="raw_message", existing_id=existing)


def submit_claim(
    evidence: ClaimEvidence,
    db: Session,
    now: Optional[datetime] = None,
    *,
    transaction_ref: Optional[str] = None,
    message_hash: Optional[str] = None,
) -> RiskReport:
    """
    Reject duplicates, score the claim, then store it with its fraud score
    and reasons.

    Scoring happens before the insert so the claim never counts as its own
    previous submission.
    """
    now = now or datetime.now(timezone.utc)
    check_duplicates(db, transaction_ref=transaction_ref, message_hash=message_hash)

    assessment = assess_risk(evidence, SqlSubmissionHistory(db), now=now)
    status = get_claim_status(evidence)
    proof_id = save_proof(
        db,
        evidence,
        assessment,
        status,
        created_at=now,
        transaction_ref=transaction_ref,
        message_hash=message_hash,
    )
    report = build_report(evidence, assessment, proof_id=proof_id)

    logger.info(
        f"✅ Claim {proof_id} stored for {evidence.actor_id} | score={report.score} "
        f"| level={report.risk_level.value} | review={report.requires_review}",
        extra={"actor_id": evidence.actor_id, "family_id": evidence.family_id, "score": report.score},
    )
    return report
