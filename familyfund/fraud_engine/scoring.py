"""
Fraud Risk Scoring Engine
-------------------------
Combines four independent signals into a bounded risk score for a payment
claim:

1️⃣ Proofless claim          +50
2️⃣ Parser confidence        +30 (unparsed) / +20 (< 80%)   message channel only
3️⃣ Payment staleness        +30 (> 90 days) / +10 (> 30 days)
4️⃣ Submission velocity      +30 (< 5 min) / +10 (< 15 min)

Points are additive and the total is capped at 100. Every triggered rule
leaves exactly one reason, in the order above, so a treasurer can see why a
claim was flagged.

Usage:
    assessment = assess_risk(evidence, history, now=datetime.now(timezone.utc))
"""

from datetime import datetime
from typing import List

from familyfund.models.claim import ClaimEvidence
from familyfund.models.fraud import FraudSignal, RiskAssessment
from familyfund.fraud_engine.history import SubmissionHistory
from familyfund.fraud_engine.rules.parser_confidence import check_parser_confidence
from familyfund.fraud_engine.rules.proofless import check_proofless
from familyfund.fraud_engine.rules.staleness import check_staleness
from familyfund.fraud_engine.rules.velocity import check_velocity
from familyfund.utils.errors import HistoryLookupError, InvalidEvidenceError
from familyfund.utils.logger import logger


def assess_risk(evidence: ClaimEvidence, history: SubmissionHistory, *, now: datetime) -> RiskAssessment:
    """
    Score one payment claim.

    Args:
        evidence (ClaimEvidence): The claim being submitted.
        history (SubmissionHistory): Source of the actor's most recent prior claim.
        now (datetime): Reference time for staleness and velocity.

    Returns:
        RiskAssessment: clamped score plus ordered reasons.

    Raises:
        InvalidEvidenceError: evidence is not a ClaimEvidence.
        TypeError: `now` is not a datetime.
        HistoryLookupError: the history capability raised.
    """
    if not isinstance(evidence, ClaimEvidence):
        raise InvalidEvidenceError(f"Expected ClaimEvidence, got {type(evidence).__name__}")
    if not isinstance(now, datetime):
        raise TypeError(f"Reference time `now` must be a datetime, got {type(now).__name__}")

    signals: List[FraudSignal] = []

    for signal in (
        check_proofless(evidence),
        check_parser_confidence(evidence),
        check_staleness(evidence, now),
    ):
        if signal is not None:
            signals.append(signal)

    try:
        last_submission = history.find_most_recent_submission(evidence.actor_id, evidence.family_id)
    except Exception as e:
        logger.error(
            f"[HISTORY] ❌ Lookup failed for {evidence.actor_id}@{evidence.family_id}: {e}",
            extra={"actor_id": evidence.actor_id, "family_id": evidence.family_id},
        )
        raise HistoryLookupError(evidence.actor_id, evidence.family_id, e) from e

    velocity = check_velocity(evidence, last_submission, now)
    if velocity is not None:
        signals.append(velocity)

    assessment = RiskAssessment.from_signals(signals)

    if assessment.reasons:
        logger.info(
            f"🚨 Claim by {evidence.actor_id} scored {assessment.score} "
            f"(raw {assessment.raw_score}): {', '.join(assessment.reasons)}",
            extra={"actor_id": evidence.actor_id, "family_id": evidence.family_id, "score": assessment.score},
        )
    else:
        logger.info(
            f"✅ No risk indicators for claim by {evidence.actor_id}",
            extra={"actor_id": evidence.actor_id, "family_id": evidence.family_id, "score": 0},
        )

    return assessment
