"""
Decision Policy
---------------
Turns a RiskAssessment into what the submission workflow acts on:

- LOW: score <= 20 (no badge)
- MEDIUM: 21–50 (yellow badge)
- HIGH: > 50 (red badge)

plus the review flag, the initial claim status and the audit-log note.
"""

from typing import Optional

from familyfund.config import config
from familyfund.models.claim import ClaimEvidence
from familyfund.models.fraud import ClaimStatus, RiskAssessment, RiskLevel, RiskReport
from familyfund.fraud_engine.constants import LOW_RISK_MAX, MEDIUM_RISK_MAX


def get_risk_level(score: int) -> RiskLevel:
    if score > MEDIUM_RISK_MAX:
        return RiskLevel.HIGH
    if score > LOW_RISK_MAX:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def requires_review(assessment: RiskAssessment, threshold: Optional[int] = None) -> bool:
    """True when the score is above the configured review threshold."""
    limit = config.REVIEW_SCORE_THRESHOLD if threshold is None else threshold
    return assessment.score > limit


def get_claim_status(evidence: ClaimEvidence) -> ClaimStatus:
    return ClaimStatus.PENDING if evidence.has_proof else ClaimStatus.UNVERIFIED_CLAIM


def get_audit_note(assessment: RiskAssessment) -> str:
    if assessment.reasons:
        return f"Flagged: {', '.join(assessment.reasons)}"
    return "Initial submission"


def build_report(
    evidence: ClaimEvidence,
    assessment: RiskAssessment,
    proof_id: Optional[int] = None,
) -> RiskReport:
    return RiskReport(
        score=assessment.score,
        reasons=list(assessment.reasons),
        risk_level=get_risk_level(assessment.score),
        requires_review=requires_review(assessment),
        status=get_claim_status(evidence),
        audit_note=get_audit_note(assessment),
        proof_id=proof_id,
    )
