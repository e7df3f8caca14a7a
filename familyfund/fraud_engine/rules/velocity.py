"""
Submission Velocity Check
-------------------------
Detects members firing claims in quick succession.

Why:
- A burst of submissions within minutes is typical of scripted or
  copy-paste abuse of the claim form.

Thresholds:
- < 5 minutes since the previous claim  → rapid (+30)
- < 15 minutes since the previous claim → frequent (+10)

A previous claim stamped in the future (clock skew) is ignored.
"""

from datetime import datetime
from typing import Optional

from familyfund.models.claim import ClaimEvidence, SubmissionHistoryRecord, as_utc
from familyfund.models.fraud import FraudSignal
from familyfund.fraud_engine.constants import (
    FREQUENT_MINUTES,
    FREQUENT_POINTS,
    FREQUENT_REASON,
    RAPID_MINUTES,
    RAPID_POINTS,
    RAPID_REASON,
)
from familyfund.utils.logger import logger


def minutes_since(record: SubmissionHistoryRecord, now: datetime) -> float:
    return (as_utc(now) - record.created_at).total_seconds() / 60


def check_velocity(
    evidence: ClaimEvidence,
    last_submission: Optional[SubmissionHistoryRecord],
    now: datetime,
) -> Optional[FraudSignal]:
    """
    Rule-based check on the gap since the actor's previous claim in this family.

    Args:
        evidence (ClaimEvidence): Claim under analysis.
        last_submission (SubmissionHistoryRecord, optional): Most recent prior claim.
        now (datetime): Reference time for the gap.

    Returns:
        FraudSignal | None: at most one signal for this category.
    """
    if last_submission is None:
        logger.debug(f"[VELOCITY] {evidence.actor_id}: no prior submission in family {evidence.family_id}.")
        return None

    gap = minutes_since(last_submission, now)
    if gap < 0:
        logger.warning(
            f"[VELOCITY] ⚠️ Prior submission for {evidence.actor_id} is {-gap:.1f} min in the future, ignored."
        )
        return None

    if gap < RAPID_MINUTES:
        signal = FraudSignal(rule="velocity", points=RAPID_POINTS, reason=RAPID_REASON)
    elif gap < FREQUENT_MINUTES:
        signal = FraudSignal(rule="velocity", points=FREQUENT_POINTS, reason=FREQUENT_REASON)
    else:
        return None

    logger.info(f"[VELOCITY] 🚨 {evidence.actor_id}: gap={gap:.1f} min since last claim (+{signal.points})")
    return signal
