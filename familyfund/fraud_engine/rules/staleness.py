"""
Payment Staleness Check
-----------------------
Claims for payments made long ago are harder to verify.

Elapsed time is measured in fractional days; a payment date in the future
gives a negative age and never triggers.
"""

from datetime import datetime
from typing import Optional

from familyfund.models.claim import ClaimEvidence, as_utc
from familyfund.models.fraud import FraudSignal
from familyfund.fraud_engine.constants import (
    STALE_DAYS_MILD,
    STALE_DAYS_SEVERE,
    STALE_MILD_POINTS,
    STALE_MILD_REASON,
    STALE_SEVERE_POINTS,
    STALE_SEVERE_REASON,
)
from familyfund.utils.logger import logger

SECONDS_PER_DAY = 24 * 60 * 60


def days_since_payment(evidence: ClaimEvidence, now: datetime) -> float:
    return (as_utc(now) - evidence.payment_date).total_seconds() / SECONDS_PER_DAY


def check_staleness(evidence: ClaimEvidence, now: datetime) -> Optional[FraudSignal]:
    age_days = days_since_payment(evidence, now)

    if age_days > STALE_DAYS_SEVERE:
        signal = FraudSignal(rule="staleness", points=STALE_SEVERE_POINTS, reason=STALE_SEVERE_REASON)
    elif age_days > STALE_DAYS_MILD:
        signal = FraudSignal(rule="staleness", points=STALE_MILD_POINTS, reason=STALE_MILD_REASON)
    else:
        return None

    logger.debug(f"[STALENESS] {evidence.actor_id}: payment {age_days:.1f} days old (+{signal.points})")
    return signal
