"""
Parser Confidence Check
-----------------------
Only applies to claims pasted in as a bank/mobile-money message.

- No confidence at all → the message could not be parsed (+30)
- Confidence below 0.8 → low confidence (+20)
- Otherwise → nothing
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from familyfund.models.claim import ClaimEvidence, SubmissionChannel
from familyfund.models.fraud import FraudSignal
from familyfund.fraud_engine.constants import (
    LOW_CONFIDENCE_POINTS,
    LOW_CONFIDENCE_REASON,
    LOW_CONFIDENCE_THRESHOLD,
    UNPARSED_MESSAGE_POINTS,
    UNPARSED_MESSAGE_REASON,
)
from familyfund.utils.logger import logger


def confidence_percent(confidence: float) -> int:
    """
    Percentage shown in the low-confidence reason, e.g. 0.764 -> 76.

    The product is rounded half-up on its exact binary value, so
    0.285 -> 28 (28.499999...) while 0.765 -> 77 (76.5).
    """
    percent = Decimal(confidence * 100)
    return int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def check_parser_confidence(evidence: ClaimEvidence) -> Optional[FraudSignal]:
    """
    Rule-based check on the automated message parser's confidence.

    Args:
        evidence (ClaimEvidence): Claim under analysis.

    Returns:
        FraudSignal | None: at most one signal for this category.
    """
    if evidence.submission_channel != SubmissionChannel.MESSAGE:
        return None

    confidence = evidence.parser_confidence
    if confidence is None:
        logger.debug(f"[PARSER] {evidence.actor_id}: message was not parsed (+{UNPARSED_MESSAGE_POINTS})")
        return FraudSignal(rule="parser_confidence", points=UNPARSED_MESSAGE_POINTS, reason=UNPARSED_MESSAGE_REASON)

    if confidence < LOW_CONFIDENCE_THRESHOLD:
        percent = confidence_percent(confidence)
        logger.debug(f"[PARSER] {evidence.actor_id}: low confidence {percent}% (+{LOW_CONFIDENCE_POINTS})")
        return FraudSignal(
            rule="parser_confidence",
            points=LOW_CONFIDENCE_POINTS,
            reason=LOW_CONFIDENCE_REASON.format(percent=percent),
        )

    return None
