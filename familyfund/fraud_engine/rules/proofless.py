"""
Proofless Claim Check
---------------------
A claim with no attached evidence is the single strongest risk signal.
"""

from typing import Optional

from familyfund.models.claim import ClaimEvidence
from familyfund.models.fraud import FraudSignal
from familyfund.fraud_engine.constants import PROOFLESS_POINTS, PROOFLESS_REASON
from familyfund.utils.logger import logger


def check_proofless(evidence: ClaimEvidence) -> Optional[FraudSignal]:
    if evidence.has_proof:
        return None
    logger.debug(f"[PROOFLESS] {evidence.actor_id}: no proof attached (+{PROOFLESS_POINTS})")
    return FraudSignal(rule="proofless", points=PROOFLESS_POINTS, reason=PROOFLESS_REASON)
