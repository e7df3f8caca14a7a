"""
Risk Scoring Endpoints
----------------------
- POST /assess_risk  → score a claim without storing it
- POST /submissions  → reject duplicates, then score and store a claim

Both accept an optional `raw_message` (M-Pesa / bank confirmation text) that
is parsed server-side. Lookup failures, duplicates and invalid evidence are
handled by the app-level exception handlers in `familyfund.main`.
"""

from datetime import datetime

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from familyfund.api.dependencies import get_db_session, get_now
from familyfund.models.claim import ClaimSubmission
from familyfund.models.fraud import RiskReport
from familyfund.services.intake import prepare_claim
from familyfund.services.submissions import score_claim, submit_claim
from familyfund.utils.logger import logger

router = APIRouter(tags=["Fraud Risk"])


@router.post(
    "/assess_risk",
    response_model=RiskReport,
    summary="Score a payment claim for fraud risk",
    description="Runs the proof, parser, staleness and velocity rules and returns the score with its reasons.",
)
async def assess_risk_endpoint(
    submission: ClaimSubmission = Body(..., description="Claim evidence, optionally with the raw payment message"),
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
):
    logger.info(f"🚀 Scoring claim for actor={submission.actor_id} family={submission.family_id}")
    prepared = prepare_claim(submission)
    return score_claim(prepared.evidence, db, now=now)


@router.post(
    "/submissions",
    response_model=RiskReport,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a payment claim",
    description=(
        "Rejects reused transaction references and already-submitted messages (409), "
        "then scores the claim against the member's history and stores it with its fraud score."
    ),
)
async def submit_claim_endpoint(
    submission: ClaimSubmission = Body(..., description="Claim evidence, optionally with the raw payment message"),
    db: Session = Depends(get_db_session),
    now: datetime = Depends(get_now),
):
    logger.info(f"📥 New claim from actor={submission.actor_id} family={submission.family_id}")
    prepared = prepare_claim(submission)
    return submit_claim(
        prepared.evidence,
        db,
        now=now,
        transaction_ref=prepared.transaction_ref,
        message_hash=prepared.message_hash,
    )
