"""
Claim Models
------------
Input schemas for payment-claim risk scoring.
Compatible with Pydantic v2.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from familyfund.utils.errors import InvalidEvidenceError


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =========================================================
# 🧩 ENUMS
# =========================================================
class SubmissionChannel(str, Enum):
    """How a payment claim reached the fund."""
    MESSAGE = "message"
    IMAGE = "image"
    MANUAL = "manual"


# =========================================================
# 📄 CLAIM EVIDENCE
# =========================================================
class ClaimEvidence(BaseModel):
    """Everything the risk engine knows about one submitted payment claim."""
    actor_id: str = Field(..., min_length=1, description="Submitting user")
    family_id: str = Field(..., min_length=1, description="Family (tenant) the claim belongs to")
    amount: Decimal = Field(..., gt=0, description="Claimed payment amount")
    payment_date: datetime = Field(..., description="When the payment is claimed to have happened")
    submission_channel: SubmissionChannel = Field(..., description="message / image / manual")
    parser_confidence: Optional[float] = Field(
        None,
        ge=0.0,
        le=1.0,
        description="Automated extraction confidence; null when parsing failed or not a message",
    )
    has_proof: bool = Field(..., description="Whether supporting evidence (e.g. a receipt image) was attached")

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "actor_id": "user_42",
                "family_id": "fam_7",
                "amount": "150.00",
                "payment_date": "2026-10-01T09:30:00Z",
                "submission_channel": "message",
                "parser_confidence": 0.92,
                "has_proof": True,
            }
        },
    )

    @field_validator("actor_id", "family_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("identifier must not be blank")
        return value

    @field_validator("payment_date")
    @classmethod
    def _normalize_payment_date(cls, value: datetime) -> datetime:
        return as_utc(value)

    @classmethod
    def build(cls, **fields: Any) -> "ClaimEvidence":
        """Construct evidence, raising InvalidEvidenceError instead of a pydantic error."""
        return _validated(cls, fields)


# =========================================================
# 📨 CLAIM SUBMISSION
# =========================================================
class ClaimSubmission(BaseModel):
    """
    A claim as sent by a client.

    Carries the evidence fields plus the optional pasted payment message and
    transaction reference. `amount` and `payment_date` may be left out when
    `raw_message` supplies them; the evidence itself is validated later by
    `ClaimEvidence.build`.
    """
    actor_id: str
    family_id: str
    amount: Optional[Decimal] = None
    payment_date: Optional[datetime] = None
    submission_channel: SubmissionChannel
    parser_confidence: Optional[float] = None
    has_proof: bool
    transaction_ref: Optional[str] = Field(None, max_length=64, description="Bank / M-Pesa transaction code")
    raw_message: Optional[str] = Field(None, max_length=2000, description="Payment confirmation message as received")

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "actor_id": "user_42",
                "family_id": "fam_7",
                "submission_channel": "message",
                "has_proof": True,
                "raw_message": (
                    "TKT95BDMTY Confirmed. Ksh1,000.00 sent to ARNOLD TEZI 0799174938 "
                    "on 29/11/25 at 2:24 PM. New M-PESA balance is Ksh15,647.18."
                ),
            }
        },
    )

    @field_validator("transaction_ref")
    @classmethod
    def _strip_ref(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @classmethod
    def build(cls, **fields: Any) -> "ClaimSubmission":
        return _validated(cls, fields)


def _validated(model: type, fields: dict):
    try:
        return model(**fields)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(p) for p in err['loc']) or 'evidence'}: {err['msg']}"
            for err in e.errors()
        ]
        raise InvalidEvidenceError("Invalid claim evidence: " + "; ".join(problems), e.errors()) from e


# =========================================================
# 🕓 SUBMISSION HISTORY
# =========================================================
class SubmissionHistoryRecord(BaseModel):
    """The most recent prior claim by an actor within a family (read-only)."""
    actor_id: str
    family_id: str
    created_at: datetime

    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_validator("created_at")
    @classmethod
    def _normalize_created_at(cls, value: datetime) -> datetime:
        return as_utc(value)
