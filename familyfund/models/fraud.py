"""
Fraud Models
------------
Outputs of the risk engine and the decision policy.
Compatible with Pydantic v2.
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from familyfund.fraud_engine.constants import MAX_SCORE


# =========================================================
# 🧩 ENUMS
# =========================================================
class RiskLevel(str, Enum):
    """Badge shown to treasurers next to a pending claim."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ClaimStatus(str, Enum):
    """Initial status of a persisted claim."""
    PENDING = "PENDING"
    UNVERIFIED_CLAIM = "UNVERIFIED_CLAIM"


# =========================================================
# 🚨 FRAUD SIGNAL
# =========================================================
class FraudSignal(BaseModel):
    """One triggered rule: which rule, how many points, and why."""
    rule: str = Field(..., description="Rule category (e.g. 'proofless', 'velocity')")
    points: int = Field(..., gt=0, description="Points this rule adds to the score")
    reason: str = Field(..., description="Human-readable explanation")

    model_config = ConfigDict(frozen=True)


# =========================================================
# 🧠 RISK ASSESSMENT
# =========================================================
class RiskAssessment(BaseModel):
    """Composite risk score with one reason per triggered rule."""
    score: int = Field(..., ge=0, le=MAX_SCORE, description="Clamped risk score (0–100)")
    reasons: Tuple[str, ...] = Field(default_factory=tuple, description="Reasons in rule-evaluation order")
    signals: Tuple[FraudSignal, ...] = Field(default_factory=tuple, description="Triggered rules")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _reasons_match_signals(self) -> "RiskAssessment":
        if self.signals and tuple(s.reason for s in self.signals) != self.reasons:
            raise ValueError("reasons must mirror the triggered signals")
        return self

    @classmethod
    def from_signals(cls, signals: List[FraudSignal]) -> "RiskAssessment":
        raw = sum(s.points for s in signals)
        return cls(
            score=min(raw, MAX_SCORE),
            reasons=tuple(s.reason for s in signals),
            signals=tuple(signals),
        )

    @property
    def raw_score(self) -> int:
        """Unclamped sum of all triggered points."""
        return sum(s.points for s in self.signals)


# =========================================================
# 📦 RISK REPORT (API / workflow output)
# =========================================================
class RiskReport(BaseModel):
    """Assessment plus the routing decisions derived from it."""
    score: int = Field(..., ge=0, le=MAX_SCORE)
    reasons: List[str] = Field(default_factory=list)
    risk_level: RiskLevel
    requires_review: bool
    status: ClaimStatus
    audit_note: str
    proof_id: Optional[int] = Field(None, description="Id of the persisted claim, when stored")

    model_config = ConfigDict(extra="ignore")


__all__ = [
    "RiskLevel",
    "ClaimStatus",
    "FraudSignal",
    "RiskAssessment",
    "RiskReport",
]
