"""
Database Utility
----------------
Manages the Postgres (or SQLite fallback) connection, the `proofs` table
and helpers to persist scored payment claims.
"""

from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    Numeric,
    String,
    create_engine,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from familyfund.config import config
from familyfund.models.claim import ClaimEvidence, as_utc
from familyfund.models.fraud import ClaimStatus, RiskAssessment
from familyfund.utils.errors import DuplicateSubmissionError
from familyfund.utils.logger import logger

# =========================================================
# ⚙️ Database Setup
# =========================================================
Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProofOfPayment(Base):
    """A submitted payment claim together with its fraud assessment."""

    __tablename__ = "proofs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=False, index=True)
    family_id = Column(String(255), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(DateTime(timezone=True), nullable=False)
    submission_type = Column(String(20), nullable=False)
    parser_confidence = Column(Float, nullable=True)
    is_proofless = Column(Boolean, nullable=False, default=False)
    status = Column(String(32), nullable=False, default=ClaimStatus.PENDING.value)
    fraud_score = Column(Integer, nullable=False, default=0)
    fraud_reasons = Column(JSON, nullable=False, default=list)
    transaction_ref = Column(String(64), nullable=True, unique=True)
    message_hash = Column(String(64), nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Build an engine; SQLite gets thread-sharing, servers get a real pool."""
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        connect_args={"connect_timeout": 10},
    )


engine = create_db_engine(config.DB_URL, echo=config.DEBUG and not config.is_test)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """FastAPI dependency for DB session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =========================================================
# 🧱 Table Initialization
# =========================================================
def init_db(bind: Optional[Engine] = None) -> None:
    """Create the `proofs` table if it does not exist."""
    target = bind or engine
    try:
        Base.metadata.create_all(bind=target)
        logger.info("✅ Database tables ready.")
    except Exception as e:
        logger.error(f"❌ DB init error: {e}")
        raise


# =========================================================
# 💾 Claim Utilities
# =========================================================
def find_proof_by_reference(db: Session, transaction_ref: str) -> Optional[int]:
    """Id of a stored proof carrying this transaction reference, in any family."""
    stmt = select(ProofOfPayment.id).where(ProofOfPayment.transaction_ref == transaction_ref).limit(1)
    return db.execute(stmt).scalar_one_or_none()


def find_proof_by_message_hash(db: Session, message_hash: str) -> Optional[int]:
    stmt = select(ProofOfPayment.id).where(ProofOfPayment.message_hash == message_hash).limit(1)
    return db.execute(stmt).scalar_one_or_none()


def save_proof(
    db: Session,
    evidence: ClaimEvidence,
    assessment: RiskAssessment,
    status: ClaimStatus,
    created_at: Optional[datetime] = None,
    transaction_ref: Optional[str] = None,
    message_hash: Optional[str] = None,
) -> int:
    """
    Persist a scored claim and return its id.

    Raises:
        DuplicateSubmissionError: the reference or message hash is already
            stored (unique constraint hit by a concurrent submission).
    """
    proof = ProofOfPayment(
        user_id=evidence.actor_id,
        family_id=evidence.family_id,
        amount=evidence.amount,
        payment_date=evidence.payment_date,
        submission_type=evidence.submission_channel.value,
        parser_confidence=evidence.parser_confidence,
        is_proofless=not evidence.has_proof,
        status=status.value,
        fraud_score=assessment.score,
        fraud_reasons=list(assessment.reasons),
        transaction_ref=transaction_ref,
        message_hash=message_hash,
        created_at=as_utc(created_at or _utcnow()),
    )
    try:
        db.add(proof)
        db.commit()
        db.refresh(proof)
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"⚠️ Duplicate proof rejected for {evidence.actor_id}: {e.orig}")
        raise DuplicateSubmissionError("Claim duplicates an existing submission", field="proof") from e
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Error saving proof for {evidence.actor_id}: {e}")
        raise
    logger.debug(f"💾 Proof saved ID={proof.id} for {evidence.actor_id} (score={assessment.score})")
    return proof.id
