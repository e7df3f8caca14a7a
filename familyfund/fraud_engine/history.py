"""
Submission History
------------------
The one external read the risk engine performs: "most recent prior claim by
this actor in this family".

Adapters:
- SqlSubmissionHistory: reads the `proofs` table through a SQLAlchemy session
- InMemorySubmissionHistory: list-backed store for tests and local tooling
"""

from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from sqlalchemy import select
from sqlalchemy.orm import Session

from familyfund.models.claim import SubmissionHistoryRecord
from familyfund.utils.db import ProofOfPayment
from familyfund.utils.logger import logger


@runtime_checkable
class SubmissionHistory(Protocol):
    """Capability the engine depends on; implementations must not cache."""

    def find_most_recent_submission(self, actor_id: str, family_id: str) -> Optional[SubmissionHistoryRecord]:
        ...


class SqlSubmissionHistory:
    """Looks up the newest row in `proofs` for an (actor, family) pair."""

    def __init__(self, db: Session):
        self.db = db

    def find_most_recent_submission(self, actor_id: str, family_id: str) -> Optional[SubmissionHistoryRecord]:
        stmt = (
            select(ProofOfPayment.created_at)
            .where(ProofOfPayment.user_id == actor_id, ProofOfPayment.family_id == family_id)
            .order_by(ProofOfPayment.created_at.desc())
            .limit(1)
        )
        created_at = self.db.execute(stmt).scalar_one_or_none()
        if created_at is None:
            return None
        logger.debug(f"[HISTORY] {actor_id}@{family_id}: last submission at {created_at}")
        return SubmissionHistoryRecord(actor_id=actor_id, family_id=family_id, created_at=created_at)


class InMemorySubmissionHistory:
    """Keeps records in a list; counts lookups so callers can assert on them."""

    def __init__(self, records: Optional[List[SubmissionHistoryRecord]] = None):
        self.records: List[SubmissionHistoryRecord] = list(records or [])
        self.lookups = 0

    def record(self, actor_id: str, family_id: str, created_at: datetime) -> SubmissionHistoryRecord:
        entry = SubmissionHistoryRecord(actor_id=actor_id, family_id=family_id, created_at=created_at)
        self.records.append(entry)
        return entry

    def find_most_recent_submission(self, actor_id: str, family_id: str) -> Optional[SubmissionHistoryRecord]:
        self.lookups += 1
        matches = [r for r in self.records if r.actor_id == actor_id and r.family_id == family_id]
        if not matches:
            return None
        return max(matches, key=lambda r: r.created_at)
