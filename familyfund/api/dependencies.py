"""
Dependencies for FastAPI endpoints
-----------------------------------
Manages:
- Database sessions
- The reference clock used for scoring
"""

from datetime import datetime, timezone
from typing import Iterator

from fastapi import Depends
from sqlalchemy.orm import Session

from familyfund.utils.db import get_db


# =========================================================
# 🗄️ DATABASE SESSION
# =========================================================
def get_db_session(db: Session = Depends(get_db)) -> Iterator[Session]:
    """Provide a managed SQLAlchemy DB session."""
    yield db


# =========================================================
# ⏱️ CLOCK
# =========================================================
def get_now() -> datetime:
    """Current UTC time; overridden in tests for deterministic scoring."""
    return datetime.now(timezone.utc)
