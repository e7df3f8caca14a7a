"""
Main Application Entry Point
----------------------------
FastAPI app exposing the Family Fund fraud risk engine.

Handles:
 - Risk scoring of payment claims
 - Claim submission (duplicate check + score + store)
 - Validation, health, and system info endpoints
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
import json
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from familyfund.api.endpoints import score_claim
from familyfund.config import config
from familyfund.utils.db import init_db
from familyfund.utils.errors import DuplicateSubmissionError, HistoryLookupError, InvalidEvidenceError
from familyfund.utils.logger import logger

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("🚦 Registered Routes:")
    for route in app.routes:
        logger.info(f"  • {route.path}")
    yield


# =========================================================
# 🚀 FastAPI Initialization
# =========================================================
app = FastAPI(
    title="Family Fund Fraud Risk Engine",
    version=VERSION,
    description="Risk scoring for family-fund payment claims.",
    lifespan=lifespan,
)

app.include_router(score_claim.router, prefix="/api/v1")


# =========================================================
# ⚙️ Exception Handlers
# =========================================================
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles invalid request payloads gracefully."""
    log_data = {
        "event": "request_error",
        "type": "ValidationError",
        "status": 422,
        "path": str(request.url.path),
        "errors": exc.errors(),
    }
    logger.error(json.dumps(log_data, default=str))

    return JSONResponse(
        status_code=422,
        content={"detail": "Invalid claim evidence. Please check your request payload."},
    )


@app.exception_handler(InvalidEvidenceError)
async def invalid_evidence_handler(request: Request, exc: InvalidEvidenceError):
    logger.error(json.dumps({"event": "request_error", "type": "InvalidEvidence", "status": 422, "detail": str(exc)}))
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(DuplicateSubmissionError)
async def duplicate_submission_handler(request: Request, exc: DuplicateSubmissionError):
    logger.warning(json.dumps({
        "event": "request_error",
        "type": "DuplicateSubmission",
        "status": 409,
        "path": str(request.url.path),
        "field": exc.field,
        "existing_id": exc.existing_id,
    }))
    return JSONResponse(status_code=409, content={"detail": str(exc), "field": exc.field})


@app.exception_handler(HistoryLookupError)
async def history_lookup_handler(request: Request, exc: HistoryLookupError):
    """History store unavailable: the claim cannot be scored safely."""
    logger.error(json.dumps({
        "event": "request_error",
        "type": "HistoryLookupError",
        "status": 503,
        "path": str(request.url.path),
        "actor_id": exc.actor_id,
        "family_id": exc.family_id,
        "cause": type(exc.original).__name__,
    }))
    return JSONResponse(
        status_code=503,
        content={"detail": "Submission history is unavailable. Please retry."},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all for unexpected runtime exceptions."""
    log_data = {
        "event": "request_error",
        "type": type(exc).__name__,
        "status": 500,
        "path": str(request.url.path),
        "trace": traceback.format_exc(),
    }
    logger.error(json.dumps(log_data))

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. Please try again later."},
    )


# =========================================================
# 🧩 Utility Endpoints
# =========================================================
@app.get("/")
async def root():
    """Root endpoint for system information."""
    return {
        "status": "running",
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": "Family Fund fraud risk engine",
        "review_threshold": config.REVIEW_SCORE_THRESHOLD,
    }


@app.get("/health")
async def health():
    """Basic health check."""
    return {"status": "healthy"}


def run_api() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    logger.info("🚀 Starting Family Fund fraud risk API")
    uvicorn.run(
        "familyfund.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=config.DEBUG,
    )


if __name__ == "__main__":
    run_api()
