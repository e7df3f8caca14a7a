"""
Integration Tests: Risk Endpoints
---------------------------------
Verifies the HTTP flow end to end against an in-memory database:
- /assess_risk scores without storing
- /submissions stores claims and feeds later velocity checks
- invalid input → 422, history outage → 503
"""

import pytest


# =========================================================
# 🧩 Fixtures
# =========================================================
@pytest.fixture
def sample_claim():
    """Valid message claim, paid today, parsed with high confidence."""
    return {
        "actor_id": "user_1",
        "family_id": "fam_1",
        "amount": "250.00",
        "payment_date": "2026-10-19T08:00:00Z",
        "submission_channel": "message",
        "parser_confidence": 0.95,
        "has_proof": True,
    }


# =========================================================
# ✅ Happy Path
# =========================================================
def test_assess_clean_claim(client, sample_claim):
    response = client.post("/api/v1/assess_risk", json=sample_claim)
    assert response.status_code == 200, response.text

    data = response.json()
    assert data["score"] == 0
    assert data["reasons"] == []
    assert data["risk_level"] == "low"
    assert data["requires_review"] is False
    assert data["status"] == "PENDING"
    assert data["audit_note"] == "Initial submission"
    assert data["proof_id"] is None


def test_assess_proofless_unparsed_claim(client, sample_claim):
    payload = {**sample_claim, "has_proof": False, "parser_confidence": None}
    data = client.post("/api/v1/assess_risk", json=payload).json()

    assert data["score"] == 80
    assert data["reasons"] == [
        "Proofless claim (manual entry)",
        "Message could not be parsed automatically",
    ]
    assert data["risk_level"] == "high"
    assert data["status"] == "UNVERIFIED_CLAIM"
    assert data["audit_note"].startswith("Flagged: ")


def test_assess_does_not_store(client, sample_claim):
    client.post("/api/v1/assess_risk", json=sample_claim)
    second = client.post("/api/v1/assess_risk", json=sample_claim).json()
    assert second["score"] == 0


def test_submission_is_stored_and_counts_for_velocity(client, sample_claim):
    first = client.post("/api/v1/submissions", json=sample_claim)
    assert first.status_code == 201, first.text
    assert first.json()["proof_id"] is not None
    assert first.json()["score"] == 0

    second = client.post("/api/v1/submissions", json=sample_claim).json()
    assert second["score"] == 30
    assert second["reasons"] == ["Rapid submission (less than 5 mins since last)"]
    assert second["proof_id"] != first.json()["proof_id"]

    other_family = client.post("/api/v1/assess_risk", json={**sample_claim, "family_id": "fam_2"}).json()
    assert other_family["score"] == 0


# =========================================================
# ❌ Validation & Error Handling
# =========================================================
@pytest.mark.parametrize(
    "field, value",
    [("submission_channel", "sms"), ("parser_confidence", 1.5), ("amount", "-5"), ("actor_id", "")],
)
def test_invalid_claim_returns_422(client, sample_claim, field, value):
    response = client.post("/api/v1/assess_risk", json={**sample_claim, field: value})
    assert response.status_code == 422
    assert "detail" in response.json()


def test_history_outage_returns_503(client, sample_claim, mocker):
    mocker.patch(
        "familyfund.fraud_engine.history.SqlSubmissionHistory.find_most_recent_submission",
        side_effect=ConnectionError("db down"),
    )
    response = client.post("/api/v1/submissions", json=sample_claim)
    assert response.status_code == 503
    assert "history" in response.json()["detail"].lower()


# =========================================================
# 📨 Raw Messages & Duplicates
# =========================================================
MPESA_MESSAGE = (
    "TKR95B76IO Confirmed. Ksh1,730.00 sent to MATHEW  KOMEN 0704167779 on 27/11/25 at 3:49 PM. "
    "New M-PESA balance is Ksh2,408.48."
)


@pytest.fixture
def message_claim():
    """Message claim carrying only the pasted M-Pesa text."""
    return {
        "actor_id": "user_1",
        "family_id": "fam_1",
        "submission_channel": "message",
        "has_proof": True,
        "raw_message": MPESA_MESSAGE,
    }


def test_raw_message_is_parsed_server_side(client, message_claim):
    data = client.post("/api/v1/assess_risk", json=message_claim).json()
    # 27/11/25 is more than 90 days before the test clock; the parse itself adds nothing.
    assert data["reasons"] == ["Payment is over 90 days old"]
    assert data["score"] == 30


def test_resubmitted_message_returns_409(client, message_claim):
    first = client.post("/api/v1/submissions", json=message_claim)
    assert first.status_code == 201, first.text

    again = client.post("/api/v1/submissions", json={**message_claim, "family_id": "fam_2"})
    assert again.status_code == 409
    assert again.json()["detail"] == "Transaction reference already used"
    assert again.json()["field"] == "transaction_ref"


def test_same_message_with_other_reference_still_409(client, message_claim):
    assert client.post("/api/v1/submissions", json=message_claim).status_code == 201

    again = client.post(
        "/api/v1/submissions",
        json={**message_claim, "raw_message": "  " + MPESA_MESSAGE.upper(), "transaction_ref": "OTHERREF01"},
    )
    assert again.status_code == 409
    assert again.json()["detail"] == "This message has already been submitted"


def test_unparseable_message_without_amount_returns_422(client, message_claim):
    response = client.post("/api/v1/assess_risk", json={**message_claim, "raw_message": "paid you"})
    assert response.status_code == 422
    assert "amount" in response.json()["detail"]


# =========================================================
# 🩺 Utility Endpoints
# =========================================================
def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_root(client):
    data = client.get("/").json()
    assert data["status"] == "running"
    assert "review_threshold" in data
