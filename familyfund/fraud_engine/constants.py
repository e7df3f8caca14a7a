"""
Fraud Engine Constants
----------------------
Rule weights, thresholds and reason texts shared by the rules and tests.
"""

MAX_SCORE = 100

# 🧾 Proof presence
PROOFLESS_POINTS = 50
PROOFLESS_REASON = "Proofless claim (manual entry)"

# 🤖 Message parser confidence
UNPARSED_MESSAGE_POINTS = 30
UNPARSED_MESSAGE_REASON = "Message could not be parsed automatically"
LOW_CONFIDENCE_POINTS = 20
LOW_CONFIDENCE_THRESHOLD = 0.8
LOW_CONFIDENCE_REASON = "Low parser confidence ({percent}%)"

# 📅 Payment staleness (days)
STALE_DAYS_SEVERE = 90
STALE_SEVERE_POINTS = 30
STALE_SEVERE_REASON = "Payment is over 90 days old"
STALE_DAYS_MILD = 30
STALE_MILD_POINTS = 10
STALE_MILD_REASON = "Payment is over 30 days old"

# ⏱️ Submission velocity (minutes)
RAPID_MINUTES = 5
RAPID_POINTS = 30
RAPID_REASON = "Rapid submission (less than 5 mins since last)"
FREQUENT_MINUTES = 15
FREQUENT_POINTS = 10
FREQUENT_REASON = "Frequent submission (less than 15 mins since last)"

# 🚦 Review badges
LOW_RISK_MAX = 20
MEDIUM_RISK_MAX = 50
