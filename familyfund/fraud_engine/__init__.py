"""Rule-based fraud risk scoring for payment claims."""
