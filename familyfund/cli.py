"""
Command-line scorer
-------------------
Scores a single claim against the configured database and prints the
report as JSON. Nothing is stored unless --submit is given.

Usage:
    familyfund-score --actor user_1 --family fam_1 --amount 150 \
        --payment-date 2026-09-01 --channel message --confidence 0.72

    familyfund-score --actor user_1 --family fam_1 --channel message \
        --message "TKT95BDMTY Confirmed. Ksh1,000.00 sent to ..." --submit
"""

import argparse
import json
import sys
from datetime import datetime, timezone
from typing import List, Optional

from familyfund.models.claim import ClaimSubmission, SubmissionChannel
from familyfund.services.intake import prepare_claim
from familyfund.services.submissions import score_claim, submit_claim
from familyfund.utils.db import SessionLocal, init_db
from familyfund.utils.errors import FraudEngineError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="familyfund-score", description="Score a payment claim for fraud risk.")
    parser.add_argument("--actor", required=True, help="Submitting user id")
    parser.add_argument("--family", required=True, help="Family id")
    parser.add_argument("--amount", default=None, help="Claimed amount (parsed from --message when omitted)")
    parser.add_argument(
        "--payment-date",
        type=datetime.fromisoformat,
        default=None,
        help="ISO date/time of payment (parsed from --message when omitted)",
    )
    parser.add_argument("--channel", required=True, choices=[c.value for c in SubmissionChannel])
    parser.add_argument("--confidence", type=float, default=None, help="Parser confidence (0-1)")
    parser.add_argument("--message", default=None, help="Raw M-Pesa / bank confirmation message")
    parser.add_argument("--ref", default=None, help="Transaction reference")
    parser.add_argument("--no-proof", action="store_true", help="Claim has no attached proof")
    parser.add_argument("--submit", action="store_true", help="Store the claim after scoring")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        submission = ClaimSubmission.build(
            actor_id=args.actor,
            family_id=args.family,
            amount=args.amount,
            payment_date=args.payment_date,
            submission_channel=args.channel,
            parser_confidence=args.confidence,
            has_proof=not args.no_proof,
            transaction_ref=args.ref,
            raw_message=args.message,
        )
        prepared = prepare_claim(submission)
        init_db()
        now = datetime.now(timezone.utc)
        with SessionLocal() as db:
            if args.submit:
                report = submit_claim(
                    prepared.evidence,
                    db,
                    now=now,
                    transaction_ref=prepared.transaction_ref,
                    message_hash=prepared.message_hash,
                )
            else:
                report = score_claim(prepared.evidence, db, now=now)
    except FraudEngineError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    print(json.dumps(report.model_dump(mode="json"), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
