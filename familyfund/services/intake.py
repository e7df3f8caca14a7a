"""
Claim Intake
------------
Turns a client submission into engine-ready evidence.

When a payment message is pasted in on the message channel it is parsed
server-side:
- a parse with confidence above 0.5 fills in amount, payment date and
  transaction reference the client left empty, and its confidence becomes
  the claim's `parser_confidence`
- a weaker parse leaves `parser_confidence` empty (scored as unparsed)

Any raw message is fingerprinted for duplicate detection.
"""

from typing import NamedTuple, Optional

from familyfund.models.claim import ClaimEvidence, ClaimSubmission, SubmissionChannel
from familyfund.parsing.message_parser import ParsedMessage, parse_message
from familyfund.utils.hashing import message_hash
from familyfund.utils.logger import logger

AUTOFILL_MIN_CONFIDENCE = 0.5


class PreparedClaim(NamedTuple):
    evidence: ClaimEvidence
    transaction_ref: Optional[str] = None
    message_hash: Optional[str] = None
    parsed: Optional[ParsedMessage] = None


def prepare_claim(submission: ClaimSubmission) -> PreparedClaim:
    """
    Build `ClaimEvidence` from a submission.

    Raises:
        InvalidEvidenceError: the resulting evidence is malformed, e.g. no
            amount was given and none could be parsed.
    """
    fields = submission.model_dump(exclude={"transaction_ref", "raw_message"})
    reference = submission.transaction_ref
    digest = None
    parsed = None

    raw = submission.raw_message
    if raw and raw.strip():
        digest = message_hash(raw)

        if submission.submission_channel == SubmissionChannel.MESSAGE:
            parsed = parse_message(raw)
            if parsed.confidence > AUTOFILL_MIN_CONFIDENCE:
                if fields["amount"] is None:
                    fields["amount"] = parsed.amount
                if fields["payment_date"] is None:
                    fields["payment_date"] = parsed.date
                reference = reference or parsed.reference
                fields["parser_confidence"] = parsed.confidence
            else:
                fields["parser_confidence"] = None
            logger.info(
                f"[INTAKE] Parsed message for {submission.actor_id}: network={parsed.network.value} "
                f"confidence={parsed.confidence:.2f}",
                extra={"actor_id": submission.actor_id, "family_id": submission.family_id},
            )

    evidence = ClaimEvidence.build(**fields)
    return PreparedClaim(evidence=evidence, transaction_ref=reference, message_hash=digest, parsed=parsed)
