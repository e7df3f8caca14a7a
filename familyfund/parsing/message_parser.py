"""
Payment Message Parser
----------------------
Extracts payment details from M-Pesa and bank confirmation messages that
members paste in as proof of payment.

Supported formats:
- M-Pesa send:    "TKT95BDMTY Confirmed. Ksh1,000.00 sent to ARNOLD TEZI 0799174938 on 29/11/25 at 2:24 PM"
- M-Pesa receive: "TKS12345AB Confirmed. You have received Ksh5,000.00 from JOHN DOE 0712345678 on 30/11/24 at 10:30 AM"
- Bank deposit:   "Your account has been credited with KES 10,000.00 on 01/12/2024. Ref: BNK123456"

Dates are always read as DD/MM/YY(YY) and returned as naive wall-clock
times, exactly as printed in the message.

The confidence score (0.0 - 1.0) weighs which fields were recovered:
    amount 0.4 | reference 0.3 | date 0.2 | known network 0.1
It feeds the `parser_confidence` rule of the risk engine.
"""

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from familyfund.utils.logger import logger

FIELD_WEIGHTS = {
    "amount": 0.4,
    "reference": 0.3,
    "date": 0.2,
    "network": 0.1,
}
MIN_REFERENCE_LENGTH = 5
VALID_MIN_CONFIDENCE = 0.7


class PaymentNetwork(str, Enum):
    MPESA = "MPESA"
    BANK = "BANK"
    UNKNOWN = "UNKNOWN"


class ParsedMessage(BaseModel):
    """Fields recovered from one payment message."""
    amount: Optional[Decimal] = None
    reference: Optional[str] = None
    date: Optional[datetime] = None
    network: PaymentNetwork = PaymentNetwork.UNKNOWN
    recipient: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    raw_fields: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


# =========================================================
# 🔢 Field Helpers
# =========================================================
_TIME = re.compile(r"(\d{1,2}):(\d{2})\s*([AP]M)", re.IGNORECASE)


def parse_amount(amount_text: str) -> Optional[Decimal]:
    """Handles "1,000.00", "1000" and "1,000"."""
    try:
        return Decimal(amount_text.replace(",", ""))
    except InvalidOperation:
        return None


def parse_date(date_text: str, time_text: Optional[str] = None) -> Optional[datetime]:
    """
    Parse a DD/MM/YY or DD/MM/YYYY date, with an optional "h:mm AM/PM" time.

    Two-digit years are taken to be in the 2000s. Returns None for anything
    that is not a real calendar date (e.g. 31/02/25).
    """
    parts = date_text.split("/")
    if len(parts) != 3:
        return None

    try:
        day, month, year = (int(p) for p in parts)
    except ValueError:
        return None

    if year < 100:
        year += 2000
    if not (1 <= day <= 31 and 1 <= month <= 12):
        return None

    hours, minutes = 0, 0
    if time_text:
        match = _TIME.search(time_text)
        if match:
            hours, minutes = int(match.group(1)), int(match.group(2))
            is_pm = match.group(3).upper() == "PM"
            if is_pm and hours != 12:
                hours += 12
            if not is_pm and hours == 12:
                hours = 0

    try:
        return datetime(year, month, day, hours, minutes)
    except ValueError:
        return None


def calculate_confidence(
    amount: Optional[Decimal],
    reference: Optional[str],
    date: Optional[datetime],
    network: PaymentNetwork,
) -> float:
    score = 0.0
    if amount is not None and amount > 0:
        score += FIELD_WEIGHTS["amount"]
    if reference and len(reference) >= MIN_REFERENCE_LENGTH:
        score += FIELD_WEIGHTS["reference"]
    if date is not None:
        score += FIELD_WEIGHTS["date"]
    if network != PaymentNetwork.UNKNOWN:
        score += FIELD_WEIGHTS["network"]
    return round(min(score, 1.0), 2)


# =========================================================
# 📨 Message Patterns
# =========================================================
class MessagePattern(NamedTuple):
    name: str
    regex: re.Pattern
    extract: Callable[[re.Match], dict]


def _mpesa_send(m: re.Match) -> dict:
    return {
        "reference": m.group(1),
        "amount": parse_amount(m.group(2)),
        "recipient": m.group(3).strip(),
        "date": parse_date(m.group(5), m.group(6)),
        "network": PaymentNetwork.MPESA,
        "raw_fields": {
            "amount_text": m.group(2),
            "date_text": f"{m.group(5)} at {m.group(6)}",
            "reference_text": m.group(1),
        },
    }


def _mpesa_receive(m: re.Match) -> dict:
    return {
        "reference": m.group(1),
        "amount": parse_amount(m.group(2)),
        "recipient": m.group(3).strip(),
        "date": parse_date(m.group(4), m.group(5)),
        "network": PaymentNetwork.MPESA,
        "raw_fields": {
            "amount_text": m.group(2),
            "date_text": f"{m.group(4)} at {m.group(5)}",
            "reference_text": m.group(1),
        },
    }


def _bank_deposit(m: re.Match) -> dict:
    return {
        "amount": parse_amount(m.group(1)),
        "date": parse_date(m.group(2)),
        "reference": m.group(3).upper().strip(),
        "network": PaymentNetwork.BANK,
        "raw_fields": {
            "amount_text": m.group(1),
            "date_text": m.group(2),
            "reference_text": m.group(3),
        },
    }


PATTERNS: List[MessagePattern] = [
    MessagePattern(
        "MPESA_SEND",
        re.compile(
            r"^([A-Z0-9]{10})\s+Confirmed\.\s+Ksh([\d,]+(?:\.\d{2})?)\s+sent to\s+(.+?)\s+"
            r"(?:for account\s+(.+?)\s+)?on\s+(\d{1,2}/\d{1,2}/\d{2,4})\s+at\s+(\d{1,2}:\d{2}\s+[AP]M)",
            re.IGNORECASE,
        ),
        _mpesa_send,
    ),
    MessagePattern(
        "MPESA_RECEIVE",
        re.compile(
            r"^([A-Z0-9]{10})\s+Confirmed\.\s+(?:You have received|Ksh)\s+Ksh([\d,]+(?:\.\d{2})?)\s+"
            r"(?:from|received from)\s+(.+?)\s+(?:\d{10}|\d{4})\s+on\s+(\d{1,2}/\d{1,2}/\d{2,4})\s+"
            r"at\s+(\d{1,2}:\d{2}\s+[AP]M)",
            re.IGNORECASE,
        ),
        _mpesa_receive,
    ),
    MessagePattern(
        "BANK_DEPOSIT",
        re.compile(
            r"(?:credited|deposit).*?(?:KES|Ksh)\s*([\d,]+(?:\.\d{2})?).*?(?:on|date)\s*"
            r"(\d{1,2}/\d{1,2}/\d{2,4}).*?(?:ref|reference)[\s:]*([A-Z0-9-]+)",
            re.IGNORECASE,
        ),
        _bank_deposit,
    ),
]


# =========================================================
# 🚀 Public API
# =========================================================
def parse_message(message: str) -> ParsedMessage:
    """
    Match a message against the known formats, first match wins.

    Args:
        message (str): Raw SMS/WhatsApp text.

    Returns:
        ParsedMessage: recovered fields; confidence 0.0 and network UNKNOWN
        when no format matched.
    """
    text = message.strip()

    for pattern in PATTERNS:
        match = pattern.regex.search(text)
        if not match:
            continue

        fields = pattern.extract(match)
        confidence = calculate_confidence(fields["amount"], fields["reference"], fields["date"], fields["network"])
        logger.debug(
            f"[PARSER] Matched {pattern.name}: ref={fields['reference']} amount={fields['amount']} "
            f"confidence={confidence:.2f}"
        )
        return ParsedMessage(confidence=confidence, **fields)

    logger.debug("[PARSER] No known message format matched.")
    return ParsedMessage()


def is_valid_parsed_message(parsed: ParsedMessage, min_confidence: float = VALID_MIN_CONFIDENCE) -> bool:
    """Enough was recovered to trust the message as proof on its own."""
    return (
        parsed.confidence >= min_confidence
        and parsed.amount is not None
        and parsed.amount > 0
        and bool(parsed.reference)
    )
