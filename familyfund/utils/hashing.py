"""
Hashing Utility
---------------
SHA-256 fingerprints used to spot a payment message that was already
submitted, even when it was pasted again with different spacing or case.
"""

import hashlib
import re

_WHITESPACE = re.compile(r"\s+")


def sha256_hex(data: str) -> str:
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def normalize_message(message: str) -> str:
    """Trim, collapse runs of whitespace to one space and lowercase."""
    return _WHITESPACE.sub(" ", message.strip()).lower()


def message_hash(message: str) -> str:
    """Fingerprint of a raw payment message for duplicate detection."""
    return sha256_hex(normalize_message(message))
