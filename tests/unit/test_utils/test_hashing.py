"""
Unit Tests: Message Hashing
---------------------------
Fingerprints ignore spacing and case but not content.
"""

from familyfund.utils.hashing import message_hash, normalize_message, sha256_hex


def test_whitespace_and_case_do_not_change_hash():
    original = "TKT95BDMTY Confirmed. Ksh1,000.00 sent to ARNOLD TEZI"
    repasted = "  tkt95bdmty   Confirmed.\n Ksh1,000.00\tsent to ARNOLD TEZI  "
    assert message_hash(original) == message_hash(repasted)


def test_different_amount_changes_hash():
    assert message_hash("TKT95BDMTY Confirmed. Ksh1,000.00 sent to ARNOLD TEZI") != message_hash(
        "TKT95BDMTY Confirmed. Ksh2,000.00 sent to ARNOLD TEZI"
    )


def test_hash_is_sha256_of_normalized_text():
    assert normalize_message("  A  b\nC ") == "a b c"
    assert message_hash("  A  b\nC ") == sha256_hex("a b c")
    assert len(message_hash("x")) == 64
