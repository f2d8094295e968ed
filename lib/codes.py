# =============================================================================
# lib/codes.py - Identifier Generation
# =============================================================================
# Pure helpers for the human- and machine-facing identifiers:
# - Tracking tokens: opaque, random, issued once per project
# - Reference codes: PREFIX-YYYY-NNNNN, sequenced per calendar year
# - Referral codes: 4 name letters + 4 digits (e.g. "DAVE1234")
#
# The database-backed part of reference-code issuance (counting this year's
# projects) lives in core/services/project_service.py.
# =============================================================================

from __future__ import annotations

import random
import re
import time
import uuid
from typing import Iterable

REFERENCE_SEQUENCE_WIDTH = 5
REFERRAL_PREFIX_LENGTH = 4
REFERRAL_FALLBACK_PREFIX_LENGTH = 2
REFERRAL_MAX_ATTEMPTS = 10

_REFERENCE_PATTERN = re.compile(r"^([A-Z0-9]+)-(\d{4})-(\d{5,})$")
_REFERRAL_PATTERN = re.compile(r"^[A-Z]{4}\d{4}$")
_NON_LETTERS = re.compile(r"[^A-Z]")


# =============================================================================
# Tracking Tokens
# =============================================================================

def generate_tracking_token() -> str:
    """Random UUID4 string used as the client's tracking token."""
    return str(uuid.uuid4())


# =============================================================================
# Reference Codes
# =============================================================================

def format_reference_code(prefix: str, year: int, sequence: int) -> str:
    """
    Build a reference code.

    Example:
        format_reference_code("SA", 2026, 7)  # "SA-2026-00007"
    """
    return f"{prefix}-{year}-{sequence:0{REFERENCE_SEQUENCE_WIDTH}d}"


def parse_reference_code(code: str) -> tuple[str, int, int] | None:
    """Split a reference code into (prefix, year, sequence), or None if malformed."""
    match = _REFERENCE_PATTERN.match(code.strip().upper())
    if not match:
        return None
    prefix, year, sequence = match.groups()
    return prefix, int(year), int(sequence)


# =============================================================================
# Referral Codes
# =============================================================================

def _name_letters(full_name: str) -> str:
    return _NON_LETTERS.sub("", full_name.upper())


def generate_referral_code(full_name: str) -> str:
    """
    Generate a referral code from a full name.

    First 4 letters of the name (uppercase, letters only, padded with "X")
    followed by 4 random digits in 1000-9999.

    Example:
        generate_referral_code("Dave Smith")  # "DAVE4821"
        generate_referral_code("Jo")          # "JOXX1307"
    """
    prefix = _name_letters(full_name)[:REFERRAL_PREFIX_LENGTH].ljust(REFERRAL_PREFIX_LENGTH, "X")
    suffix = random.randint(1000, 9999)
    return f"{prefix}{suffix}"


def is_valid_referral_code_format(code: str) -> bool:
    """4 letters + 4 digits, case-insensitive."""
    return bool(_REFERRAL_PATTERN.match(code.upper()))


def normalize_referral_code(code: str) -> str:
    """Uppercase and trim a referral code for comparison."""
    return code.upper().strip()


def generate_unique_referral_code(
    full_name: str,
    existing_codes: Iterable[str] = (),
    max_attempts: int = REFERRAL_MAX_ATTEMPTS,
) -> str:
    """
    Generate a referral code not present in `existing_codes`.

    Tries up to `max_attempts` random codes (compared case-insensitively).
    If all collide, falls back to 2 name letters + the last 6 digits of the
    current millisecond timestamp. Never raises.

    Args:
        full_name: The person's full name
        existing_codes: Codes already in use
        max_attempts: Random attempts before falling back

    Returns:
        An 8-character referral code
    """
    taken = {normalize_referral_code(code) for code in existing_codes}

    for _ in range(max_attempts):
        code = generate_referral_code(full_name)
        if code not in taken:
            return code

    prefix = _name_letters(full_name)[:REFERRAL_FALLBACK_PREFIX_LENGTH].ljust(
        REFERRAL_FALLBACK_PREFIX_LENGTH, "X"
    )
    timestamp = str(int(time.time() * 1000))[-6:]
    return f"{prefix}{timestamp}"
