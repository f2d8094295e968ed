# =============================================================================
# lib/verification.py - Tracking PIN and Verification Markers
# =============================================================================
# Clients prove they own a project by entering the last 4 digits of the phone
# number on file. A successful check mints a signed verification marker that
# the browser carries in a per-project cookie for one hour.
#
# The marker is a short HS256 JWT signed with SECRET_KEY:
#   {"sub": <project id>, "scope": "track_verified", "verified": true,
#    "iat": ..., "exp": ...}
# Nothing is stored server-side, so any API replica can check it.
#
# Usage:
#   from lib.verification import expected_pin, mint_verification_token, is_verified
#   token = mint_verification_token(project_id)
#   is_verified(request.cookies.get(verification_cookie_name(project_id)), project_id)
# =============================================================================

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError

from app.config import settings

logger = logging.getLogger(__name__)

VERIFICATION_SCOPE = "track_verified"
VERIFICATION_ALGORITHM = "HS256"
COOKIE_PREFIX = "track_verified_"

_NON_DIGITS = re.compile(r"\D")
_PIN_PATTERN = re.compile(r"[0-9]{4}")


# =============================================================================
# PIN
# =============================================================================

def digits_only(value: str | None) -> str:
    """Strip every non-digit character: "+1 (555) 123-4567" -> "15551234567"."""
    return _NON_DIGITS.sub("", value or "")


def expected_pin(phone: str | None) -> str:
    """
    Derive the tracking PIN from a stored phone number.

    Returns the last 4 digits after removing separators. A missing phone
    gives "" and a short one gives fewer than 4 digits; neither can match
    a well-formed PIN.
    """
    return digits_only(phone)[-4:]


def is_well_formed_pin(pin: object) -> bool:
    """True for a string of exactly four ASCII digits."""
    return isinstance(pin, str) and bool(_PIN_PATTERN.fullmatch(pin))


def pin_matches(pin: str, phone: str | None) -> bool:
    """Exact comparison between a submitted PIN and the phone-derived PIN."""
    expected = expected_pin(phone)
    return len(expected) == 4 and pin == expected


# =============================================================================
# Verification Marker
# =============================================================================

def verification_cookie_name(project_id: str) -> str:
    """Cookie name carrying the marker for one project."""
    return f"{COOKIE_PREFIX}{project_id}"


def mint_verification_token(
    project_id: str,
    issued_at: datetime | None = None,
    ttl_seconds: int | None = None,
) -> str:
    """
    Create a signed marker asserting the PIN for `project_id` was verified.

    Args:
        project_id: Project the marker is scoped to
        issued_at: Issue time (defaults to now, UTC)
        ttl_seconds: Lifetime (defaults to TRACKING_VERIFICATION_TTL_SECONDS)

    Returns:
        Compact JWT string
    """
    issued_at = issued_at or datetime.now(timezone.utc)
    ttl = ttl_seconds if ttl_seconds is not None else settings.TRACKING_VERIFICATION_TTL_SECONDS

    claims = {
        "sub": str(project_id),
        "scope": VERIFICATION_SCOPE,
        "verified": True,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(seconds=ttl)).timestamp()),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=VERIFICATION_ALGORITHM)


def is_verified(marker: str | None, project_id: str) -> bool:
    """
    Check a verification marker for a project.

    Absent, tampered, expired, differently-scoped or other-project markers
    are all treated as unverified.
    """
    if not marker:
        return False

    try:
        claims = jwt.decode(
            marker,
            settings.SECRET_KEY,
            algorithms=[VERIFICATION_ALGORITHM],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        logger.debug(f"Rejected verification marker for project {project_id}: {e}")
        return False

    return (
        claims.get("sub") == str(project_id)
        and claims.get("scope") == VERIFICATION_SCOPE
        and claims.get("verified") is True
    )
