# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - verification.py: PIN checks and the signed verification marker
# - codes.py: Tracking tokens, reference codes and referral codes
# - email_client.py: Resend API client for transactional email
# - email_templates.py: HTML email templates for client notifications
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.email_client import EmailClient, EmailResult, EmailSendError
from lib.verification import (
    expected_pin,
    is_verified,
    is_well_formed_pin,
    mint_verification_token,
    pin_matches,
    verification_cookie_name,
)
from lib.codes import (
    format_reference_code,
    generate_referral_code,
    generate_tracking_token,
    generate_unique_referral_code,
    parse_reference_code,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Email
    "EmailClient",
    "EmailResult",
    "EmailSendError",
    # Verification
    "expected_pin",
    "is_verified",
    "is_well_formed_pin",
    "mint_verification_token",
    "pin_matches",
    "verification_cookie_name",
    # Codes
    "format_reference_code",
    "generate_referral_code",
    "generate_tracking_token",
    "generate_unique_referral_code",
    "parse_reference_code",
]
