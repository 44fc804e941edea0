"""
Random code generators — pure, side-effect-free functions.

All generators use the cryptographically secure ``secrets`` module.
"""

from __future__ import annotations

import secrets

VERIFICATION_CODE_MIN = 100000
VERIFICATION_CODE_MAX = 999999


def generate_verification_code() -> int:
    """Generate a uniformly random 6-digit verification code.

    Returns:
        Integer in [100000, 999999].
    """
    span = VERIFICATION_CODE_MAX - VERIFICATION_CODE_MIN + 1
    return VERIFICATION_CODE_MIN + secrets.randbelow(span)
