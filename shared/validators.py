"""
Input validators — framework-agnostic, pure functions.

Used by the request DTOs (pydantic field validators) so the rules live in
one place and can be unit-tested without a request.
"""

from __future__ import annotations

import re
from typing import List
from urllib.parse import urlparse

import validators as _validators

# Letters, digits, hyphen, underscore and dot; 3 to 30 characters
HANDLE_PATTERN = re.compile(r"^[A-Za-z0-9\-_.]{3,30}$")

PASSWORD_MIN_LENGTH = 8
_SYMBOL_PATTERN = re.compile(r"[^A-Za-z0-9\s]")

ALLOWED_URL_SCHEMES = ("http", "https")


def validate_handle(value: str) -> bool:
    """Return True if *value* is a valid username / short code."""
    return bool(HANDLE_PATTERN.match(value))


def password_strength_errors(password: str) -> List[str]:
    """Return the requirements *password* does not meet (empty when strong).

    Rules: at least 8 characters with one lowercase letter, one uppercase
    letter, one digit and one symbol.
    """
    missing = []
    if len(password) < PASSWORD_MIN_LENGTH:
        missing.append(f"At least {PASSWORD_MIN_LENGTH} characters")
    if not re.search(r"[a-z]", password):
        missing.append("At least one lowercase letter")
    if not re.search(r"[A-Z]", password):
        missing.append("At least one uppercase letter")
    if not re.search(r"[0-9]", password):
        missing.append("At least one number")
    if not _SYMBOL_PATTERN.search(password):
        missing.append("At least one special character")
    return missing


def is_strong_password(password: str) -> bool:
    return not password_strength_errors(password)


def validate_url(url: str) -> bool:
    """Return True if *url* is a well-formed URL with an http or https scheme."""
    if urlparse(url).scheme.lower() not in ALLOWED_URL_SCHEMES:
        return False
    return bool(_validators.url(url))
