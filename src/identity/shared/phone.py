"""Validation of free-form phone numbers."""

import re

_PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]+$")


def is_valid_phone(number: str | None) -> bool:
    """Accept digits, spaces, hyphens, parentheses and an optional leading +."""
    if not number or not re.search(r"\d", number):
        return False
    return bool(_PHONE_PATTERN.match(number))
