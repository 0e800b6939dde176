"""
Pure field validators for the registration form.

Both functions return a boolean and never raise, so they can be used directly
as JSON-schema format checks.
"""

from __future__ import annotations

import re

_ID_PATTERN = re.compile(r"\d{9}", re.ASCII)

# 0 + prefix (02/03/04/08/09 landlines, 05x mobiles, 071-079 VoIP) + 7 digits
_DOMESTIC_PHONE_PATTERN = re.compile(r"0(?:2|3|4|5[0-9]|7[1-9]|8|9)\d{7}", re.ASCII)
_NON_DIGITS = re.compile(r"\D", re.ASCII)


def is_valid_identifier(value: str) -> bool:
    """
    Check a 9-digit national ID against its weighted digit-sum checksum.

    Digits in odd positions are doubled, products above 9 have 9 subtracted,
    and the total must be a multiple of 10.
    """
    if not isinstance(value, str) or not _ID_PATTERN.fullmatch(value):
        return False

    total = 0
    for position, char in enumerate(value):
        step = int(char) * (position % 2 + 1)
        total += step - 9 if step > 9 else step
    return total % 10 == 0


def is_valid_domestic_phone(value: str) -> bool:
    """Accept a domestic phone number, ignoring any formatting characters."""
    if not value or not isinstance(value, str):
        return False
    cleaned = _NON_DIGITS.sub("", value)
    return bool(_DOMESTIC_PHONE_PATTERN.fullmatch(cleaned))
