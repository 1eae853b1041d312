from __future__ import annotations

import re

COUNTRY_CODE = "62"
_NON_DIGIT = re.compile(r"[^0-9]")


def normalize_phone(raw: str | None) -> str:
    """Convert a locally formatted Indonesian number into ``62XXXXXXXX``.

    Accepts separators and the ``0``, ``+62``, ``62``, ``+62 (0)`` and ``0062``
    prefixes.
    Input without any digit is returned trimmed, unchanged; the validator is
    the one that rejects it. The result is stable under re-normalization.
    """
    text = str(raw or "").strip()
    digits = _NON_DIGIT.sub("", text)
    if digits.startswith("00"):
        digits = digits[2:]
    if not digits:
        return text

    if digits.startswith(COUNTRY_CODE):
        # "+62 (0)812..." keeps the trunk zero after the country code.
        return COUNTRY_CODE + digits[2:].lstrip("0")
    if digits.startswith("0"):
        return COUNTRY_CODE + digits.lstrip("0")
    if digits.startswith("8"):
        return COUNTRY_CODE + digits
    return digits
