"""
Checksum algorithms for Iranian identifiers.

- National ID (code melli): 10 digits, weighted mod-11 check digit
- Sheba: Iranian IBAN, ISO 13616 mod-97 check
"""

from __future__ import annotations

import re

_DIGITS_RE = re.compile(r"[0-9]+")
_NATIONAL_ID_RE = re.compile(r"[0-9]{10}")
_REPEATED_RE = re.compile(r"([0-9])\1{9}")
_SHEBA_RE = re.compile(r"IR[0-9]{24}")
_BBAN_RE = re.compile(r"[0-9]{22}")
_SEPARATORS_RE = re.compile(r"[\s-]")


def is_valid_national_id(value: object) -> bool:
    """Check an Iranian national ID.

    The first nine digits are weighted 10..2. With r = sum % 11, the check
    digit is r when r < 2 and 11 - r otherwise. IDs made of a single
    repeated digit pass the arithmetic but are never issued.
    """
    if not isinstance(value, str) or not _NATIONAL_ID_RE.fullmatch(value):
        return False
    if _REPEATED_RE.fullmatch(value):
        return False

    total = sum(int(value[i]) * (10 - i) for i in range(9))
    remainder = total % 11
    check_digit = int(value[9])

    if remainder < 2:
        return check_digit == remainder
    return check_digit == 11 - remainder


def normalize_sheba(value: str) -> str:
    """Uppercase and drop spaces/hyphens (``ir06-2960 ...`` -> ``IR062960...``)."""
    return _SEPARATORS_RE.sub("", value).upper()


def mod97(digits: str) -> int:
    """Reduce a decimal string modulo 97 without big-integer arithmetic.

    Starts from the leading two digits, then repeatedly appends the next
    seven digits to the running remainder and reduces again.
    """
    if not _DIGITS_RE.fullmatch(digits):
        raise ValueError(f"mod97 expects a decimal string, got {digits!r}")

    checksum = digits[:2]
    for offset in range(2, len(digits), 7):
        fragment = checksum + digits[offset : offset + 7]
        checksum = str(int(fragment) % 97)
    return int(checksum)


def _iban_digits(iban: str) -> str:
    rearranged = iban[4:] + iban[:4]
    return "".join(str(ord(ch) - 55) if "A" <= ch <= "Z" else ch for ch in rearranged)


def is_valid_sheba(value: object) -> bool:
    """Check an Iranian Sheba number (``IR`` + 24 digits, mod-97 == 1)."""
    if not value or not isinstance(value, str):
        return False
    sheba = normalize_sheba(value)
    if not _SHEBA_RE.fullmatch(sheba):
        return False
    return mod97(_iban_digits(sheba)) == 1


def sheba_check_digits(bban: str) -> str:
    """Compute the two check digits for a 22-digit Iranian BBAN."""
    bban = _SEPARATORS_RE.sub("", bban)
    if not _BBAN_RE.fullmatch(bban):
        raise ValueError("BBAN must be exactly 22 digits")
    remainder = mod97(_iban_digits(f"IR00{bban}"))
    return f"{98 - remainder:02d}"


def build_sheba(bban: str) -> str:
    """Return the full Sheba number (``IR`` + check digits + BBAN)."""
    bban = _SEPARATORS_RE.sub("", bban)
    return f"IR{sheba_check_digits(bban)}{bban}"
