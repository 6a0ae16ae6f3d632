"""
Normalizes Kenyan mobile numbers to the canonical international form.

Accepted inputs include 0712345678, 712345678, +254712345678, 254712345678
and the same with spaces or dashes. The canonical form is 2547XXXXXXXX or
2541XXXXXXXX, which is what the payment provider expects.
"""
import re

COUNTRY_CODE = "254"

# Safaricom/Airtel mobile ranges: 07xx and 01xx
VALID_PHONE_PATTERN = re.compile(r"^254[71]\d{8}$")

_NON_DIGITS = re.compile(r"\D")


def format_phone_number(value) -> str:
    """
    Map a local or international input to 254XXXXXXXXX.

    Unrecognised shapes are returned as bare digits so that
    is_valid_phone_number() can reject them.
    """
    if value is None:
        return ""
    digits = _NON_DIGITS.sub("", str(value))

    if digits.startswith("0") and len(digits) == 10:
        return COUNTRY_CODE + digits[1:]
    if len(digits) == 9 and digits[0] in "71":
        return COUNTRY_CODE + digits
    return digits


def is_valid_phone_number(canonical: str) -> bool:
    if not canonical:
        return False
    return VALID_PHONE_PATTERN.match(canonical) is not None
