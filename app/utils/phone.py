import re
from typing import Optional
from app.config import settings
from app.exceptions import InvalidInput

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(raw, country_prefix: Optional[str] = None, digits: Optional[int] = None) -> str:
    """
    Reduce a phone number to the digits drivers register with.

    "+91 89577 66736" -> "8957766736". A number that already has the local
    length is returned as is.
    """
    if country_prefix is None:
        country_prefix = settings.SMS_COUNTRY_PREFIX
    if digits is None:
        digits = settings.PHONE_DIGITS

    phone = _NON_DIGITS.sub("", str(raw))
    if len(phone) == digits + len(country_prefix) and phone.startswith(country_prefix):
        phone = phone[len(country_prefix):]
    return phone


def require_phone(raw) -> str:
    """normalize_phone, rejecting input with no digits to key a driver on"""
    phone = normalize_phone(raw) if raw is not None else ""
    if not phone:
        raise InvalidInput("Invalid phone number.")
    return phone
