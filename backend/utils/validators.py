"""
Input validation utilities
"""
import re

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def validate_amount(amount: float) -> float:
    """Validate a money amount is not negative"""
    if amount < 0:
        raise ValueError("Amount must not be negative")
    return amount


def validate_rate(rate: float) -> float:
    """Validate a percentage rate is between 0 and 100"""
    if rate < 0 or rate > 100:
        raise ValueError("Rate must be between 0 and 100")
    return rate


def validate_clock_time(value: str) -> str:
    """Validate an HH:MM working-hours time"""
    if not _TIME_RE.match(value):
        raise ValueError("Time must be in HH:MM format")
    return value


def validate_phone(phone: str) -> str:
    """Validate a phone number holds 10 to 15 digits"""
    digits = re.sub(r"[\s\-+()]", "", phone)
    if not digits.isdigit() or not 10 <= len(digits) <= 15:
        raise ValueError("Phone number must contain 10 to 15 digits")
    return phone
