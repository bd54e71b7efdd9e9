"""
Input validators for account data, used by serializers before touching the DB.
"""
import re
from typing import List

from django.conf import settings

PHONE_PATTERN = re.compile(r"^\+?[0-9][0-9 \-]{5,19}$")


def password_policy_errors(password: str) -> List[str]:
    """
    Password rules: minimum length (PASSWORD_MIN_LENGTH), at least one
    uppercase letter, one lowercase letter and one digit.
    """
    errors = []
    min_length = settings.PASSWORD_MIN_LENGTH
    if len(password) < min_length:
        errors.append(f"Password must be at least {min_length} characters")
    if not any(c.isupper() for c in password):
        errors.append("Password must contain an uppercase letter")
    if not any(c.islower() for c in password):
        errors.append("Password must contain a lowercase letter")
    if not any(c.isdigit() for c in password):
        errors.append("Password must contain a digit")
    return errors


def is_valid_phone(phone: str) -> bool:
    """Digits with an optional leading +, spaces and dashes allowed."""
    return bool(PHONE_PATTERN.match(phone.strip()))


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()
