"""
Signed bearer tokens (HS256 JWT) carrying the user id.
"""
import logging
from datetime import timedelta

import jwt
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


class InvalidToken(Exception):
    """Token is malformed, tampered with or missing its subject"""


class ExpiredToken(InvalidToken):
    """Token signature is valid but ``exp`` has passed"""


def issue_token(user) -> str:
    """Create a token for ``user`` valid for JWT_EXPIRY_DAYS."""
    now = timezone.now()
    payload = {
        "sub": str(user.id),
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_EXPIRY_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> str:
    """Verify ``token`` and return the user id it was issued for."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise ExpiredToken("Token expired") from e
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected token: {e}")
        raise InvalidToken("Invalid token") from e
    return payload["sub"]
