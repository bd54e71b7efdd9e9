"""
Bearer token authentication for the API.
"""
import logging

from drf_spectacular.extensions import OpenApiAuthenticationExtension
from drf_spectacular.plumbing import build_bearer_security_scheme_object
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from apps.accounts.services import resolve_active_user
from apps.accounts.tokens import ExpiredToken, InvalidToken, decode_token

logger = logging.getLogger(__name__)


class BearerTokenAuthentication(BaseAuthentication):
    """
    ``Authorization: Bearer <token>``.

    No header means anonymous (so permission classes answer 401); a header
    that does not resolve to an active user fails outright.
    """
    keyword = 'Bearer'

    def authenticate(self, request):
        parts = get_authorization_header(request).split()
        if not parts or parts[0].lower() != self.keyword.lower().encode():
            return None
        if len(parts) != 2:
            raise exceptions.AuthenticationFailed("Invalid authorization header")

        try:
            token = parts[1].decode()
            user_id = decode_token(token)
        except UnicodeError:
            raise exceptions.AuthenticationFailed("Invalid token")
        except ExpiredToken:
            raise exceptions.AuthenticationFailed("Token expired")
        except InvalidToken:
            raise exceptions.AuthenticationFailed("Invalid token")

        user = resolve_active_user(user_id)
        if user is None:
            logger.warning(f"Token for missing or deactivated user {user_id}")
            raise exceptions.AuthenticationFailed("User not found or deactivated")
        return user, token

    def authenticate_header(self, request):
        return self.keyword


class OptionalBearerTokenAuthentication(BearerTokenAuthentication):
    """Attach the user when the token resolves; never reject the request."""

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except exceptions.AuthenticationFailed:
            return None


class BearerTokenScheme(OpenApiAuthenticationExtension):
    target_class = 'api.authentication.BearerTokenAuthentication'
    name = 'bearerAuth'
    match_subclasses = True

    def get_security_definition(self, auto_schema):
        return build_bearer_security_scheme_object(
            header_name='Authorization',
            token_prefix=BearerTokenAuthentication.keyword,
            bearer_format='JWT',
        )
