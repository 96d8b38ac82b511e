import logging

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken

logger = logging.getLogger(__name__)


class CookieJWTAuthentication(JWTAuthentication):
    """
    JWT authentication that accepts the token from the Authorization header
    or, failing that, from the session cookie set at login.

    An expired or tampered cookie, or one whose user is gone or inactive, leaves the request anonymous so public
    catalog reads keep working; mutations then fail the permission check.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            return super().authenticate(request)

        raw_token = request.COOKIES.get(settings.AUTH_COOKIE_NAME)
        if not raw_token:
            return None

        try:
            validated_token = self.get_validated_token(raw_token.encode())
        except InvalidToken:
            logger.debug("Ignoring invalid session cookie")
            return None

        try:
            user = self.get_user(validated_token)
        except AuthenticationFailed:
            logger.debug("Ignoring session cookie for a missing or inactive user")
            return None
        return user, validated_token
