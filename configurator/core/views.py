import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login
from django.db.models import Q
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework_simplejwt.settings import api_settings as jwt_settings

from .exceptions import BadRequestError, UnauthorizedError
from .permissions import IsAdmin
from .responses import success_response
from .serializers import (
    AdminTokenObtainPairSerializer, AdminTokenRefreshSerializer,
    LoginSerializer, UserSerializer
)

logger = logging.getLogger(__name__)

User = get_user_model()

INVALID_CREDENTIALS = 'Invalid email/username or password'


def _find_admin(identifier):
    """Look an admin up by email (case-insensitive) or exact username"""
    return User.objects.filter(
        Q(email__iexact=identifier) | Q(username=identifier)
    ).first()


def _set_session_cookie(response, access_token):
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        str(access_token),
        max_age=int(jwt_settings.ACCESS_TOKEN_LIFETIME.total_seconds()),
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite='Lax',
    )
    return response


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login(request):
    """Credential login with email or username"""
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    identifier = serializer.validated_data.get('identifier', '')
    password = serializer.validated_data.get('password', '')

    if not identifier or not password:
        raise BadRequestError('Email/username and password are required')

    user = _find_admin(identifier)
    if user is None or not user.is_active or not user.check_password(password):
        logger.warning(f"Failed admin login for identifier '{identifier}'")
        raise UnauthorizedError(INVALID_CREDENTIALS)

    refresh = AdminTokenObtainPairSerializer.get_token(user)
    update_last_login(None, user)
    logger.info(f"Admin {user.username} signed in")

    response = success_response({
        'user': UserSerializer(user).data,
        'access': str(refresh.access_token),
        'refresh': str(refresh),
    }, message='Signed in successfully')
    return _set_session_cookie(response, refresh.access_token)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def refresh_token(request):
    """Exchange a refresh token for a new access token"""
    serializer = AdminTokenRefreshSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    access = serializer.validated_data['access']
    response = success_response(serializer.validated_data)
    return _set_session_cookie(response, access)


@api_view(['POST'])
@permission_classes([AllowAny])
def logout(request):
    """Drop the session cookie"""
    response = success_response(None, message='Signed out successfully')
    response.delete_cookie(settings.AUTH_COOKIE_NAME, samesite='Lax')
    return response


@api_view(['GET'])
@permission_classes([IsAdmin])
def admin_me(request):
    """Current admin profile"""
    return success_response(UserSerializer(request.user).data)
