"""
Authentication API: login with rate limiting, logout, token checks and
session refresh.
"""
import logging
import re

from django.contrib.auth import authenticate, logout
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.views import TokenObtainPairView

from prakerin.serializers import PasswordChangeSerializer
from prakerin.session import describe_session, refresh_session, resolve_session

from . import ratelimit
from .permissions import HasSession

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9._@-]{3,50}$')
MAX_PASSWORD_LENGTH = 128

INVALID_CREDENTIALS = 'Username atau password salah'
INVALID_INPUT = 'Input tidak valid'
TOO_MANY_ATTEMPTS = 'Terlalu banyak percobaan gagal. Silakan coba lagi nanti.'


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT serializer that adds the role and major to the token claims.

    The claims are informational; every request resolves its session from
    the database again.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        session = resolve_session(user)
        token['role'] = session.role if session else user.role
        token['major_name'] = getattr(session, 'major_name', None)
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        # Teacher accounts whose profile is gone get no tokens
        if resolve_session(self.user) is None:
            raise AuthenticationFailed(INVALID_CREDENTIALS)
        return data


class CustomTokenObtainPairView(TokenObtainPairView):
    """Token pair endpoint sharing the lockout and messages of login_view."""
    serializer_class = CustomTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        ip = ratelimit.client_ip(request)
        if ratelimit.is_locked_out(ip):
            logger.warning("Token request refused for locked out IP %s", ip)
            return Response({'success': False, 'error': TOO_MANY_ATTEMPTS}, status=status.HTTP_429_TOO_MANY_REQUESTS)

        username = request.data.get('username')
        if not validate_login_input(username, request.data.get('password')):
            ratelimit.record_failure(ip)
            return Response({'success': False, 'error': INVALID_INPUT}, status=status.HTTP_400_BAD_REQUEST)

        try:
            response = super().post(request, *args, **kwargs)
        except AuthenticationFailed:
            failures = ratelimit.record_failure(ip)
            logger.info("Failed token request for %r from %s (%s failures)", username, ip, failures)
            return Response({'success': False, 'error': INVALID_CREDENTIALS}, status=status.HTTP_401_UNAUTHORIZED)

        ratelimit.clear_failures(ip)
        return response


def validate_login_input(username, password):
    if not isinstance(username, str) or not USERNAME_PATTERN.match(username):
        return False
    if not isinstance(password, str) or not 1 <= len(password) <= MAX_PASSWORD_LENGTH:
        return False
    return True


def user_payload(user, session):
    return {
        'id': user.pk,
        'name': user.name or user.get_full_name() or user.username,
        'username': user.username,
        'role': session.role,
        'major_name': getattr(session, 'major_name', None),
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Exchange a username and password for JWT tokens.

    Failures are answered with one generic message whether the username or
    the password was wrong. Repeated failures from one IP are locked out.
    """
    ip = ratelimit.client_ip(request)
    if ratelimit.is_locked_out(ip):
        logger.warning("Login refused for locked out IP %s", ip)
        return Response({'success': False, 'error': TOO_MANY_ATTEMPTS}, status=status.HTTP_429_TOO_MANY_REQUESTS)

    username = request.data.get('username')
    password = request.data.get('password')
    if not validate_login_input(username, password):
        ratelimit.record_failure(ip)
        return Response({'success': False, 'error': INVALID_INPUT}, status=status.HTTP_400_BAD_REQUEST)

    user = authenticate(request._request, username=username, password=password)
    session = resolve_session(user) if user is not None else None
    if session is None:
        failures = ratelimit.record_failure(ip)
        logger.info("Failed login for %r from %s (%s failures)", username, ip, failures)
        return Response({'success': False, 'error': INVALID_CREDENTIALS}, status=status.HTTP_401_UNAUTHORIZED)

    ratelimit.clear_failures(ip)
    refresh = CustomTokenObtainPairSerializer.get_token(user)
    logger.info("User %s logged in as %s", user.username, session.role)
    return Response({
        'success': True,
        'user': user_payload(user, session),
        'access': str(refresh.access_token),
        'refresh': str(refresh),
    })


@api_view(['POST'])
@permission_classes([AllowAny])
def logout_view(request):
    """Ends a cookie session; token clients simply discard their tokens."""
    if request.user.is_authenticated:
        logger.info("User %s logged out", request.user.username)
    logout(request._request)
    response = Response({'success': True})
    response['Cache-Control'] = 'no-cache, no-store, must-revalidate'
    return response


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def verify_token_view(request):
    """
    API endpoint to verify if the provided token is valid.
    Returns the resolved session of the token's account.
    """
    data = describe_session(refresh_session(request))
    data.update({'username': request.user.username, 'is_authenticated': True})
    return Response(data)


@api_view(['GET'])
@permission_classes([HasSession])
def session_view(request):
    """Session re-read from the database, after a role or major change."""
    session = refresh_session(request)
    return Response({'success': True, 'user': user_payload(request.user, session)})


@api_view(['POST'])
@permission_classes([HasSession])
def change_password_view(request):
    serializer = PasswordChangeSerializer(data=request.data, context={'user': request.user})
    serializer.is_valid(raise_exception=True)
    if not request.user.check_password(serializer.validated_data['old_password']):
        return Response({'success': False, 'error': 'Password lama salah'}, status=status.HTTP_400_BAD_REQUEST)
    request.user.set_password(serializer.validated_data['new_password'])
    request.user.save(update_fields=['password'])
    logger.info("User %s changed their password", request.user.username)
    return Response({'success': True})
