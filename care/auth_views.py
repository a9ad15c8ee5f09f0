"""
Login, token refresh and logout for the mobile and admin clients.

The bearer authentication classes themselves live in
``care.authentication`` so settings can import them without loading
any views.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from care.exceptions import ValidationError
from care.serializers.auth import LoginSerializer
from care.services.payloads import user_data

from .models import User

logger = logging.getLogger(__name__)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login_view(request):
    """Exchange a username and password for a JWT access/refresh pair."""
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']

    user = authenticate(request, username=username, password=s.validated_data['password'])
    if not user:
        logger.warning('Failed login for %s from %s', username, request.META.get('REMOTE_ADDR'))
        raise ValidationError('Invalid username or password.')

    refresh = RefreshToken.for_user(user)
    logger.info('User %s logged in', user.pk)
    return Response({
        'success': True,
        'access': str(refresh.access_token),
        'refresh': str(refresh),
        'user': user_data(user),
    })

# ScopedRateThrottle reads throttle_scope from the wrapped view class
login_view.cls.throttle_scope = 'login'


def get_user_for_request(request) -> User | None:
    """The caller, or None for anonymous requests."""
    user = getattr(request, 'user', None)
    if user and getattr(user, 'is_authenticated', False):
        return user  # type: ignore
    return None


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token (and rotated refresh token)."""
    resp = TokenRefreshView.as_view()(request._request)
    if resp.status_code == 200:
        return Response({'success': True, **resp.data})
    return Response({'success': False, 'message': 'Invalid or expired refresh token.'}, status=resp.status_code)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or all of the user's tokens."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            token = RefreshToken(refresh)
        except TokenError as exc:
            raise ValidationError('Invalid refresh token.') from exc
        if str(token.get('user_id')) != str(request.user.pk):
            raise ValidationError('Invalid refresh token.')
        token.blacklist()
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    logger.info('User %s logged out, %s tokens blacklisted', request.user.pk, count)
    return Response({'success': True, 'blacklisted': count})
