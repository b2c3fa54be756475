"""
Authentication views.

Signup is a two step email OTP flow (``send-otp`` then ``verify-otp``);
login checks email and password and hands back both a DRF token and a
JWT pair.  The token classes live in ``core.authentication`` so that
DRF can import them at start-up without pulling in these views.
"""
from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import AuthFailed, InvalidPayload, NotFoundError
from core.serializers.auth import (
    CheckEmailSerializer,
    LoginSerializer,
    LogoutSerializer,
    RefreshSerializer,
    SendOtpSerializer,
    VerifyOtpSerializer,
)
from core.services.audit import client_ip, log_action
from core.services.otp import email_registered, normalize_email, start_signup, verify_signup

User = get_user_model()
logger = logging.getLogger(__name__)


def user_payload(user) -> dict:
    return {
        'id': user.id,
        'email': user.email,
        'firstName': user.first_name,
        'lastName': user.last_name,
        'role': user.role,
    }


def _validated(serializer_class, data):
    s = serializer_class(data=data)
    if not s.is_valid():
        raise InvalidPayload('Invalid request', details=s.errors)
    return s.validated_data


# ---------------------------------------------------------------------
# Signup
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def check_email_view(request):
    s = CheckEmailSerializer(data=request.data)
    if not s.is_valid():
        return Response({'exists': False})
    return Response({'exists': email_registered(s.validated_data['email'])})


@api_view(['POST'])
@permission_classes([AllowAny])
def send_otp_view(request):
    vd = _validated(SendOtpSerializer, request.data)
    email = normalize_email(vd['email'])
    start_signup(email=email, password=vd['password'], first_name=vd['firstName'], last_name=vd['lastName'])
    log_action(user=None, action='signup_otp_sent', object_type='user',
               detail={'email': email, 'ip': client_ip(request)})
    return Response({'message': 'OTP sent to email'})

send_otp_view.cls.throttle_scope = 'otp'


@api_view(['POST'])
@permission_classes([AllowAny])
def verify_otp_view(request):
    vd = _validated(VerifyOtpSerializer, request.data)
    user = verify_signup(email=vd['email'], otp=vd['otp'])
    log_action(user=user, action='signup_verified', object_type='user', object_id=user.id,
               detail={'ip': client_ip(request)})
    return Response({'message': 'Account created', 'user': user_payload(user)})


# ---------------------------------------------------------------------
# Email/password login
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    vd = _validated(LoginSerializer, request.data)
    email = normalize_email(vd['email'])
    ip = client_ip(request)

    user = User.objects.filter(email=email).first()
    if user is None:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'unknown_account', 'email': email, 'ip': ip})
        raise NotFoundError('Account not found')
    if not user.is_active or not user.check_password(vd['password']):
        log_action(user=user, action='login', object_type='user', object_id=user.id,
                   detail={'result': 'fail', 'ip': ip})
        raise AuthFailed('Invalid password')

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})
    logger.info('user %s logged in', user.id)

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return Response({
        'message': 'Login successful',
        'user': user_payload(user),
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
    })

# ScopedRateThrottle reads throttle_scope from the generated view class
login_view.cls.throttle_scope = 'login'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response({'user': user_payload(request.user)})


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from a refresh token."""
    vd = _validated(RefreshSerializer, request.data)
    s = TokenRefreshSerializer(data={'refresh': vd['refresh']})
    try:
        s.is_valid(raise_exception=True)
    except TokenError as e:
        raise AuthFailed('Invalid refresh token') from e
    data = {'jwt_access': s.validated_data['access']}
    if 'refresh' in s.validated_data:
        data['jwt_refresh'] = s.validated_data['refresh']
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist the given refresh token, or all of the user's, and drop the DRF token."""
    refresh = _validated(LogoutSerializer, request.data).get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError as e:
            raise InvalidPayload('Invalid refresh token') from e
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    logger.info('user %s logged out, %d refresh token(s) blacklisted', request.user.id, count)
    return Response({'message': 'Logged out', 'blacklisted': count})
