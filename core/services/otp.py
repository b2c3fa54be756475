"""
Email one-time-password signup.

A challenge is kept in the Django cache under the normalised email
until it is verified, expires or runs out of attempts.  The password
is hashed before it is cached; the plain OTP is never logged.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import asdict, dataclass

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password
from django.core.cache import cache
from django.core.mail import send_mail
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.exceptions import ConflictError, DeliveryFailed, GoneError, InvalidPayload

User = get_user_model()
logger = logging.getLogger(__name__)

CACHE_PREFIX = 'signup-otp:'


@dataclass
class OtpChallenge:
    otp: str
    expires_at: float
    first_name: str
    last_name: str
    password_hash: str
    attempts: int = 0

    @property
    def expired(self) -> bool:
        return timezone.now().timestamp() > self.expires_at


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


def _key(email: str) -> str:
    return CACHE_PREFIX + normalize_email(email)


def email_registered(email: str) -> bool:
    return User.objects.filter(email=normalize_email(email)).exists()


def generate_otp(length: int | None = None) -> str:
    length = length or settings.OTP_LENGTH
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def load_challenge(email: str) -> OtpChallenge | None:
    data = cache.get(_key(email))
    return OtpChallenge(**data) if data else None


def store_challenge(email: str, challenge: OtpChallenge) -> None:
    # keep the entry a little past expiry so verify can tell "expired" from "missing"
    cache.set(_key(email), asdict(challenge), settings.OTP_TTL_SECONDS + 60)


def discard_challenge(email: str) -> None:
    cache.delete(_key(email))


def _send_otp_email(email: str, otp: str) -> None:
    minutes = max(1, settings.OTP_TTL_SECONDS // 60)
    send_mail(
        subject='Your OTP Code',
        message=f'Your verification code is: {otp}\nIt expires in {minutes} minutes.',
        from_email=settings.OTP_FROM_EMAIL,
        recipient_list=[email],
        html_message=(
            '<p>Your verification code is:</p>'
            f'<h2>{otp}</h2>'
            f'<p>It expires in {minutes} minutes.</p>'
        ),
    )


def start_signup(*, email: str, password: str, first_name: str, last_name: str) -> OtpChallenge:
    email = normalize_email(email)
    if email_registered(email):
        raise ConflictError('Email already registered')

    challenge = OtpChallenge(
        otp=generate_otp(),
        expires_at=timezone.now().timestamp() + settings.OTP_TTL_SECONDS,
        first_name=first_name,
        last_name=last_name,
        password_hash=make_password(password),
    )
    store_challenge(email, challenge)
    try:
        _send_otp_email(email, challenge.otp)
    except Exception as e:
        discard_challenge(email)
        logger.error('OTP email to %s failed: %s', email, e)
        raise DeliveryFailed('Failed to send OTP') from e
    logger.info('signup OTP sent to %s', email)
    return challenge


def verify_signup(*, email: str, otp: str):
    """Check the OTP and create the account.  Returns the new user."""
    email = normalize_email(email)
    challenge = load_challenge(email)
    if challenge is None:
        raise GoneError('OTP expired or invalid. Restart signup.')
    if challenge.expired:
        discard_challenge(email)
        raise GoneError('OTP expired')

    if not secrets.compare_digest(otp, challenge.otp):
        challenge.attempts += 1
        if challenge.attempts >= settings.OTP_MAX_ATTEMPTS:
            discard_challenge(email)
            logger.warning('signup OTP for %s discarded after %d failed attempts', email, challenge.attempts)
        else:
            store_challenge(email, challenge)
        raise InvalidPayload('Invalid OTP')

    try:
        with transaction.atomic():
            user = User(
                email=email,
                username=email,
                first_name=challenge.first_name,
                last_name=challenge.last_name,
                password=challenge.password_hash,
            )
            user.save()
    except IntegrityError:
        discard_challenge(email)
        raise ConflictError('Email already registered')

    discard_challenge(email)
    logger.info('account %s created for %s', user.id, email)
    return user
