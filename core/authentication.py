"""
Token authentication for the API.

Kept apart from ``core.auth_views`` so DRF can load the class from
``DEFAULT_AUTHENTICATION_CLASSES`` without importing any views.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """DRF token auth reading ``Authorization: Token <key>``.

    JWT bearer tokens are handled separately by simplejwt.
    """

    keyword = 'Token'
