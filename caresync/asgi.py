"""
ASGI config for the CareSync project.

It exposes the ASGI callable as a module-level variable named ``application``.
Only HTTP is served; there are no WebSocket routes.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "caresync.settings")

application = get_asgi_application()
