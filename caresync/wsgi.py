"""
WSGI entry point for CareSync (gunicorn ``caresync.wsgi:application``).
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'caresync.settings')

application = get_wsgi_application()
