import logging

import pytest
from django.core.management import call_command
from django.urls import reverse
from rest_framework.test import APIClient

from core.models import CodeMapping, NamasteCode, Patient, User

pytestmark = pytest.mark.django_db


def test_seed_terminology_without_demo_patient():
    Patient.objects.all().delete()
    call_command('seed_terminology', '--no-demo-patient')
    assert NamasteCode.objects.count() == 5
    assert CodeMapping.objects.count() == 5
    assert not Patient.objects.exists()

    call_command('seed_terminology')
    assert Patient.objects.filter(id='P001').exists()


def test_ensure_test_users_is_idempotent():
    call_command('ensure_test_users')
    viewer = User.objects.get(email='viewer@caresync.local')
    viewer.set_password('changed')
    viewer.role = 'admin'
    viewer.save()

    call_command('ensure_test_users')
    assert User.objects.filter(email__endswith='@caresync.local').count() == 3
    viewer.refresh_from_db()
    assert viewer.role == 'viewer'
    assert viewer.check_password('caresync123')
    assert User.objects.get(email='admin@caresync.local').is_staff


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def request_log():
    logger = logging.getLogger('core.middleware')
    handler = _ListHandler()
    old_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    yield handler.records
    logger.removeHandler(handler)
    logger.setLevel(old_level)


def test_request_log_levels(request_log):
    client = APIClient()
    client.get(reverse('code_search'))
    client.get(reverse('code_detail', args=['NOPE-1']))
    assert [r.levelno for r in request_log] == [logging.INFO, logging.WARNING]
    assert 'GET /api/codes/NOPE-1 404' in request_log[1].getMessage()
