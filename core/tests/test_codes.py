import pytest
from django.urls import reverse
from rest_framework.test import APIClient

pytestmark = pytest.mark.django_db


@pytest.fixture
def client(catalog):
    return APIClient()


def search(client, **params):
    return client.get(reverse('code_search'), params)


def test_search_by_text_matches_description_and_icd(client):
    r = search(client, q='diabetes')
    assert r.status_code == 200
    assert r.data['total'] == 1
    hit = r.data['results'][0]
    assert hit == {
        'namasteCode': 'SID-045',
        'namasteDescription': 'Pitta Roga (Pitta Disease)',
        'icd11Code': 'DA90',
        'icd11Description': 'Diabetes mellitus',
        'confidence': 0.87,
        'category': 'Siddha',
    }

    r = search(client, q='ba25')
    assert [x['namasteCode'] for x in r.data['results']] == ['AYR-001']


def test_search_without_filters_returns_whole_catalog(client):
    r = search(client)
    assert r.status_code == 200
    assert r.data['total'] == 5
    assert [x['namasteCode'] for x in r.data['results']] == [
        'AYR-001', 'SID-045', 'UNA-012', 'AYR-023', 'SID-089',
    ]


def test_search_by_category(client):
    r = search(client, category='Ayurveda')
    assert r.status_code == 200
    codes = [x['namasteCode'] for x in r.data['results']]
    assert codes == ['AYR-001', 'AYR-023']
    assert all(x['category'] == 'Ayurveda' for x in r.data['results'])


def test_search_text_and_category_combine(client):
    r = search(client, q='pitta', category='Siddha')
    assert {x['namasteCode'] for x in r.data['results']} == {'SID-045', 'SID-089'}
    r = search(client, q='pitta', category='Unani')
    assert r.data == {'results': [], 'total': 0}


def test_search_limit_caps_results_and_total(client):
    r = search(client, limit=2)
    assert r.status_code == 200
    assert len(r.data['results']) == 2
    assert r.data['total'] == 2


@pytest.mark.parametrize('params', [
    {'category': 'Homeopathy'},
    {'limit': 0},
    {'limit': 101},
    {'limit': 'ten'},
])
def test_search_rejects_bad_query(client, params):
    r = search(client, **params)
    assert r.status_code == 400
    assert r.data['ok'] is False
    assert r.data['error'] == 'Invalid search query'
    assert r.data['code'] == 'invalid'
    assert r.data['details']


def test_lookup_hit(client):
    r = client.get(reverse('code_detail', args=['UNA-012']))
    assert r.status_code == 200
    assert r.data['icd11Code'] == 'QD82'
    assert r.data['category'] == 'Unani'


def test_lookup_miss_and_case_sensitivity(client):
    r = client.get(reverse('code_detail', args=['XXX-999']))
    assert r.status_code == 404
    assert r.data == {'ok': False, 'error': 'Code not found', 'code': 'not_found'}

    r = client.get(reverse('code_detail', args=['ayr-001']))
    assert r.status_code == 404


def test_seed_is_idempotent(catalog):
    from core.models import CodeMapping, NamasteCode, Patient
    from core.services.catalog import seed_default_catalog

    counts = seed_default_catalog()
    assert counts == {'codes': 0, 'mappings': 0, 'demoPatient': False}
    assert NamasteCode.objects.count() == 5
    assert CodeMapping.objects.count() == 5
    assert Patient.objects.filter(id='P001').count() == 1
