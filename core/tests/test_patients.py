"""
Integration tests for the patient endpoints.

Uses DRF's APITestCase.  The seeded demo patient ``P001`` is present in
every test, so list assertions account for it.

To run the tests:

```
pytest -q core/tests
```
"""

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from core.models import AuditEvent, Diagnosis, Patient
from core.services.catalog import seed_default_catalog


class PatientAPITests(APITestCase):
    def setUp(self) -> None:
        seed_default_catalog()
        self.payload = {
            'firstName': 'Asha',
            'lastName': 'Verma',
            'birthDate': '1992-03-04',
            'gender': 'female',
            'phone': '+91 98765 43210',
            'email': 'asha@example.com',
        }

    def create(self, **overrides):
        return self.client.post(reverse('patients'), {**self.payload, **overrides}, format='json')

    def test_create_then_fetch_returns_same_fields(self):
        resp = self.create()
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        pid = resp.data['id']
        self.assertRegex(pid, r'^P[0-9A-F]{12}$')
        resource = resp.data['patient']
        self.assertEqual(resource['resourceType'], 'Patient')
        self.assertEqual(resource['id'], pid)
        self.assertEqual(resource['name'], [{'use': 'official', 'given': ['Asha'], 'family': 'Verma'}])
        self.assertEqual(resource['birthDate'], '1992-03-04')
        self.assertEqual(resource['gender'], 'female')
        self.assertEqual(resource['telecom'], [
            {'system': 'phone', 'value': '+91 98765 43210'},
            {'system': 'email', 'value': 'asha@example.com'},
        ])
        self.assertEqual(resp.data['diagnoses'], [])

        fetched = self.client.get(reverse('patient_detail', args=[pid]))
        self.assertEqual(fetched.status_code, status.HTTP_200_OK)
        self.assertEqual(fetched.data['patient'], resource)
        self.assertEqual(fetched.data['createdAt'], resp.data['createdAt'])
        self.assertTrue(AuditEvent.objects.filter(action='patient_create', object_id=pid).exists())

    def test_create_with_names_only(self):
        resp = self.client.post(reverse('patients'), {'firstName': 'Ravi', 'lastName': 'Kumar'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        resource = resp.data['patient']
        for key in ('birthDate', 'gender', 'telecom'):
            self.assertNotIn(key, resource)

    def test_invalid_create_returns_400(self):
        for bad in ({'firstName': ''}, {'lastName': '   '}, {'gender': 'unknown'}, {'birthDate': 'yesterday'}):
            resp = self.create(**bad)
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST, bad)
            self.assertEqual(resp.data['error'], 'Invalid patient data')
            self.assertEqual(resp.data['code'], 'invalid')
        self.assertEqual(Patient.objects.count(), 1)

    def test_create_strips_markup(self):
        resp = self.create(firstName='<b>Asha</b>', lastName='<a href="http://x.test">Verma</a>')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        name = resp.data['patient']['name'][0]
        self.assertEqual(name['given'], ['Asha'])
        self.assertEqual(name['family'], 'Verma')

    def test_text_with_ampersand_round_trips(self):
        pid = self.create(lastName='Smith & Jones').data['id']
        self.client.post(reverse('patient_diagnoses', args=[pid]),
                         {'code': 'UNA-012', 'icd11Code': 'QD82', 'description': 'Fever > 38C & cough'},
                         format='json')

        record = self.client.get(reverse('patient_detail', args=[pid])).data
        self.assertEqual(record['patient']['name'][0]['family'], 'Smith & Jones')
        self.assertEqual(record['diagnoses'][0]['description'], 'Fever > 38C & cough')

        bundle = self.client.get(reverse('patient_fhir', args=[pid])).data
        self.assertEqual(bundle['entry'][0]['resource']['name'][0]['family'], 'Smith & Jones')
        self.assertEqual(bundle['entry'][1]['resource']['code']['coding'][0]['display'],
                         'Fever > 38C & cough')

    def test_list_search_and_pagination(self):
        self.create()
        self.create(firstName='Meera', lastName='Iyer', email='meera@example.com')
        resp = self.client.get(reverse('patients'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['total'], 3)
        self.assertEqual(resp.data['patients'][0]['id'], 'P001')

        resp = self.client.get(reverse('patients'), {'q': 'iyer'})
        self.assertEqual(resp.data['total'], 1)
        self.assertEqual(resp.data['patients'][0]['patient']['name'][0]['family'], 'Iyer')

        resp = self.client.get(reverse('patients'), {'page': 2, 'pageSize': 2})
        self.assertEqual(resp.data['total'], 3)
        self.assertEqual(len(resp.data['patients']), 1)

    def test_demo_patient_is_seeded(self):
        resp = self.client.get(reverse('patient_detail', args=['P001']))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['diagnoses'][0]['code'], 'AYR-001')
        self.assertEqual(resp.data['diagnoses'][0]['icd11Code'], 'BA25.1')
        self.assertEqual(resp.data['diagnoses'][0]['recordedDate'], '2024-01-10')

    def test_fetch_unknown_patient(self):
        resp = self.client.get(reverse('patient_detail', args=['PNOPE']))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data, {'ok': False, 'error': 'Patient not found', 'code': 'not_found'})

    def test_delete_patient_cascades(self):
        pid = self.create().data['id']
        self.client.post(reverse('patient_diagnoses', args=[pid]),
                         {'code': 'SID-045', 'icd11Code': 'DA90', 'description': 'Diabetes mellitus'},
                         format='json')
        resp = self.client.delete(reverse('patient_detail', args=[pid]))
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Patient.objects.filter(id=pid).exists())
        self.assertFalse(Diagnosis.objects.filter(patient_id=pid).exists())
        self.assertEqual(self.client.get(reverse('patient_detail', args=[pid])).status_code, 404)
        self.assertEqual(self.client.delete(reverse('patient_detail', args=[pid])).status_code, 404)

    def test_add_diagnosis(self):
        pid = self.create().data['id']
        resp = self.client.post(reverse('patient_diagnoses', args=[pid]),
                                {'code': 'AYR-023', 'icd11Code': 'DB20', 'description': 'Asthma'},
                                format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['code'], 'AYR-023')
        self.assertEqual(resp.data['icd11Code'], 'DB20')
        self.assertIn('recordedDate', resp.data)

        record = self.client.get(reverse('patient_detail', args=[pid])).data
        self.assertEqual(len(record['diagnoses']), 1)
        self.assertEqual(record['diagnoses'][0]['id'], resp.data['id'])

    def test_invalid_diagnosis_is_rejected_before_patient_lookup(self):
        resp = self.client.post(reverse('patient_diagnoses', args=['PMISSING']), {'code': 'AYR-023'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error'], 'Invalid diagnosis data')

        resp = self.client.post(reverse('patient_diagnoses', args=['PMISSING']),
                                {'code': 'AYR-023', 'icd11Code': 'DB20', 'description': 'Asthma'},
                                format='json')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_remove_diagnosis(self):
        pid = self.create().data['id']
        did = self.client.post(reverse('patient_diagnoses', args=[pid]),
                               {'code': 'AYR-023', 'icd11Code': 'DB20', 'description': 'Asthma'},
                               format='json').data['id']
        # a diagnosis of another patient is not reachable through this one
        other = Diagnosis.objects.get(patient_id='P001')
        resp = self.client.delete(reverse('patient_diagnosis_detail', args=[pid, other.id]))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data['error'], 'Diagnosis not found')

        resp = self.client.delete(reverse('patient_diagnosis_detail', args=[pid, did]))
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Diagnosis.objects.filter(id=did).exists())
        self.assertTrue(AuditEvent.objects.filter(action='diagnosis_delete', object_id=pid).exists())

    def test_diagnosis_changes_bump_updated_at(self):
        pid = self.create().data['id']
        created = Patient.objects.get(id=pid).updated_at

        did = self.client.post(reverse('patient_diagnoses', args=[pid]),
                               {'code': 'AYR-023', 'icd11Code': 'DB20', 'description': 'Asthma'},
                               format='json').data['id']
        after_add = Patient.objects.get(id=pid).updated_at
        self.assertGreater(after_add, created)

        self.client.delete(reverse('patient_diagnosis_detail', args=[pid, did]))
        after_remove = Patient.objects.get(id=pid).updated_at
        self.assertGreater(after_remove, after_add)
