"""
FHIR R4 rendering of patient records.

Produces plain dicts ready for JSON: a ``Patient`` resource, one
``Condition`` per diagnosis and a ``document`` Bundle holding both.
"""
from __future__ import annotations

import uuid

from django.utils import timezone

from core.models import Diagnosis, Patient

ICD11_MMS_SYSTEM = 'http://id.who.int/icd/release/11/mms'


def patient_resource(patient: Patient) -> dict:
    resource: dict[str, object] = {
        'resourceType': 'Patient',
        'id': patient.id,
        'name': [{
            'use': 'official',
            'given': [patient.first_name],
            'family': patient.last_name,
        }],
    }
    if patient.birth_date:
        resource['birthDate'] = patient.birth_date.isoformat()
    if patient.gender:
        resource['gender'] = patient.gender
    telecom = []
    if patient.phone:
        telecom.append({'system': 'phone', 'value': patient.phone})
    if patient.email:
        telecom.append({'system': 'email', 'value': patient.email})
    if telecom:
        resource['telecom'] = telecom
    return resource


def condition_resource(diagnosis: Diagnosis, patient_id: str) -> dict:
    return {
        'resourceType': 'Condition',
        'id': f'C{diagnosis.pk}',
        'code': {
            'coding': [{
                'system': ICD11_MMS_SYSTEM,
                'code': diagnosis.icd11_code,
                'display': diagnosis.description,
            }],
        },
        'subject': {'reference': f'Patient/{patient_id}'},
        'recordedDate': diagnosis.recorded_date.isoformat(),
    }


def build_bundle(patient: Patient) -> dict:
    """Bundle with the Patient first, then a Condition per diagnosis."""
    diagnoses = patient.diagnoses.order_by('id')
    entries = [{'resource': patient_resource(patient)}]
    entries.extend({'resource': condition_resource(d, patient.id)} for d in diagnoses)
    return {
        'resourceType': 'Bundle',
        'id': str(uuid.uuid4()),
        'type': 'document',
        'timestamp': timezone.now().isoformat(),
        'entry': entries,
    }
