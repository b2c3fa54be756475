import logging
from typing import Optional

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from core.exceptions import NotFoundError
from core.models import Diagnosis, Patient
from core.services.fhir import patient_resource

logger = logging.getLogger(__name__)


def get_patient_or_404(patient_id: str) -> Patient:
    patient = Patient.objects.filter(id=patient_id).first()
    if not patient:
        raise NotFoundError('Patient not found')
    return patient


def format_diagnosis(d: Diagnosis) -> dict:
    return {
        'id': d.id,
        'code': d.code,
        'icd11Code': d.icd11_code,
        'description': d.description,
        'recordedDate': d.recorded_date.isoformat(),
    }


def format_patient_record(patient: Patient) -> dict:
    return {
        'id': patient.id,
        'patient': patient_resource(patient),
        'diagnoses': [format_diagnosis(d) for d in patient.diagnoses.all()],
        'createdAt': patient.created_at.isoformat(),
        'updatedAt': patient.updated_at.isoformat(),
    }


def create_patient(*, first_name, last_name, birth_date=None, gender=None, phone=None, email=None) -> Patient:
    patient = Patient.objects.create(
        first_name=first_name,
        last_name=last_name,
        birth_date=birth_date,
        gender=gender or '',
        phone=phone or '',
        email=email or '',
    )
    logger.info('patient %s created', patient.id)
    return patient


def list_patients(*, q: Optional[str] = None, page: Optional[int] = None,
                  page_size: Optional[int] = None) -> tuple[list[Patient], int]:
    qs = Patient.objects.prefetch_related('diagnoses').order_by('created_at', 'id')
    if q:
        qs = qs.filter(Q(first_name__icontains=q) | Q(last_name__icontains=q))
    total = qs.count()
    if page_size:
        start = ((page or 1) - 1) * page_size
        qs = qs[start:start + page_size]
    return list(qs), total


def delete_patient(patient: Patient) -> None:
    pid = patient.id
    with transaction.atomic():
        patient.delete()
    logger.info('patient %s deleted', pid)


def add_diagnosis(patient: Patient, *, code: str, icd11_code: str, description: str) -> Diagnosis:
    with transaction.atomic():
        diagnosis = Diagnosis.objects.create(
            patient=patient,
            code=code,
            icd11_code=icd11_code,
            description=description,
            recorded_date=timezone.localdate(),
        )
        # bump updated_at
        patient.save(update_fields=['updated_at'])
    logger.info('diagnosis %s (%s -> %s) added to patient %s', diagnosis.id, code, icd11_code, patient.id)
    return diagnosis


def remove_diagnosis(patient: Patient, diagnosis_id: int) -> None:
    diagnosis = Diagnosis.objects.filter(patient=patient, id=diagnosis_id).first()
    if not diagnosis:
        raise NotFoundError('Diagnosis not found')
    with transaction.atomic():
        diagnosis.delete()
        patient.save(update_fields=['updated_at'])
    logger.info('diagnosis %s removed from patient %s', diagnosis_id, patient.id)
