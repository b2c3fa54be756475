"""
NAMASTE catalogue lookups and the seed data loader.

Mappings are curated rows, not computed: a search is a filter over
:class:`~core.models.CodeMapping` joined to its NAMASTE code.
"""
from __future__ import annotations

import datetime
import logging
from typing import Optional

from django.db import transaction
from django.db.models import Q

from core.models import CodeMapping, Diagnosis, NamasteCode, Patient

logger = logging.getLogger(__name__)

SEED_CODES = [
    # (namaste, description, category, icd11, icd11 description, confidence, status)
    ('AYR-001', 'Vata Vyadhi (Wind Disorder)', 'Ayurveda', 'BA25.1',
     'Disorders of the nervous system and sense organs', 0.94, 'verified'),
    ('SID-045', 'Pitta Roga (Pitta Disease)', 'Siddha', 'DA90', 'Diabetes mellitus', 0.87, 'verified'),
    ('UNA-012', 'Humoral Imbalance', 'Unani', 'QD82', 'Symptoms and signs', 0.76, 'pending'),
    ('AYR-023', 'Kapha Vyadhi (Phlegm Disorder)', 'Ayurveda', 'DB20', 'Asthma', 0.92, 'verified'),
    ('SID-089', 'Iyya Pitta (Bodily Humours)', 'Siddha', 'EA03', 'Hypertension', 0.65, 'pending'),
]

DEMO_PATIENT_ID = 'P001'


def format_mapping(mapping: CodeMapping) -> dict:
    return {
        'namasteCode': mapping.namaste.code,
        'namasteDescription': mapping.namaste.description,
        'icd11Code': mapping.icd11_code,
        'icd11Description': mapping.icd11_description,
        'confidence': mapping.confidence,
        'category': mapping.namaste.category,
    }


def search_mappings(*, q: Optional[str] = None, category: Optional[str] = None, limit: int = 10) -> list[dict]:
    qs = CodeMapping.objects.select_related('namaste').order_by('id')
    if q:
        qs = qs.filter(
            Q(namaste__code__icontains=q)
            | Q(namaste__description__icontains=q)
            | Q(icd11_code__icontains=q)
            | Q(icd11_description__icontains=q)
        )
    if category:
        qs = qs.filter(namaste__category=category)
    return [format_mapping(m) for m in qs[:limit]]


def get_mapping_for_code(code: str) -> Optional[dict]:
    # exact, case-sensitive match on the NAMASTE code
    mapping = (
        CodeMapping.objects.select_related('namaste')
        .filter(namaste__code__exact=code)
        .order_by('id')
        .first()
    )
    if mapping is None or mapping.namaste.code != code:
        return None
    return format_mapping(mapping)


@transaction.atomic
def seed_default_catalog(*, with_demo_patient: bool = True) -> dict:
    """Load the built-in catalogue (and demo patient).  Safe to re-run."""
    created_codes = 0
    created_mappings = 0
    for code, desc, category, icd, icd_desc, confidence, status in SEED_CODES:
        namaste, made = NamasteCode.objects.get_or_create(
            code=code, defaults={'description': desc, 'category': category}
        )
        created_codes += int(made)
        _, made = CodeMapping.objects.get_or_create(
            namaste=namaste,
            icd11_code=icd,
            defaults={'icd11_description': icd_desc, 'confidence': confidence, 'status': status},
        )
        created_mappings += int(made)

    patient_created = False
    if with_demo_patient:
        patient, patient_created = Patient.objects.get_or_create(
            id=DEMO_PATIENT_ID,
            defaults={
                'first_name': 'John',
                'last_name': 'Doe',
                'birth_date': datetime.date(1980, 1, 15),
                'gender': 'male',
            },
        )
        if patient_created:
            Diagnosis.objects.create(
                patient=patient,
                code='AYR-001',
                icd11_code='BA25.1',
                description='Vata Vyadhi (Wind Disorder)',
                recorded_date=datetime.date(2024, 1, 10),
            )

    if created_codes or created_mappings or patient_created:
        logger.info('catalogue seeded: %d codes, %d mappings, demo patient %s',
                    created_codes, created_mappings, 'created' if patient_created else 'kept')
    return {'codes': created_codes, 'mappings': created_mappings, 'demoPatient': patient_created}
