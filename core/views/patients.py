"""
Patient management views.

These endpoints create, list, fetch and delete patient records, attach
and remove diagnoses, and export a patient as a FHIR Bundle.  Records
are returned in the camelCase ``PatientRecord`` shape the front-end
consumes, with the demographic part already rendered as a FHIR
``Patient`` resource.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.exceptions import InvalidPayload
from core.serializers.patient import (
    DiagnosisCreateSerializer,
    PatientCreateSerializer,
    PatientListQuerySerializer,
)
from core.services.audit import log_action
from core.services.fhir import build_bundle
from core.services.patients import (
    add_diagnosis,
    create_patient,
    delete_patient,
    format_diagnosis,
    format_patient_record,
    get_patient_or_404,
    list_patients,
    remove_diagnosis,
)


def _actor(request):
    user = getattr(request, 'user', None)
    return user if user and getattr(user, 'is_authenticated', False) else None


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def patients_collection(request):
    """``GET`` lists patients, ``POST`` creates one."""
    if request.method == 'POST':
        return _create_patient(request)

    q = PatientListQuerySerializer(data=request.query_params)
    if not q.is_valid():
        raise InvalidPayload('Invalid query', details=q.errors)
    vd = q.validated_data
    patients, total = list_patients(q=vd.get('q') or None, page=vd.get('page'), page_size=vd.get('pageSize'))
    return Response({'patients': [format_patient_record(p) for p in patients], 'total': total})


def _create_patient(request):
    data = PatientCreateSerializer(data=request.data)
    if not data.is_valid():
        raise InvalidPayload('Invalid patient data', details=data.errors)
    vd = data.validated_data
    patient = create_patient(
        first_name=vd['firstName'],
        last_name=vd['lastName'],
        birth_date=vd.get('birthDate'),
        gender=vd.get('gender'),
        phone=vd.get('phone'),
        email=vd.get('email'),
    )
    log_action(user=_actor(request), action='patient_create', object_type='patient', object_id=patient.id)
    return Response(format_patient_record(patient), status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
@permission_classes([AllowAny])
def patient_detail(request, patient_id: str):
    patient = get_patient_or_404(patient_id)
    if request.method == 'DELETE':
        delete_patient(patient)
        log_action(user=_actor(request), action='patient_delete', object_type='patient', object_id=patient_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
    return Response(format_patient_record(patient))


@api_view(['POST'])
@permission_classes([AllowAny])
def patient_add_diagnosis(request, patient_id: str):
    """Attach a diagnosis; the body is validated before the patient lookup."""
    data = DiagnosisCreateSerializer(data=request.data)
    if not data.is_valid():
        raise InvalidPayload('Invalid diagnosis data', details=data.errors)
    patient = get_patient_or_404(patient_id)
    vd = data.validated_data
    diagnosis = add_diagnosis(patient, code=vd['code'], icd11_code=vd['icd11Code'], description=vd['description'])
    log_action(user=_actor(request), action='diagnosis_add', object_type='patient', object_id=patient.id,
               detail={'diagnosisId': diagnosis.id, 'code': diagnosis.code, 'icd11Code': diagnosis.icd11_code})
    return Response(format_diagnosis(diagnosis), status=status.HTTP_201_CREATED)


@api_view(['DELETE'])
@permission_classes([AllowAny])
def patient_remove_diagnosis(request, patient_id: str, diagnosis_id: int):
    patient = get_patient_or_404(patient_id)
    remove_diagnosis(patient, diagnosis_id)
    log_action(user=_actor(request), action='diagnosis_delete', object_type='patient', object_id=patient.id,
               detail={'diagnosisId': diagnosis_id})
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([AllowAny])
def patient_fhir_export(request, patient_id: str):
    patient = get_patient_or_404(patient_id)
    bundle = build_bundle(patient)
    log_action(user=_actor(request), action='fhir_export', object_type='patient', object_id=patient.id,
               detail={'entries': len(bundle['entry'])})
    return Response(bundle)
