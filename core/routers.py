"""
URL mappings for the CareSync API.

Paths follow the front-end's ``/api/...`` routes.  Trailing slashes are
omitted (``APPEND_SLASH`` is off).
"""
from django.urls import path

from .auth_views import (
    check_email_view,
    jwt_logout_view,
    jwt_refresh_view,
    login_view,
    me_view,
    send_otp_view,
    verify_otp_view,
)
from .views import codes, health, patients


urlpatterns = [
    path('healthz', health.healthz, name='healthz'),
    path('api/ping', health.ping, name='ping'),
    # Terminology
    path('api/codes/search', codes.search_codes, name='code_search'),
    path('api/codes/<str:code>', codes.code_detail, name='code_detail'),
    # Patients
    path('api/patients', patients.patients_collection, name='patients'),
    path('api/patients/<str:patient_id>', patients.patient_detail, name='patient_detail'),
    path('api/patients/<str:patient_id>/diagnoses', patients.patient_add_diagnosis, name='patient_diagnoses'),
    path('api/patients/<str:patient_id>/diagnoses/<int:diagnosis_id>', patients.patient_remove_diagnosis,
         name='patient_diagnosis_detail'),
    path('api/patients/<str:patient_id>/fhir', patients.patient_fhir_export, name='patient_fhir'),
    # Authentication
    path('api/auth/check-email', check_email_view, name='check_email'),
    path('api/auth/send-otp', send_otp_view, name='send_otp'),
    path('api/auth/verify-otp', verify_otp_view, name='verify_otp'),
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/me', me_view, name='me'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),
]
