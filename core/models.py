"""
Database models for the CareSync backend.

These models capture the core concepts of the system: clinician
accounts, the NAMASTE code catalogue with its ICD-11 mappings, patients
with their recorded diagnoses and an audit trail.  Field names follow
Django conventions; the camelCase shapes expected by the front-end are
produced by the service layer.
"""
from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


def _new_patient_id() -> str:
    return f"P{uuid.uuid4().hex[:12].upper()}"


class User(AbstractUser):
    """Clinician or administrator account.

    Accounts are keyed by email; ``username`` mirrors the email so that
    Django's stock authentication backend and admin keep working.
    """
    ROLE_CHOICES = [
        ('admin', 'Administrator'),
        ('editor', 'Editor'),
        ('viewer', 'Viewer'),
    ]
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='viewer')

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
            self.username = self.email
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class NamasteCode(models.Model):
    """A traditional-medicine diagnosis code from the NAMASTE catalogue."""
    CATEGORY_AYURVEDA = 'Ayurveda'
    CATEGORY_SIDDHA = 'Siddha'
    CATEGORY_UNANI = 'Unani'
    CATEGORY_CHOICES = [
        (CATEGORY_AYURVEDA, 'Ayurveda'),
        (CATEGORY_SIDDHA, 'Siddha'),
        (CATEGORY_UNANI, 'Unani'),
    ]
    code = models.CharField(max_length=32, unique=True)
    description = models.CharField(max_length=255)
    category = models.CharField(max_length=16, choices=CATEGORY_CHOICES, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']

    def __str__(self) -> str:
        return f"{self.code} ({self.category})"


class CodeMapping(models.Model):
    """Curated NAMASTE to ICD-11 (MMS) mapping with a confidence score."""
    STATUS_VERIFIED = 'verified'
    STATUS_PENDING = 'pending'
    STATUS_CHOICES = [
        (STATUS_VERIFIED, 'Verified'),
        (STATUS_PENDING, 'Pending'),
    ]
    namaste = models.ForeignKey(NamasteCode, on_delete=models.CASCADE, related_name='mappings')
    icd11_code = models.CharField(max_length=32, db_index=True)
    icd11_description = models.CharField(max_length=255)
    confidence = models.FloatField(default=0.0)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        unique_together = [('namaste', 'icd11_code')]

    def __str__(self) -> str:
        return f"{self.namaste_id} -> {self.icd11_code} ({self.confidence:.2f})"


class Patient(models.Model):
    """A patient record.  Diagnoses hang off it via :class:`Diagnosis`."""
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]
    id = models.CharField(max_length=20, primary_key=True, default=_new_patient_id)
    first_name = models.CharField(max_length=128)
    last_name = models.CharField(max_length=128)
    birth_date = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self) -> str:
        return f"{self.id}: {self.first_name} {self.last_name}"


class Diagnosis(models.Model):
    """A NAMASTE diagnosis attached to a patient, coded against ICD-11."""
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='diagnoses')
    code = models.CharField(max_length=32)
    icd11_code = models.CharField(max_length=32)
    description = models.CharField(max_length=255)
    recorded_date = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        verbose_name_plural = 'diagnoses'

    def __str__(self) -> str:
        return f"{self.patient_id}: {self.code} / {self.icd11_code}"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
