"""
Django admin registrations for the core models.

Everything is reachable under ``/admin/`` so staff can correct mapping
rows and inspect patients and the audit trail by hand.
"""

from django.contrib import admin

from .models import AuditEvent, CodeMapping, Diagnosis, NamasteCode, Patient, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'first_name', 'last_name', 'role', 'is_staff', 'is_active')
    list_filter = ('role', 'is_staff', 'is_active')
    search_fields = ('email', 'first_name', 'last_name')


class CodeMappingInline(admin.TabularInline):
    model = CodeMapping
    extra = 0


@admin.register(NamasteCode)
class NamasteCodeAdmin(admin.ModelAdmin):
    list_display = ('code', 'description', 'category', 'created_at')
    list_filter = ('category',)
    search_fields = ('code', 'description')
    inlines = [CodeMappingInline]


@admin.register(CodeMapping)
class CodeMappingAdmin(admin.ModelAdmin):
    list_display = ('namaste', 'icd11_code', 'icd11_description', 'confidence', 'status')
    list_filter = ('status', 'namaste__category')
    search_fields = ('namaste__code', 'icd11_code', 'icd11_description')


class DiagnosisInline(admin.TabularInline):
    model = Diagnosis
    extra = 0


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'birth_date', 'gender', 'created_at')
    list_filter = ('gender',)
    search_fields = ('id', 'first_name', 'last_name', 'email', 'phone')
    inlines = [DiagnosisInline]


@admin.register(Diagnosis)
class DiagnosisAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'code', 'icd11_code', 'recorded_date')
    search_fields = ('patient__id', 'code', 'icd11_code')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'action', 'user', 'object_type', 'object_id')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id', 'user__email')
    readonly_fields = ('created_at',)
