import html

import bleach
from rest_framework import serializers


def _clean(v):
    # no tags kept; entities unescaped
    return html.unescape(bleach.clean((v or '').strip(), tags=set(), strip=True)).strip()


class PatientCreateSerializer(serializers.Serializer):
    firstName = serializers.CharField(max_length=128)
    lastName = serializers.CharField(max_length=128)
    birthDate = serializers.DateField(required=False, allow_null=True)
    gender = serializers.ChoiceField(choices=['male', 'female', 'other'], required=False, allow_null=True)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True)

    def validate_firstName(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('firstName may not be blank')
        return v

    def validate_lastName(self, v):
        v = _clean(v)
        if not v:
            raise serializers.ValidationError('lastName may not be blank')
        return v

    def validate_phone(self, v):
        return _clean(v)


class PatientListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, max_length=64)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)


class DiagnosisCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=32)
    icd11Code = serializers.CharField(max_length=32)
    description = serializers.CharField(max_length=255)

    def validate_description(self, v):
        return _clean(v)
