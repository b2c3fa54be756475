from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth import password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers


class CheckEmailSerializer(serializers.Serializer):
    email = serializers.EmailField()


class SendOtpSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, max_length=128, trim_whitespace=False)
    firstName = serializers.CharField(min_length=1, max_length=150)
    lastName = serializers.CharField(min_length=1, max_length=150)

    def validate(self, attrs):
        # unsaved user so the similarity validator can compare against the names
        candidate = get_user_model()(
            email=attrs['email'], first_name=attrs['firstName'], last_name=attrs['lastName'],
        )
        try:
            password_validation.validate_password(attrs['password'], user=candidate)
        except DjangoValidationError as e:
            raise serializers.ValidationError({'password': list(e.messages)})
        return attrs


class VerifyOtpSerializer(serializers.Serializer):
    email = serializers.EmailField()
    otp = serializers.CharField()

    def validate_otp(self, v):
        if len(v) != settings.OTP_LENGTH or not v.isdigit():
            raise serializers.ValidationError(f'OTP must be {settings.OTP_LENGTH} digits')
        return v


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=1, trim_whitespace=False)


class RefreshSerializer(serializers.Serializer):
    refresh = serializers.CharField()


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)
