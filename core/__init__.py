"""Core application for the CareSync backend.

This package holds the models, serializers, services, views and route
registrations behind the NAMASTE to ICD-11 terminology API.
"""
