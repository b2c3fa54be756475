# core/management/commands/ensure_test_users.py
from django.core.management.base import BaseCommand

from core.models import User

TEST_PASSWORD = "caresync123"
TEST_SET = [
    ("admin@caresync.local", "admin"),
    ("editor@caresync.local", "editor"),
    ("viewer@caresync.local", "viewer"),
]


class Command(BaseCommand):
    help = f"Ensure one test user per role exists with password={TEST_PASSWORD} (idempotent)."

    def handle(self, *args, **opts):
        for email, role in TEST_SET:
            u, created = User.objects.get_or_create(
                email=email,
                defaults={"username": email, "role": role, "is_active": True},
            )
            # reset password, role and active flag on every run
            u.set_password(TEST_PASSWORD)
            u.role = role
            u.is_active = True
            u.is_staff = role == "admin"
            u.save()
            self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'ok'}: {email} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
