"""
Load the built-in NAMASTE catalogue and the demo patient.

Running it again only fills in what is missing.
"""
from django.core.management.base import BaseCommand

from core.services.catalog import seed_default_catalog


class Command(BaseCommand):
    help = "Seed NAMASTE codes, their ICD-11 mappings and the demo patient (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--no-demo-patient",
            action="store_true",
            help="Skip creating the demo patient P001.",
        )

    def handle(self, *args, **opts):
        counts = seed_default_catalog(with_demo_patient=not opts["no_demo_patient"])
        self.stdout.write(self.style.SUCCESS(
            f"codes created: {counts['codes']}, mappings created: {counts['mappings']}, "
            f"demo patient created: {'yes' if counts['demoPatient'] else 'no'}"
        ))
