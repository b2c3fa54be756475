import logging

from django.apps import AppConfig
from django.db.models.signals import post_migrate

logger = logging.getLogger(__name__)


def seed_after_migrate(sender, **kwargs):
    from core.services.catalog import seed_default_catalog

    counts = seed_default_catalog()
    logger.debug('post_migrate seed: %s', counts)


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'core'
    verbose_name = 'CareSync core'

    def ready(self):
        post_migrate.connect(seed_after_migrate, sender=self, dispatch_uid='core.seed_after_migrate')
