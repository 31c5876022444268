from django.core.management.base import BaseCommand
from django.utils import timezone

from perceptors.services.catalogs import refresh_all


class Command(BaseCommand):
    help = "Drop and re-warm the catalog caches."

    def handle(self, *args, **options):
        now = timezone.now()
        keys = refresh_all()
        for key in keys:
            self.stdout.write(f"catalog:{key}")
        self.stdout.write(self.style.SUCCESS(f"Refreshed {len(keys)} keys at {now}"))
