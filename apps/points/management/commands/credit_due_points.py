from django.core.management.base import BaseCommand
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from apps.points.services import LoyaltyAdjustmentService


class Command(BaseCommand):
    help = 'Credit pending order points whose scheduled date has passed'

    def add_arguments(self, parser):
        parser.add_argument(
            '--now',
            type=str,
            help='Treat this ISO timestamp as the current time',
        )

    def handle(self, *args, **options):
        now = timezone.now()
        if options.get('now'):
            now = parse_datetime(options['now'])
            if now is None:
                self.stdout.write(self.style.ERROR(f"Invalid timestamp: {options['now']}"))
                return
            if timezone.is_naive(now):
                now = timezone.make_aware(now)

        self.stdout.write(f'Crediting points due at {now.isoformat()}...')

        result = LoyaltyAdjustmentService.credit_due_grants(now)

        self.stdout.write(
            self.style.SUCCESS(
                f"Points credit complete. Orders credited: {result['credited']}, "
                f"total points: {result['points']}"
            )
        )
