import logging

from django.core.management.base import BaseCommand

from fleet.models import Vehicle
from fleet.services.oil_change import NEEDS_CHANGE, NORMAL, oil_change_summary

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'List active vehicles that are due for or need an oil change'

    def add_arguments(self, parser):
        parser.add_argument('--code', help='Only check vehicles under this management code')

    def handle(self, *args, **options):
        vehicles = Vehicle.objects.filter(is_active=True).select_related('management_code')
        if options.get('code'):
            vehicles = vehicles.filter(management_code__code=options['code'])

        flagged = 0
        for vehicle in vehicles:
            summary = oil_change_summary(vehicle)
            if summary['status'] == NORMAL:
                continue
            flagged += 1
            line = (
                f"{vehicle.vehicle_no}: {summary['status_label']} "
                f"({summary['km_since_oil_change']} km since last change)"
            )
            if summary['status'] == NEEDS_CHANGE:
                self.stdout.write(self.style.ERROR(line))
            else:
                self.stdout.write(self.style.WARNING(line))
            logger.warning(line)

        self.stdout.write(self.style.SUCCESS(f'{flagged} vehicle(s) need attention'))
