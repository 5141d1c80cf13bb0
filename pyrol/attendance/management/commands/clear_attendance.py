from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.utils import timezone
from django.utils.translation import gettext as _

from pyrol.attendance.models import Attendance
from pyrol.attendance.tasks import clear_attendance_for
from pyrol.utils.dates import parse_iso_date


class Command(BaseCommand):
    help = _("Delete attendance records for one date (default today) or all dates")

    def add_arguments(self, parser):
        group = parser.add_mutually_exclusive_group()
        group.add_argument("--date", help="Date to clear, YYYY-MM-DD")
        group.add_argument(
            "--all",
            action="store_true",
            help="Delete every attendance record",
        )

    def handle(self, *args, **options):
        if options["all"]:
            deleted, _details = Attendance.objects.all().delete()
            self.stdout.write(
                self.style.SUCCESS(f"Deleted {deleted} attendance records")
            )
            return

        if options["date"]:
            target_date = parse_iso_date(options["date"])
            if target_date is None:
                msg = f"Invalid date: {options['date']}"
                raise CommandError(msg)
        else:
            target_date = timezone.localdate()
        deleted = clear_attendance_for(target_date)
        self.stdout.write(
            self.style.SUCCESS(
                f"Deleted {deleted} attendance records for {target_date.isoformat()}"
            )
        )
