# subscriptions/management/commands/generate_codes.py
from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from subscriptions.services import create_codes


class Command(BaseCommand):
    help = "Generate Season Pass activation codes (RGSP-XXXX-XXXX) and print them."

    def add_arguments(self, parser):
        parser.add_argument("count", type=int, help="How many codes to create")
        parser.add_argument("--days", type=int, default=None, help="Premium days per code (default SEASON_PASS_DAYS)")
        parser.add_argument("--batch", default="", help="Batch label for bookkeeping")
        parser.add_argument("--valid-for", type=int, default=None,
                            help="Days until unredeemed codes expire (default: never)")

    def handle(self, *args, **opts):
        count = opts["count"]
        if count < 1 or count > 10000:
            raise CommandError("count must be between 1 and 10000")
        if opts["days"] is not None and opts["days"] < 1:
            raise CommandError("--days must be positive")

        expires_at = None
        if opts["valid_for"]:
            expires_at = timezone.now() + timedelta(days=opts["valid_for"])

        codes = create_codes(count, duration_days=opts["days"], batch=opts["batch"], expires_at=expires_at)
        for c in codes:
            self.stdout.write(c.code)
        self.stdout.write(self.style.SUCCESS(f"Created {len(codes)} code(s)."))
