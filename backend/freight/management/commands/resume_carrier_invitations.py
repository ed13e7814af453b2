from django.core.management.base import BaseCommand

from freight.models import TransportRequest
from services.matching import resume_pending_invitations


class Command(BaseCommand):
    help = "Re-enqueue the invitation stage for matching transport requests with uncontacted carriers."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show which transport requests would be resumed without enqueuing anything.",
        )

    def handle(self, *args, **options):
        if options["dry_run"]:
            pending = (
                TransportRequest.objects.filter(status="matching", carrier_requests__status="new")
                .distinct()
                .count()
            )
            self.stdout.write(
                self.style.WARNING(f"DRY RUN: Would resume invitations for {pending} transport request(s).")
            )
            return

        request_ids = resume_pending_invitations()
        self.stdout.write(
            self.style.SUCCESS(f"Resumed invitations for {len(request_ids)} transport request(s).")
        )
