# integrations/management/commands/run_sync_worker.py

from __future__ import annotations

import time

from django.core.management.base import BaseCommand

from integrations.handlers import HANDLERS, build_context
from integrations.services.outbox import OutboxWorker


class Command(BaseCommand):
    help = "Process outbox jobs (Google Sheets fuel price sync)."

    def add_arguments(self, parser):
        parser.add_argument("--once", action="store_true", help="Run a single pass and exit.")
        parser.add_argument(
            "--poll-interval",
            type=float,
            default=2.0,
            help="Seconds to sleep when no job is due (default 2).",
        )

    def handle(self, *args, **options):
        once = bool(options.get("once"))
        poll_interval = max(float(options.get("poll_interval") or 0), 0.1)

        worker = OutboxWorker(HANDLERS, build_context())
        self.stdout.write(self.style.MIGRATE_HEADING("Sync worker started"))

        try:
            while True:
                processed = worker.run_once()
                if processed:
                    self.stdout.write(f"processed {processed} job(s)")
                if once:
                    break
                if not processed:
                    time.sleep(poll_interval)
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING("Sync worker stopped."))
            return

        self.stdout.write(self.style.SUCCESS("Done."))
