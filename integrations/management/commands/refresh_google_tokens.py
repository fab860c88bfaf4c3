# integrations/management/commands/refresh_google_tokens.py

from __future__ import annotations

from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from integrations.google.http import GoogleApiError
from integrations.google.oauth import refresh_access_token
from integrations.models import GoogleToken


class Command(BaseCommand):
    help = "Refresh stored Google tokens that expire within the next hour."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="List the tokens that would be refreshed without calling Google.",
        )

    def handle(self, *args, **options):
        dry_run = bool(options.get("dry_run"))

        cutoff = timezone.now() + timedelta(hours=1)
        tokens = GoogleToken.objects.filter(expires_at__lte=cutoff).exclude(refresh_token="")

        if not tokens.exists():
            self.stdout.write(self.style.SUCCESS("No tokens need refreshing."))
            return

        refreshed = failed = 0
        for token in tokens.order_by("expires_at"):
            label = f"{token.service} (expires {token.expires_at:%Y-%m-%d %H:%M})"
            if dry_run:
                self.stdout.write(f"would refresh {label}")
                continue
            try:
                refresh_access_token(token)
            except GoogleApiError as exc:
                failed += 1
                self.stdout.write(self.style.ERROR(f"failed {label}: {exc}"))
                continue
            refreshed += 1
            self.stdout.write(self.style.SUCCESS(f"refreshed {label}"))

        if not dry_run:
            self.stdout.write(f"Refreshed: {refreshed}, failed: {failed}")
