# banking/management/commands/verify_account_balances.py

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from banking.models import Account
from banking.services.ledger import compute_ledger_balance


class Command(BaseCommand):
    help = "Compare every account balance with the sum of its completed transactions."

    def add_arguments(self, parser):
        parser.add_argument(
            "--fix",
            action="store_true",
            help="Overwrite drifted balances with the ledger value.",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any drift is found.",
        )

    def handle(self, *args, **options):
        fix = bool(options.get("fix"))
        strict = bool(options.get("strict"))

        self.stdout.write(self.style.MIGRATE_HEADING("Account balance verification"))

        drifted = 0
        for account in Account.all_objects.order_by("pk"):
            expected = compute_ledger_balance(account)
            if expected == account.balance:
                continue

            drifted += 1
            self.stdout.write(
                self.style.WARNING(
                    f"#{account.pk} {account}: stored={account.balance} ledger={expected}"
                )
            )

            if fix:
                with transaction.atomic():
                    locked = Account.all_objects.select_for_update().get(pk=account.pk)
                    locked.balance = compute_ledger_balance(locked)
                    locked.save(update_fields=["balance", "updated_at"])
                self.stdout.write(self.style.SUCCESS(f"  fixed -> {expected}"))

        if drifted == 0:
            self.stdout.write(self.style.SUCCESS("All balances match the ledger."))
            return

        summary = f"{drifted} account(s) drifted from the ledger."
        if strict and not fix:
            raise CommandError(summary)
        self.stdout.write(self.style.WARNING(summary))
