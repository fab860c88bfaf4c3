# users/management/commands/ensure_superuser.py

"""
First-deploy admin bootstrap.

- Reads AUTO_ADMIN_EMAIL + AUTO_ADMIN_PASSWORD from the environment
- Idempotent: creates the admin if missing, otherwise re-activates it,
  promotes it to the admin role and resets the password
- Never prints the password
"""

from __future__ import annotations

import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from users.models import ROLE_ADMIN


class Command(BaseCommand):
    help = "Create or update the bootstrap admin from AUTO_ADMIN_* env vars."

    def handle(self, *args, **options):
        email = (os.environ.get("AUTO_ADMIN_EMAIL") or "").strip()
        password = (os.environ.get("AUTO_ADMIN_PASSWORD") or "").strip()

        if not email or not password:
            self.stdout.write(self.style.WARNING("AUTO_ADMIN_* env vars not set. Skipping."))
            return

        User = get_user_model()

        with transaction.atomic():
            user = User.objects.filter(email__iexact=email).first()
            if user is None:
                User.objects.create_superuser(email=email, password=password)
                self.stdout.write(self.style.SUCCESS(f"Admin ensured: {email} (created)"))
                return

            user.role = ROLE_ADMIN
            user.is_active = True
            user.is_staff = True
            user.is_superuser = True
            user.set_password(password)
            user.save()

        self.stdout.write(self.style.SUCCESS(f"Admin ensured: {email} (updated)"))
