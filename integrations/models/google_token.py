# integrations/models/google_token.py

from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone


class GoogleToken(models.Model):
    """
    Stored OAuth token for one Google service (e.g. "google_sheets").

    The refresh token outlives the access token; the access token is
    replaced in place whenever it is refreshed.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="google_tokens",
    )
    service = models.CharField(max_length=50, db_index=True)

    access_token = models.TextField()
    refresh_token = models.TextField(blank=True)
    expires_at = models.DateTimeField()
    token_data = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "service"], name="uniq_google_token_user_service"),
        ]

    def __str__(self):
        return f"{self.service} token (expires {self.expires_at:%Y-%m-%d %H:%M})"

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= timezone.now()

    def expires_soon(self, seconds: int = 60) -> bool:
        return self.expires_at <= timezone.now() + timedelta(seconds=seconds)

    @classmethod
    def store(cls, *, service: str, token_data: dict, user=None) -> "GoogleToken":
        """Upsert from a Google token response (access_token, expires_in, ...)."""
        expires_in = int(token_data.get("expires_in") or 3600)
        defaults = {
            "access_token": token_data["access_token"],
            "expires_at": timezone.now() + timedelta(seconds=expires_in),
            "token_data": token_data,
        }
        if token_data.get("refresh_token"):
            defaults["refresh_token"] = token_data["refresh_token"]

        token, _ = cls.objects.update_or_create(user=user, service=service, defaults=defaults)
        return token
