"""
======================================================
PATH: integrations/google/oauth.py
======================================================
GOOGLE OAUTH TOKENS

- refresh_access_token(): exchanges the stored refresh token for a new access
  token and saves it on the GoogleToken row
- TokenCredentials: hands out a valid access token for one service,
  refreshing when it expires within the next 60 seconds
"""

from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from integrations.google.http import GoogleApiError, request_json
from integrations.models import GoogleToken

logger = logging.getLogger(__name__)

TOKEN_URL = "https://oauth2.googleapis.com/token"
REFRESH_WINDOW_SECONDS = 60


class GoogleAuthError(GoogleApiError):
    pass


def _client_credentials() -> tuple[str, str]:
    cfg = getattr(settings, "GOOGLE_SHEETS", {}) or {}
    client_id = (cfg.get("CLIENT_ID") or "").strip()
    client_secret = (cfg.get("CLIENT_SECRET") or "").strip()
    if not client_id or not client_secret:
        raise GoogleAuthError("GOOGLE_CLIENT_ID / GOOGLE_CLIENT_SECRET are not configured.")
    return client_id, client_secret


def refresh_access_token(token: GoogleToken) -> GoogleToken:
    if not token.refresh_token:
        raise GoogleAuthError(f"No refresh token stored for service '{token.service}'.")

    client_id, client_secret = _client_credentials()
    data = request_json(
        "POST",
        TOKEN_URL,
        form={
            "grant_type": "refresh_token",
            "refresh_token": token.refresh_token,
            "client_id": client_id,
            "client_secret": client_secret,
        },
        error_class=GoogleAuthError,
    )

    access_token = data.get("access_token")
    if not access_token:
        raise GoogleAuthError("Token endpoint returned no access_token.")

    token.access_token = access_token
    token.expires_at = timezone.now() + timedelta(seconds=int(data.get("expires_in") or 3600))
    # Google only returns a new refresh token when it rotates one
    if data.get("refresh_token"):
        token.refresh_token = data["refresh_token"]
    token.token_data = {**(token.token_data or {}), **data}
    token.save(update_fields=["access_token", "expires_at", "refresh_token", "token_data", "updated_at"])

    logger.info(
        "google token refreshed",
        extra={"service": token.service, "expires_at": token.expires_at.isoformat()},
    )
    return token


class TokenCredentials:
    def __init__(self, service: str):
        self.service = service

    def _load(self) -> GoogleToken:
        token = GoogleToken.objects.filter(service=self.service).order_by("-updated_at").first()
        if token is None:
            raise GoogleAuthError(f"No Google token stored for service '{self.service}'.")
        return token

    def access_token(self) -> str:
        token = self._load()
        if token.expires_soon(REFRESH_WINDOW_SECONDS):
            token = refresh_access_token(token)
        return token.access_token
