# integrations/models/__init__.py

from integrations.models.google_token import GoogleToken
from integrations.models.outbox_job import OutboxJob

__all__ = ["GoogleToken", "OutboxJob"]
