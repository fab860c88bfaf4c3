"""
======================================================
PATH: integrations/models/outbox_job.py
======================================================
OUTBOX JOB

A unit of background work written in the same DB transaction as the business
change that caused it, then picked up by the sync worker.

    pending --claim--> running --ok--> succeeded
                          |
                          +--error--> pending (backoff)  or  failed (last attempt)

A running job whose lease expired is claimable again (worker crash recovery),
so handlers must be safe to run more than once.
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone


class OutboxJob(models.Model):
    STATUS_PENDING = "pending"
    STATUS_RUNNING = "running"
    STATUS_SUCCEEDED = "succeeded"
    STATUS_FAILED = "failed"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_RUNNING, "Running"),
        (STATUS_SUCCEEDED, "Succeeded"),
        (STATUS_FAILED, "Failed"),
    ]

    topic = models.CharField(max_length=100, db_index=True)
    payload = models.JSONField(default=dict, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    attempts = models.PositiveIntegerField(default=0)
    max_attempts = models.PositiveIntegerField(default=3)

    next_attempt_at = models.DateTimeField(default=timezone.now)
    locked_at = models.DateTimeField(null=True, blank=True)
    last_error = models.TextField(blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["next_attempt_at", "id"]
        indexes = [
            models.Index(fields=["status", "next_attempt_at"], name="outbox_status_next_idx"),
        ]

    def __str__(self):
        return f"{self.topic}#{self.pk} ({self.status})"
