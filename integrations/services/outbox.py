"""
======================================================
PATH: integrations/services/outbox.py
======================================================
OUTBOX PUBLISH + WORKER

publish() is called by services inside their own transaction, so a job exists
if and only if the business write committed.

OutboxWorker.run_once() is one polling pass:
- claims due jobs (pending and due, or running with an expired lease)
- runs the topic handler with the injected context
- success -> succeeded
- failure -> rescheduled with backoff (5s, 10s, 30s by default) until
  max_attempts, then failed + one permanent-failure log line carrying the
  full job context

Delivery is at-least-once. Jobs are never cancelled.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Callable, Mapping

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from integrations.models import OutboxJob

logger = logging.getLogger("outbox")

Handler = Callable[[OutboxJob, Any], None]


def publish(topic: str, payload: dict | None = None) -> OutboxJob:
    job = OutboxJob.objects.create(
        topic=topic,
        payload=payload or {},
        max_attempts=getattr(settings, "SYNC_JOB_MAX_ATTEMPTS", 3),
        next_attempt_at=timezone.now(),
    )
    logger.info("outbox job published", extra={"job_id": job.pk, "topic": topic})
    return job


class OutboxWorker:
    def __init__(
        self,
        handlers: Mapping[str, Handler],
        context: Any = None,
        *,
        backoff: list[int] | None = None,
        lease_seconds: int | None = None,
        batch_size: int = 20,
    ):
        self.handlers = dict(handlers)
        self.context = context
        self.backoff = list(backoff or getattr(settings, "SYNC_JOB_BACKOFF", [5, 10, 30]))
        self.lease_seconds = int(lease_seconds or getattr(settings, "SYNC_JOB_LEASE_SECONDS", 300))
        self.batch_size = batch_size

    # -------------------------------------------------
    # CLAIM
    # -------------------------------------------------
    def claim(self, now) -> list[OutboxJob]:
        lease_cutoff = now - timedelta(seconds=self.lease_seconds)
        due = Q(status=OutboxJob.STATUS_PENDING, next_attempt_at__lte=now) | Q(
            status=OutboxJob.STATUS_RUNNING, locked_at__lte=lease_cutoff
        )

        with transaction.atomic():
            jobs = list(
                OutboxJob.objects.select_for_update(skip_locked=True)
                .filter(due)
                .order_by("next_attempt_at", "id")[: self.batch_size]
            )
            for job in jobs:
                if job.status == OutboxJob.STATUS_RUNNING:
                    logger.warning(
                        "outbox lease expired; reclaiming job",
                        extra={"job_id": job.pk, "topic": job.topic, "attempts": job.attempts},
                    )
                job.status = OutboxJob.STATUS_RUNNING
                job.locked_at = now
                job.attempts += 1
                job.save(update_fields=["status", "locked_at", "attempts"])
        return jobs

    # -------------------------------------------------
    # RUN
    # -------------------------------------------------
    def run_once(self, now=None) -> int:
        now = now or timezone.now()
        jobs = self.claim(now)
        for job in jobs:
            self.execute(job, now)
        return len(jobs)

    def execute(self, job: OutboxJob, now) -> None:
        if job.attempts > job.max_attempts:
            self._give_up(job, "lease expired after the final attempt", now)
            return

        handler = self.handlers.get(job.topic)
        if handler is None:
            self._give_up(job, f"no handler registered for topic '{job.topic}'", now)
            return

        try:
            handler(job, self.context)
        except Exception as exc:
            logger.warning(
                "outbox job attempt failed",
                extra={
                    "job_id": job.pk,
                    "topic": job.topic,
                    "attempt": job.attempts,
                    "error": str(exc),
                },
            )
            self._retry_or_fail(job, exc, now)
            return

        job.status = OutboxJob.STATUS_SUCCEEDED
        job.completed_at = now
        job.locked_at = None
        job.last_error = ""
        job.save(update_fields=["status", "completed_at", "locked_at", "last_error"])
        logger.info(
            "outbox job succeeded",
            extra={"job_id": job.pk, "topic": job.topic, "attempts": job.attempts},
        )

    def backoff_for(self, attempts: int) -> int:
        if not self.backoff:
            return 0
        return self.backoff[min(attempts, len(self.backoff)) - 1]

    def _retry_or_fail(self, job: OutboxJob, exc: Exception, now) -> None:
        if job.attempts >= job.max_attempts:
            self._give_up(job, str(exc), now)
            return

        job.status = OutboxJob.STATUS_PENDING
        job.locked_at = None
        job.last_error = str(exc)
        job.next_attempt_at = now + timedelta(seconds=self.backoff_for(job.attempts))
        job.save(update_fields=["status", "locked_at", "last_error", "next_attempt_at"])

    def _give_up(self, job: OutboxJob, error: str, now) -> None:
        job.status = OutboxJob.STATUS_FAILED
        job.locked_at = None
        job.last_error = error
        job.completed_at = now
        job.save(update_fields=["status", "locked_at", "last_error", "completed_at"])
        logger.error(
            "outbox job failed permanently",
            extra={
                "job_id": job.pk,
                "topic": job.topic,
                "payload": job.payload,
                "attempts": job.attempts,
                "error": error,
                "max_attempts_reached": True,
            },
        )
