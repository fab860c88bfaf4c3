from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from integrations.models import OutboxJob
from integrations.services.outbox import OutboxWorker, publish


class Flaky:
    def __init__(self, failures):
        self.failures = failures
        self.calls = 0

    def __call__(self, job, context):
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError(f"boom {self.calls}")


# =========================================================
# WORKER
# =========================================================
class OutboxWorkerTests(TestCase):
    """
    GUARANTEES:
    - due jobs run once per pass and end succeeded
    - failures back off 5s, 10s, then fail permanently after 3 attempts
    - an expired lease makes a running job claimable again
    """

    def setUp(self):
        self.now = timezone.now() + timedelta(seconds=1)

    def test_success(self):
        seen = []
        job = publish("demo.topic", {"x": 1})
        worker = OutboxWorker({"demo.topic": lambda j, ctx: seen.append((j.payload, ctx))}, context="ctx")

        self.assertEqual(worker.run_once(self.now), 1)

        job.refresh_from_db()
        self.assertEqual(job.status, OutboxJob.STATUS_SUCCEEDED)
        self.assertEqual(job.attempts, 1)
        self.assertEqual(seen, [({"x": 1}, "ctx")])
        self.assertEqual(worker.run_once(self.now), 0)

    def test_backoff_then_permanent_failure(self):
        handler = Flaky(failures=10)
        job = publish("demo.topic")
        worker = OutboxWorker({"demo.topic": handler}, backoff=[5, 10, 30])

        worker.run_once(self.now)
        job.refresh_from_db()
        self.assertEqual(job.status, OutboxJob.STATUS_PENDING)
        self.assertEqual(job.next_attempt_at, self.now + timedelta(seconds=5))
        self.assertEqual(job.last_error, "boom 1")

        # not due yet
        self.assertEqual(worker.run_once(self.now + timedelta(seconds=4)), 0)

        second = self.now + timedelta(seconds=5)
        worker.run_once(second)
        job.refresh_from_db()
        self.assertEqual(job.next_attempt_at, second + timedelta(seconds=10))

        with self.assertLogs("outbox", level="ERROR") as logs:
            worker.run_once(second + timedelta(seconds=10))

        job.refresh_from_db()
        self.assertEqual(job.status, OutboxJob.STATUS_FAILED)
        self.assertEqual(job.attempts, 3)
        self.assertEqual(handler.calls, 3)
        self.assertIn("failed permanently", logs.output[0])

    def test_recovers_after_failures(self):
        handler = Flaky(failures=1)
        job = publish("demo.topic")
        worker = OutboxWorker({"demo.topic": handler}, backoff=[5, 10, 30])

        worker.run_once(self.now)
        worker.run_once(self.now + timedelta(seconds=5))

        job.refresh_from_db()
        self.assertEqual(job.status, OutboxJob.STATUS_SUCCEEDED)
        self.assertEqual(job.attempts, 2)

    def test_expired_lease_is_reclaimed(self):
        job = publish("demo.topic")
        OutboxJob.objects.filter(pk=job.pk).update(
            status=OutboxJob.STATUS_RUNNING, attempts=1, locked_at=self.now - timedelta(minutes=10)
        )
        calls = []
        worker = OutboxWorker({"demo.topic": lambda j, ctx: calls.append(j.pk)}, lease_seconds=300)

        self.assertEqual(worker.run_once(self.now), 1)
        job.refresh_from_db()
        self.assertEqual(job.status, OutboxJob.STATUS_SUCCEEDED)
        self.assertEqual(job.attempts, 2)

    def test_live_lease_is_left_alone(self):
        job = publish("demo.topic")
        OutboxJob.objects.filter(pk=job.pk).update(
            status=OutboxJob.STATUS_RUNNING, attempts=1, locked_at=self.now - timedelta(seconds=30)
        )
        worker = OutboxWorker({"demo.topic": lambda j, ctx: None}, lease_seconds=300)
        self.assertEqual(worker.run_once(self.now), 0)

    def test_unknown_topic_fails_without_retry(self):
        job = publish("nobody.listens")
        with self.assertLogs("outbox", level="ERROR"):
            OutboxWorker({}).run_once(self.now)

        job.refresh_from_db()
        self.assertEqual(job.status, OutboxJob.STATUS_FAILED)
