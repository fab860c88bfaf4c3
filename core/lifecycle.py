# core/lifecycle.py

"""
======================================================
PATH: core/lifecycle.py
======================================================
RECORD LIFECYCLE

Every business record moves through an explicit status instead of a hidden
deletion timestamp:

    active  --archive()-->  archived  --restore()-->  active
    active | archived  --purge()-->  purged (row physically removed)

Rules:
- `objects` only sees active rows (default listings)
- `all_objects` sees active + archived rows ("with trashed")
- Subclasses veto transitions through assert_can_archive() / assert_can_purge()
- Plain delete() is refused; callers must pick archive() or purge()
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.utils import timezone


class Status(models.TextChoices):
    ACTIVE = "active", "Active"
    ARCHIVED = "archived", "Archived"
    PURGED = "purged", "Purged"


TRANSITIONS = {
    (Status.ACTIVE, Status.ARCHIVED),
    (Status.ARCHIVED, Status.ACTIVE),
    (Status.ACTIVE, Status.PURGED),
    (Status.ARCHIVED, Status.PURGED),
}


class LifecycleError(ValidationError):
    """Raised when a lifecycle transition is not allowed."""

    status_code = 422


class NotArchivedError(LifecycleError):
    status_code = 400


class ActiveManager(models.Manager):
    def get_queryset(self):
        return super().get_queryset().filter(status=Status.ACTIVE)


def can_transition(current: str, target: str) -> bool:
    return (current, target) in TRANSITIONS


class LifecycleModel(models.Model):
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )
    archived_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActiveManager()
    all_objects = models.Manager()

    class Meta:
        abstract = True

    @property
    def label(self) -> str:
        return str(self._meta.verbose_name).capitalize()

    @property
    def is_archived(self) -> bool:
        return self.status == Status.ARCHIVED

    def _assert_transition(self, target: str) -> None:
        if can_transition(self.status, target):
            return
        if target == Status.ACTIVE:
            raise NotArchivedError(f"{self.label} is not deleted")
        raise LifecycleError(f"{self.label} cannot move from {self.status} to {target}.")

    # Hooks -----------------------------------------------------------

    def assert_can_archive(self) -> None:
        """Override to block soft deletion (e.g. active children exist)."""

    def assert_can_purge(self) -> None:
        """Override to block permanent deletion (e.g. dependents exist)."""

    # Transitions -----------------------------------------------------

    def archive(self):
        self._assert_transition(Status.ARCHIVED)
        self.assert_can_archive()

        self.status = Status.ARCHIVED
        self.archived_at = timezone.now()
        self.save(update_fields=["status", "archived_at", "updated_at"])
        return self

    def restore(self):
        self._assert_transition(Status.ACTIVE)

        self.status = Status.ACTIVE
        self.archived_at = None
        self.save(update_fields=["status", "archived_at", "updated_at"])
        return self

    @transaction.atomic
    def purge(self):
        self._assert_transition(Status.PURGED)
        self.assert_can_purge()

        super().delete()
        self.status = Status.PURGED
        return self

    def delete(self, *args, **kwargs):
        raise LifecycleError(
            f"{self.label} records are not deleted directly; use archive() or purge()."
        )
