"""
======================================================
PATH: expenses/models/expense_type.py
======================================================
EXPENSE TYPE TREE

Categories nest through `parent` (e.g. Utilities > Power).

Rules:
- a type can't be its own parent, nor hang under one of its descendants
- archive is blocked while active children exist
- purge is blocked while any child exists, archived ones included
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models

from core.lifecycle import LifecycleError, LifecycleModel


class ExpenseType(LifecycleModel):
    expense_type = models.CharField(max_length=255)
    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
    )

    class Meta:
        ordering = ["expense_type"]
        verbose_name = "expense type"

    def __str__(self):
        return self.expense_type

    def ancestor_ids(self) -> list[int]:
        seen = []
        current_id = self.parent_id
        while current_id is not None and current_id not in seen:
            seen.append(current_id)
            current_id = (
                ExpenseType.all_objects.filter(pk=current_id)
                .values_list("parent_id", flat=True)
                .first()
            )
        return seen

    def clean(self):
        self.expense_type = (self.expense_type or "").strip()
        if not self.expense_type:
            raise ValidationError({"expense_type": ["Expense type is required."]})

        if self.pk is None or self.parent_id is None:
            return
        if self.parent_id == self.pk:
            raise ValidationError({"parent": ["An expense type cannot be its own parent."]})
        if self.pk in self.ancestor_ids():
            raise ValidationError(
                {"parent": ["An expense type cannot be nested under one of its own children."]}
            )

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def assert_can_archive(self):
        if ExpenseType.objects.filter(parent=self).exists():
            raise LifecycleError(
                {"expense_type": ["Please delete or reassign child expense types first."]}
            )

    def assert_can_purge(self):
        if ExpenseType.all_objects.filter(parent=self).exists():
            raise LifecycleError(
                {"expense_type": ["Please permanently delete child expense types first."]}
            )
