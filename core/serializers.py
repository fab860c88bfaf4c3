# core/serializers.py

from __future__ import annotations


class ChangedFieldsUpdateMixin:
    """
    ModelSerializer.update that saves only the columns present in
    validated_data (plus updated_at).

    Ledger-owned columns (account balance, loan principal) are mutated under
    row locks by the services; a plain `instance.save()` from the API would
    write back the stale value loaded with the request.
    """

    def update(self, instance, validated_data):
        for attr, value in validated_data.items():
            setattr(instance, attr, value)

        update_fields = list(validated_data)
        if hasattr(instance, "updated_at"):
            update_fields.append("updated_at")

        instance.save(update_fields=update_fields)
        return instance
