# expenses/api/serializers.py

from rest_framework import serializers

from expenses.models import ExpenseType


class ExpenseTypeRefSerializer(serializers.ModelSerializer):
    class Meta:
        model = ExpenseType
        fields = ["id", "expense_type"]


class ExpenseTypeSerializer(serializers.ModelSerializer):
    parent_id = serializers.PrimaryKeyRelatedField(
        source="parent",
        queryset=ExpenseType.objects.all(),
        required=False,
        allow_null=True,
    )
    parent = ExpenseTypeRefSerializer(read_only=True)
    children = serializers.SerializerMethodField()

    class Meta:
        model = ExpenseType
        fields = [
            "id",
            "expense_type",
            "parent_id",
            "parent",
            "children",
            "status",
            "archived_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ("id", "status", "archived_at", "created_at", "updated_at")

    def get_children(self, obj):
        return ExpenseTypeRefSerializer(obj.children.all(), many=True).data
