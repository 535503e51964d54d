from rest_framework import serializers

from .models import FeeTransfer


class FeeTransferSerializer(serializers.ModelSerializer):
    class Meta:
        model = FeeTransfer
        fields = ("id", "amount", "payer", "payee", "group_id", "created_at")
        read_only_fields = fields
