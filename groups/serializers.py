from rest_framework import serializers

from accounts.validators import MAX_PRINCIPAL_LENGTH


# Field bounds are enforced by the registry, in its own order, so request
# serializers only coerce types and cap strings at their column size.
class GroupCreateSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    max_members = serializers.IntegerField()
    contrib_amount = serializers.IntegerField()
    cycle_duration = serializers.IntegerField()
    penalty_rate = serializers.IntegerField()
    voting_threshold = serializers.IntegerField()
    group_type = serializers.CharField(allow_blank=True)
    interest_rate = serializers.IntegerField()
    grace_period = serializers.IntegerField()
    location = serializers.CharField(allow_blank=True, trim_whitespace=False)
    currency = serializers.CharField(allow_blank=True)
    min_contrib = serializers.IntegerField()
    max_loan = serializers.IntegerField()


class GroupUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    max_members = serializers.IntegerField()
    contrib_amount = serializers.IntegerField()


class GroupSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    max_members = serializers.IntegerField()
    contrib_amount = serializers.IntegerField()
    cycle_duration = serializers.IntegerField()
    penalty_rate = serializers.IntegerField()
    voting_threshold = serializers.IntegerField()
    group_type = serializers.CharField()
    interest_rate = serializers.IntegerField()
    grace_period = serializers.IntegerField()
    location = serializers.CharField()
    currency = serializers.CharField()
    min_contrib = serializers.IntegerField()
    max_loan = serializers.IntegerField()
    status = serializers.BooleanField()
    creator = serializers.CharField()
    created_at = serializers.IntegerField()
    last_updated_at = serializers.IntegerField()


class GroupUpdateRecordSerializer(serializers.Serializer):
    group_id = serializers.IntegerField()
    name = serializers.CharField()
    max_members = serializers.IntegerField()
    contrib_amount = serializers.IntegerField()
    timestamp = serializers.IntegerField()
    updater = serializers.CharField()


class AuthorityContractSerializer(serializers.Serializer):
    principal = serializers.CharField(allow_blank=True, max_length=MAX_PRINCIPAL_LENGTH)


class CreationFeeSerializer(serializers.Serializer):
    fee = serializers.IntegerField()


class MaxGroupsSerializer(serializers.Serializer):
    max_groups = serializers.IntegerField()
