from django.conf import settings
from django.db import models

from accounts.validators import MAX_PRINCIPAL_LENGTH
from .constants import (
    CURRENCY_CHOICES,
    DEFAULT_CREATION_FEE,
    DEFAULT_MAX_GROUPS,
    GROUP_TYPE_CHOICES,
    MAX_LOCATION_LENGTH,
    MAX_NAME_LENGTH,
)
from .records import GroupRecord, GroupUpdateRecord, RegistryConfigRecord


# =========================
# RegistryConfig Model
# =========================
class RegistryConfig(models.Model):
    """Single row holding the id counter and the registry configuration."""

    SINGLETON_ID = 1

    next_group_id = models.PositiveBigIntegerField(default=0)
    max_groups = models.PositiveBigIntegerField(default=DEFAULT_MAX_GROUPS)
    creation_fee = models.PositiveBigIntegerField(default=DEFAULT_CREATION_FEE)
    authority_contract = models.CharField(
        max_length=MAX_PRINCIPAL_LENGTH,
        null=True,
        blank=True,
        help_text="Set once; receives every creation fee",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Registry Config"
        verbose_name_plural = "Registry Config"

    def __str__(self):
        return f"Registry (next id {self.next_group_id}, fee {self.creation_fee})"

    @classmethod
    def load(cls, for_update=False):
        registry_settings = getattr(settings, "GROUP_REGISTRY", {})
        queryset = cls.objects.select_for_update() if for_update else cls.objects
        config, _ = queryset.get_or_create(
            pk=cls.SINGLETON_ID,
            defaults={
                "max_groups": registry_settings.get("MAX_GROUPS", DEFAULT_MAX_GROUPS),
                "creation_fee": registry_settings.get("CREATION_FEE", DEFAULT_CREATION_FEE),
            },
        )
        return config

    def to_record(self):
        return RegistryConfigRecord(
            next_group_id=self.next_group_id,
            max_groups=self.max_groups,
            creation_fee=self.creation_fee,
            authority_contract=self.authority_contract,
        )


# =========================
# Group Model
# =========================
class Group(models.Model):
    GROUP_TYPE_CHOICES = GROUP_TYPE_CHOICES
    CURRENCY_CHOICES = CURRENCY_CHOICES

    # Assigned by the registry counter, never by the database
    id = models.PositiveBigIntegerField(primary_key=True)
    name = models.CharField(max_length=MAX_NAME_LENGTH, unique=True)

    max_members = models.PositiveSmallIntegerField()
    contrib_amount = models.PositiveBigIntegerField()
    cycle_duration = models.PositiveBigIntegerField()
    penalty_rate = models.PositiveSmallIntegerField(help_text="Percentage")
    voting_threshold = models.PositiveSmallIntegerField(help_text="Percentage")
    group_type = models.CharField(max_length=20, choices=GROUP_TYPE_CHOICES)
    interest_rate = models.PositiveSmallIntegerField()
    grace_period = models.PositiveSmallIntegerField()
    location = models.CharField(max_length=MAX_LOCATION_LENGTH)
    currency = models.CharField(max_length=10, choices=CURRENCY_CHOICES)
    min_contrib = models.PositiveBigIntegerField()
    max_loan = models.PositiveBigIntegerField()

    status = models.BooleanField(default=True)
    creator = models.CharField(max_length=MAX_PRINCIPAL_LENGTH, db_index=True)

    # Logical timestamps supplied by the host
    created_at = models.PositiveBigIntegerField()
    last_updated_at = models.PositiveBigIntegerField()

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.name

    @classmethod
    def from_record(cls, record):
        return cls(
            id=record.id,
            name=record.name,
            max_members=record.max_members,
            contrib_amount=record.contrib_amount,
            cycle_duration=record.cycle_duration,
            penalty_rate=record.penalty_rate,
            voting_threshold=record.voting_threshold,
            group_type=record.group_type,
            interest_rate=record.interest_rate,
            grace_period=record.grace_period,
            location=record.location,
            currency=record.currency,
            min_contrib=record.min_contrib,
            max_loan=record.max_loan,
            status=record.status,
            creator=record.creator,
            created_at=record.created_at,
            last_updated_at=record.last_updated_at,
        )

    def to_record(self):
        return GroupRecord(
            id=self.id,
            name=self.name,
            max_members=self.max_members,
            contrib_amount=self.contrib_amount,
            cycle_duration=self.cycle_duration,
            penalty_rate=self.penalty_rate,
            voting_threshold=self.voting_threshold,
            group_type=self.group_type,
            interest_rate=self.interest_rate,
            grace_period=self.grace_period,
            location=self.location,
            currency=self.currency,
            min_contrib=self.min_contrib,
            max_loan=self.max_loan,
            status=self.status,
            creator=self.creator,
            created_at=self.created_at,
            last_updated_at=self.last_updated_at,
        )


# =========================
# GroupUpdate Model
# =========================
class GroupUpdate(models.Model):
    """Last mutation applied to a group; overwritten by every update."""

    group = models.OneToOneField(
        Group,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="last_update",
    )
    name = models.CharField(max_length=MAX_NAME_LENGTH)
    max_members = models.PositiveSmallIntegerField()
    contrib_amount = models.PositiveBigIntegerField()
    timestamp = models.PositiveBigIntegerField()
    updater = models.CharField(max_length=MAX_PRINCIPAL_LENGTH)

    def __str__(self):
        return f"Update of group {self.group_id} by {self.updater}"

    def to_record(self):
        return GroupUpdateRecord(
            group_id=self.group_id,
            name=self.name,
            max_members=self.max_members,
            contrib_amount=self.contrib_amount,
            timestamp=self.timestamp,
            updater=self.updater,
        )
