from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone
from .managers import UserManager
from .validators import MAX_PRINCIPAL_LENGTH, validate_principal


class User(AbstractUser):
    username = None

    email = models.EmailField(unique=True)
    principal = models.CharField(
        max_length=MAX_PRINCIPAL_LENGTH,
        unique=True,
        blank=True,
        null=True,
        validators=[validate_principal],
        help_text="Identity the registry records as creator, updater and payer",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    ROLE_CHOICES = (
        ("ADMIN", "Admin"),
        ("AUTHORITY", "Authority"),
        ("MEMBER", "Member"),
    )

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="MEMBER")
    is_approved = models.BooleanField(default=False)
    is_authority = models.BooleanField(
        default=False,
        help_text="Verified authorities may create groups",
    )
    authority_verified_at = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    def approve_member(self, actor=None):
        if self.is_approved:
            return
        self.is_approved = True
        self.save(update_fields=["is_approved"])
        AuditLog.objects.create(actor=actor, target_user=self, action="APPROVAL")

    def grant_authority(self, actor=None, notes=""):
        if self.is_authority:
            return
        self.is_authority = True
        self.role = "AUTHORITY"
        self.authority_verified_at = timezone.now()
        self.save(update_fields=["is_authority", "role", "authority_verified_at"])
        AuditLog.objects.create(
            actor=actor,
            target_user=self,
            action="AUTHORITY_GRANTED",
            notes=notes,
        )

    def revoke_authority(self, actor=None, notes=""):
        if not self.is_authority:
            return
        self.is_authority = False
        if self.role == "AUTHORITY":
            self.role = "MEMBER"
        self.authority_verified_at = None
        self.save(update_fields=["is_authority", "role", "authority_verified_at"])
        AuditLog.objects.create(
            actor=actor,
            target_user=self,
            action="AUTHORITY_REVOKED",
            notes=notes,
        )

    def __str__(self):
        return self.email


class AuditLog(models.Model):
    ACTION_CHOICES = (
        ("APPROVAL", "Approval"),
        ("AUTHORITY_GRANTED", "Authority Granted"),
        ("AUTHORITY_REVOKED", "Authority Revoked"),
    )

    actor = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="actions_performed",
    )
    target_user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="audit_entries",
    )
    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    timestamp = models.DateTimeField(auto_now_add=True)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ["-timestamp"]
        verbose_name = "Audit Log"
        verbose_name_plural = "Audit Logs"

    def __str__(self):
        actor_name = self.actor.email if self.actor else "SYSTEM"
        return f"{actor_name} -> {self.action} -> {self.target_user.email}"
