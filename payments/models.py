from django.db import models

from accounts.validators import MAX_PRINCIPAL_LENGTH


class FeeTransfer(models.Model):
    """One creation-fee transfer handed to the payment sink."""

    amount = models.PositiveBigIntegerField()
    payer = models.CharField(max_length=MAX_PRINCIPAL_LENGTH, db_index=True)
    payee = models.CharField(max_length=MAX_PRINCIPAL_LENGTH, db_index=True)

    # Plain id: the transfer is written before the group row exists
    group_id = models.PositiveBigIntegerField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.payer} -> {self.payee} - {self.amount}"
