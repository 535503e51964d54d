from django.contrib import admin
from .models import FeeTransfer


@admin.register(FeeTransfer)
class FeeTransferAdmin(admin.ModelAdmin):
    list_display = ("created_at", "payer", "payee", "amount", "group_id")
    search_fields = ("payer", "payee")
