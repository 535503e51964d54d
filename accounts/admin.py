from django.contrib import admin
from .models import AuditLog, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = (
        "email",
        "principal",
        "role",
        "is_approved",
        "is_authority",
    )

    list_filter = ("role", "is_approved", "is_authority")
    search_fields = ("email", "principal")


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "actor", "action", "target_user")
    list_filter = ("action",)
