from django.contrib import admin
from .models import Group, GroupUpdate, RegistryConfig


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "group_type",
        "currency",
        "max_members",
        "contrib_amount",
        "creator",
        "status",
    )
    list_filter = ("group_type", "currency", "status")
    search_fields = ("name", "location", "creator")

    # Writes must go through the registry
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(GroupUpdate)
class GroupUpdateAdmin(admin.ModelAdmin):
    list_display = ("group", "name", "max_members", "contrib_amount", "updater", "timestamp")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(RegistryConfig)
class RegistryConfigAdmin(admin.ModelAdmin):
    list_display = ("authority_contract", "creation_fee", "max_groups", "next_group_id", "updated_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
