from rest_framework.permissions import BasePermission


class RolePermission(BasePermission):
    """
    Base permission class for role-based access control.
    Ensures user is authenticated, active, and approved.
    """
    allowed_roles = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated or not user.is_active:
            return False

        if user.is_superuser:
            return True

        if not getattr(user, "is_approved", False):
            return False

        return getattr(user, "role", None) in self.allowed_roles


class IsAdminOnly(RolePermission):
    allowed_roles = {"ADMIN"}


class IsApprovedUser(BasePermission):
    message = "You must be an approved user to perform this action."

    def has_permission(self, request, view):
        user = request.user
        return (
            user.is_authenticated
            and user.is_active
            and (user.is_superuser or getattr(user, "is_approved", False))
        )


class HasPrincipal(BasePermission):
    """The registry records callers by principal, so one must be on file."""

    message = "Register a principal on your account before calling the registry."

    def has_permission(self, request, view):
        return bool(getattr(request.user, "principal", None))
