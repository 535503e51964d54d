from django.contrib.auth import get_user_model

from groups.interfaces import AuthorityOracle


class UserAuthorityOracle(AuthorityOracle):
    """A principal is verified when it belongs to an active, approved authority user."""

    def is_verified(self, principal):
        if not principal:
            return False
        return get_user_model().objects.filter(
            principal=principal,
            is_active=True,
            is_approved=True,
            is_authority=True,
        ).exists()


class StaticAuthorityOracle(AuthorityOracle):
    def __init__(self, principals=()):
        self.principals = set(principals)

    def is_verified(self, principal):
        return principal in self.principals
