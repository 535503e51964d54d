from django.conf import settings
from django.utils import timezone

from accounts.oracles import UserAuthorityOracle
from payments.sinks import LedgerPaymentSink
from .orm_store import DjangoRegistryStore
from .registry import GroupRegistry


def build_registry(store=None, oracle=None, sink=None):
    """Registry wired to the database, the user table and the fee ledger."""
    registry_settings = getattr(settings, "GROUP_REGISTRY", {})
    return GroupRegistry(
        store=store or DjangoRegistryStore(),
        oracle=oracle or UserAuthorityOracle(),
        sink=sink or LedgerPaymentSink(),
        null_principal=registry_settings.get("NULL_PRINCIPAL"),
    )


def logical_time():
    """Logical timestamp for HTTP callers: UNIX seconds."""
    return int(timezone.now().timestamp())
