from abc import ABCMeta, abstractmethod


class AuthorityOracle(metaclass=ABCMeta):
    @abstractmethod
    def is_verified(self, principal) -> bool:
        """True when ``principal`` is a verified authority."""


class PaymentSink(metaclass=ABCMeta):
    @abstractmethod
    def transfer(self, amount, payer, payee, group_id=None):
        """Move ``amount`` from ``payer`` to ``payee``; raise to abort."""


class RegistryStore(metaclass=ABCMeta):
    """
    Key-value storage behind ``GroupRegistry``.

    The store keeps the group table, the name index and the single
    last-update slot per group consistent with each other. ``atomic()``
    must serialize callers and discard every write made inside a block
    that raises.
    """

    @abstractmethod
    def atomic(self):
        ...

    @abstractmethod
    def load_config(self):
        ...

    @abstractmethod
    def save_config(self, config):
        ...

    @abstractmethod
    def get_group(self, group_id):
        ...

    @abstractmethod
    def name_owner(self, name):
        """Id indexed under ``name`` or None."""

    @abstractmethod
    def insert_group(self, record):
        ...

    @abstractmethod
    def replace_group(self, record, previous_name):
        """Write ``record`` over its id and move the index off ``previous_name``."""

    @abstractmethod
    def get_update(self, group_id):
        ...

    @abstractmethod
    def put_update(self, update):
        ...
