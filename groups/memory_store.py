import threading
from contextlib import contextmanager
from dataclasses import replace

from . import constants
from .interfaces import RegistryStore
from .records import RegistryConfigRecord


class InMemoryRegistryStore(RegistryStore):
    """
    Dict-backed store. One re-entrant lock serializes operations. Writes made
    inside ``atomic()`` push an undo step, and the steps pushed since a block
    was entered are replayed in reverse if that block raises.
    """

    def __init__(
        self,
        max_groups=constants.DEFAULT_MAX_GROUPS,
        creation_fee=constants.DEFAULT_CREATION_FEE,
    ):
        self._lock = threading.RLock()
        self._depth = 0
        self._undo = []
        self.config = RegistryConfigRecord(
            next_group_id=0,
            max_groups=max_groups,
            creation_fee=creation_fee,
        )
        self.groups = {}
        self.group_updates = {}
        self.groups_by_name = {}

    @contextmanager
    def atomic(self):
        with self._lock:
            mark = len(self._undo)
            self._depth += 1
            try:
                yield self
            except Exception:
                while len(self._undo) > mark:
                    self._undo.pop()()
                raise
            finally:
                self._depth -= 1
                if not self._depth:
                    self._undo.clear()

    def _remember(self, table, key):
        if not self._depth:
            return
        if key in table:
            previous = table[key]
            self._undo.append(lambda: table.__setitem__(key, previous))
        else:
            self._undo.append(lambda: table.pop(key, None))

    def _put(self, table, key, value):
        self._remember(table, key)
        table[key] = value

    def _drop(self, table, key):
        self._remember(table, key)
        table.pop(key, None)

    def load_config(self):
        return replace(self.config)

    def save_config(self, config):
        if self._depth:
            previous = self.config
            self._undo.append(lambda: setattr(self, "config", previous))
        self.config = replace(config)

    def get_group(self, group_id):
        return self.groups.get(group_id)

    def name_owner(self, name):
        return self.groups_by_name.get(name)

    def insert_group(self, record):
        self._put(self.groups, record.id, record)
        self._put(self.groups_by_name, record.name, record.id)

    def replace_group(self, record, previous_name):
        self._put(self.groups, record.id, record)
        self._drop(self.groups_by_name, previous_name)
        self._put(self.groups_by_name, record.name, record.id)

    def get_update(self, group_id):
        return self.group_updates.get(group_id)

    def put_update(self, update):
        self._put(self.group_updates, update.group_id, update)
