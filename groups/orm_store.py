from django.db import transaction

from .interfaces import RegistryStore
from .models import Group, GroupUpdate, RegistryConfig


class DjangoRegistryStore(RegistryStore):
    """
    ORM-backed store. Every registry operation runs in ``transaction.atomic()``
    and locks the configuration row, which serializes concurrent writers on
    databases that support ``SELECT ... FOR UPDATE``. The unique ``name``
    column is the name index.
    """

    def atomic(self):
        return transaction.atomic()

    def load_config(self):
        return RegistryConfig.load(for_update=True).to_record()

    def save_config(self, config):
        RegistryConfig.objects.filter(pk=RegistryConfig.SINGLETON_ID).update(
            next_group_id=config.next_group_id,
            max_groups=config.max_groups,
            creation_fee=config.creation_fee,
            authority_contract=config.authority_contract,
        )

    def get_group(self, group_id):
        group = Group.objects.filter(pk=group_id).first()
        return group.to_record() if group else None

    def name_owner(self, name):
        return Group.objects.filter(name=name).values_list("id", flat=True).first()

    def insert_group(self, record):
        Group.from_record(record).save(force_insert=True)

    def replace_group(self, record, previous_name):
        Group.from_record(record).save(force_update=True)

    def get_update(self, group_id):
        update = GroupUpdate.objects.filter(pk=group_id).first()
        return update.to_record() if update else None

    def put_update(self, update):
        GroupUpdate.objects.update_or_create(
            group_id=update.group_id,
            defaults={
                "name": update.name,
                "max_members": update.max_members,
                "contrib_amount": update.contrib_amount,
                "timestamp": update.timestamp,
                "updater": update.updater,
            },
        )
