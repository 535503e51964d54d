from django.test import TestCase, override_settings

from accounts.oracles import StaticAuthorityOracle
from payments.models import FeeTransfer
from payments.sinks import LedgerPaymentSink
from . import errors
from .models import Group, GroupUpdate, RegistryConfig
from .orm_store import DjangoRegistryStore
from .services import build_registry
from .tests import group_fields


class DjangoRegistryStoreTests(TestCase):
    def setUp(self):
        self.registry = build_registry(oracle=StaticAuthorityOracle({"ST1TEST"}))
        self.registry.set_authority_contract("ST2TEST.registry")

    def test_create_persists_group_and_fee_transfer(self):
        group_id = self.registry.create_group("ST1TEST", 100, **group_fields())

        self.assertEqual(group_id, 0)
        group = Group.objects.get(pk=0)
        self.assertEqual(group.name, "Alpha")
        self.assertEqual(group.creator, "ST1TEST")
        self.assertEqual(group.created_at, 100)
        self.assertTrue(group.status)

        transfer = FeeTransfer.objects.get()
        self.assertEqual(transfer.amount, 1000)
        self.assertEqual(transfer.payer, "ST1TEST")
        self.assertEqual(transfer.payee, "ST2TEST.registry")
        self.assertEqual(transfer.group_id, 0)

        self.assertEqual(RegistryConfig.load().next_group_id, 1)

    def test_update_overwrites_single_update_row(self):
        self.registry.create_group("ST1TEST", 100, **group_fields())

        self.registry.update_group("ST1TEST", 101, 0, "Beta", 12, 150)
        self.registry.update_group("ST1TEST", 102, 0, "Gamma", 14, 175)

        self.assertEqual(GroupUpdate.objects.count(), 1)
        update = GroupUpdate.objects.get(pk=0)
        self.assertEqual(update.name, "Gamma")
        self.assertEqual(update.timestamp, 102)
        self.assertEqual(update.updater, "ST1TEST")

        group = Group.objects.get(pk=0)
        self.assertEqual(group.name, "Gamma")
        self.assertEqual(group.created_at, 100)
        self.assertEqual(group.last_updated_at, 102)
        self.assertEqual(group.location, "VillageX")

    def test_name_index_follows_renames(self):
        self.registry.create_group("ST1TEST", 1, **group_fields())
        self.registry.update_group("ST1TEST", 2, 0, "NewName", 15, 200)

        self.assertFalse(self.registry.check_group_existence("Alpha"))
        self.assertTrue(self.registry.check_group_existence("NewName"))

    def test_rejected_create_writes_nothing(self):
        with self.assertRaises(errors.InvalidMaxMembers):
            self.registry.create_group("ST1TEST", 1, **group_fields(max_members=51))

        self.assertFalse(Group.objects.exists())
        self.assertFalse(FeeTransfer.objects.exists())
        self.assertEqual(self.registry.get_group_count(), 0)

    def test_failure_after_transfer_rolls_back_transfer(self):
        class BrokenStore(DjangoRegistryStore):
            def insert_group(self, record):
                raise RuntimeError("disk full")

        registry = build_registry(
            store=BrokenStore(),
            oracle=StaticAuthorityOracle({"ST1TEST"}),
            sink=LedgerPaymentSink(),
        )

        with self.assertRaises(RuntimeError):
            registry.create_group("ST1TEST", 1, **group_fields())

        self.assertFalse(FeeTransfer.objects.exists())
        self.assertEqual(registry.get_group_count(), 0)

    def test_largest_storable_amount_round_trips(self):
        self.registry.create_group("ST1TEST", 1, **group_fields(max_loan=2**63 - 1))

        self.assertEqual(Group.objects.get(pk=0).max_loan, 2**63 - 1)

    def test_authority_contract_persists(self):
        with self.assertRaises(errors.AlreadyConfigured):
            build_registry().set_authority_contract("ST3OTHER")

        self.assertEqual(RegistryConfig.load().authority_contract, "ST2TEST.registry")


class RegistryConfigDefaultsTests(TestCase):
    @override_settings(GROUP_REGISTRY={"MAX_GROUPS": 3, "CREATION_FEE": 25})
    def test_config_row_is_seeded_from_settings(self):
        registry = build_registry()

        self.assertEqual(registry.get_max_groups(), 3)
        self.assertEqual(registry.get_creation_fee(), 25)
        self.assertIsNone(registry.get_authority_contract())

    @override_settings(GROUP_REGISTRY={"NULL_PRINCIPAL": "ST000NULL"})
    def test_null_principal_comes_from_settings(self):
        with self.assertRaises(errors.InvalidAuthority):
            build_registry().set_authority_contract("ST000NULL")
