from django.test import SimpleTestCase

from accounts.oracles import StaticAuthorityOracle
from payments.sinks import RecordingPaymentSink, TransferRecord
from . import constants, errors
from .memory_store import InMemoryRegistryStore
from .registry import GroupRegistry

NULL_PRINCIPAL = "SP000000000000000000002Q6VF78"


def group_fields(**overrides):
    fields = {
        "name": "Alpha",
        "max_members": 10,
        "contrib_amount": 100,
        "cycle_duration": 30,
        "penalty_rate": 5,
        "voting_threshold": 50,
        "group_type": "rural",
        "interest_rate": 10,
        "grace_period": 7,
        "location": "VillageX",
        "currency": "STX",
        "min_contrib": 50,
        "max_loan": 1000,
    }
    fields.update(overrides)
    return fields


def urban_fields(**overrides):
    return group_fields(
        **{
            "name": "Group2",
            "max_members": 15,
            "contrib_amount": 200,
            "cycle_duration": 60,
            "penalty_rate": 10,
            "voting_threshold": 60,
            "group_type": "urban",
            "interest_rate": 15,
            "grace_period": 14,
            "location": "CityY",
            "currency": "USD",
            "min_contrib": 100,
            "max_loan": 2000,
            **overrides,
        }
    )


class RegistryTestCase(SimpleTestCase):
    caller = "ST1TEST"

    def setUp(self):
        self.store = InMemoryRegistryStore()
        self.oracle = StaticAuthorityOracle({"ST1TEST"})
        self.sink = RecordingPaymentSink()
        self.registry = GroupRegistry(self.store, self.oracle, self.sink)

    def create(self, caller=None, now=0, **overrides):
        return self.registry.create_group(caller or self.caller, now, **group_fields(**overrides))


# -------------------------
# Creation
# -------------------------
class CreateGroupTests(RegistryTestCase):
    def setUp(self):
        super().setUp()
        self.registry.set_authority_contract("ST2TEST")

    def test_creates_group_successfully(self):
        group_id = self.create(now=12)

        self.assertEqual(group_id, 0)
        group = self.registry.get_group(0)
        self.assertEqual(group.name, "Alpha")
        self.assertEqual(group.max_members, 10)
        self.assertEqual(group.contrib_amount, 100)
        self.assertEqual(group.cycle_duration, 30)
        self.assertEqual(group.penalty_rate, 5)
        self.assertEqual(group.voting_threshold, 50)
        self.assertEqual(group.group_type, "rural")
        self.assertEqual(group.interest_rate, 10)
        self.assertEqual(group.grace_period, 7)
        self.assertEqual(group.location, "VillageX")
        self.assertEqual(group.currency, "STX")
        self.assertEqual(group.min_contrib, 50)
        self.assertEqual(group.max_loan, 1000)
        self.assertTrue(group.status)
        self.assertEqual(group.creator, "ST1TEST")
        self.assertEqual(group.created_at, 12)
        self.assertEqual(group.last_updated_at, 12)
        self.assertEqual(
            self.sink.transfers,
            [TransferRecord(amount=1000, payer="ST1TEST", payee="ST2TEST", group_id=0)],
        )

    def test_ids_follow_call_order(self):
        ids = [self.create(name=f"Group{i}") for i in range(3)]

        self.assertEqual(ids, [0, 1, 2])
        self.assertEqual(self.registry.get_group_count(), 3)

    def test_rejects_duplicate_group_names(self):
        self.create()

        with self.assertRaises(errors.GroupAlreadyExists) as ctx:
            self.registry.create_group(self.caller, 0, **urban_fields(name="Alpha"))

        self.assertEqual(ctx.exception.code, 106)
        self.assertEqual(self.registry.get_group_count(), 1)

    def test_rejects_non_authorized_caller(self):
        self.oracle.principals.clear()

        with self.assertRaises(errors.NotAuthorized) as ctx:
            self.create(caller="ST2FAKE", name="Beta")

        self.assertEqual(ctx.exception.code, 100)
        self.assertEqual(self.sink.transfers, [])

    def test_rejects_invalid_max_members_without_consuming_an_id(self):
        with self.assertRaises(errors.InvalidMaxMembers) as ctx:
            self.create(name="InvalidMembers", max_members=51)

        self.assertEqual(ctx.exception.code, 101)
        self.assertEqual(self.registry.get_group_count(), 0)
        self.assertEqual(self.create(), 0)

    def test_rejects_empty_name(self):
        with self.assertRaises(errors.InvalidName) as ctx:
            self.create(name="")

        self.assertEqual(ctx.exception.code, 113)

    def test_each_malformed_field_maps_to_its_error(self):
        cases = [
            ({"name": "x" * 101}, errors.InvalidName),
            ({"max_members": 0}, errors.InvalidMaxMembers),
            ({"contrib_amount": 0}, errors.InvalidContribAmount),
            ({"cycle_duration": 0}, errors.InvalidCycleDuration),
            ({"penalty_rate": -1}, errors.InvalidPenaltyRate),
            ({"penalty_rate": 101}, errors.InvalidPenaltyRate),
            ({"voting_threshold": 0}, errors.InvalidVotingThreshold),
            ({"voting_threshold": 101}, errors.InvalidVotingThreshold),
            ({"group_type": "invalid"}, errors.InvalidGroupType),
            ({"interest_rate": -1}, errors.InvalidInterestRate),
            ({"interest_rate": 21}, errors.InvalidInterestRate),
            ({"grace_period": -1}, errors.InvalidGracePeriod),
            ({"grace_period": 31}, errors.InvalidGracePeriod),
            ({"location": ""}, errors.InvalidLocation),
            ({"location": "y" * 101}, errors.InvalidLocation),
            ({"currency": "EUR"}, errors.InvalidCurrency),
            ({"min_contrib": 0}, errors.InvalidMinContrib),
            ({"max_loan": 0}, errors.InvalidMaxLoan),
        ]
        for overrides, error in cases:
            with self.subTest(overrides=overrides):
                with self.assertRaises(error):
                    self.create(**overrides)

        self.assertEqual(self.registry.get_group_count(), 0)

    def test_rejects_amounts_beyond_storage_range(self):
        too_large = constants.MAX_STORED_INT + 1
        cases = [
            ("contrib_amount", errors.InvalidContribAmount),
            ("cycle_duration", errors.InvalidCycleDuration),
            ("min_contrib", errors.InvalidMinContrib),
            ("max_loan", errors.InvalidMaxLoan),
        ]
        for field, error in cases:
            with self.subTest(field=field):
                with self.assertRaises(error):
                    self.create(**{field: too_large})

        self.assertEqual(self.registry.get_group_count(), 0)

        group_id = self.create(max_loan=constants.MAX_STORED_INT)
        self.assertEqual(self.registry.get_group(group_id).max_loan, constants.MAX_STORED_INT)

    def test_accepts_boundary_values(self):
        group_id = self.create(
            name="n" * 100,
            max_members=50,
            penalty_rate=0,
            voting_threshold=100,
            group_type="community",
            interest_rate=20,
            grace_period=30,
            location="l" * 100,
            currency="BTC",
        )

        self.assertEqual(group_id, 0)

    def test_booleans_are_not_integers(self):
        with self.assertRaises(errors.InvalidMaxMembers):
            self.create(max_members=True)

    def test_first_failing_check_wins(self):
        with self.assertRaises(errors.InvalidMaxMembers):
            self.create(max_members=0, contrib_amount=0, currency="EUR")

        self.create()
        self.oracle.principals.clear()
        with self.assertRaises(errors.NotAuthorized):
            self.create(caller="ST2FAKE")

    def test_rejects_when_max_groups_exceeded(self):
        self.registry.set_max_groups(1)
        self.create(name="Group1")

        with self.assertRaises(errors.MaxGroupsExceeded) as ctx:
            self.registry.create_group(self.caller, 0, **urban_fields(name=""))

        self.assertEqual(ctx.exception.code, 114)

    def test_failed_transfer_leaves_no_state(self):
        class FailingSink(RecordingPaymentSink):
            def transfer(self, amount, payer, payee, group_id=None):
                raise RuntimeError("payment backend unavailable")

        self.registry.sink = FailingSink()

        with self.assertRaises(RuntimeError):
            self.create()

        self.assertEqual(self.registry.get_group_count(), 0)
        self.assertFalse(self.registry.check_group_existence("Alpha"))
        with self.assertRaises(errors.GroupNotFound):
            self.registry.get_group(0)


class AuthorityGateTests(RegistryTestCase):
    def test_rejects_creation_without_authority_contract(self):
        with self.assertRaises(errors.AuthorityNotVerified) as ctx:
            self.create(name="NoAuth")

        self.assertEqual(ctx.exception.code, 109)
        self.assertEqual(self.sink.transfers, [])
        self.assertEqual(self.registry.get_group_count(), 0)

    def test_unverified_caller_is_rejected_before_missing_authority(self):
        with self.assertRaises(errors.NotAuthorized):
            self.create(caller="ST2FAKE")

        self.assertEqual(self.sink.transfers, [])

    def test_field_errors_come_before_missing_authority(self):
        with self.assertRaises(errors.InvalidGroupType):
            self.create(group_type="invalid")


# -------------------------
# Update
# -------------------------
class UpdateGroupTests(RegistryTestCase):
    def setUp(self):
        super().setUp()
        self.registry.set_authority_contract("ST2TEST")
        self.create(name="OldGroup", now=5)

    def test_updates_group_successfully(self):
        result = self.registry.update_group(self.caller, 9, 0, "NewGroup", 15, 200)

        self.assertTrue(result)
        group = self.registry.get_group(0)
        self.assertEqual(group.name, "NewGroup")
        self.assertEqual(group.max_members, 15)
        self.assertEqual(group.contrib_amount, 200)
        self.assertEqual(group.created_at, 5)
        self.assertEqual(group.last_updated_at, 9)
        self.assertEqual(group.location, "VillageX")

        update = self.registry.get_group_update(0)
        self.assertEqual(update.name, "NewGroup")
        self.assertEqual(update.max_members, 15)
        self.assertEqual(update.contrib_amount, 200)
        self.assertEqual(update.timestamp, 9)
        self.assertEqual(update.updater, "ST1TEST")

    def test_rename_moves_name_index(self):
        self.registry.update_group(self.caller, 1, 0, "NewName", 15, 200)

        self.assertFalse(self.registry.check_group_existence("OldGroup"))
        self.assertTrue(self.registry.check_group_existence("NewName"))

    def test_last_update_is_overwritten(self):
        self.registry.update_group(self.caller, 1, 0, "First", 11, 110)
        self.registry.update_group(self.caller, 2, 0, "Second", 12, 120)

        update = self.registry.get_group_update(0)
        self.assertEqual((update.name, update.timestamp), ("Second", 2))

    def test_group_without_updates_has_no_last_update(self):
        self.assertIsNone(self.registry.get_group_update(0))

    def test_rejects_update_for_non_existent_group(self):
        with self.assertRaises(errors.GroupNotFound) as ctx:
            self.registry.update_group(self.caller, 1, 99, "NewGroup", 15, 200)

        self.assertEqual(ctx.exception.code, 107)

    def test_rejects_update_by_non_creator_and_leaves_state_intact(self):
        before = self.registry.get_group(0)

        with self.assertRaises(errors.NotAuthorized):
            self.registry.update_group("ST3FAKE", 1, 0, "NewGroup", 15, 200)

        self.assertEqual(self.registry.get_group(0), before)
        self.assertTrue(self.registry.check_group_existence("OldGroup"))
        self.assertFalse(self.registry.check_group_existence("NewGroup"))
        self.assertIsNone(self.registry.get_group_update(0))

    def test_rejects_invalid_update_params(self):
        for args in [("", 15, 200), ("z" * 101, 15, 200), ("Ok", 0, 200), ("Ok", 51, 200), ("Ok", 15, 0)]:
            with self.subTest(args=args):
                with self.assertRaises(errors.InvalidParam):
                    self.registry.update_group(self.caller, 1, 0, *args)

    def test_rejects_name_of_another_group(self):
        self.create(name="Taken")

        with self.assertRaises(errors.NameCollision) as ctx:
            self.registry.update_group(self.caller, 1, 0, "Taken", 15, 200)

        self.assertEqual(ctx.exception.code, 123)
        self.assertEqual(self.registry.get_group(0).name, "OldGroup")

    def test_allows_keeping_own_name(self):
        self.registry.update_group(self.caller, 1, 0, "OldGroup", 20, 300)

        self.assertTrue(self.registry.check_group_existence("OldGroup"))
        self.assertEqual(self.registry.get_group(0).max_members, 20)

    def test_freed_name_can_be_reused_but_ids_are_not(self):
        self.registry.update_group(self.caller, 1, 0, "Renamed", 15, 200)

        group_id = self.create(name="OldGroup")

        self.assertEqual(group_id, 1)
        self.assertEqual(self.registry.get_group_count(), 2)


# -------------------------
# Configuration
# -------------------------
class ConfigurationTests(RegistryTestCase):
    def test_sets_authority_contract_successfully(self):
        self.assertTrue(self.registry.set_authority_contract("ST2TEST"))
        self.assertEqual(self.registry.get_authority_contract(), "ST2TEST")

    def test_authority_contract_is_set_only_once(self):
        self.registry.set_authority_contract("ST2TEST")

        with self.assertRaises(errors.AlreadyConfigured):
            self.registry.set_authority_contract("ST3OTHER")

        self.assertEqual(self.registry.get_authority_contract(), "ST2TEST")

    def test_rejects_null_authority_contract(self):
        with self.assertRaises(errors.InvalidAuthority):
            self.registry.set_authority_contract(NULL_PRINCIPAL)

        self.assertIsNone(self.registry.get_authority_contract())

    def test_sets_creation_fee_successfully(self):
        self.registry.set_authority_contract("ST2TEST")

        self.assertTrue(self.registry.set_creation_fee(2000))
        self.assertEqual(self.registry.get_creation_fee(), 2000)

        self.create(name="TestGroup")
        self.assertEqual(
            self.sink.transfers,
            [TransferRecord(amount=2000, payer="ST1TEST", payee="ST2TEST", group_id=0)],
        )

    def test_fee_change_is_not_retroactive(self):
        self.registry.set_authority_contract("ST2TEST")
        self.create(name="First")
        self.registry.set_creation_fee(5)
        self.create(name="Second")

        self.assertEqual([t.amount for t in self.sink.transfers], [1000, 5])

    def test_rejects_creation_fee_change_without_authority_contract(self):
        with self.assertRaises(errors.NotConfigured):
            self.registry.set_creation_fee(2000)

        self.assertEqual(self.registry.get_creation_fee(), 1000)

    def test_rejects_max_groups_change_without_authority_contract(self):
        with self.assertRaises(errors.NotConfigured):
            self.registry.set_max_groups(5)

    def test_rejects_fee_beyond_storage_range(self):
        self.registry.set_authority_contract("ST2TEST")

        with self.assertRaises(errors.InvalidParam):
            self.registry.set_creation_fee(constants.MAX_STORED_INT + 1)
        with self.assertRaises(errors.InvalidParam):
            self.registry.set_creation_fee(-1)

        self.assertEqual(self.registry.get_creation_fee(), 1000)

    def test_rejects_non_positive_max_groups(self):
        self.registry.set_authority_contract("ST2TEST")

        for value in [0, -1, constants.MAX_STORED_INT + 1]:
            with self.subTest(value=value):
                with self.assertRaises(errors.InvalidParam):
                    self.registry.set_max_groups(value)

        self.assertEqual(self.registry.get_max_groups(), 1000)

    def test_is_verified_authority_reads_the_oracle(self):
        self.assertTrue(self.registry.is_verified_authority("ST1TEST"))
        self.assertFalse(self.registry.is_verified_authority("ST9NOBODY"))


# -------------------------
# Reads
# -------------------------
class ReadTests(RegistryTestCase):
    def setUp(self):
        super().setUp()
        self.registry.set_authority_contract("ST2TEST")

    def test_returns_correct_group_count(self):
        self.create(name="Group1")
        self.registry.create_group(self.caller, 0, **urban_fields())

        self.assertEqual(self.registry.get_group_count(), 2)

    def test_checks_group_existence_correctly(self):
        self.create(name="TestGroup")

        self.assertTrue(self.registry.check_group_existence("TestGroup"))
        self.assertFalse(self.registry.check_group_existence("NonExistent"))

    def test_get_group_raises_for_unknown_id(self):
        with self.assertRaises(errors.GroupNotFound):
            self.registry.get_group(7)

    def test_error_serializes_for_hosts(self):
        error = errors.GroupAlreadyExists()

        self.assertEqual(
            error.as_dict(),
            {
                "code": 106,
                "name": "GroupAlreadyExists",
                "category": "conflict",
                "detail": "A group with this name already exists.",
            },
        )

    def test_out_of_range_ids_are_not_found(self):
        for group_id in [-1, constants.MAX_STORED_INT + 1, "0"]:
            with self.subTest(group_id=group_id):
                with self.assertRaises(errors.GroupNotFound):
                    self.registry.get_group(group_id)
                with self.assertRaises(errors.GroupNotFound):
                    self.registry.get_group_update(group_id)


# -------------------------
# In-memory store
# -------------------------
class InMemoryRegistryStoreTests(SimpleTestCase):
    def setUp(self):
        self.store = InMemoryRegistryStore()
        self.registry = GroupRegistry(
            self.store, StaticAuthorityOracle({"ST1TEST"}), RecordingPaymentSink()
        )
        self.registry.set_authority_contract("ST2TEST")
        self.registry.create_group("ST1TEST", 0, **group_fields())

    def test_failed_block_restores_rename(self):
        with self.assertRaises(RuntimeError):
            with self.store.atomic():
                group = self.store.get_group(0)
                self.store.replace_group(group.renamed("Beta", 12, 150, 1), previous_name="Alpha")
                raise RuntimeError("abort")

        self.assertEqual(self.store.name_owner("Alpha"), 0)
        self.assertIsNone(self.store.name_owner("Beta"))
        self.assertEqual(self.registry.get_group(0).name, "Alpha")

    def test_failed_inner_block_keeps_outer_writes(self):
        with self.store.atomic():
            config = self.store.load_config()
            config.creation_fee = 5
            self.store.save_config(config)

            with self.assertRaises(RuntimeError):
                with self.store.atomic():
                    self.store.replace_group(
                        self.store.get_group(0).renamed("Beta", 12, 150, 1),
                        previous_name="Alpha",
                    )
                    raise RuntimeError("abort")

        self.assertEqual(self.registry.get_creation_fee(), 5)
        self.assertTrue(self.registry.check_group_existence("Alpha"))

    def test_reads_leave_no_undo_steps(self):
        self.registry.get_group(0)
        self.registry.check_group_existence("Alpha")

        self.assertEqual(self.store._undo, [])
