"""
Group registry engine.

``GroupRegistry`` validates and applies every state transition of the
savings-group registry: one-time authority configuration, the creation fee,
paid group creation and creator-only updates. All state lives in the
``RegistryStore`` handed to the constructor; the caller principal and the
logical time are explicit arguments of every mutating call.

Validation is a fixed, ordered list of checks. The first failing check is
raised and the remaining ones are never evaluated, so each malformed input
maps to exactly one error.
"""
import logging

from . import constants, errors
from .records import GroupRecord, GroupUpdateRecord

logger = logging.getLogger(__name__)


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _in_range(value, low, high=constants.MAX_STORED_INT):
    return _is_int(value) and low <= value <= high


def _is_text(value, max_length):
    return isinstance(value, str) and 0 < len(value) <= max_length


def first_failure(checks):
    """Return the error paired with the first predicate that fails, or None."""
    for passes, error in checks:
        if not passes():
            return error
    return None


class GroupRegistry:
    def __init__(self, store, oracle, sink, null_principal=None):
        self.store = store
        self.oracle = oracle
        self.sink = sink
        self.null_principal = null_principal or constants.DEFAULT_NULL_PRINCIPAL

    # -------------------------
    # Configuration
    # -------------------------
    def set_authority_contract(self, principal):
        with self.store.atomic():
            config = self.store.load_config()

            if not principal or principal == self.null_principal:
                raise self._reject("set_authority_contract", errors.InvalidAuthority())
            if config.authority_contract is not None:
                raise self._reject("set_authority_contract", errors.AlreadyConfigured())

            config.authority_contract = principal
            self.store.save_config(config)

        logger.info(f"Authority contract set to {principal}")
        return True

    def set_creation_fee(self, new_fee):
        with self.store.atomic():
            config = self.store.load_config()

            if config.authority_contract is None:
                raise self._reject("set_creation_fee", errors.NotConfigured())
            if not _in_range(new_fee, 0):
                raise self._reject(
                    "set_creation_fee",
                    errors.InvalidParam("Creation fee must be a non-negative integer."),
                )

            previous = config.creation_fee
            config.creation_fee = new_fee
            self.store.save_config(config)

        logger.info(f"Creation fee changed from {previous} to {new_fee}")
        return True

    def set_max_groups(self, max_groups):
        with self.store.atomic():
            config = self.store.load_config()

            if config.authority_contract is None:
                raise self._reject("set_max_groups", errors.NotConfigured())
            if not _in_range(max_groups, 1):
                raise self._reject(
                    "set_max_groups",
                    errors.InvalidParam("Max groups must be a positive integer."),
                )

            config.max_groups = max_groups
            self.store.save_config(config)

        logger.info(f"Group ceiling set to {max_groups}")
        return True

    # -------------------------
    # Creation
    # -------------------------
    def create_group(
        self,
        caller,
        now,
        name,
        max_members,
        contrib_amount,
        cycle_duration,
        penalty_rate,
        voting_threshold,
        group_type,
        interest_rate,
        grace_period,
        location,
        currency,
        min_contrib,
        max_loan,
    ):
        with self.store.atomic():
            config = self.store.load_config()

            failure = first_failure([
                (lambda: config.next_group_id < config.max_groups, errors.MaxGroupsExceeded()),
                (lambda: _is_text(name, constants.MAX_NAME_LENGTH), errors.InvalidName()),
                (
                    lambda: _in_range(max_members, constants.MIN_MEMBERS, constants.MAX_MEMBERS),
                    errors.InvalidMaxMembers(),
                ),
                (lambda: _in_range(contrib_amount, 1), errors.InvalidContribAmount()),
                (lambda: _in_range(cycle_duration, 1), errors.InvalidCycleDuration()),
                (
                    lambda: _in_range(penalty_rate, 0, constants.MAX_PENALTY_RATE),
                    errors.InvalidPenaltyRate(),
                ),
                (
                    lambda: _in_range(
                        voting_threshold,
                        constants.MIN_VOTING_THRESHOLD,
                        constants.MAX_VOTING_THRESHOLD,
                    ),
                    errors.InvalidVotingThreshold(),
                ),
                (lambda: group_type in constants.GROUP_TYPES, errors.InvalidGroupType()),
                (
                    lambda: _in_range(interest_rate, 0, constants.MAX_INTEREST_RATE),
                    errors.InvalidInterestRate(),
                ),
                (
                    lambda: _in_range(grace_period, 0, constants.MAX_GRACE_PERIOD),
                    errors.InvalidGracePeriod(),
                ),
                (lambda: _is_text(location, constants.MAX_LOCATION_LENGTH), errors.InvalidLocation()),
                (lambda: currency in constants.CURRENCIES, errors.InvalidCurrency()),
                (lambda: _in_range(min_contrib, 1), errors.InvalidMinContrib()),
                (lambda: _in_range(max_loan, 1), errors.InvalidMaxLoan()),
                (lambda: self.oracle.is_verified(caller), errors.NotAuthorized()),
                (lambda: self.store.name_owner(name) is None, errors.GroupAlreadyExists()),
                (lambda: config.authority_contract is not None, errors.AuthorityNotVerified()),
            ])
            if failure is not None:
                raise self._reject("create_group", failure)

            group_id = config.next_group_id

            # Any exception from the sink unwinds the atomic block before
            # the group or the counter are written.
            self.sink.transfer(
                config.creation_fee,
                caller,
                config.authority_contract,
                group_id=group_id,
            )

            record = GroupRecord(
                id=group_id,
                name=name,
                max_members=max_members,
                contrib_amount=contrib_amount,
                cycle_duration=cycle_duration,
                penalty_rate=penalty_rate,
                voting_threshold=voting_threshold,
                group_type=group_type,
                interest_rate=interest_rate,
                grace_period=grace_period,
                location=location,
                currency=currency,
                min_contrib=min_contrib,
                max_loan=max_loan,
                status=True,
                creator=caller,
                created_at=now,
                last_updated_at=now,
            )
            self.store.insert_group(record)

            config.next_group_id = group_id + 1
            self.store.save_config(config)

        logger.info(
            f"Group {group_id} '{name}' created by {caller} "
            f"(fee {config.creation_fee} to {config.authority_contract})"
        )
        return group_id

    # -------------------------
    # Update
    # -------------------------
    def update_group(self, caller, now, group_id, name, max_members, contrib_amount):
        with self.store.atomic():
            group = self.store.get_group(group_id) if _in_range(group_id, 0) else None
            if group is None:
                raise self._reject("update_group", errors.GroupNotFound())

            failure = first_failure([
                (lambda: group.creator == caller, errors.NotAuthorized()),
                (
                    lambda: _is_text(name, constants.MAX_NAME_LENGTH),
                    errors.InvalidParam("New name must be between 1 and 100 characters."),
                ),
                (
                    lambda: _in_range(max_members, constants.MIN_MEMBERS, constants.MAX_MEMBERS),
                    errors.InvalidParam("New max members must be between 1 and 50."),
                ),
                (
                    lambda: _in_range(contrib_amount, 1),
                    errors.InvalidParam("New contribution amount must be greater than zero."),
                ),
                (lambda: self.store.name_owner(name) in (None, group_id), errors.NameCollision()),
            ])
            if failure is not None:
                raise self._reject("update_group", failure)

            self.store.replace_group(
                group.renamed(name, max_members, contrib_amount, now),
                previous_name=group.name,
            )
            self.store.put_update(
                GroupUpdateRecord(
                    group_id=group_id,
                    name=name,
                    max_members=max_members,
                    contrib_amount=contrib_amount,
                    timestamp=now,
                    updater=caller,
                )
            )

        logger.info(f"Group {group_id} updated by {caller}: '{group.name}' -> '{name}'")
        return True

    # -------------------------
    # Reads
    # -------------------------
    def get_group(self, group_id):
        with self.store.atomic():
            group = self.store.get_group(group_id) if _in_range(group_id, 0) else None
        if group is None:
            raise errors.GroupNotFound()
        return group

    def get_group_update(self, group_id):
        with self.store.atomic():
            if not _in_range(group_id, 0) or self.store.get_group(group_id) is None:
                raise errors.GroupNotFound()
            return self.store.get_update(group_id)

    def get_group_count(self):
        with self.store.atomic():
            return self.store.load_config().next_group_id

    def check_group_existence(self, name):
        with self.store.atomic():
            return self.store.name_owner(name) is not None

    def is_verified_authority(self, principal):
        return bool(self.oracle.is_verified(principal))

    def get_authority_contract(self):
        with self.store.atomic():
            return self.store.load_config().authority_contract

    def get_creation_fee(self):
        with self.store.atomic():
            return self.store.load_config().creation_fee

    def get_max_groups(self):
        with self.store.atomic():
            return self.store.load_config().max_groups

    @staticmethod
    def _reject(operation, error):
        logger.warning(f"{operation} rejected: {error.name} ({error.code}) {error.detail}")
        return error
