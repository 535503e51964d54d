"""
Typed failures raised by the group registry.

Every class carries a stable numeric ``code`` and a ``category``. Host
adapters turn them into result values; see ``groups.handlers``.
"""

CONFIGURATION = "configuration"
VALIDATION = "validation"
AUTHORIZATION = "authorization"
CONFLICT = "conflict"
CAPACITY = "capacity"
NOT_FOUND = "not_found"


class RegistryError(Exception):
    code = None
    category = None
    default_detail = "Registry operation failed."

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def name(self):
        return type(self).__name__

    def as_dict(self):
        return {
            "code": self.code,
            "name": self.name,
            "category": self.category,
            "detail": self.detail,
        }


# -------------------------
# Configuration
# -------------------------
class ConfigurationError(RegistryError):
    category = CONFIGURATION


class AuthorityNotVerified(ConfigurationError):
    code = 109
    default_detail = "No authority contract has been configured."


class AlreadyConfigured(ConfigurationError):
    code = 120
    default_detail = "The authority contract is already set."


class NotConfigured(ConfigurationError):
    code = 121
    default_detail = "The authority contract must be set first."


class InvalidAuthority(ConfigurationError):
    code = 122
    default_detail = "The reserved null principal cannot be the authority."


# -------------------------
# Validation
# -------------------------
class ValidationError(RegistryError):
    category = VALIDATION


class InvalidMaxMembers(ValidationError):
    code = 101
    default_detail = "Max members must be between 1 and 50."


class InvalidContribAmount(ValidationError):
    code = 102
    default_detail = "Contribution amount must be greater than zero."


class InvalidCycleDuration(ValidationError):
    code = 103
    default_detail = "Cycle duration must be greater than zero."


class InvalidPenaltyRate(ValidationError):
    code = 104
    default_detail = "Penalty rate must be between 0 and 100."


class InvalidVotingThreshold(ValidationError):
    code = 105
    default_detail = "Voting threshold must be between 1 and 100."


class InvalidMinContrib(ValidationError):
    code = 110
    default_detail = "Minimum contribution must be greater than zero."


class InvalidMaxLoan(ValidationError):
    code = 111
    default_detail = "Max loan must be greater than zero."


class InvalidName(ValidationError):
    code = 113
    default_detail = "Name must be between 1 and 100 characters."


class InvalidParam(ValidationError):
    code = 113
    default_detail = "Invalid update parameter."


class InvalidGroupType(ValidationError):
    code = 115
    default_detail = "Group type must be rural, urban or community."


class InvalidInterestRate(ValidationError):
    code = 116
    default_detail = "Interest rate must be between 0 and 20."


class InvalidGracePeriod(ValidationError):
    code = 117
    default_detail = "Grace period must be between 0 and 30."


class InvalidLocation(ValidationError):
    code = 118
    default_detail = "Location must be between 1 and 100 characters."


class InvalidCurrency(ValidationError):
    code = 119
    default_detail = "Currency must be STX, USD or BTC."


# -------------------------
# Authorization / conflict / capacity / lookup
# -------------------------
class NotAuthorized(RegistryError):
    code = 100
    category = AUTHORIZATION
    default_detail = "Caller is not allowed to perform this operation."


class GroupAlreadyExists(RegistryError):
    code = 106
    category = CONFLICT
    default_detail = "A group with this name already exists."


class NameCollision(RegistryError):
    code = 123
    category = CONFLICT
    default_detail = "Another group already uses this name."


class MaxGroupsExceeded(RegistryError):
    code = 114
    category = CAPACITY
    default_detail = "The registry has reached its group ceiling."


class GroupNotFound(RegistryError):
    code = 107
    category = NOT_FOUND
    default_detail = "Group not found."
