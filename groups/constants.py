# Name and location are stored as bounded UTF-8 strings
MAX_NAME_LENGTH = 100
MAX_LOCATION_LENGTH = 100

MIN_MEMBERS = 1
MAX_MEMBERS = 50

# Percentages
MAX_PENALTY_RATE = 100
MIN_VOTING_THRESHOLD = 1
MAX_VOTING_THRESHOLD = 100

MAX_INTEREST_RATE = 20
MAX_GRACE_PERIOD = 30

GROUP_TYPES = ("rural", "urban", "community")
CURRENCIES = ("STX", "USD", "BTC")

GROUP_TYPE_CHOICES = [(value, value.title()) for value in GROUP_TYPES]
CURRENCY_CHOICES = [(value, value) for value in CURRENCIES]

# Fallbacks when settings.GROUP_REGISTRY leaves a key out
DEFAULT_MAX_GROUPS = 1000
DEFAULT_CREATION_FEE = 1000
DEFAULT_NULL_PRINCIPAL = "SP000000000000000000002Q6VF78"

# Largest value a PositiveBigIntegerField column holds
MAX_STORED_INT = 2**63 - 1
