import re
from django.core.exceptions import ValidationError
from django.utils.translation import gettext as _

# Standard principal (41 chars) + "." + contract name (up to 128 chars)
MAX_PRINCIPAL_LENGTH = 170

PRINCIPAL_PATTERN = re.compile(
    r"^S[A-Z0-9]{2,40}(\.[a-zA-Z][a-zA-Z0-9_-]{0,127})?$"
)


def validate_principal(value):
    """
    Validate the shape of a standard (``ST1...``) or contract
    (``ST1....name``) principal. Checksums are not verified.
    """
    if not isinstance(value, str) or len(value) > MAX_PRINCIPAL_LENGTH:
        raise ValidationError(
            _("Principal must be at most %(max)s characters."),
            code="principal_too_long",
            params={"max": MAX_PRINCIPAL_LENGTH},
        )
    if not PRINCIPAL_PATTERN.match(value):
        raise ValidationError(
            _("Enter a valid principal, e.g. ST1TEST or ST1TEST.registry."),
            code="principal_invalid",
        )
