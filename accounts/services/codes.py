import logging

from django.conf import settings
from django.utils.crypto import get_random_string

logger = logging.getLogger(__name__)

# Upper-case letters and digits without look-alikes (0/O, 1/I)
CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
MAX_ATTEMPTS = 20


def generate_management_code(length=None):
    """
    Generate an unused management code.

    Raises:
        RuntimeError: if no free code was found after MAX_ATTEMPTS tries.
    """
    from accounts.models import ManagementCode

    length = length or getattr(settings, 'MANAGEMENT_CODE_LENGTH', 6)
    for _ in range(MAX_ATTEMPTS):
        code = get_random_string(length, allowed_chars=CODE_ALPHABET)
        if not ManagementCode.objects.filter(code=code).exists():
            return code
        logger.debug(f"Management code collision on {code}, retrying")

    raise RuntimeError("Could not generate a unique management code")
