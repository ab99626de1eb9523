import secrets
import string

from crm.fields import PROPERTY_CODE_PREFIX

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_property_code(length: int = 6) -> str:
    """Internal property code such as ``BDS-7K2QXA``."""
    return PROPERTY_CODE_PREFIX + "".join(
        secrets.choice(_CODE_ALPHABET) for _ in range(length)
    )
