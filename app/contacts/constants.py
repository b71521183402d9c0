"""
Constants for the contact ledger.

Import example:
    from contacts.constants import CONTACT_CONFIG
"""

from typing import Final


class CONTACT_CONFIG:
    """Limits for contact entries."""

    NAME_MIN_LENGTH: Final[int] = 1
    NAME_MAX_LENGTH: Final[int] = 50
