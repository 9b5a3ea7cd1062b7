"""
Identifier generation for inventory items.

Each item carries two identifiers: an internal id used as the primary key and a
user-facing item number shown in lists and on sale records.
"""
import random
import string
from typing import Callable, Container

BASE36 = string.digits + string.ascii_lowercase

INTERNAL_ID_PREFIX = "_inv_"
ITEM_NUMBER_PREFIX = "ITEM-"

# Give up rather than spin forever if the id space is somehow exhausted
MAX_ATTEMPTS = 1000


def _random_base36(length: int) -> str:
    return "".join(random.choice(BASE36) for _ in range(length))


def generate_internal_id() -> str:
    """Return a random internal id such as ``_inv_k3j9x0a1b``."""
    return INTERNAL_ID_PREFIX + _random_base36(9)


def generate_item_number() -> str:
    """Return a random item number such as ``ITEM-4F9K2Q``."""
    return ITEM_NUMBER_PREFIX + _random_base36(6).upper()


def generate_unique(generator: Callable[[], str], taken: Container[str]) -> str:
    """
    Draw from ``generator`` until it yields a value not in ``taken``.

    Raises:
        RuntimeError: if no free value was found after MAX_ATTEMPTS draws
    """
    for _ in range(MAX_ATTEMPTS):
        candidate = generator()
        if candidate not in taken:
            return candidate
    raise RuntimeError(f"Could not generate a unique identifier after {MAX_ATTEMPTS} attempts")
