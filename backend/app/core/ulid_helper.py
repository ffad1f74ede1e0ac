"""ULID generation helper utilities."""

import ulid


def generate_ulid() -> str:
    """Generate a new ULID string (used as primary key default)."""
    return str(ulid.ULID())

