"""ID generators for vault entries and admin sessions.

Identifiers are CUID2 values, optionally prefixed by kind so that a
credential id is never mistaken for a session id in logs.
"""

from cuid2 import cuid_wrapper

_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new collision-resistant identifier (CUID2)."""
    value = _cuid()
    if not isinstance(value, str):
        raise TypeError(f"Expected str from cuid generator, got {type(value).__name__}")
    return value


def generate_prefixed_id(prefix: str) -> str:
    """Return ``<prefix>_<cuid>``, e.g. ``tmp_k3x...`` for temporary credentials."""
    return f"{prefix}_{generate_cuid()}"
