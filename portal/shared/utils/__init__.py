"""Small helpers shared across layers (time, identifiers)."""

from portal.shared.utils.datetime import Clock, utc_now
from portal.shared.utils.generators import generate_cuid, generate_prefixed_id

__all__ = [
    "Clock",
    "generate_cuid",
    "generate_prefixed_id",
    "utc_now",
]
