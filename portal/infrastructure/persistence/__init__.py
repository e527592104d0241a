"""Local persistence adapters."""

from portal.infrastructure.persistence.in_memory_profile_store import InMemoryProfileStore

__all__ = ["InMemoryProfileStore"]
