"""Domain layer: entities, enums and exceptions (no I/O)."""
