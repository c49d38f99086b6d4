"""Core building blocks (entities, value objects, exceptions, ports)."""
