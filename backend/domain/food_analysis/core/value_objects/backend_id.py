"""Identifiers of the whole-pipeline analyzer backends."""

from enum import Enum


class BackendId(str, Enum):
    """Analyzer backend identifier, as reported in ``meta.used``."""

    MANAGED = "supabase"
    VISION = "openai"
    STUB = "stub"
