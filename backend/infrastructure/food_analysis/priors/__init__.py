"""Food priors store adapters."""

from infrastructure.food_analysis.priors.in_memory_priors_store import (
    InMemoryFoodPriorsStore,
)
from infrastructure.food_analysis.priors.supabase_priors_store import (
    SupabaseFoodPriorsStore,
)

__all__ = ["InMemoryFoodPriorsStore", "SupabaseFoodPriorsStore"]
