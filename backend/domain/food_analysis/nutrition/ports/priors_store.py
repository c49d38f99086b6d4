"""Food priors store port (interface).

Read-only query contract of the food-priors table: reference values per
100 g plus density/energy-density priors, keyed by food label.
"""

from typing import Optional, Protocol

from domain.food_analysis.core.value_objects.priors import FoodPriors


class IFoodPriorsStore(Protocol):
    """
    Interface for the food priors data source.

    Implementations:
    - Supabase ``food_priors`` table
    - In-memory store (tests, offline mode)
    """

    async def find_by_label(self, label: str) -> Optional[FoodPriors]:
        """
        Case-insensitive lookup by label.

        Args:
            label: Sanitized food label

        Returns:
            FoodPriors if found, None otherwise

        Raises:
            PriorsStoreError: If the store cannot be queried
        """
        ...
