"""In-memory food priors store (tests, offline mode)."""

from typing import Dict, Iterable, Optional

from domain.food_analysis.core.value_objects.priors import FoodPriors


class InMemoryFoodPriorsStore:
    """
    Dictionary-backed IFoodPriorsStore, keyed by lower-cased label.

    Example:
        >>> store = InMemoryFoodPriorsStore([rice_priors])
        >>> await store.find_by_label("White Rice") is rice_priors
        True
    """

    def __init__(self, records: Iterable[FoodPriors] = ()):
        self._records: Dict[str, FoodPriors] = {}
        for record in records:
            self.add(record)

    def add(self, record: FoodPriors) -> None:
        self._records[record.label.strip().lower()] = record

    async def find_by_label(self, label: str) -> Optional[FoodPriors]:
        return self._records.get(label.strip().lower())
