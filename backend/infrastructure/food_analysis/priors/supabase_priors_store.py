"""Supabase food priors store - Implements IFoodPriorsStore port.

Reads the ``food_priors`` table. The Supabase SDK is synchronous, so
queries run in the default executor to keep the event loop free.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Mapping, Optional

from supabase import Client, create_client

from domain.food_analysis.core.exceptions.domain_errors import PriorsStoreError
from domain.food_analysis.core.value_objects.macros import Macros
from domain.food_analysis.core.value_objects.priors import FoodPriors, GaussianPrior

logger = logging.getLogger(__name__)

TABLE = "food_priors"
COLUMNS = (
    "label,kcal_per_g_mu,kcal_per_g_sigma,density_mu,density_sigma,"
    "protein_per_100g,carbs_per_100g,fat_per_100g,fiber_per_100g"
)


def row_to_priors(row: Mapping[str, Any]) -> FoodPriors:
    """
    Map a ``food_priors`` row to the domain record.

    The macro profile is kept only when protein, carbs and fat are all set.

    Raises:
        KeyError, TypeError, ValueError: On malformed rows
    """
    macros = None
    macro_keys = ("protein_per_100g", "carbs_per_100g", "fat_per_100g")
    if all(row.get(k) is not None for k in macro_keys):
        fiber = row.get("fiber_per_100g")
        macros = Macros(
            protein_g=float(row["protein_per_100g"]),
            carbs_g=float(row["carbs_per_100g"]),
            fat_g=float(row["fat_per_100g"]),
            fiber_g=float(fiber) if fiber is not None else None,
        )
    return FoodPriors(
        label=str(row["label"]),
        kcal_per_g=GaussianPrior(
            mu=float(row["kcal_per_g_mu"]), sigma=float(row["kcal_per_g_sigma"])
        ),
        density=GaussianPrior(
            mu=float(row["density_mu"]), sigma=float(row["density_sigma"])
        ),
        macros_per_100g=macros,
    )


class SupabaseFoodPriorsStore:
    """
    Food priors lookup backed by Supabase (PostgREST).

    Example:
        >>> store = SupabaseFoodPriorsStore.from_credentials(url, service_key)
        >>> priors = await store.find_by_label("white rice")
        >>> priors.label
        'white rice'
    """

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def from_credentials(cls, url: str, key: str) -> "SupabaseFoodPriorsStore":
        return cls(create_client(url, key))

    def _query(self, label: str) -> Optional[Mapping[str, Any]]:
        response = (
            self._client.table(TABLE)
            .select(COLUMNS)
            .ilike("label", label)
            .limit(1)
            .execute()
        )
        rows = response.data or []
        return rows[0] if rows else None

    async def find_by_label(self, label: str) -> Optional[FoodPriors]:
        """
        Case-insensitive exact lookup (``ilike`` without wildcards).

        Raises:
            PriorsStoreError: On query failures or malformed rows
        """
        # ilike treats % and _ as wildcards
        pattern = label.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        loop = asyncio.get_running_loop()
        try:
            row = await loop.run_in_executor(None, partial(self._query, pattern))
        except Exception as e:
            raise PriorsStoreError(f"food_priors query failed: {e}") from e

        if row is None:
            logger.debug("No priors for label", extra={"label": label})
            return None
        try:
            return row_to_priors(row)
        except (KeyError, TypeError, ValueError) as e:
            raise PriorsStoreError(
                f"Malformed food_priors row for {label!r}: {e}"
            ) from e
