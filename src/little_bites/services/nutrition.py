"""Nutrition lookup service integrating FatSecret."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from little_bites.adapters.fatsecret_client import FatSecretClient
from little_bites.domain.nutrition import (
    NutritionFacts,
    NutritionRecord,
    nutrition_facts_from_mapping,
)
from little_bites.services.cache import Cache

# FatSecret serving field -> NutritionFacts field. Added sugars and vitamin D
# are not reported by the basic API.
_SERVING_FIELDS = {
    "calories": "calories",
    "fat": "total_fat",
    "saturated_fat": "saturated_fat",
    "trans_fat": "trans_fat",
    "cholesterol": "cholesterol",
    "sodium": "sodium",
    "carbohydrate": "total_carbohydrates",
    "fiber": "dietary_fiber",
    "sugar": "total_sugars",
    "protein": "protein",
    "calcium": "calcium",
    "iron": "iron",
    "potassium": "potassium",
}

_logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


class NutritionLookupError(RuntimeError):
    """Raised when nutrition data cannot be retrieved."""


@dataclass
class NutritionService:
    """Service for barcode nutrition lookups with caching."""

    client: FatSecretClient
    cache: Cache
    cache_expiry_hours: int = 24
    enable_caching: bool = True
    retry_attempts: int = 2
    retry_delay_seconds: float = 0.3

    async def get_by_barcode(self, barcode: str) -> NutritionRecord:
        """Return nutrition data for a barcode, from cache when fresh."""
        cache_key = f"nutrition:barcode:{barcode}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, NutritionRecord):
            return cached

        try:
            record = await self._fetch_by_barcode(barcode)
        except Exception as exc:
            _logger.warning(
                "Nutrition lookup failed: barcode=%s error=%s", barcode, exc
            )
            raise NutritionLookupError(
                f"Failed to retrieve nutrition data for barcode: {barcode}"
            ) from exc

        if self.enable_caching:
            self.cache.set(
                cache_key, record, ttl_seconds=self.cache_expiry_hours * 3600
            )
        return record

    async def search_by_name(
        self, query: str, limit: int = 10
    ) -> list[NutritionRecord]:
        """Search products by name; results carry no barcode or facts."""
        try:
            foods = await self._call_with_retry(
                lambda: self.client.search_foods(query, max_results=limit),
                action="search",
            )
        except Exception as exc:
            raise NutritionLookupError(f"Failed to search products: {exc}") from exc
        now = datetime.now(tz=UTC)
        return [
            NutritionRecord(
                barcode="",
                product_name=str(food.get("food_name", "")),
                brand_name=_optional_str(food.get("brand_name")),
                serving_size="Per serving",
                facts=NutritionFacts(),
                retrieved_at=now,
            )
            for food in foods
        ]

    async def is_available(self) -> bool:
        """Return True when the provider accepts our credentials."""
        try:
            await self.client.get_access_token()
        except Exception:
            _logger.exception("Nutrition API availability check failed")
            return False
        return True

    async def _fetch_by_barcode(self, barcode: str) -> NutritionRecord:
        foods = await self._call_with_retry(
            lambda: self.client.search_foods(barcode), action=f"search:{barcode}"
        )
        if not foods:
            raise LookupError("No food found for this barcode")
        first = foods[0]
        food_id = str(first.get("food_id", ""))
        food = await self._call_with_retry(
            lambda: self.client.get_food(food_id), action=f"get_food:{food_id}"
        )
        servings = (food.get("servings") or {}).get("serving") or []
        if not servings:
            raise LookupError("No nutrition data available for this food")
        serving = servings[0]
        _logger.info(
            "Nutrition lookup FatSecret: barcode=%s food_id=%s", barcode, food_id
        )
        return NutritionRecord(
            barcode=barcode,
            product_name=str(first.get("food_name", "")),
            brand_name=_optional_str(first.get("brand_name")),
            serving_size=str(serving.get("serving_description", "")),
            facts=_extract_facts(serving),
            retrieved_at=datetime.now(tz=UTC),
        )

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[Any]]", *, action: str
    ) -> Any:
        """Call an async function with a short retry."""
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Nutrition %s failed (attempt %s/%s, status=%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    _status_code_from_exception(exc),
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def _status_code_from_exception(exc: Exception) -> str:
    """Extract HTTP status code from an exception, if available."""
    status_code = getattr(exc, "status_code", None)
    if status_code is None:
        response = getattr(exc, "response", None)
        status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"


def _extract_facts(serving: dict[str, object]) -> NutritionFacts:
    """Map a FatSecret serving onto normalized nutrition facts."""
    return nutrition_facts_from_mapping(
        {target: serving.get(source) for source, target in _SERVING_FIELDS.items()}
    )


def _optional_str(value: object) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
