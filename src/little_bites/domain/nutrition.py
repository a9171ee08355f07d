"""Nutrition domain models."""

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import UTC, datetime


@dataclass(frozen=True)
class NutritionFacts:
    """Per-serving nutrition facts; unreported values are 0."""

    calories: float = 0.0
    total_fat: float = 0.0
    saturated_fat: float = 0.0
    trans_fat: float = 0.0
    cholesterol: float = 0.0
    sodium: float = 0.0
    total_carbohydrates: float = 0.0
    dietary_fiber: float = 0.0
    total_sugars: float = 0.0
    added_sugars: float = 0.0
    protein: float = 0.0
    vitamin_d: float = 0.0
    calcium: float = 0.0
    iron: float = 0.0
    potassium: float = 0.0


@dataclass(frozen=True)
class NutritionRecord:
    """Snapshot of a product's nutrition facts at lookup time."""

    barcode: str
    product_name: str
    serving_size: str
    facts: NutritionFacts
    brand_name: str | None = None
    ingredients: tuple[str, ...] = ()
    allergens: tuple[str, ...] = ()
    retrieved_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


def nutrition_facts_from_mapping(values: Mapping[str, object]) -> NutritionFacts:
    """Build nutrition facts from a loose mapping, defaulting gaps to 0."""
    normalized: dict[str, float] = {}
    for fact in fields(NutritionFacts):
        normalized[fact.name] = _to_amount(values.get(fact.name))
    return NutritionFacts(**normalized)


def _to_amount(raw: object) -> float:
    if raw is None or isinstance(raw, bool):
        return 0.0
    try:
        amount = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if amount != amount or amount < 0:
        return 0.0
    return amount
