"""Pydantic request models for the HTTP API."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from little_bites.domain.grading import (
    AgeGroupCriteria,
    CategoryCriteria,
    GradingCriteria,
)
from little_bites.domain.nutrition import NutritionFacts, NutritionRecord


class NutritionFactsPayload(BaseModel):
    """Per-serving nutrition facts; omitted values count as 0."""

    calories: float = Field(default=0, ge=0)
    total_fat: float = Field(default=0, ge=0)
    saturated_fat: float = Field(default=0, ge=0)
    trans_fat: float = Field(default=0, ge=0)
    cholesterol: float = Field(default=0, ge=0)
    sodium: float = Field(default=0, ge=0)
    total_carbohydrates: float = Field(default=0, ge=0)
    dietary_fiber: float = Field(default=0, ge=0)
    total_sugars: float = Field(default=0, ge=0)
    added_sugars: float = Field(default=0, ge=0)
    protein: float = Field(default=0, ge=0)
    vitamin_d: float = Field(default=0, ge=0)
    calcium: float = Field(default=0, ge=0)
    iron: float = Field(default=0, ge=0)
    potassium: float = Field(default=0, ge=0)


class NutritionRecordPayload(BaseModel):
    """Caller-supplied nutrition record."""

    barcode: str = ""
    product_name: str
    brand_name: str | None = None
    serving_size: str = ""
    facts: NutritionFactsPayload = Field(default_factory=NutritionFactsPayload)
    ingredients: list[str] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)

    def to_domain(self) -> NutritionRecord:
        """Convert to a domain nutrition record."""
        return NutritionRecord(
            barcode=self.barcode,
            product_name=self.product_name,
            brand_name=self.brand_name,
            serving_size=self.serving_size,
            facts=NutritionFacts(**self.facts.model_dump()),
            ingredients=tuple(self.ingredients),
            allergens=tuple(self.allergens),
            retrieved_at=datetime.now(tz=UTC),
        )


class ScanRequest(BaseModel):
    """Scan a barcode for an age group."""

    barcode: str
    age_group: str | None = None


class GradeRequest(BaseModel):
    """Grade a caller-supplied nutrition record."""

    nutrition: NutritionRecordPayload
    age_group: str | None = None


class RegradeRequest(BaseModel):
    """Regrade a stored product."""

    age_group: str


class FavoriteRequest(BaseModel):
    """Set the favorite flag; omit to toggle."""

    is_favorite: bool | None = None


class AgeGroupCriteriaPayload(BaseModel):
    """Thresholds for one age group."""

    age_group: str
    max_sodium: float = Field(ge=0)
    max_sugar: float = Field(ge=0)
    max_fat: float = Field(ge=0)
    min_protein: float = Field(ge=0)
    min_fiber: float = Field(ge=0)
    max_calories: float = Field(ge=0)


class CategoryCriteriaPayload(BaseModel):
    """Thresholds for one product category."""

    category: str
    max_sodium: float = Field(ge=0)
    max_sugar: float = Field(ge=0)
    max_fat: float = Field(ge=0)
    min_protein: float = Field(ge=0)
    min_fiber: float = Field(ge=0)
    max_calories: float = Field(ge=0)
    bonus_points: float = 0
    penalty_points: float = 0


class GradingCriteriaPayload(BaseModel):
    """Full grading criteria bundle."""

    age_groups: list[AgeGroupCriteriaPayload]
    categories: list[CategoryCriteriaPayload] = Field(default_factory=list)
    artificial_ingredients: list[str] = Field(default_factory=list)
    allergens: list[str] = Field(default_factory=list)

    def to_domain(self) -> GradingCriteria:
        """Convert to domain criteria."""
        return GradingCriteria(
            age_groups=tuple(
                AgeGroupCriteria(**entry.model_dump()) for entry in self.age_groups
            ),
            categories=tuple(
                CategoryCriteria(**entry.model_dump()) for entry in self.categories
            ),
            artificial_ingredients=tuple(self.artificial_ingredients),
            allergens=tuple(self.allergens),
            last_updated=datetime.now(tz=UTC),
        )
