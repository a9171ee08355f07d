"""Grading domain models and built-in criteria."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from little_bites.domain.nutrition import NutritionRecord


class AgeGroup(StrEnum):
    """Supported infant and toddler age brackets."""

    NEWBORN = "0-6months"
    INFANT = "6-12months"
    TODDLER = "12-24months"
    PRESCHOOL = "2-5years"


class ProductCategory(StrEnum):
    """Product categories with their own thresholds."""

    PUREES = "purees"
    SNACKS = "snacks"
    DRINKS = "drinks"
    CEREALS = "cereals"
    MEALS = "meals"


class HighlightCategory(StrEnum):
    """Kinds of flagged concerns."""

    SUGAR = "sugar"
    SODIUM = "sodium"
    FAT = "fat"
    ARTIFICIAL = "artificial"
    ALLERGENS = "allergens"
    NUTRITION = "nutrition"


class Severity(StrEnum):
    """How far a value is past its threshold."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LetterGrade(StrEnum):
    """Letter banding of the numeric score."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


# Protein and fiber deficiencies are reported as "nutrition" highlights, so
# their weights are carried for configuration parity only.
GRADING_WEIGHTS: dict[str, float] = {
    HighlightCategory.SUGAR: 25,
    HighlightCategory.SODIUM: 20,
    HighlightCategory.FAT: 15,
    HighlightCategory.ARTIFICIAL: 20,
    HighlightCategory.ALLERGENS: 10,
    HighlightCategory.NUTRITION: 5,
    "protein": 3,
    "fiber": 2,
}

SEVERITY_MULTIPLIERS: dict[Severity, float] = {
    Severity.HIGH: 2.0,
    Severity.MEDIUM: 1.5,
    Severity.LOW: 1.0,
}


@dataclass(frozen=True)
class AgeGroupCriteria:
    """Per-serving thresholds for one age group."""

    age_group: str
    max_sodium: float
    max_sugar: float
    max_fat: float
    min_protein: float
    min_fiber: float
    max_calories: float


@dataclass(frozen=True)
class CategoryCriteria:
    """Per-serving thresholds for a product category."""

    category: str
    max_sodium: float
    max_sugar: float
    max_fat: float
    min_protein: float
    min_fiber: float
    max_calories: float
    bonus_points: float
    penalty_points: float


FALLBACK_AGE_CRITERIA = AgeGroupCriteria(
    age_group=AgeGroup.INFANT,
    max_sodium=140,
    max_sugar=6,
    max_fat=3,
    min_protein=2,
    min_fiber=1,
    max_calories=120,
)


@dataclass(frozen=True)
class GradingCriteria:
    """Full threshold and keyword bundle driving highlight detection."""

    age_groups: tuple[AgeGroupCriteria, ...]
    categories: tuple[CategoryCriteria, ...]
    artificial_ingredients: tuple[str, ...]
    allergens: tuple[str, ...]
    last_updated: datetime

    def for_age_group(self, age_group: str) -> AgeGroupCriteria:
        """Return criteria for an age group, falling back to 6-12 months."""
        for criteria in self.age_groups:
            if criteria.age_group == age_group:
                return criteria
        for criteria in self.age_groups:
            if criteria.age_group == AgeGroup.INFANT:
                return criteria
        return FALLBACK_AGE_CRITERIA


@dataclass(frozen=True)
class GradeHighlight:
    """A single flagged nutritional or ingredient concern."""

    category: HighlightCategory
    severity: Severity
    message: str
    impact: str


@dataclass(frozen=True)
class ProductGrade:
    """Graded assessment produced by the grading engine."""

    grade: LetterGrade
    score: float
    highlights: tuple[GradeHighlight, ...]
    recommendations: tuple[str, ...]
    timestamp: datetime


@dataclass(frozen=True)
class ScannedProduct:
    """A graded product as kept in scan history."""

    barcode: str
    nutrition: NutritionRecord
    grade: ProductGrade
    scan_date: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    is_favorite: bool = False


def default_grading_criteria(now: datetime | None = None) -> GradingCriteria:
    """Return the built-in grading criteria bundle."""
    return GradingCriteria(
        age_groups=(
            AgeGroupCriteria(
                age_group=AgeGroup.NEWBORN,
                max_sodium=140,
                max_sugar=0,
                max_fat=3,
                min_protein=1,
                min_fiber=0,
                max_calories=100,
            ),
            FALLBACK_AGE_CRITERIA,
            AgeGroupCriteria(
                age_group=AgeGroup.TODDLER,
                max_sodium=200,
                max_sugar=8,
                max_fat=4,
                min_protein=3,
                min_fiber=2,
                max_calories=150,
            ),
            AgeGroupCriteria(
                age_group=AgeGroup.PRESCHOOL,
                max_sodium=300,
                max_sugar=12,
                max_fat=5,
                min_protein=4,
                min_fiber=3,
                max_calories=200,
            ),
        ),
        categories=(
            CategoryCriteria(
                category=ProductCategory.PUREES,
                max_sodium=140,
                max_sugar=6,
                max_fat=3,
                min_protein=2,
                min_fiber=1,
                max_calories=120,
                bonus_points=5,
                penalty_points=10,
            ),
            CategoryCriteria(
                category=ProductCategory.SNACKS,
                max_sodium=200,
                max_sugar=8,
                max_fat=4,
                min_protein=3,
                min_fiber=2,
                max_calories=150,
                bonus_points=0,
                penalty_points=15,
            ),
        ),
        artificial_ingredients=(
            "artificial colors",
            "artificial flavors",
            "artificial sweeteners",
            "aspartame",
            "saccharin",
            "sucralose",
            "acesulfame potassium",
            "high fructose corn syrup",
            "partially hydrogenated",
            "trans fat",
        ),
        allergens=(
            "milk",
            "eggs",
            "fish",
            "shellfish",
            "tree nuts",
            "peanuts",
            "wheat",
            "soy",
        ),
        last_updated=now or datetime.now(tz=UTC),
    )
