"""Grading engine scoring products for infant and toddler suitability."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from little_bites.domain.grading import (
    GRADING_WEIGHTS,
    SEVERITY_MULTIPLIERS,
    AgeGroupCriteria,
    GradeHighlight,
    GradingCriteria,
    HighlightCategory,
    LetterGrade,
    ProductGrade,
    Severity,
)
from little_bites.domain.nutrition import NutritionRecord
from little_bites.services.criteria import CriteriaService

MAX_SCORE = 100.0
MIN_SCORE = 0.0

_HIGH_RATIO = 2.0
_MEDIUM_RATIO = 1.5

_GRADE_BANDS: tuple[tuple[float, LetterGrade], ...] = (
    (90, LetterGrade.A),
    (80, LetterGrade.B),
    (70, LetterGrade.C),
    (60, LetterGrade.D),
)

_GRADE_RECOMMENDATIONS: dict[LetterGrade, tuple[str, str]] = {
    LetterGrade.A: (
        "Excellent choice for your baby!",
        "This product meets all nutritional guidelines.",
    ),
    LetterGrade.B: (
        "Good choice with minor concerns.",
        "Consider as an occasional treat rather than daily food.",
    ),
    LetterGrade.C: (
        "Moderate nutritional value.",
        "Consider healthier alternatives for regular consumption.",
    ),
    LetterGrade.D: (
        "Not recommended for regular consumption.",
        "Look for products with lower sugar and sodium content.",
    ),
    LetterGrade.F: (
        "Not suitable for babies.",
        "Choose products specifically designed for infant nutrition.",
    ),
}

_HIGHLIGHT_RECOMMENDATIONS: dict[HighlightCategory, str] = {
    HighlightCategory.SUGAR: "Look for products with no added sugars.",
    HighlightCategory.SODIUM: "Choose low-sodium alternatives.",
    HighlightCategory.ARTIFICIAL: "Prefer products with natural ingredients only.",
    HighlightCategory.ALLERGENS: "Consult with pediatrician before introducing.",
}

_logger = logging.getLogger(__name__)


class GradingError(RuntimeError):
    """Raised when a product cannot be graded."""


def grade_product(
    nutrition: NutritionRecord,
    age_group: str,
    criteria: GradingCriteria,
    *,
    now: datetime | None = None,
) -> ProductGrade:
    """Grade a product for an age group against the supplied criteria.

    The result is all-or-nothing: any unexpected failure during analysis,
    scoring or recommendation generation raises ``GradingError``.
    """
    try:
        highlights = analyze_nutrition(nutrition, age_group, criteria)
        score = calculate_score(highlights)
        grade = grade_for_score(score)
        recommendations = generate_recommendations(highlights, grade)
    except Exception as exc:
        _logger.exception(
            "Grading failed: barcode=%s age_group=%s",
            getattr(nutrition, "barcode", None),
            age_group,
        )
        raise GradingError("Failed to grade product") from exc

    return ProductGrade(
        grade=grade,
        score=score,
        highlights=tuple(highlights),
        recommendations=tuple(recommendations),
        timestamp=now or datetime.now(tz=UTC),
    )


def analyze_nutrition(
    nutrition: NutritionRecord, age_group: str, criteria: GradingCriteria
) -> list[GradeHighlight]:
    """Return highlights in detection order."""
    limits = criteria.for_age_group(age_group)
    facts = nutrition.facts
    highlights: list[GradeHighlight] = []

    highlights.extend(
        _excess(
            HighlightCategory.SUGAR,
            "sugar",
            facts.total_sugars,
            limits.max_sugar,
            "g",
            age_group,
        )
    )
    highlights.extend(
        _excess(
            HighlightCategory.SODIUM,
            "sodium",
            facts.sodium,
            limits.max_sodium,
            "mg",
            age_group,
        )
    )
    highlights.extend(
        _excess(
            HighlightCategory.FAT,
            "fat",
            facts.total_fat,
            limits.max_fat,
            "g",
            age_group,
        )
    )

    artificial = detect_keywords(nutrition.ingredients, criteria.artificial_ingredients)
    if artificial:
        highlights.append(
            GradeHighlight(
                category=HighlightCategory.ARTIFICIAL,
                severity=_severity_for_count(len(artificial)),
                message=f"Contains artificial ingredients: {', '.join(artificial)}",
                impact="Artificial ingredients may not be suitable for young children",
            )
        )

    allergens = detect_keywords(nutrition.allergens, criteria.allergens)
    if allergens:
        highlights.append(
            GradeHighlight(
                category=HighlightCategory.ALLERGENS,
                severity=Severity.HIGH,
                message=f"Contains allergens: {', '.join(allergens)}",
                impact="May cause allergic reactions in sensitive children",
            )
        )

    highlights.extend(
        _deficiency("protein", facts.protein, limits.min_protein, age_group)
    )
    highlights.extend(
        _deficiency("fiber", facts.dietary_fiber, limits.min_fiber, age_group)
    )
    highlights.extend(_excess_calories(facts.calories, limits, age_group))
    return highlights


def severity_for(value: float, limit: float) -> Severity:
    """Classify how far ``value`` is from ``limit`` by their ratio."""
    ratio = _ratio(value, limit)
    if ratio >= _HIGH_RATIO:
        return Severity.HIGH
    if ratio >= _MEDIUM_RATIO:
        return Severity.MEDIUM
    return Severity.LOW


def detect_keywords(texts: Iterable[str], keywords: Iterable[str]) -> list[str]:
    """Return keywords found in any text, in first-match order, deduplicated."""
    keyword_list = list(keywords)
    seen: set[str] = set()
    matched: list[str] = []
    for text in texts:
        lowered = text.lower()
        for keyword in keyword_list:
            if keyword in seen:
                continue
            if keyword.lower() in lowered:
                seen.add(keyword)
                matched.append(keyword)
    return matched


def calculate_score(highlights: Iterable[GradeHighlight]) -> float:
    """Subtract weighted penalties from a perfect score, clamped to [0, 100]."""
    score = MAX_SCORE
    for highlight in highlights:
        weight = GRADING_WEIGHTS[highlight.category]
        score -= weight * SEVERITY_MULTIPLIERS[highlight.severity]
    return max(MIN_SCORE, min(MAX_SCORE, score))


def grade_for_score(score: float) -> LetterGrade:
    """Map a numeric score to its letter grade band."""
    for lower_bound, grade in _GRADE_BANDS:
        if score >= lower_bound:
            return grade
    return LetterGrade.F


def generate_recommendations(
    highlights: Iterable[GradeHighlight], grade: LetterGrade
) -> list[str]:
    """Return grade-level advice followed by one line per actionable highlight."""
    recommendations = list(_GRADE_RECOMMENDATIONS[grade])
    for highlight in highlights:
        extra = _HIGHLIGHT_RECOMMENDATIONS.get(highlight.category)
        if extra is not None:
            recommendations.append(extra)
    return recommendations


@dataclass
class GradingService:
    """Grades products using layered criteria configuration."""

    criteria_service: CriteriaService

    def grade(
        self,
        nutrition: NutritionRecord,
        age_group: str,
        criteria: GradingCriteria | None = None,
    ) -> ProductGrade:
        """Grade with caller criteria, else stored criteria, else defaults."""
        resolved = criteria or self.criteria_service.load()
        result = grade_product(nutrition, age_group, resolved)
        _logger.info(
            "Graded product: barcode=%s age_group=%s grade=%s score=%s",
            nutrition.barcode,
            age_group,
            result.grade,
            result.score,
        )
        return result


def _excess(
    category: HighlightCategory,
    label: str,
    value: float,
    limit: float,
    unit: str,
    age_group: str,
) -> list[GradeHighlight]:
    if value <= limit:
        return []
    return [
        GradeHighlight(
            category=category,
            severity=severity_for(value, limit),
            message=f"High {label} content: {_fmt(value)}{unit} per serving",
            impact=(
                f"Exceeds recommended limit of {_fmt(limit)}{unit} for {age_group}"
            ),
        )
    ]


def _deficiency(
    label: str, value: float, minimum: float, age_group: str
) -> list[GradeHighlight]:
    if value >= minimum:
        return []
    # Arguments swap for shortfalls: the ratio grows as the value drops.
    return [
        GradeHighlight(
            category=HighlightCategory.NUTRITION,
            severity=severity_for(minimum, value),
            message=f"Low {label} content: {_fmt(value)}g per serving",
            impact=(
                f"Below recommended minimum of {_fmt(minimum)}g for {age_group}"
            ),
        )
    ]


def _excess_calories(
    calories: float, limits: AgeGroupCriteria, age_group: str
) -> list[GradeHighlight]:
    if calories <= limits.max_calories:
        return []
    return [
        GradeHighlight(
            category=HighlightCategory.NUTRITION,
            severity=severity_for(calories, limits.max_calories),
            message=f"High calorie content: {_fmt(calories)} calories per serving",
            impact=(
                f"Exceeds recommended limit of {_fmt(limits.max_calories)} "
                f"calories for {age_group}"
            ),
        )
    ]


def _severity_for_count(matches: int) -> Severity:
    if matches > 3:  # noqa: PLR2004
        return Severity.HIGH
    if matches > 1:
        return Severity.MEDIUM
    return Severity.LOW


def _ratio(value: float, limit: float) -> float:
    if limit == 0:
        return math.inf if value > 0 else 0.0
    return value / limit


def _fmt(amount: float) -> str:
    value = float(amount)
    return str(int(value)) if value.is_integer() else repr(value)
