"""JSON-safe conversion of domain records for persistence and the API."""

from dataclasses import asdict
from datetime import datetime

from little_bites.domain.grading import (
    AgeGroupCriteria,
    CategoryCriteria,
    GradeHighlight,
    GradingCriteria,
    HighlightCategory,
    LetterGrade,
    ProductGrade,
    ScannedProduct,
    Severity,
)
from little_bites.domain.nutrition import NutritionRecord, nutrition_facts_from_mapping


def nutrition_record_to_dict(record: NutritionRecord) -> dict[str, object]:
    """Serialize a nutrition record."""
    return {
        "barcode": record.barcode,
        "product_name": record.product_name,
        "brand_name": record.brand_name,
        "serving_size": record.serving_size,
        "facts": asdict(record.facts),
        "ingredients": list(record.ingredients),
        "allergens": list(record.allergens),
        "retrieved_at": record.retrieved_at.isoformat(),
    }


def nutrition_record_from_dict(data: dict[str, object]) -> NutritionRecord:
    """Parse a serialized nutrition record."""
    facts = data.get("facts")
    return NutritionRecord(
        barcode=str(data.get("barcode", "")),
        product_name=str(data.get("product_name", "")),
        brand_name=data.get("brand_name"),  # type: ignore[arg-type]
        serving_size=str(data.get("serving_size", "")),
        facts=nutrition_facts_from_mapping(facts if isinstance(facts, dict) else {}),
        ingredients=tuple(str(item) for item in data.get("ingredients") or []),
        allergens=tuple(str(item) for item in data.get("allergens") or []),
        retrieved_at=_parse_datetime(data["retrieved_at"]),
    )


def product_grade_to_dict(grade: ProductGrade) -> dict[str, object]:
    """Serialize a grade, keeping highlight and recommendation order."""
    return {
        "grade": grade.grade.value,
        "score": grade.score,
        "highlights": [
            {
                "category": highlight.category.value,
                "severity": highlight.severity.value,
                "message": highlight.message,
                "impact": highlight.impact,
            }
            for highlight in grade.highlights
        ],
        "recommendations": list(grade.recommendations),
        "timestamp": grade.timestamp.isoformat(),
    }


def product_grade_from_dict(data: dict[str, object]) -> ProductGrade:
    """Parse a serialized grade."""
    return ProductGrade(
        grade=LetterGrade(data["grade"]),
        score=float(data["score"]),  # type: ignore[arg-type]
        highlights=tuple(
            GradeHighlight(
                category=HighlightCategory(item["category"]),
                severity=Severity(item["severity"]),
                message=str(item["message"]),
                impact=str(item["impact"]),
            )
            for item in data.get("highlights") or []
        ),
        recommendations=tuple(str(item) for item in data.get("recommendations") or []),
        timestamp=_parse_datetime(data["timestamp"]),
    )


def scanned_product_to_dict(product: ScannedProduct) -> dict[str, object]:
    """Serialize a history entry."""
    return {
        "barcode": product.barcode,
        "nutrition": nutrition_record_to_dict(product.nutrition),
        "grade": product_grade_to_dict(product.grade),
        "scan_date": product.scan_date.isoformat(),
        "is_favorite": product.is_favorite,
    }


def scanned_product_from_dict(data: dict[str, object]) -> ScannedProduct:
    """Parse a serialized history entry."""
    return ScannedProduct(
        barcode=str(data["barcode"]),
        nutrition=nutrition_record_from_dict(data["nutrition"]),  # type: ignore[arg-type]
        grade=product_grade_from_dict(data["grade"]),  # type: ignore[arg-type]
        scan_date=_parse_datetime(data["scan_date"]),
        is_favorite=bool(data.get("is_favorite", False)),
    )


def grading_criteria_to_dict(criteria: GradingCriteria) -> dict[str, object]:
    """Serialize a criteria bundle."""
    return {
        "age_groups": [_plain(asdict(entry)) for entry in criteria.age_groups],
        "categories": [_plain(asdict(entry)) for entry in criteria.categories],
        "artificial_ingredients": list(criteria.artificial_ingredients),
        "allergens": list(criteria.allergens),
        "last_updated": criteria.last_updated.isoformat(),
    }


def grading_criteria_from_dict(data: dict[str, object]) -> GradingCriteria:
    """Parse a serialized criteria bundle."""
    return GradingCriteria(
        age_groups=tuple(
            AgeGroupCriteria(**entry) for entry in data.get("age_groups") or []
        ),
        categories=tuple(
            CategoryCriteria(**entry) for entry in data.get("categories") or []
        ),
        artificial_ingredients=tuple(
            str(item) for item in data.get("artificial_ingredients") or []
        ),
        allergens=tuple(str(item) for item in data.get("allergens") or []),
        last_updated=_parse_datetime(data["last_updated"]),
    )


def _plain(values: dict[str, object]) -> dict[str, object]:
    """Unwrap enum members so the payload is plain JSON."""
    return {
        key: str(value) if isinstance(value, str) else value
        for key, value in values.items()
    }


def _parse_datetime(raw: object) -> datetime:
    if isinstance(raw, datetime):
        return raw
    return datetime.fromisoformat(str(raw))
