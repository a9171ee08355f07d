"""Scan-to-result workflow: lookup, grade and record a product."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from little_bites.domain.grading import ScannedProduct
from little_bites.services.barcodes import validate_barcode
from little_bites.services.grading import GradingService
from little_bites.services.history import HistoryService
from little_bites.services.nutrition import NutritionService

_logger = logging.getLogger(__name__)


class InvalidBarcodeError(ValueError):
    """Raised when a barcode fails format or check-digit validation."""


@dataclass
class ScanService:
    """Coordinates nutrition lookup, grading and history for a scan."""

    nutrition_service: NutritionService
    grading_service: GradingService
    history_service: HistoryService

    async def scan(self, barcode: str, age_group: str) -> ScannedProduct:
        """Grade a scanned barcode and record it in history.

        Lookup and grading errors propagate and nothing is written to history.
        A previously favorited product keeps its favorite flag.
        """
        code = (barcode or "").strip()
        if not validate_barcode(code):
            raise InvalidBarcodeError("Invalid barcode format. Please try again.")

        nutrition = await self.nutrition_service.get_by_barcode(code)
        grade = self.grading_service.grade(nutrition, age_group)
        existing = self.history_service.get_product(code)
        product = ScannedProduct(
            barcode=code,
            nutrition=nutrition,
            grade=grade,
            scan_date=datetime.now(tz=UTC),
            is_favorite=existing.is_favorite if existing else False,
        )
        self.history_service.save_scan(product)
        _logger.info(
            "Scan recorded: barcode=%s age_group=%s grade=%s",
            code,
            age_group,
            grade.grade,
        )
        return product

    def regrade(self, barcode: str, age_group: str) -> ScannedProduct | None:
        """Replace the stored grade of a product for another age group."""
        existing = self.history_service.get_product(barcode)
        if existing is None:
            return None
        grade = self.grading_service.grade(existing.nutrition, age_group)
        updated = replace(existing, grade=grade)
        self.history_service.save_scan(updated)
        return updated
