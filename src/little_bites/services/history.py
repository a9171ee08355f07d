"""Scan history service."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from little_bites.domain.grading import ScannedProduct

_logger = logging.getLogger(__name__)


class HistoryRepository(Protocol):
    """Persistence interface for scan history, newest first."""

    def list_products(self) -> list[ScannedProduct]:
        """Return all stored products in history order."""

    def save_product(self, product: ScannedProduct) -> None:
        """Overwrite the entry for the barcode in place, or add it at the front."""

    def delete_products(self, barcodes: list[str]) -> None:
        """Remove the entries for the given barcodes."""

    def clear(self) -> None:
        """Remove all stored products."""


@dataclass
class HistoryService:
    """Keeps one entry per barcode, capped at ``max_scan_history``."""

    repository: HistoryRepository
    max_scan_history: int = 100

    def save_scan(self, product: ScannedProduct) -> None:
        """Store a scan, overwriting any prior entry for the barcode."""
        self.repository.save_product(product)
        overflow = self.repository.list_products()[self.max_scan_history :]
        if overflow:
            self.repository.delete_products([item.barcode for item in overflow])
            _logger.info("Trimmed scan history: dropped=%s", len(overflow))

    def list_products(self) -> list[ScannedProduct]:
        """Return scan history, newest first."""
        return self.repository.list_products()

    def get_product(self, barcode: str) -> ScannedProduct | None:
        """Return the history entry for a barcode, if present."""
        for product in self.repository.list_products():
            if product.barcode == barcode:
                return product
        return None

    def list_favorites(self) -> list[ScannedProduct]:
        """Return favorite products in history order."""
        return [product for product in self.list_products() if product.is_favorite]

    def set_favorite(self, barcode: str, is_favorite: bool) -> ScannedProduct | None:
        """Set the favorite flag for a stored product."""
        product = self.get_product(barcode)
        if product is None:
            return None
        updated = replace(product, is_favorite=is_favorite)
        self.save_scan(updated)
        return updated

    def toggle_favorite(self, barcode: str) -> ScannedProduct | None:
        """Flip the favorite flag for a stored product."""
        product = self.get_product(barcode)
        if product is None:
            return None
        return self.set_favorite(barcode, not product.is_favorite)

    def clear(self) -> None:
        """Remove all history."""
        self.repository.clear()
