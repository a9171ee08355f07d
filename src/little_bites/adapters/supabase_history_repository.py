"""Supabase implementation for scan history."""

from dataclasses import dataclass

from supabase import Client

from little_bites.adapters.serialization import (
    scanned_product_from_dict,
    scanned_product_to_dict,
)
from little_bites.domain.grading import ScannedProduct
from little_bites.services.history import HistoryRepository

_TABLE = "scanned_products"


@dataclass
class SupabaseHistoryRepository(HistoryRepository):
    """Supabase-backed scan history, one row per barcode.

    Rows sort by ascending ``position``; a new barcode takes a position below
    the current minimum so it lands at the front without touching other rows.
    """

    client: Client

    def list_products(self) -> list[ScannedProduct]:
        """Return stored products ordered newest first."""
        response = (
            self.client.table(_TABLE)
            .select("barcode, position, payload")
            .order("position")
            .execute()
        )
        return [_parse_product(row) for row in response.data or []]

    def save_product(self, product: ScannedProduct) -> None:
        """Overwrite the row for the barcode, or add a new row at the front."""
        existing = (
            self.client.table(_TABLE)
            .select("position")
            .eq("barcode", product.barcode)
            .limit(1)
            .execute()
        )
        row = _product_row(product)
        if existing.data:
            response = (
                self.client.table(_TABLE)
                .update(row)
                .eq("barcode", product.barcode)
                .execute()
            )
        else:
            row["position"] = self._front_position()
            response = (
                self.client.table(_TABLE).upsert(row, on_conflict="barcode").execute()
            )
        if not response.data:
            raise RuntimeError(f"Failed to save scanned product {product.barcode}")

    def delete_products(self, barcodes: list[str]) -> None:
        """Delete the rows for the given barcodes."""
        if not barcodes:
            return
        self.client.table(_TABLE).delete().in_("barcode", barcodes).execute()

    def clear(self) -> None:
        """Delete every history row."""
        self.client.table(_TABLE).delete().neq("barcode", "").execute()

    def _front_position(self) -> int:
        response = (
            self.client.table(_TABLE)
            .select("position")
            .order("position")
            .limit(1)
            .execute()
        )
        if not response.data:
            return 0
        return int(response.data[0]["position"]) - 1


def _product_row(product: ScannedProduct) -> dict[str, object]:
    return {
        "barcode": product.barcode,
        "is_favorite": product.is_favorite,
        "scan_date": product.scan_date.isoformat(),
        "payload": scanned_product_to_dict(product),
    }


def _parse_product(row: dict[str, object]) -> ScannedProduct:
    """Parse a history row into a domain model."""
    payload = row.get("payload")
    if not isinstance(payload, dict):
        raise RuntimeError(f"Malformed history row for barcode {row.get('barcode')}")
    return scanned_product_from_dict(payload)
