"""Supabase repository for grading criteria."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from little_bites.adapters.serialization import (
    grading_criteria_from_dict,
    grading_criteria_to_dict,
)
from little_bites.domain.grading import GradingCriteria
from little_bites.services.criteria import CriteriaRepository

_TABLE = "grading_criteria"
_ROW_ID = "default"


@dataclass
class SupabaseCriteriaRepository(CriteriaRepository):
    """Supabase implementation storing a single criteria bundle."""

    client: Client

    def get_criteria(self) -> GradingCriteria | None:
        """Return the stored criteria bundle, if any."""
        response = (
            self.client.table(_TABLE)
            .select("payload")
            .eq("id", _ROW_ID)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        payload = response.data[0].get("payload")
        if not isinstance(payload, dict):
            return None
        return grading_criteria_from_dict(payload)

    def save_criteria(self, criteria: GradingCriteria) -> None:
        """Insert or replace the stored criteria bundle."""
        response = (
            self.client.table(_TABLE)
            .upsert(
                {
                    "id": _ROW_ID,
                    "payload": grading_criteria_to_dict(criteria),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save grading criteria")
