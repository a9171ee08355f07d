"""Grading criteria store with built-in defaults."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol

from little_bites.domain.grading import (
    AgeGroup,
    GradingCriteria,
    default_grading_criteria,
)

_logger = logging.getLogger(__name__)

_THRESHOLD_FIELDS = (
    "max_sodium",
    "max_sugar",
    "max_fat",
    "min_protein",
    "min_fiber",
    "max_calories",
)


class CriteriaRepository(Protocol):
    """Persistence interface for grading criteria."""

    def get_criteria(self) -> GradingCriteria | None:
        """Return stored criteria, if any."""

    def save_criteria(self, criteria: GradingCriteria) -> None:
        """Persist criteria, replacing any stored bundle."""


@dataclass
class CriteriaService:
    """Loads and stores grading criteria."""

    repository: CriteriaRepository

    def load(self) -> GradingCriteria:
        """Return stored criteria, or the built-in defaults."""
        try:
            stored = self.repository.get_criteria()
        except Exception:
            _logger.exception("Failed to read stored grading criteria")
            stored = None
        if stored is not None:
            return stored
        return default_grading_criteria()

    def save(self, criteria: GradingCriteria) -> GradingCriteria:
        """Validate, timestamp and persist criteria."""
        validate_criteria(criteria)
        stamped = replace(criteria, last_updated=datetime.now(tz=UTC))
        self.repository.save_criteria(stamped)
        _logger.info("Saved grading criteria: updated_at=%s", stamped.last_updated)
        return stamped

    def reset(self) -> GradingCriteria:
        """Replace stored criteria with the built-in defaults."""
        defaults = default_grading_criteria()
        self.repository.save_criteria(defaults)
        return defaults


def validate_criteria(criteria: GradingCriteria) -> None:
    """Ensure one entry per age group and non-negative thresholds."""
    seen = [entry.age_group for entry in criteria.age_groups]
    expected = {group.value for group in AgeGroup}
    if sorted(seen) != sorted(expected):
        raise ValueError(
            "Grading criteria must define exactly one entry per age group: "
            + ", ".join(sorted(expected))
        )
    for entry in (*criteria.age_groups, *criteria.categories):
        for name in _THRESHOLD_FIELDS:
            if getattr(entry, name) < 0:
                raise ValueError(f"Threshold {name} must be non-negative")
