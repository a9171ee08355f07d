"""Tests for the criteria service."""

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from little_bites.domain.grading import AgeGroup, default_grading_criteria
from little_bites.services.criteria import CriteriaService, validate_criteria
from tests.conftest import InMemoryCriteriaRepository


def test_load_returns_defaults_when_nothing_stored() -> None:
    service = CriteriaService(InMemoryCriteriaRepository())

    criteria = service.load()

    assert {entry.age_group for entry in criteria.age_groups} == {
        group.value for group in AgeGroup
    }
    assert len(criteria.artificial_ingredients) == 10
    assert len(criteria.allergens) == 8
    assert [entry.category for entry in criteria.categories] == ["purees", "snacks"]


def test_load_returns_stored_criteria() -> None:
    stored = replace(default_grading_criteria(), allergens=("sesame",))
    service = CriteriaService(InMemoryCriteriaRepository(stored=stored))

    assert service.load().allergens == ("sesame",)


def test_load_falls_back_when_repository_fails() -> None:
    service = CriteriaService(InMemoryCriteriaRepository(fail_reads=True))

    assert service.load().allergens[0] == "milk"


def test_save_stamps_last_updated() -> None:
    repository = InMemoryCriteriaRepository()
    service = CriteriaService(repository)
    old = default_grading_criteria(datetime(2020, 1, 1, tzinfo=UTC))

    saved = service.save(old)

    assert saved.last_updated > old.last_updated
    assert repository.stored == saved


def test_save_rejects_missing_age_group() -> None:
    criteria = default_grading_criteria()
    broken = replace(criteria, age_groups=criteria.age_groups[:3])
    repository = InMemoryCriteriaRepository()

    with pytest.raises(ValueError, match="one entry per age group"):
        CriteriaService(repository).save(broken)
    assert repository.saves == 0


def test_validate_rejects_duplicate_and_negative_entries() -> None:
    criteria = default_grading_criteria()
    duplicated = replace(
        criteria, age_groups=(*criteria.age_groups, criteria.age_groups[0])
    )
    negative = replace(
        criteria,
        age_groups=(
            replace(criteria.age_groups[0], max_sodium=-1),
            *criteria.age_groups[1:],
        ),
    )

    with pytest.raises(ValueError):
        validate_criteria(duplicated)
    with pytest.raises(ValueError, match="max_sodium"):
        validate_criteria(negative)


def test_reset_restores_defaults() -> None:
    stored = replace(default_grading_criteria(), allergens=())
    repository = InMemoryCriteriaRepository(stored=stored)

    CriteriaService(repository).reset()

    assert repository.stored is not None
    assert "soy" in repository.stored.allergens
