"""Tests for configuration helpers."""

import pytest
from pydantic import ValidationError

from little_bites.config import Settings, parse_age_group
from little_bites.domain.grading import AgeGroup


def test_parse_age_group() -> None:
    assert parse_age_group("6-12months") is AgeGroup.INFANT
    assert parse_age_group(" 2-5 Years ") is AgeGroup.PRESCHOOL
    assert parse_age_group("") is None
    assert parse_age_group(None) is None
    assert parse_age_group("teen") is None


def test_settings_defaults(settings: Settings) -> None:
    assert settings.cache_expiry_hours == 24
    assert settings.max_scan_history == 100
    assert settings.enable_caching is True
    assert settings.default_age_group == "6-12months"


def test_settings_normalize_default_age_group(settings: Settings) -> None:
    updated = Settings(**{**settings.model_dump(), "default_age_group": " 2-5 Years"})

    assert updated.default_age_group == "2-5years"


def test_settings_reject_unknown_default_age_group(settings: Settings) -> None:
    with pytest.raises(ValidationError, match="Unknown age group"):
        Settings(**{**settings.model_dump(), "default_age_group": "teen"})
