"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from little_bites.adapters.fatsecret_client import HttpxFatSecretClient
from little_bites.adapters.supabase_criteria_repository import (
    SupabaseCriteriaRepository,
)
from little_bites.adapters.supabase_history_repository import (
    SupabaseHistoryRepository,
)
from little_bites.config import Settings
from little_bites.services.cache import InMemoryCache
from little_bites.services.criteria import CriteriaService
from little_bites.services.grading import GradingService
from little_bites.services.history import HistoryService
from little_bites.services.nutrition import NutritionService
from little_bites.services.scans import ScanService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    nutrition_service: NutritionService
    criteria_service: CriteriaService
    grading_service: GradingService
    history_service: HistoryService
    scan_service: ScanService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    fatsecret_client = HttpxFatSecretClient.create(
        client_id=resolved_settings.fatsecret_client_id,
        client_secret=resolved_settings.fatsecret_client_secret,
        base_url=resolved_settings.fatsecret_base_url,
        token_url=resolved_settings.fatsecret_token_url,
        timeout_seconds=resolved_settings.fatsecret_timeout_seconds,
    )
    nutrition_service = NutritionService(
        client=fatsecret_client,
        cache=InMemoryCache(),
        cache_expiry_hours=resolved_settings.cache_expiry_hours,
        enable_caching=resolved_settings.enable_caching,
    )
    criteria_service = CriteriaService(SupabaseCriteriaRepository(supabase_client))
    grading_service = GradingService(criteria_service)
    history_service = HistoryService(
        repository=SupabaseHistoryRepository(supabase_client),
        max_scan_history=resolved_settings.max_scan_history,
    )
    scan_service = ScanService(
        nutrition_service=nutrition_service,
        grading_service=grading_service,
        history_service=history_service,
    )

    async def close_resources() -> None:
        await fatsecret_client.close()

    return AppContainer(
        settings=resolved_settings,
        nutrition_service=nutrition_service,
        criteria_service=criteria_service,
        grading_service=grading_service,
        history_service=history_service,
        scan_service=scan_service,
        close_resources=close_resources,
    )
