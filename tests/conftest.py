"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from little_bites.adapters.fatsecret_client import FatSecretApiError, FatSecretClient
from little_bites.config import Settings
from little_bites.containers import AppContainer
from little_bites.domain.grading import GradingCriteria, ScannedProduct
from little_bites.domain.nutrition import NutritionFacts, NutritionRecord
from little_bites.services.cache import InMemoryCache
from little_bites.services.criteria import CriteriaRepository, CriteriaService
from little_bites.services.grading import GradingService
from little_bites.services.history import HistoryRepository, HistoryService
from little_bites.services.nutrition import NutritionService
from little_bites.services.scans import ScanService

VALID_EAN_13 = "4006381333931"
VALID_UPC_A = "036000291452"
VALID_EAN_8 = "73513537"


@dataclass
class InMemoryCriteriaRepository(CriteriaRepository):
    """In-memory criteria repository for tests."""

    stored: GradingCriteria | None = None
    fail_reads: bool = False
    saves: int = 0

    def get_criteria(self) -> GradingCriteria | None:
        if self.fail_reads:
            raise RuntimeError("storage unavailable")
        return self.stored

    def save_criteria(self, criteria: GradingCriteria) -> None:
        self.saves += 1
        self.stored = criteria


@dataclass
class InMemoryHistoryRepository(HistoryRepository):
    """In-memory history repository for tests."""

    products: list[ScannedProduct] = field(default_factory=list)

    def list_products(self) -> list[ScannedProduct]:
        return list(self.products)

    def save_product(self, product: ScannedProduct) -> None:
        for index, existing in enumerate(self.products):
            if existing.barcode == product.barcode:
                self.products[index] = product
                return
        self.products.insert(0, product)

    def delete_products(self, barcodes: list[str]) -> None:
        doomed = set(barcodes)
        self.products = [p for p in self.products if p.barcode not in doomed]

    def clear(self) -> None:
        self.products = []


@dataclass
class FakeFatSecretClient(FatSecretClient):
    """Fake FatSecret client returning a fixed product."""

    foods: list[dict[str, object]] = field(
        default_factory=lambda: [
            {
                "food_id": "42",
                "food_name": "Apple Puree",
                "brand_name": "Little Spoon",
            }
        ]
    )
    servings: list[dict[str, object]] = field(
        default_factory=lambda: [
            {
                "serving_description": "1 pouch",
                "calories": "60",
                "fat": "0.2",
                "sodium": "5",
                "carbohydrate": "14",
                "fiber": "1.5",
                "sugar": "4",
                "protein": "2.5",
            }
        ]
    )
    search_calls: int = 0
    food_calls: int = 0
    token_calls: int = 0
    fail_token: bool = False

    async def get_access_token(self) -> str:
        self.token_calls += 1
        if self.fail_token:
            raise FatSecretApiError("Invalid API credentials or token expired", 401)
        return "token"

    async def search_foods(
        self, expression: str, max_results: int = 10
    ) -> list[dict[str, object]]:
        self.search_calls += 1
        return self.foods[:max_results]

    async def get_food(self, food_id: str) -> dict[str, object]:
        self.food_calls += 1
        return {"food_id": food_id, "servings": {"serving": self.servings}}


def make_record(
    facts: NutritionFacts | None = None,
    *,
    barcode: str = VALID_EAN_13,
    ingredients: tuple[str, ...] = (),
    allergens: tuple[str, ...] = (),
) -> NutritionRecord:
    return NutritionRecord(
        barcode=barcode,
        product_name="Test Product",
        serving_size="1 pouch",
        facts=facts or NutritionFacts(),
        ingredients=ingredients,
        allergens=allergens,
        retrieved_at=datetime(2024, 5, 1, 12, 0, tzinfo=UTC),
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        fatsecret_client_id="client-id",
        fatsecret_client_secret="client-secret",
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
    )


@pytest.fixture
def fatsecret_client() -> FakeFatSecretClient:
    return FakeFatSecretClient()


@pytest.fixture
def criteria_repository() -> InMemoryCriteriaRepository:
    return InMemoryCriteriaRepository()


@pytest.fixture
def history_repository() -> InMemoryHistoryRepository:
    return InMemoryHistoryRepository()


@pytest.fixture
def container(
    settings: Settings,
    fatsecret_client: FakeFatSecretClient,
    criteria_repository: InMemoryCriteriaRepository,
    history_repository: InMemoryHistoryRepository,
) -> AppContainer:
    nutrition_service = NutritionService(
        client=fatsecret_client,
        cache=InMemoryCache(),
        retry_delay_seconds=0,
    )
    criteria_service = CriteriaService(criteria_repository)
    grading_service = GradingService(criteria_service)
    history_service = HistoryService(history_repository, max_scan_history=5)
    scan_service = ScanService(
        nutrition_service=nutrition_service,
        grading_service=grading_service,
        history_service=history_service,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        nutrition_service=nutrition_service,
        criteria_service=criteria_service,
        grading_service=grading_service,
        history_service=history_service,
        scan_service=scan_service,
        close_resources=close_resources,
    )
