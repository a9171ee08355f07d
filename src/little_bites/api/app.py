"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from little_bites.adapters.serialization import (
    grading_criteria_to_dict,
    nutrition_record_to_dict,
    product_grade_to_dict,
    scanned_product_to_dict,
)
from little_bites.api.admin import router as admin_router
from little_bites.api.models import (
    FavoriteRequest,
    GradeRequest,
    RegradeRequest,
    ScanRequest,
)
from little_bites.app_logging import configure_logging
from little_bites.containers import AppContainer
from little_bites.services.grading import GradingError
from little_bites.services.nutrition import NutritionLookupError
from little_bites.services.scans import InvalidBarcodeError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    default_age_group = container.settings.default_age_group

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/scans")
    async def scan_product(payload: ScanRequest, request: Request) -> dict[str, object]:
        """Look up, grade and record a scanned barcode."""
        state_container: AppContainer = request.app.state.container
        age_group = payload.age_group or default_age_group
        try:
            product = await state_container.scan_service.scan(
                payload.barcode, age_group
            )
        except InvalidBarcodeError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        except NutritionLookupError as exc:
            logger.warning("Scan lookup failed: barcode=%s", payload.barcode)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        except GradingError as exc:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
            ) from exc
        return scanned_product_to_dict(product)

    @app.post("/grades")
    async def grade_nutrition(
        payload: GradeRequest, request: Request
    ) -> dict[str, object]:
        """Grade a caller-supplied nutrition record without recording it."""
        state_container: AppContainer = request.app.state.container
        age_group = payload.age_group or default_age_group
        try:
            grade = state_container.grading_service.grade(
                payload.nutrition.to_domain(), age_group
            )
        except GradingError as exc:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
            ) from exc
        return product_grade_to_dict(grade)

    @app.get("/products/search")
    async def search_products(
        q: str, request: Request, limit: int = 10
    ) -> dict[str, object]:
        """Search products by name."""
        state_container: AppContainer = request.app.state.container
        try:
            results = await state_container.nutrition_service.search_by_name(
                q, limit=limit
            )
        except NutritionLookupError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        return {"products": [nutrition_record_to_dict(record) for record in results]}

    @app.get("/history")
    async def list_history(
        request: Request, favorites_only: bool = False
    ) -> dict[str, object]:
        """Return scan history, newest first."""
        state_container: AppContainer = request.app.state.container
        history = state_container.history_service
        if favorites_only:
            products = history.list_favorites()
        else:
            products = history.list_products()
        return {"products": [scanned_product_to_dict(product) for product in products]}

    @app.get("/history/{barcode}")
    async def get_history_entry(barcode: str, request: Request) -> dict[str, object]:
        """Return one history entry."""
        state_container: AppContainer = request.app.state.container
        product = state_container.history_service.get_product(barcode)
        if product is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return scanned_product_to_dict(product)

    @app.post("/history/{barcode}/favorite")
    async def update_favorite(
        barcode: str, payload: FavoriteRequest, request: Request
    ) -> dict[str, object]:
        """Set or toggle the favorite flag of a history entry."""
        state_container: AppContainer = request.app.state.container
        history = state_container.history_service
        if payload.is_favorite is None:
            product = history.toggle_favorite(barcode)
        else:
            product = history.set_favorite(barcode, payload.is_favorite)
        if product is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return scanned_product_to_dict(product)

    @app.post("/history/{barcode}/regrade")
    async def regrade_history_entry(
        barcode: str, payload: RegradeRequest, request: Request
    ) -> dict[str, object]:
        """Regrade a stored product for another age group."""
        state_container: AppContainer = request.app.state.container
        try:
            product = state_container.scan_service.regrade(barcode, payload.age_group)
        except GradingError as exc:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
            ) from exc
        if product is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return scanned_product_to_dict(product)

    @app.get("/criteria")
    async def get_criteria(request: Request) -> dict[str, object]:
        """Return the active grading criteria."""
        state_container: AppContainer = request.app.state.container
        return grading_criteria_to_dict(state_container.criteria_service.load())

    return app
