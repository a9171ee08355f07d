"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from little_bites.adapters.serialization import grading_criteria_to_dict
from little_bites.api.models import GradingCriteriaPayload  # noqa: TC001

if TYPE_CHECKING:
    from little_bites.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health(request: Request) -> dict[str, object]:
    """Admin health check including nutrition API reachability."""
    container: AppContainer = request.app.state.container
    available = await container.nutrition_service.is_available()
    return {"status": "ok", "nutrition_api_available": available}


@router.put("/criteria", dependencies=[Depends(require_admin)])
async def update_criteria(
    payload: GradingCriteriaPayload, request: Request
) -> dict[str, object]:
    """Replace the stored grading criteria."""
    container: AppContainer = request.app.state.container
    try:
        saved = container.criteria_service.save(payload.to_domain())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return grading_criteria_to_dict(saved)


@router.post("/criteria/reset", dependencies=[Depends(require_admin)])
async def reset_criteria(request: Request) -> dict[str, object]:
    """Restore the built-in grading criteria."""
    container: AppContainer = request.app.state.container
    return grading_criteria_to_dict(container.criteria_service.reset())


@router.delete("/history", dependencies=[Depends(require_admin)])
async def clear_history(request: Request) -> dict[str, str]:
    """Remove all scan history."""
    container: AppContainer = request.app.state.container
    container.history_service.clear()
    return {"status": "ok"}
