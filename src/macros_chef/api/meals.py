"""Saved meal, meal log and meal edit endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Body, Depends, Request, Response, status

from macros_chef.api.auth import require_user
from macros_chef.api.schemas import (
    CommitEditRequest,
    MealLogRequest,
    RescaleRequest,
    StartEditRequest,
)
from macros_chef.api.serializers import (
    edit_session_json,
    meal_log_entry_json,
    saved_meal_json,
)
from macros_chef.domain.errors import InvalidArgumentError, NotFoundError
from macros_chef.domain.models import CurrentUser  # noqa: TC001
from macros_chef.domain.payloads import parse_meal, parse_meal_payload

if TYPE_CHECKING:
    from macros_chef.containers import AppContainer

router = APIRouter(tags=["meals"])


@router.get("/saved-meals")
async def list_saved_meals(
    request: Request, user: CurrentUser = Depends(require_user)
) -> list[dict[str, object]]:
    """Return the user's saved meals without image data."""
    container: AppContainer = request.app.state.container
    meals = container.saved_meal_service.list_meals(user.id)
    return [saved_meal_json(meal) for meal in meals]


@router.post("/saved-meals", status_code=status.HTTP_201_CREATED)
async def save_meal(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user: CurrentUser = Depends(require_user),
) -> dict[str, object]:
    """Save a meal to the user's library."""
    container: AppContainer = request.app.state.container
    parsed = parse_meal_payload(payload)
    saved = container.saved_meal_service.save_meal(
        user.id, parsed.to_domain(), parsed.source
    )
    return saved_meal_json(saved)


@router.get("/saved-meals/{meal_id}")
async def get_saved_meal(
    meal_id: int, request: Request, user: CurrentUser = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    saved = container.saved_meal_service.get_meal(user.id, meal_id)
    if saved is None:
        raise NotFoundError("Meal not found.")
    return saved_meal_json(saved)


@router.delete("/saved-meals/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_saved_meal(
    meal_id: int, request: Request, user: CurrentUser = Depends(require_user)
) -> Response:
    container: AppContainer = request.app.state.container
    if not container.saved_meal_service.delete_meal(user.id, meal_id):
        raise NotFoundError("Meal not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/meal-log")
async def list_meal_log(
    request: Request, user: CurrentUser = Depends(require_user)
) -> list[dict[str, object]]:
    """Return the user's meal timeline without image data."""
    container: AppContainer = request.app.state.container
    entries = container.meal_log_service.list_entries(user.id)
    return [meal_log_entry_json(entry) for entry in entries]


@router.post("/meal-log", status_code=status.HTTP_201_CREATED)
async def create_meal_log_entry(
    body: MealLogRequest, request: Request, user: CurrentUser = Depends(require_user)
) -> dict[str, object]:
    """Log a meal, optionally with its photo."""
    container: AppContainer = request.app.state.container
    entry = container.meal_log_service.log_meal(
        user.id, parse_meal(body.meal_data), body.image_base64
    )
    return meal_log_entry_json(entry)


@router.get("/meal-log/{entry_id}")
async def get_meal_log_entry(
    entry_id: int, request: Request, user: CurrentUser = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    entry = container.meal_log_service.get_entry(user.id, entry_id)
    if entry is None:
        raise NotFoundError("Meal log entry not found.")
    return meal_log_entry_json(entry)


@router.post("/meal-edits", status_code=status.HTTP_201_CREATED)
async def start_meal_edit(
    body: StartEditRequest, request: Request, user: CurrentUser = Depends(require_user)
) -> dict[str, object]:
    """Open an edit session over an inline meal or a saved meal."""
    container: AppContainer = request.app.state.container
    if (body.meal is None) == (body.saved_meal_id is None):
        raise InvalidArgumentError("Provide exactly one of meal or savedMealId.")
    source: str | None = None
    if body.meal is not None:
        meal = parse_meal(body.meal)
    else:
        saved = container.saved_meal_service.get_meal(user.id, body.saved_meal_id)
        if saved is None:
            raise NotFoundError("Meal not found.")
        meal = saved.meal
        source = saved.source
    session = container.edit_session_service.start(user.id, meal, source)
    return edit_session_json(session)


@router.get("/meal-edits/{session_id}")
async def get_meal_edit(
    session_id: UUID, request: Request, user: CurrentUser = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return edit_session_json(container.edit_session_service.get(user.id, session_id))


@router.post("/meal-edits/{session_id}/rescale")
async def rescale_meal_edit(
    session_id: UUID,
    body: RescaleRequest,
    request: Request,
    user: CurrentUser = Depends(require_user),
) -> dict[str, object]:
    """Change one ingredient's weight and return the recomputed meal."""
    container: AppContainer = request.app.state.container
    session = container.edit_session_service.rescale(
        user.id, session_id, body.index, body.weight_grams
    )
    return edit_session_json(session)


@router.post("/meal-edits/{session_id}/commit", status_code=status.HTTP_201_CREATED)
async def commit_meal_edit(
    session_id: UUID,
    body: CommitEditRequest,
    request: Request,
    user: CurrentUser = Depends(require_user),
) -> dict[str, object]:
    """Persist the edited meal to the library or the timeline."""
    container: AppContainer = request.app.state.container
    service = container.edit_session_service
    if body.target == "saved":
        saved = service.commit_to_saved(user.id, session_id, body.source)
        return saved_meal_json(saved)
    entry = service.commit_to_log(user.id, session_id, body.image_base64)
    return meal_log_entry_json(entry)


@router.delete("/meal-edits/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_meal_edit(
    session_id: UUID, request: Request, user: CurrentUser = Depends(require_user)
) -> Response:
    container: AppContainer = request.app.state.container
    container.edit_session_service.discard(user.id, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
