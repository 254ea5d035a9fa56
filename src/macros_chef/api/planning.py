"""Meal plan and grocery list endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from fastapi import APIRouter, Depends, Query, Request, Response, status

from macros_chef.api.auth import require_user
from macros_chef.api.schemas import (
    AddGroceryItemRequest,
    AddPlanItemRequest,
    CreateGroceryListRequest,
    CreatePlanRequest,
    GenerateGroceryListRequest,
    ImportGroceryRequest,
    UpdateGroceryItemRequest,
)
from macros_chef.api.serializers import (
    grocery_item_json,
    grocery_list_json,
    plan_item_json,
    plan_json,
)
from macros_chef.domain.errors import InvalidArgumentError
from macros_chef.domain.models import CurrentUser  # noqa: TC001
from macros_chef.domain.payloads import parse_meal

if TYPE_CHECKING:
    from macros_chef.containers import AppContainer

router = APIRouter(tags=["planning"])


@router.get("/meal-plans")
async def list_meal_plans(
    request: Request, user: CurrentUser = Depends(require_user)
) -> list[dict[str, object]]:
    container: AppContainer = request.app.state.container
    return [plan_json(plan) for plan in container.meal_plan_service.list_plans(user.id)]


@router.post("/meal-plans", status_code=status.HTTP_201_CREATED)
async def create_meal_plan(
    body: CreatePlanRequest, request: Request, user: CurrentUser = Depends(require_user)
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return plan_json(container.meal_plan_service.create_plan(user.id, body.name))


@router.delete("/meal-plans/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_meal_plan_item(
    item_id: int, request: Request, user: CurrentUser = Depends(require_user)
) -> Response:
    container: AppContainer = request.app.state.container
    container.meal_plan_service.remove_item(user.id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/meal-plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal_plan(
    plan_id: int, request: Request, user: CurrentUser = Depends(require_user)
) -> Response:
    container: AppContainer = request.app.state.container
    container.meal_plan_service.delete_plan(user.id, plan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/meal-plans/{plan_id}/items", status_code=status.HTTP_201_CREATED)
async def add_meal_plan_item(
    plan_id: int,
    body: AddPlanItemRequest,
    request: Request,
    user: CurrentUser = Depends(require_user),
) -> dict[str, object]:
    """Add a saved meal, or a new meal saved on the fly, to a plan."""
    container: AppContainer = request.app.state.container
    service = container.meal_plan_service
    if body.saved_meal_id is not None:
        item = service.add_saved_meal(
            user.id, plan_id, body.saved_meal_id, body.metadata
        )
    elif body.meal_data is not None:
        item = service.add_new_meal(
            user.id, plan_id, parse_meal(body.meal_data), body.metadata
        )
    else:
        raise InvalidArgumentError("Either savedMealId or mealData is required.")
    return plan_item_json(item)


@router.get("/grocery-lists")
async def list_grocery_lists(
    request: Request, user: CurrentUser = Depends(require_user)
) -> list[dict[str, object]]:
    container: AppContainer = request.app.state.container
    lists = container.grocery_service.list_lists(user.id)
    return [grocery_list_json(item) for item in lists]


@router.post("/grocery-lists", status_code=status.HTTP_201_CREATED)
async def create_grocery_list(
    body: CreateGroceryListRequest,
    request: Request,
    user: CurrentUser = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return grocery_list_json(container.grocery_service.create_list(user.id, body.name))


@router.post("/grocery-lists/generate", status_code=status.HTTP_201_CREATED)
async def generate_grocery_list(
    body: GenerateGroceryListRequest,
    request: Request,
    user: CurrentUser = Depends(require_user),
) -> dict[str, object]:
    """Create a new active list from the ingredients of meal plans."""
    container: AppContainer = request.app.state.container
    grocery_list = container.grocery_service.generate_list(
        user.id, body.name, body.meal_plan_ids
    )
    return grocery_list_json(grocery_list)


@router.delete("/grocery-lists/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_grocery_item(
    item_id: int, request: Request, user: CurrentUser = Depends(require_user)
) -> Response:
    container: AppContainer = request.app.state.container
    container.grocery_service.remove_item(user.id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/grocery-lists/items/{item_id}")
async def update_grocery_item(
    item_id: int,
    body: UpdateGroceryItemRequest,
    request: Request,
    user: CurrentUser = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    item = container.grocery_service.set_item_checked(user.id, item_id, body.checked)
    return grocery_item_json(item)


@router.delete("/grocery-lists/{list_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_grocery_list(
    list_id: int, request: Request, user: CurrentUser = Depends(require_user)
) -> Response:
    container: AppContainer = request.app.state.container
    container.grocery_service.delete_list(user.id, list_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/grocery-lists/{list_id}/activate")
async def activate_grocery_list(
    list_id: int, request: Request, user: CurrentUser = Depends(require_user)
) -> dict[str, bool]:
    container: AppContainer = request.app.state.container
    container.grocery_service.activate_list(user.id, list_id)
    return {"success": True}


@router.post("/grocery-lists/{list_id}/import")
async def import_grocery_items(
    list_id: int,
    body: ImportGroceryRequest,
    request: Request,
    user: CurrentUser = Depends(require_user),
) -> list[dict[str, object]]:
    """Add ingredients from meal plans that are not already on the list."""
    container: AppContainer = request.app.state.container
    items = container.grocery_service.import_from_plans(
        user.id, list_id, body.meal_plan_ids
    )
    return [grocery_item_json(item) for item in items]


@router.get("/grocery-lists/{list_id}/items")
async def list_grocery_items(
    list_id: int, request: Request, user: CurrentUser = Depends(require_user)
) -> list[dict[str, object]]:
    container: AppContainer = request.app.state.container
    items = container.grocery_service.list_items(user.id, list_id)
    return [grocery_item_json(item) for item in items]


@router.post("/grocery-lists/{list_id}/items", status_code=status.HTTP_201_CREATED)
async def add_grocery_item(
    list_id: int,
    body: AddGroceryItemRequest,
    request: Request,
    user: CurrentUser = Depends(require_user),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    item = container.grocery_service.add_item(user.id, list_id, body.name)
    return grocery_item_json(item)


@router.delete("/grocery-lists/{list_id}/clear", status_code=status.HTTP_204_NO_CONTENT)
async def clear_grocery_items(
    list_id: int,
    request: Request,
    clear_type: Literal["all", "checked"] = Query("all", alias="type"),
    user: CurrentUser = Depends(require_user),
) -> Response:
    container: AppContainer = request.app.state.container
    container.grocery_service.clear_items(user.id, list_id, clear_type)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
