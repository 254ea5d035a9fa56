"""Photo analysis and meal suggestion endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from macros_chef.api.auth import require_user
from macros_chef.api.schemas import (  # noqa: TC001
    AnalyzeImageRequest,
    ImageRequest,
    MedicalPlanRequest,
    SuggestionsRequest,
)
from macros_chef.domain.payloads import dump_meal, dump_planned_meal, dump_recipe
from macros_chef.services.analysis import decode_image

if TYPE_CHECKING:
    from macros_chef.containers import AppContainer

router = APIRouter(tags=["analysis"], dependencies=[Depends(require_user)])


@router.post("/analyze-image")
async def analyze_image(
    body: AnalyzeImageRequest, request: Request
) -> dict[str, object]:
    """Estimate the nutrition of a meal photo."""
    container: AppContainer = request.app.state.container
    meal = await container.analysis_service.analyze_meal(
        decode_image(body.base64_image), body.mime_type, restaurant=body.restaurant
    )
    return dump_meal(meal)


@router.post("/analyze-image/groceries")
async def analyze_groceries(
    body: ImageRequest, request: Request
) -> dict[str, list[str]]:
    container: AppContainer = request.app.state.container
    items = await container.analysis_service.identify_groceries(
        decode_image(body.base64_image), body.mime_type
    )
    return {"items": items}


@router.post("/analyze-image-recipes")
async def analyze_image_recipes(
    body: ImageRequest, request: Request
) -> list[dict[str, object]]:
    """Suggest recipes from a pantry photo."""
    container: AppContainer = request.app.state.container
    recipes = await container.analysis_service.recipes_from_image(
        decode_image(body.base64_image), body.mime_type
    )
    return [dump_recipe(recipe) for recipe in recipes]


@router.post("/get-meal-suggestions")
async def get_meal_suggestions(
    body: SuggestionsRequest, request: Request
) -> list[dict[str, object]]:
    container: AppContainer = request.app.state.container
    meals = await container.analysis_service.suggest_meals(body.condition, body.cuisine)
    return [dump_meal(meal) for meal in meals]


@router.post("/generate-medical-plan")
async def generate_medical_plan(
    body: MedicalPlanRequest, request: Request
) -> list[dict[str, object]]:
    """Plan meals for a day or a week around one or more medical conditions."""
    container: AppContainer = request.app.state.container
    planned = await container.analysis_service.generate_medical_plan(
        body.to_conditions(), body.cuisine, body.duration, body.current_day
    )
    return [dump_planned_meal(item) for item in planned]
