"""Meal, grocery and recipe analysis through a generative model."""

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Protocol

from macros_chef.domain.errors import (
    AnalysisFailedError,
    InvalidArgumentError,
    InvalidMealDataError,
)
from macros_chef.domain.nutrition import NutritionInfo, Recipe
from macros_chef.domain.payloads import (
    parse_meal,
    parse_planned_meal,
    parse_recipe,
    strip_data_url,
)
from macros_chef.domain.planning import MEAL_SLOTS, DietCondition, PlannedMeal

logger = logging.getLogger(__name__)

MEAL_PROMPT = (
    "Analyze the image of the food and identify the meal and all its ingredients. "
    "For each ingredient estimate its weight in grams and the calories, protein, "
    "carbs and fat for that weight, plus potassium, magnesium, vitamin D, calcium, "
    "sugar, fiber and sodium where they can be estimated. Meal totals must equal "
    "the sum of the ingredients. Include a short insight, a Nutri-Score and "
    "Eco-Score grade, and any common allergens. "
    "Return the result in the specified JSON format."
)
RESTAURANT_PROMPT = (
    "Analyze this restaurant meal. Identify the dish and potential hidden "
    "ingredients like butter, oil, or sugar often used in restaurant cooking. "
    "Estimate nutritional values conservatively, accounting for larger portion "
    "sizes common in restaurants. Return the result in the specified JSON format."
)
GROCERY_PROMPT = (
    "Identify the food or household items. "
    "Return specific item names in JSON under 'items'."
)
RECIPES_PROMPT = (
    "Analyze the image to identify all visible food ingredients. Based on these "
    "ingredients, suggest 3 diverse meal recipes. Assume common pantry staples "
    "like oil, salt, pepper, and basic spices are available. For each recipe, "
    "provide a descriptive name, a short description, a list of ingredients with "
    "quantities, step-by-step instructions, and an estimated nutritional "
    "breakdown (total calories, protein, carbs, fat). "
    "Return the result in the specified JSON format."
)
SUGGESTIONS_PROMPT = (
    "Generate 3 diverse meal suggestions suitable for someone with the goal or "
    "condition of '{condition}'. The cuisine preference is {cuisine}. For each "
    "meal, provide a detailed nutritional breakdown (total calories, protein, "
    "carbs, fat) and a list of ingredients with their individual nutritional "
    "info. Also, include a brief justification for why the meal is appropriate. "
    "Return the result in the specified JSON format."
)

MEDICAL_PLAN_PROMPT = (
    "Act as a clinical dietitian. Create a meal plan for: {days}. "
    "Patient conditions: {conditions}. The cuisine preference is {cuisine}. "
    "Every meal must respect the macro targets and avoid the listed foods for "
    "all conditions at once. For each meal, provide a detailed nutritional "
    "breakdown (total calories, protein, carbs, fat), a list of ingredients with "
    "their individual nutritional info, a brief justification, the day it is "
    "planned for as suggestedDay and the meal slot (Breakfast, Lunch, Dinner or "
    "Snack) as suggestedSlot. Return the result in the specified JSON format."
)

MEAL_ANALYSIS_ERROR = "Could not identify food, please try a clearer photo."
GROCERY_ANALYSIS_ERROR = "Could not identify grocery items, please try again."
RECIPES_ANALYSIS_ERROR = "Could not suggest recipes from this photo."
SUGGESTIONS_ERROR = "Could not generate meal suggestions, please try again."
MEDICAL_PLAN_ERROR = "Could not generate a medical meal plan, please try again."

_NUMBER = {"type": "number", "minimum": 0}
_OPTIONAL_NUMBER = {"anyOf": [{"type": "number", "minimum": 0}, {"type": "null"}]}
_OPTIONAL_STRING = {"anyOf": [{"type": "string"}, {"type": "null"}]}
_MICRONUTRIENTS = (
    "potassium",
    "magnesium",
    "vitaminD",
    "calcium",
    "sugar",
    "fiber",
    "sodium",
)


def _object_schema(properties: dict[str, object]) -> dict[str, object]:
    return {
        "type": "object",
        "properties": properties,
        "required": list(properties),
        "additionalProperties": False,
    }


INGREDIENT_SCHEMA = _object_schema(
    {
        "name": {"type": "string"},
        "weightGrams": {"type": "number", "exclusiveMinimum": 0},
        "calories": _NUMBER,
        "protein": _NUMBER,
        "carbs": _NUMBER,
        "fat": _NUMBER,
        **{name: _OPTIONAL_NUMBER for name in _MICRONUTRIENTS},
    }
)

_MEAL_PROPERTIES: dict[str, object] = {
    "mealName": {"type": "string"},
    "totalCalories": _NUMBER,
    "totalProtein": _NUMBER,
    "totalCarbs": _NUMBER,
    "totalFat": _NUMBER,
    **{
        f"total{name[0].upper()}{name[1:]}": _OPTIONAL_NUMBER
        for name in _MICRONUTRIENTS
    },
    "ingredients": {"type": "array", "items": INGREDIENT_SCHEMA},
    "insight": _OPTIONAL_STRING,
    "nutriScore": _OPTIONAL_STRING,
    "ecoScore": _OPTIONAL_STRING,
    "allergens": {"type": "array", "items": {"type": "string"}},
    "justification": _OPTIONAL_STRING,
}

MEAL_SCHEMA = _object_schema(_MEAL_PROPERTIES)

PLANNED_MEAL_SCHEMA = _object_schema(
    {
        **_MEAL_PROPERTIES,
        "suggestedDay": {"type": "string"},
        "suggestedSlot": {"type": "string", "enum": list(MEAL_SLOTS)},
    }
)

SUGGESTIONS_SCHEMA = _object_schema(
    {"meals": {"type": "array", "items": MEAL_SCHEMA}}
)

MEDICAL_PLAN_SCHEMA = _object_schema(
    {"meals": {"type": "array", "items": PLANNED_MEAL_SCHEMA}}
)

GROCERY_SCHEMA = _object_schema(
    {"items": {"type": "array", "items": {"type": "string"}}}
)

RECIPE_SCHEMA = _object_schema(
    {
        "recipeName": {"type": "string"},
        "description": {"type": "string"},
        "ingredients": {
            "type": "array",
            "items": _object_schema(
                {"name": {"type": "string"}, "quantity": {"type": "string"}}
            ),
        },
        "instructions": {"type": "array", "items": {"type": "string"}},
        "nutrition": _object_schema(
            {
                "totalCalories": _NUMBER,
                "totalProtein": _NUMBER,
                "totalCarbs": _NUMBER,
                "totalFat": _NUMBER,
            }
        ),
    }
)

RECIPES_SCHEMA = _object_schema(
    {"recipes": {"type": "array", "items": RECIPE_SCHEMA}}
)


class AnalysisClient(Protocol):
    """Interface for structured generation with an optional image."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return the parsed JSON object produced by the model."""


@dataclass
class AnalysisService:
    """Service that prompts the model and validates its structured replies."""

    client: AnalysisClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze_meal(
        self,
        image_bytes: bytes,
        mime_type: str | None = None,
        restaurant: bool = False,
    ) -> NutritionInfo:
        """Estimate the nutrition of a meal photo."""
        raw = await self._generate(
            prompt=RESTAURANT_PROMPT if restaurant else MEAL_PROMPT,
            schema=MEAL_SCHEMA,
            schema_name="meal_nutrition",
            image_data_url=_to_data_url(image_bytes, mime_type),
            failure_message=MEAL_ANALYSIS_ERROR,
        )
        return parse_meal(raw)

    async def identify_groceries(
        self, image_bytes: bytes, mime_type: str | None = None
    ) -> list[str]:
        """Return the item names visible in a grocery or pantry photo."""
        raw = await self._generate(
            prompt=GROCERY_PROMPT,
            schema=GROCERY_SCHEMA,
            schema_name="grocery_items",
            image_data_url=_to_data_url(image_bytes, mime_type),
            failure_message=GROCERY_ANALYSIS_ERROR,
        )
        items = raw.get("items")
        if not isinstance(items, list):
            raise InvalidMealDataError("Invalid grocery data: items must be a list")
        return [str(item).strip() for item in items if str(item).strip()]

    async def recipes_from_image(
        self, image_bytes: bytes, mime_type: str | None = None
    ) -> list[Recipe]:
        """Suggest recipes from the ingredients in a pantry photo."""
        raw = await self._generate(
            prompt=RECIPES_PROMPT,
            schema=RECIPES_SCHEMA,
            schema_name="pantry_recipes",
            image_data_url=_to_data_url(image_bytes, mime_type),
            failure_message=RECIPES_ANALYSIS_ERROR,
        )
        return [parse_recipe(item) for item in _list_field(raw, "recipes")]

    async def suggest_meals(self, condition: str, cuisine: str) -> list[NutritionInfo]:
        """Suggest meals for a goal or condition and a cuisine."""
        condition = condition.strip()
        cuisine = cuisine.strip()
        if not condition or not cuisine:
            raise InvalidArgumentError("Condition and cuisine are required")
        raw = await self._generate(
            prompt=SUGGESTIONS_PROMPT.format(condition=condition, cuisine=cuisine),
            schema=SUGGESTIONS_SCHEMA,
            schema_name="meal_suggestions",
            image_data_url=None,
            failure_message=SUGGESTIONS_ERROR,
        )
        return [parse_meal(item) for item in _list_field(raw, "meals")]

    async def generate_medical_plan(
        self,
        conditions: list[DietCondition],
        cuisine: str,
        duration: str = "day",
        current_day: str | None = None,
    ) -> list[PlannedMeal]:
        """Plan meals for a day or a week that suit every listed condition.

        ``current_day`` narrows the plan to a single named day; otherwise a
        ``week`` duration covers Monday to Sunday and ``day`` covers today.
        """
        cuisine = cuisine.strip()
        if not conditions or not cuisine:
            raise InvalidArgumentError(
                "At least one condition and a cuisine are required"
            )
        if duration not in ("day", "week"):
            raise InvalidArgumentError("Duration must be 'day' or 'week'")
        if current_day and current_day.strip():
            days = current_day.strip()
        elif duration == "week":
            days = "Monday to Sunday"
        else:
            days = "Today only"
        logger.info(
            "Generating medical plan for %s with %s conditions", days, len(conditions)
        )
        raw = await self._generate(
            prompt=MEDICAL_PLAN_PROMPT.format(
                days=days,
                conditions="; ".join(_describe(item) for item in conditions),
                cuisine=cuisine,
            ),
            schema=MEDICAL_PLAN_SCHEMA,
            schema_name="medical_meal_plan",
            image_data_url=None,
            failure_message=MEDICAL_PLAN_ERROR,
        )
        return [parse_planned_meal(item) for item in _list_field(raw, "meals")]

    async def _generate(  # noqa: PLR0913

        self,
        *,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None,
        failure_message: str,
    ) -> dict[str, object]:
        try:
            raw = await self.client.generate(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema=schema,
                schema_name=schema_name,
                image_data_url=image_data_url,
            )
        except json.JSONDecodeError as exc:
            raise InvalidMealDataError(
                f"Model returned invalid JSON for {schema_name}"
            ) from exc
        except Exception as exc:
            logger.exception("Model request for %s failed", schema_name)
            detail = f"{type(exc).__name__}: {exc}"
            raise AnalysisFailedError(failure_message, detail=detail) from exc
        if not isinstance(raw, dict):
            raise InvalidMealDataError(f"Model returned no object for {schema_name}")
        return raw


def decode_image(base64_image: str) -> bytes:
    """Decode raw base64 or a data URL into image bytes."""
    try:
        image_bytes = base64.b64decode(strip_data_url(base64_image), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidArgumentError("Image must be base64 encoded") from exc
    if not image_bytes:
        raise InvalidArgumentError("Image is empty")
    return image_bytes


def _describe(condition: DietCondition) -> str:
    target = (
        f"P{condition.protein_pct:g}% C{condition.carbs_pct:g}% "
        f"F{condition.fat_pct:g}%"
    )
    avoid = condition.avoid.strip() or "nothing specific"
    return f"{condition.name} (Target: {target}. Avoid: {avoid})"


def _list_field(raw: dict[str, object], key: str) -> list[object]:
    value = raw.get(key)
    if not isinstance(value, list):
        raise InvalidMealDataError(f"Invalid model data: {key} must be a list")
    return value


def _to_data_url(image_bytes: bytes, mime_type: str | None = None) -> str:
    """Convert bytes to a base64 data URL for image input."""
    resolved = mime_type if mime_type and mime_type.startswith("image/") else None
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{resolved or _detect_mime_type(image_bytes)};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
