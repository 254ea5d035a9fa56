"""Validated JSON payloads for meals and recipes.

External JSON (model output, request bodies, stored rows) uses the camelCase
shape of the web client. These models are the only way such data becomes a
domain object, so NaN, negative amounts and empty ingredient lists never reach
the aggregator.
"""

from dataclasses import asdict
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from macros_chef.domain.errors import InvalidMealDataError
from macros_chef.domain.nutrition import (
    Ingredient,
    NutrientTotals,
    NutritionInfo,
    Recipe,
)
from macros_chef.domain.planning import PlannedMeal

_MAX_REPORTED_ERRORS = 3
_DATA_URL_PREFIX = "data:image/jpeg;base64,"


class CamelModel(BaseModel):
    """Base model accepting camelCase or snake_case keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        allow_inf_nan=False,
        extra="ignore",
    )


class IngredientPayload(CamelModel):
    """Ingredient as sent by clients or the model."""

    name: str = Field(min_length=1)
    weight_grams: float = Field(gt=0)
    calories: float = Field(default=0.0, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    potassium: float | None = Field(default=None, ge=0)
    magnesium: float | None = Field(default=None, ge=0)
    vitamin_d: float | None = Field(default=None, ge=0)
    calcium: float | None = Field(default=None, ge=0)
    sugar: float | None = Field(default=None, ge=0)
    fiber: float | None = Field(default=None, ge=0)
    sodium: float | None = Field(default=None, ge=0)
    image_url: str | None = None

    def to_domain(self) -> Ingredient:
        return Ingredient(**self.model_dump())

    @classmethod
    def from_domain(cls, ingredient: Ingredient) -> "IngredientPayload":
        return cls.model_validate(asdict(ingredient))


class MealPayload(CamelModel):
    """Meal (NutritionInfo) as sent by clients or the model."""

    meal_name: str = Field(min_length=1)
    total_calories: float = Field(default=0.0, ge=0)
    total_protein: float = Field(default=0.0, ge=0)
    total_carbs: float = Field(default=0.0, ge=0)
    total_fat: float = Field(default=0.0, ge=0)
    total_potassium: float | None = Field(default=None, ge=0)
    total_magnesium: float | None = Field(default=None, ge=0)
    total_vitamin_d: float | None = Field(default=None, ge=0)
    total_calcium: float | None = Field(default=None, ge=0)
    total_sugar: float | None = Field(default=None, ge=0)
    total_fiber: float | None = Field(default=None, ge=0)
    total_sodium: float | None = Field(default=None, ge=0)
    ingredients: list[IngredientPayload] = Field(min_length=1)
    insight: str | None = None
    nutri_score: str | None = None
    eco_score: str | None = None
    allergens: list[str] = Field(default_factory=list)
    image_url: str | None = None
    justification: str | None = None
    source: str | None = None

    def to_domain(self) -> NutritionInfo:
        """Convert into a domain meal. ``source`` is not part of the meal."""
        return NutritionInfo(
            meal_name=self.meal_name,
            totals=NutrientTotals(
                calories=self.total_calories,
                protein=self.total_protein,
                carbs=self.total_carbs,
                fat=self.total_fat,
                potassium=self.total_potassium,
                magnesium=self.total_magnesium,
                vitamin_d=self.total_vitamin_d,
                calcium=self.total_calcium,
                sugar=self.total_sugar,
                fiber=self.total_fiber,
                sodium=self.total_sodium,
            ),
            ingredients=tuple(item.to_domain() for item in self.ingredients),
            insight=self.insight,
            nutri_score=self.nutri_score,
            eco_score=self.eco_score,
            allergens=tuple(self.allergens),
            image_url=self.image_url,
            justification=self.justification,
        )

    @classmethod
    def from_domain(
        cls, meal: NutritionInfo, source: str | None = None
    ) -> "MealPayload":
        totals = meal.totals
        return cls(
            meal_name=meal.meal_name,
            total_calories=totals.calories,
            total_protein=totals.protein,
            total_carbs=totals.carbs,
            total_fat=totals.fat,
            total_potassium=totals.potassium,
            total_magnesium=totals.magnesium,
            total_vitamin_d=totals.vitamin_d,
            total_calcium=totals.calcium,
            total_sugar=totals.sugar,
            total_fiber=totals.fiber,
            total_sodium=totals.sodium,
            ingredients=[
                IngredientPayload.from_domain(item) for item in meal.ingredients
            ],
            insight=meal.insight,
            nutri_score=meal.nutri_score,
            eco_score=meal.eco_score,
            allergens=list(meal.allergens),
            image_url=meal.image_url,
            justification=meal.justification,
            source=source,
        )


class PlannedMealPayload(MealPayload):
    """A generated meal together with the day and slot it is planned for."""

    suggested_day: str = Field(min_length=1)
    suggested_slot: Literal["Breakfast", "Lunch", "Dinner", "Snack"]

    def to_planned(self) -> PlannedMeal:
        return PlannedMeal(
            meal=self.to_domain(),
            suggested_day=self.suggested_day,
            suggested_slot=self.suggested_slot,
        )


class RecipeIngredientPayload(CamelModel):

    name: str
    quantity: str


class RecipeNutritionPayload(CamelModel):
    total_calories: float = Field(default=0.0, ge=0)
    total_protein: float = Field(default=0.0, ge=0)
    total_carbs: float = Field(default=0.0, ge=0)
    total_fat: float = Field(default=0.0, ge=0)


class RecipePayload(CamelModel):
    """Recipe suggestion as returned by the model."""

    recipe_name: str = Field(min_length=1)
    description: str = ""
    ingredients: list[RecipeIngredientPayload] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    nutrition: RecipeNutritionPayload = Field(default_factory=RecipeNutritionPayload)
    image_url: str | None = None

    def to_domain(self) -> Recipe:
        return Recipe(
            recipe_name=self.recipe_name,
            description=self.description,
            ingredients=tuple((item.name, item.quantity) for item in self.ingredients),
            instructions=tuple(self.instructions),
            totals=NutrientTotals(
                calories=self.nutrition.total_calories,
                protein=self.nutrition.total_protein,
                carbs=self.nutrition.total_carbs,
                fat=self.nutrition.total_fat,
            ),
            image_url=self.image_url,
        )

    @classmethod
    def from_domain(cls, recipe: Recipe) -> "RecipePayload":
        return cls(
            recipe_name=recipe.recipe_name,
            description=recipe.description,
            ingredients=[
                RecipeIngredientPayload(name=name, quantity=quantity)
                for name, quantity in recipe.ingredients
            ],
            instructions=list(recipe.instructions),
            nutrition=RecipeNutritionPayload(
                total_calories=recipe.totals.calories,
                total_protein=recipe.totals.protein,
                total_carbs=recipe.totals.carbs,
                total_fat=recipe.totals.fat,
            ),
            image_url=recipe.image_url,
        )


def parse_meal(raw: object) -> NutritionInfo:
    """Validate external meal JSON and return a domain meal."""
    return parse_meal_payload(raw).to_domain()


def parse_meal_payload(raw: object) -> MealPayload:
    """Validate external meal JSON, raising ``InvalidMealDataError``."""
    try:
        return MealPayload.model_validate(raw)
    except ValidationError as exc:
        raise InvalidMealDataError(_summarize(exc)) from exc


def parse_planned_meal(raw: object) -> PlannedMeal:
    """Validate a generated plan entry, raising ``InvalidMealDataError``."""
    try:
        return PlannedMealPayload.model_validate(raw).to_planned()
    except ValidationError as exc:
        raise InvalidMealDataError(_summarize(exc)) from exc


def parse_recipe(raw: object) -> Recipe:
    """Validate external recipe JSON and return a domain recipe."""
    try:
        return RecipePayload.model_validate(raw).to_domain()
    except ValidationError as exc:
        raise InvalidMealDataError(_summarize(exc)) from exc


def dump_meal(meal: NutritionInfo, source: str | None = None) -> dict[str, object]:
    """Serialize a meal to camelCase JSON, omitting absent fields."""
    return MealPayload.from_domain(meal, source=source).model_dump(
        by_alias=True, exclude_none=True
    )


def dump_planned_meal(planned: PlannedMeal) -> dict[str, object]:
    """Serialize a planned meal: the meal JSON plus its day and slot."""
    return {
        **dump_meal(planned.meal),
        "suggestedDay": planned.suggested_day,
        "suggestedSlot": planned.suggested_slot,
    }


def dump_recipe(recipe: Recipe) -> dict[str, object]:
    """Serialize a recipe to camelCase JSON."""
    return RecipePayload.from_domain(recipe).model_dump(
        by_alias=True, exclude_none=True
    )


def meal_to_record(meal: NutritionInfo, source: str | None = None) -> dict[str, object]:
    """Prepare a meal for JSONB storage.

    Inline ``data:image`` URLs are stored as raw base64 under ``imageBase64``.
    """
    data = dump_meal(meal, source=source)
    image_url = data.pop("imageUrl", None)
    if isinstance(image_url, str) and image_url.startswith("data:image"):
        data["imageBase64"] = strip_data_url(image_url)
    elif image_url:
        data["imageUrl"] = image_url
    return data


def meal_from_record(
    data: dict[str, object],
) -> tuple[NutritionInfo, str | None, bool]:
    """Rebuild a stored meal, returning the meal, its source and image flag."""
    payload = dict(data)
    image_base64 = payload.pop("imageBase64", None)
    if image_base64:
        payload["imageUrl"] = image_data_url(str(image_base64))
    parsed = parse_meal_payload(payload)
    return parsed.to_domain(), parsed.source, bool(image_base64)


def _summarize(exc: ValidationError) -> str:
    details = []
    for error in exc.errors()[:_MAX_REPORTED_ERRORS]:
        location = ".".join(str(part) for part in error["loc"]) or "body"
        details.append(f"{location}: {error['msg']}")
    return "Invalid meal data: " + "; ".join(details)


def image_data_url(image_base64: str) -> str:
    """Wrap stored base64 image data as a JPEG data URL."""
    return f"{_DATA_URL_PREFIX}{image_base64}"


def strip_data_url(image: str) -> str:
    """Return raw base64 from a data URL, or the input unchanged."""
    if image.startswith("data:"):
        return image.split(",", 1)[-1]
    return image
