"""Request bodies for the HTTP API."""

from typing import Literal

from pydantic import Field

from macros_chef.domain.errors import InvalidArgumentError
from macros_chef.domain.payloads import CamelModel
from macros_chef.domain.planning import DietCondition
from macros_chef.services.goals import BodyProfile, feet_inches_to_cm, pounds_to_kg


class ImageRequest(CamelModel):
    """A photo sent as raw base64 or a data URL."""

    base64_image: str = Field(min_length=1)
    mime_type: str | None = None


class AnalyzeImageRequest(ImageRequest):
    restaurant: bool = False


class SuggestionsRequest(CamelModel):
    condition: str
    cuisine: str


class MacroSplitRequest(CamelModel):
    """Target protein, carbs and fat as percentages of calories."""

    p: float = Field(ge=0, le=100)
    c: float = Field(ge=0, le=100)
    f: float = Field(ge=0, le=100)


class ConditionRequest(CamelModel):
    name: str = Field(min_length=1)
    macros: MacroSplitRequest
    focus: str = ""


class MedicalPlanRequest(CamelModel):
    """Conditions to plan for, and whether to plan one day or a whole week."""

    diseases: list[ConditionRequest] = Field(min_length=1)
    cuisine: str
    duration: Literal["day", "week"] = "day"
    current_day: str | None = None

    def to_conditions(self) -> list[DietCondition]:
        return [
            DietCondition(
                name=item.name,
                protein_pct=item.macros.p,
                carbs_pct=item.macros.c,
                fat_pct=item.macros.f,
                avoid=item.focus,
            )
            for item in self.diseases
        ]



class MealLogRequest(CamelModel):
    meal_data: dict[str, object]
    image_base64: str | None = None


class StartEditRequest(CamelModel):
    """Start editing either an inline meal or a saved meal."""

    meal: dict[str, object] | None = None
    saved_meal_id: int | None = None


class RescaleRequest(CamelModel):
    index: int
    weight_grams: float


class CommitEditRequest(CamelModel):
    target: Literal["saved", "log"]
    source: str | None = None
    image_base64: str | None = None


class CreatePlanRequest(CamelModel):
    name: str


class AddPlanItemRequest(CamelModel):
    saved_meal_id: int | None = None
    meal_data: dict[str, object] | None = None
    metadata: dict[str, object] = Field(default_factory=dict)


class CreateGroceryListRequest(CamelModel):
    name: str


class GenerateGroceryListRequest(CamelModel):
    name: str
    meal_plan_ids: list[int] = Field(default_factory=list)


class ImportGroceryRequest(CamelModel):
    meal_plan_ids: list[int] = Field(default_factory=list)


class AddGroceryItemRequest(CamelModel):
    name: str


class UpdateGroceryItemRequest(CamelModel):
    checked: bool


class GoalsRequest(CamelModel):
    """Body measurements in metric or imperial units."""

    sex: Literal["male", "female"]
    age: int
    activity_factor: float
    units: Literal["metric", "imperial"] = "metric"
    weight_kg: float | None = None
    height_cm: float | None = None
    weight_lbs: float | None = None
    height_ft: float | None = None
    height_in: float = 0.0

    def to_profile(self) -> BodyProfile:
        if self.units == "imperial":
            if self.weight_lbs is None or self.height_ft is None:
                raise InvalidArgumentError("weightLbs and heightFt are required")
            weight_kg = pounds_to_kg(self.weight_lbs)
            height_cm = feet_inches_to_cm(self.height_ft, self.height_in)
        else:
            if self.weight_kg is None or self.height_cm is None:
                raise InvalidArgumentError("weightKg and heightCm are required")
            weight_kg = self.weight_kg
            height_cm = self.height_cm
        return BodyProfile(
            sex=self.sex,
            age_years=self.age,
            weight_kg=weight_kg,
            height_cm=height_cm,
            activity_factor=self.activity_factor,
        )
