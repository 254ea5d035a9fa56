"""Tests for meal payload validation and storage records."""

import pytest

from macros_chef.domain.errors import InvalidMealDataError
from macros_chef.domain.payloads import (
    dump_meal,
    meal_from_record,
    meal_to_record,
    parse_meal,
    parse_recipe,
)
from tests.conftest import make_meal, meal_json


def test_parse_meal_accepts_camel_case_json() -> None:
    meal = parse_meal(meal_json())

    assert meal.meal_name == "Oatmeal"
    assert meal.totals.calories == 300
    assert meal.ingredients[0].weight_grams == 80
    assert meal.ingredients[0].fiber == 8
    assert meal.ingredients[0].sodium is None


def test_parse_meal_ignores_unknown_keys() -> None:
    payload = {**meal_json(), "id": 55, "hasImage": True}

    assert parse_meal(payload).meal_name == "Oatmeal"


def test_parse_meal_rejects_empty_ingredients() -> None:
    payload = {**meal_json(), "ingredients": []}

    with pytest.raises(InvalidMealDataError) as exc_info:
        parse_meal(payload)

    assert "ingredients" in str(exc_info.value)


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("weightGrams", 0),
        ("weightGrams", -10),
        ("calories", -1),
        ("protein", float("nan")),
        ("sodium", -0.5),
        ("name", ""),
    ],
)
def test_parse_meal_rejects_bad_ingredient_values(field: str, value: object) -> None:
    payload = meal_json()
    payload["ingredients"][0][field] = value  # type: ignore[index]

    with pytest.raises(InvalidMealDataError):
        parse_meal(payload)


def test_parse_meal_rejects_non_object() -> None:
    with pytest.raises(InvalidMealDataError):
        parse_meal(["not", "a", "meal"])


def test_dump_meal_omits_absent_fields() -> None:
    data = dump_meal(make_meal(), source="pantry")

    assert data["mealName"] == "Rice and Chicken"
    assert data["source"] == "pantry"
    assert "totalSugar" not in data
    assert data["ingredients"][0]["weightGrams"] == 200  # type: ignore[index]


def test_meal_record_moves_inline_image_to_base64() -> None:
    meal = make_meal(image_url="data:image/png;base64,QUJD")

    record = meal_to_record(meal, source="pantry")

    assert record["imageBase64"] == "QUJD"
    assert "imageUrl" not in record

    restored, source, has_image = meal_from_record(record)
    assert restored.image_url == "data:image/jpeg;base64,QUJD"
    assert source == "pantry"
    assert has_image is True


def test_meal_record_keeps_remote_image_url() -> None:
    meal = make_meal(image_url="https://cdn.example.com/meal.jpg")

    record = meal_to_record(meal)
    restored, _, has_image = meal_from_record(record)

    assert record["imageUrl"] == "https://cdn.example.com/meal.jpg"
    assert restored.image_url == "https://cdn.example.com/meal.jpg"
    assert has_image is False


def test_parse_recipe_builds_domain_recipe() -> None:
    recipe = parse_recipe(
        {
            "recipeName": "Veggie Omelette",
            "description": "Quick breakfast",
            "ingredients": [{"name": "Eggs", "quantity": "3"}],
            "instructions": ["Whisk", "Cook"],
            "nutrition": {
                "totalCalories": 320,
                "totalProtein": 21,
                "totalCarbs": 6,
                "totalFat": 22,
            },
        }
    )

    assert recipe.ingredients == (("Eggs", "3"),)
    assert recipe.totals.calories == 320
    assert recipe.instructions == ("Whisk", "Cook")
