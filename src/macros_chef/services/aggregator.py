"""Meal nutrition aggregation and ingredient weight rescaling."""

import math
from dataclasses import replace

from macros_chef.domain.errors import InvalidArgumentError
from macros_chef.domain.nutrition import (
    MACRO_FIELDS,
    MICRONUTRIENT_FIELDS,
    NUTRIENT_FIELDS,
    Ingredient,
    NutrientTotals,
    NutritionInfo,
)


class NutritionAggregator:
    """Working copy of a meal that keeps totals in sync with its ingredients.

    Rescaling always derives per-gram density from the authoritative meal the
    aggregator was created with, so repeated edits to the same ingredient do
    not compound. The authoritative meal is never modified.
    """

    def __init__(self, meal: NutritionInfo) -> None:
        self._original = meal
        self._working = meal
        self._dirty = False

    @property
    def original(self) -> NutritionInfo:
        """The authoritative meal used as the density reference."""
        return self._original

    @property
    def meal(self) -> NutritionInfo:
        """The current working copy."""
        return self._working

    @property
    def is_dirty(self) -> bool:
        """True once any rescale has been applied."""
        return self._dirty

    def rescale_ingredient(self, index: int, new_weight_grams: float) -> NutritionInfo:
        """Set an ingredient's weight, scaling its nutrients proportionally."""
        ingredients = self._original.ingredients
        if isinstance(index, bool) or not 0 <= index < len(ingredients):
            raise InvalidArgumentError(f"No ingredient at index {index}")
        if not math.isfinite(new_weight_grams) or new_weight_grams <= 0:
            raise InvalidArgumentError("Ingredient weight must be a positive number")
        base = ingredients[index]
        if base.weight_grams <= 0:
            raise InvalidArgumentError(
                f"Ingredient {base.name!r} has no positive original weight"
            )

        scaled = scale_ingredient(
            base, new_weight_grams, current=self._working.ingredients[index]
        )
        updated = list(self._working.ingredients)
        updated[index] = scaled
        totals = sum_totals(updated)
        if not (_all_finite(scaled) and _all_finite(totals)):
            raise InvalidArgumentError(
                f"Weight {new_weight_grams} g is too large for {base.name!r}"
            )
        self._working = replace(
            self._working, ingredients=tuple(updated), totals=totals
        )
        self._dirty = True
        return self._working

    def commit(self) -> NutritionInfo:
        """Return the working copy for persistence."""
        return self._working


def scale_ingredient(
    base: Ingredient, new_weight_grams: float, current: Ingredient | None = None
) -> Ingredient:
    """Return ``current`` (or ``base``) with ``base`` nutrients scaled to a weight."""
    multiplier = new_weight_grams / base.weight_grams
    values: dict[str, float | None] = {}
    for name in NUTRIENT_FIELDS:
        amount = getattr(base, name)
        values[name] = None if amount is None else amount * multiplier
    return replace(current or base, weight_grams=new_weight_grams, **values)


def sum_totals(
    ingredients: list[Ingredient] | tuple[Ingredient, ...],
) -> NutrientTotals:
    """Sum every nutrient across ingredients.

    Optional totals stay ``None`` when no ingredient carries the field.
    """
    totals: dict[str, float | None] = {}
    for name in MACRO_FIELDS:
        totals[name] = sum(getattr(item, name) for item in ingredients)
    for name in MICRONUTRIENT_FIELDS:
        amounts = [getattr(item, name) for item in ingredients]
        present = [amount for amount in amounts if amount is not None]
        totals[name] = sum(present) if present else None
    return NutrientTotals(**totals)


def _all_finite(values: Ingredient | NutrientTotals) -> bool:
    amounts = (getattr(values, name) for name in NUTRIENT_FIELDS)
    return all(amount is None or math.isfinite(amount) for amount in amounts)
