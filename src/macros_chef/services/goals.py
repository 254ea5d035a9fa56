"""Calorie and protein goal calculator (Mifflin-St Jeor)."""

import math
from dataclasses import dataclass

from macros_chef.domain.errors import InvalidArgumentError

KG_PER_LB = 1 / 2.20462
CM_PER_FOOT = 30.48
CM_PER_INCH = 2.54
PROTEIN_GRAMS_PER_KG = 1.8
MIN_ACTIVITY_FACTOR = 1.0
MAX_ACTIVITY_FACTOR = 2.5

_SEX_OFFSETS = {"male": 5.0, "female": -161.0}


@dataclass(frozen=True)
class BodyProfile:
    """Metric body measurements used for goal calculation."""

    sex: str
    age_years: int
    weight_kg: float
    height_cm: float
    activity_factor: float


@dataclass(frozen=True)
class GoalTargets:
    """Daily energy and protein targets."""

    bmr: int
    tdee: int
    protein_g: int


def pounds_to_kg(pounds: float) -> float:
    return pounds * KG_PER_LB


def feet_inches_to_cm(feet: float, inches: float = 0.0) -> float:
    return feet * CM_PER_FOOT + inches * CM_PER_INCH


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def basal_metabolic_rate(profile: BodyProfile) -> float:
    """Return unrounded BMR in kcal per day."""
    _validate(profile)
    base = 10 * profile.weight_kg + 6.25 * profile.height_cm - 5 * profile.age_years
    return base + _SEX_OFFSETS[profile.sex]


def calculate_goals(profile: BodyProfile) -> GoalTargets:
    """Return BMR, TDEE and protein targets for a profile."""
    bmr = basal_metabolic_rate(profile)
    return GoalTargets(
        bmr=round_half_up(bmr),
        tdee=round_half_up(bmr * profile.activity_factor),
        protein_g=round_half_up(PROTEIN_GRAMS_PER_KG * profile.weight_kg),
    )


def _validate(profile: BodyProfile) -> None:
    if profile.sex not in _SEX_OFFSETS:
        raise InvalidArgumentError('Sex must be "male" or "female"')
    for label, value in (
        ("Age", profile.age_years),
        ("Weight", profile.weight_kg),
        ("Height", profile.height_cm),
    ):
        if not math.isfinite(value) or value <= 0:
            raise InvalidArgumentError(f"{label} must be a positive number")
    factor = profile.activity_factor
    if not MIN_ACTIVITY_FACTOR <= factor <= MAX_ACTIVITY_FACTOR:
        raise InvalidArgumentError(
            f"Activity factor must be between {MIN_ACTIVITY_FACTOR} "
            f"and {MAX_ACTIVITY_FACTOR}"
        )
