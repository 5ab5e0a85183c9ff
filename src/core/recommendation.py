"""Daily portion recommendation — pure business logic.

Maps a pet profile (weight, age, diet) to recommended daily food grams and
water millilitres.

No I/O: this module only transforms data.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from src.data.models import Diet, PetProfile

FOOD_GRAMS_PER_KG = 35
WATER_ML_PER_KG = 60
MIN_WATER_ML = 450
PORTIONS_PER_DAY = 3

_DIET_FACTORS = {
    Diet.HIGH_ENERGY: 1.15,
    Diet.LIGHT: 0.88,
}


@dataclass(frozen=True)
class Recommendation:
    """Bundled daily recommendation for one profile."""

    food_grams: int
    water_ml: int
    portions: int
    grams_per_portion: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (227.5 -> 228)."""
    return int(math.floor(value + 0.5))


def _age_factor(age: float) -> float:
    if age < 1:
        return 1.25   # puppy / kitten
    if age > 7:
        return 0.9    # senior
    return 1.0


def recommended_food(weight: float, age: float, diet: Diet | str) -> int:
    """Recommended food in grams per day."""
    base = max(weight, 0) * FOOD_GRAMS_PER_KG
    diet_factor = _DIET_FACTORS.get(Diet(diet), 1.0)
    return round_half_up(base * _age_factor(max(age, 0)) * diet_factor)


def recommended_water(weight: float) -> int:
    """Recommended water in ml per day, never below MIN_WATER_ML."""
    base = max(weight, 0) * WATER_ML_PER_KG
    return max(MIN_WATER_ML, round_half_up(base))


def recommend(profile: PetProfile) -> Recommendation:
    food = recommended_food(profile.weight, profile.age, profile.diet)
    return Recommendation(
        food_grams=food,
        water_ml=recommended_water(profile.weight),
        portions=PORTIONS_PER_DAY,
        grams_per_portion=round_half_up(food / PORTIONS_PER_DAY),
    )
