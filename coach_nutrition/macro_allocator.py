"""Goal-driven macronutrient allocation.

Steps:
1. Anchor protein to grams per kilogram of bodyweight (goal-specific)
2. Subtract protein calories from the target budget
3. Split the remainder between fat and carbs by the goal's fat ratio
4. Convert calories to grams using 4/4/9 cal/g for protein/carbs/fat

References:
- ISSN Position Stand: protein and exercise (2017).
"""

import math
from typing import Optional, Union

from coach_nutrition.config import CALORIES_PER_GRAM, DEFAULT_MACRO_PROFILE, GOAL_MACRO_PROFILES
from coach_nutrition.models import Goal, MacroComponent, MacroTarget


def macro_profile(goal: Union[Goal, str, None]) -> dict:
    """Return ``{"protein_g_per_kg", "fat_ratio"}`` for a goal."""
    goal = Goal.from_label(goal)
    return GOAL_MACRO_PROFILES.get(goal.value, DEFAULT_MACRO_PROFILE)


def _component(grams: float, kcal_per_gram: int, target_calories: float) -> MacroComponent:
    percentage = grams * kcal_per_gram / target_calories * 100
    return MacroComponent(grams=grams, percentage=percentage, kcal_per_gram=kcal_per_gram)


def allocate_macros(
    target_calories: float,
    weight_kg: float,
    goal: Union[Goal, str, None] = None,
) -> MacroTarget:
    """Split a daily calorie budget into protein, carbs and fat.

    Non-positive or non-finite inputs return an all-zero target. When the
    protein anchor alone exceeds the budget, protein takes the whole budget.
    """
    if not (math.isfinite(target_calories) and math.isfinite(weight_kg)):
        return MacroTarget.zero()
    if target_calories <= 0 or weight_kg <= 0:
        return MacroTarget.zero(max(target_calories, 0))

    profile = macro_profile(goal)

    protein_kcal = min(profile["protein_g_per_kg"] * weight_kg * CALORIES_PER_GRAM["protein"], target_calories)
    remainder = target_calories - protein_kcal
    fat_kcal = remainder * profile["fat_ratio"]
    carbs_kcal = remainder - fat_kcal

    return MacroTarget(
        target_calories=target_calories,
        protein=_component(protein_kcal / CALORIES_PER_GRAM["protein"], CALORIES_PER_GRAM["protein"], target_calories),
        carbs=_component(carbs_kcal / CALORIES_PER_GRAM["carbs"], CALORIES_PER_GRAM["carbs"], target_calories),
        fats=_component(fat_kcal / CALORIES_PER_GRAM["fat"], CALORIES_PER_GRAM["fat"], target_calories),
    )


def macro_kcal_total(protein_g: float, carbs_g: float, fat_g: float) -> float:
    """Calories implied by hand-edited macro grams."""
    return (
        protein_g * CALORIES_PER_GRAM["protein"]
        + carbs_g * CALORIES_PER_GRAM["carbs"]
        + fat_g * CALORIES_PER_GRAM["fat"]
    )


def format_macro_target(target: MacroTarget, goal: Optional[Goal] = None) -> str:
    """Format macro targets for display."""
    lines = []
    if goal is not None:
        lines.append(f"Goal:     {goal.value.replace('_', ' ').title()}")
    lines.append(f"Target:   {target.target_calories:.0f} kcal/day")
    for label, component in (("Protein", target.protein), ("Carbs", target.carbs), ("Fat", target.fats)):
        lines.append(
            f"{label + ':':<10}{component.grams:.0f}g ({component.kcal:.0f} kcal, {component.percentage:.0f}%)"
        )
    return "\n".join(lines)
