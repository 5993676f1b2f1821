"""Data models for the nutrition engine."""

import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Goal(Enum):
    """Student's primary training goal."""
    HYPERTROPHY = "hypertrophy"
    FAT_LOSS = "fat_loss"
    MAINTENANCE = "maintenance"
    PERFORMANCE = "performance"
    REHABILITATION = "rehabilitation"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: Union["Goal", str, None]) -> "Goal":
        """Map a free-text goal label (Portuguese or English) to a Goal.

        Unrecognized or empty labels map to UNKNOWN.
        """
        if isinstance(label, Goal):
            return label
        if not label:
            return cls.UNKNOWN
        return _GOAL_ALIASES.get(_normalize_label(label), cls.UNKNOWN)


def _normalize_label(label: str) -> str:
    decomposed = unicodedata.normalize("NFKD", label.strip().lower())
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.replace("-", " ").replace("_", " ")


_GOAL_ALIASES = {
    "hipertrofia": Goal.HYPERTROPHY,
    "hypertrophy": Goal.HYPERTROPHY,
    "ganho de massa": Goal.HYPERTROPHY,
    "ganho de massa (hipertrofia)": Goal.HYPERTROPHY,
    "muscle gain": Goal.HYPERTROPHY,
    "build muscle": Goal.HYPERTROPHY,
    "emagrecimento": Goal.FAT_LOSS,
    "perda de peso": Goal.FAT_LOSS,
    "fat loss": Goal.FAT_LOSS,
    "weight loss": Goal.FAT_LOSS,
    "lose fat": Goal.FAT_LOSS,
    "manutencao": Goal.MAINTENANCE,
    "maintenance": Goal.MAINTENANCE,
    "maintain": Goal.MAINTENANCE,
    "performance": Goal.PERFORMANCE,
    "condicionamento": Goal.PERFORMANCE,
    "conditioning": Goal.PERFORMANCE,
    "reabilitacao": Goal.REHABILITATION,
    "rehabilitation": Goal.REHABILITATION,
    "rehab": Goal.REHABILITATION,
}


@dataclass(frozen=True)
class BiometricInput:
    """Body metrics for one energy calculation. Never persisted."""
    weight_kg: float
    height_cm: float
    age_years: float
    sex: str  # "male" or "female"
    activity_factor: float
    body_fat_percent: Optional[float] = None


@dataclass(frozen=True)
class EnergyEstimate:
    """BMR estimates (kcal/day) and total daily energy expenditure."""
    mifflin_bmr: float
    tinsley_total_bmr: float
    tinsley_lbm_bmr: Optional[float]  # None without a body-fat measurement
    total_daily_expenditure: float


@dataclass(frozen=True)
class MacroComponent:
    """One macronutrient's share of a calorie budget."""
    grams: float
    percentage: float
    kcal_per_gram: int

    @property
    def kcal(self) -> float:
        return self.grams * self.kcal_per_gram


@dataclass(frozen=True)
class MacroTarget:
    """Daily protein/carbs/fat targets for a calorie budget."""
    target_calories: float
    protein: MacroComponent
    carbs: MacroComponent
    fats: MacroComponent

    @staticmethod
    def zero(target_calories: float = 0) -> "MacroTarget":
        return MacroTarget(
            target_calories=target_calories,
            protein=MacroComponent(0.0, 0.0, 4),
            carbs=MacroComponent(0.0, 0.0, 4),
            fats=MacroComponent(0.0, 0.0, 9),
        )

    @property
    def components(self) -> dict:
        return {"protein": self.protein, "carbs": self.carbs, "fats": self.fats}

    @property
    def total_kcal(self) -> float:
        """Calories reconstructed from the three components."""
        return self.protein.kcal + self.carbs.kcal + self.fats.kcal

    @property
    def is_empty(self) -> bool:
        return all(c.grams == 0 for c in self.components.values())

    def rounded_grams(self) -> dict:
        """Whole-gram targets, as shown to the coach and sent to the AI."""
        return {
            "protein": round(self.protein.grams),
            "carbs": round(self.carbs.grams),
            "fats": round(self.fats.grams),
        }


@dataclass(frozen=True)
class NutritionTargets:
    """Everything the assistant computes for one student."""
    biometrics: BiometricInput
    energy: EnergyEstimate
    target_calories: int
    goal: Goal
    macros: MacroTarget
