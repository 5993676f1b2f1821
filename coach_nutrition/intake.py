"""Student anamnesis intake.

Turns the student and anamnesis rows held by the external student store
into calculation inputs, substituting fallbacks for missing measurements.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from coach_nutrition.config import (
    ACTIVITY_LEVELS,
    FALLBACK_AGE_YEARS,
    FALLBACK_HEIGHT_CM,
    FALLBACK_SEX,
    FALLBACK_WEIGHT_KG,
)
from coach_nutrition.energy import estimate_energy
from coach_nutrition.macro_allocator import allocate_macros
from coach_nutrition.models import BiometricInput, EnergyEstimate, Goal, NutritionTargets

_SEX_LABELS = {
    "masculino": "male",
    "male": "male",
    "m": "male",
    "feminino": "female",
    "female": "female",
    "f": "female",
}


def _parse_date(value) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value)).date()


@dataclass
class StudentRecord:
    """Student row as returned by the student store."""
    id: Optional[str]
    name: str
    sex: Optional[str] = None  # "masculino" / "feminino"
    birth_date: Optional[date] = None

    @staticmethod
    def from_row(row: dict) -> "StudentRecord":
        return StudentRecord(
            id=row.get("id"),
            name=row.get("name") or "",
            sex=row.get("sex"),
            birth_date=_parse_date(row.get("birth_date")),
        )


@dataclass
class AnamnesisRecord:
    """Latest anamnesis answers relevant to the diet."""
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    body_fat_percentage: Optional[float] = None
    main_goal: Optional[str] = None

    @staticmethod
    def from_row(row: dict) -> "AnamnesisRecord":
        return AnamnesisRecord(
            weight_kg=row.get("weight_kg"),
            height_cm=row.get("height_cm"),
            body_fat_percentage=row.get("body_fat_percentage"),
            main_goal=row.get("main_goal"),
        )

    @property
    def goal(self) -> Goal:
        return Goal.from_label(self.main_goal)


def age_from_birth_date(birth_date: Optional[date], today: Optional[date] = None) -> int:
    """Age as the difference in calendar years; fallback age when unknown."""
    if birth_date is None:
        return FALLBACK_AGE_YEARS
    if today is None:
        today = date.today()
    return today.year - birth_date.year


def normalize_sex(label: Optional[str]) -> str:
    if not label:
        return FALLBACK_SEX
    return _SEX_LABELS.get(label.strip().lower(), FALLBACK_SEX)


def resolve_activity_factor(level: Union[str, float]) -> float:
    """Accept an activity level name or one of its factors.

    Raises ValueError for anything outside ``ACTIVITY_LEVELS``.
    """
    if isinstance(level, str):
        key = level.strip().lower()
        if key in ACTIVITY_LEVELS:
            return ACTIVITY_LEVELS[key]
        try:
            level = float(key)
        except ValueError:
            raise ValueError(
                f"Unknown activity level {level!r}. Choose from: {', '.join(ACTIVITY_LEVELS)}"
            ) from None
    for factor in ACTIVITY_LEVELS.values():
        if abs(level - factor) < 1e-9:
            return factor
    raise ValueError(
        f"Unsupported activity factor {level}. Choose from: "
        f"{', '.join(str(f) for f in ACTIVITY_LEVELS.values())}"
    )


def activity_level_name(activity_factor: float) -> Optional[str]:
    for name, factor in ACTIVITY_LEVELS.items():
        if abs(activity_factor - factor) < 1e-9:
            return name
    return None


def biometrics_from_records(
    student: StudentRecord,
    anamnesis: AnamnesisRecord,
    activity_factor: float,
    today: Optional[date] = None,
) -> BiometricInput:
    """Build calculation inputs, substituting fallbacks for missing data.

    A zero or missing body-fat percentage counts as "not measured".
    """
    return BiometricInput(
        weight_kg=anamnesis.weight_kg or FALLBACK_WEIGHT_KG,
        height_cm=anamnesis.height_cm or FALLBACK_HEIGHT_CM,
        age_years=age_from_birth_date(student.birth_date, today),
        sex=normalize_sex(student.sex),
        activity_factor=activity_factor,
        body_fat_percent=anamnesis.body_fat_percentage or None,
    )


def target_calories(estimate: EnergyEstimate, adjustment: int = 0) -> int:
    """Daily target: rounded GET plus the coach's deficit or surplus."""
    return round(estimate.total_daily_expenditure) + adjustment


def build_nutrition_targets(
    biometrics: BiometricInput,
    goal: Union[Goal, str, None] = None,
    adjustment: int = 0,
) -> NutritionTargets:
    """Energy estimate, adjusted calorie target and macro split in one pass."""
    goal = Goal.from_label(goal)
    energy = estimate_energy(biometrics)
    kcal = target_calories(energy, adjustment)
    return NutritionTargets(
        biometrics=biometrics,
        energy=energy,
        target_calories=kcal,
        goal=goal,
        macros=allocate_macros(kcal, biometrics.weight_kg, goal),
    )
