"""Energy expenditure engine.

Uses:
- Mifflin-St Jeor equation for Basal Metabolic Rate (BMR)
- Tinsley equations (total bodyweight and lean body mass variants)
- Activity multipliers (NAF) for total daily energy expenditure (GET)

GET is always derived from the Mifflin estimate; the Tinsley figures are
reported for comparison only.

References:
- Mifflin MD, St Jeor ST, et al. (1990). "A new predictive equation for
  resting energy expenditure in healthy individuals." Am J Clin Nutr.
- Tinsley GM, Graybeal AJ, Moore ML (2019). "Resting metabolic rate in
  muscular physique athletes: validity of existing methods and development
  of new prediction equations." Appl Physiol Nutr Metab.
"""

from coach_nutrition.config import (
    MIFFLIN_AGE_COEF,
    MIFFLIN_HEIGHT_COEF,
    MIFFLIN_SEX_OFFSETS,
    MIFFLIN_WEIGHT_COEF,
    TINSLEY_LEAN_MASS,
    TINSLEY_TOTAL_WEIGHT,
)
from coach_nutrition.models import BiometricInput, EnergyEstimate


def estimate_mifflin(biometrics: BiometricInput) -> float:
    """Calculate BMR using the Mifflin-St Jeor equation.

    Male:   BMR = 10 × weight(kg) + 6.25 × height(cm) − 5 × age(y) + 5
    Female: BMR = 10 × weight(kg) + 6.25 × height(cm) − 5 × age(y) − 161
    """
    bmr = (
        MIFFLIN_WEIGHT_COEF * biometrics.weight_kg
        + MIFFLIN_HEIGHT_COEF * biometrics.height_cm
        - MIFFLIN_AGE_COEF * biometrics.age_years
    )
    if biometrics.sex == "male":
        return bmr + MIFFLIN_SEX_OFFSETS["male"]
    return bmr + MIFFLIN_SEX_OFFSETS["female"]


def estimate_tinsley_total(weight_kg: float) -> float:
    """Tinsley total-bodyweight equation: 24.8 × weight(kg) + 10."""
    slope, intercept = TINSLEY_TOTAL_WEIGHT
    return slope * weight_kg + intercept


def estimate_tinsley_lbm(weight_kg: float, body_fat_percent: float) -> float:
    """Tinsley lean-mass equation: 25.3 × LBM(kg) + 284.

    ``body_fat_percent`` must be in [0, 100). Callers without a body-fat
    measurement should not call this; see ``estimate_energy``.
    """
    lean_mass = weight_kg * (1 - body_fat_percent / 100)
    slope, intercept = TINSLEY_LEAN_MASS
    return slope * lean_mass + intercept


def compute_daily_expenditure(bmr: float, activity_factor: float) -> float:
    """GET = BMR × activity factor."""
    return bmr * activity_factor


def estimate_energy(biometrics: BiometricInput) -> EnergyEstimate:
    """Run every estimator for one set of body metrics."""
    mifflin = estimate_mifflin(biometrics)

    tinsley_lbm = None
    if biometrics.body_fat_percent is not None:
        tinsley_lbm = estimate_tinsley_lbm(biometrics.weight_kg, biometrics.body_fat_percent)

    return EnergyEstimate(
        mifflin_bmr=mifflin,
        tinsley_total_bmr=estimate_tinsley_total(biometrics.weight_kg),
        tinsley_lbm_bmr=tinsley_lbm,
        total_daily_expenditure=compute_daily_expenditure(mifflin, biometrics.activity_factor),
    )


def format_energy_estimate(estimate: EnergyEstimate) -> str:
    """Format energy estimates for display."""
    lbm = f"{estimate.tinsley_lbm_bmr:.0f} kcal" if estimate.tinsley_lbm_bmr is not None else "n/a (no body fat)"
    lines = [
        f"BMR (Mifflin):       {estimate.mifflin_bmr:.0f} kcal",
        f"BMR (Tinsley total): {estimate.tinsley_total_bmr:.0f} kcal",
        f"BMR (Tinsley LBM):   {lbm}",
        f"GET:                 {estimate.total_daily_expenditure:.0f} kcal/day",
    ]
    return "\n".join(lines)
