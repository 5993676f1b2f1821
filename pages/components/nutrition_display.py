"""Nutrition display components for Streamlit pages."""

import streamlit as st

from coach_nutrition.macro_allocator import macro_kcal_total
from coach_nutrition.models import EnergyEstimate, MacroTarget


def render_energy_card(estimate: EnergyEstimate):
    """Render BMR estimates and GET as metrics."""
    cols = st.columns(4)
    cols[0].metric("BMR (Mifflin)", f"{estimate.mifflin_bmr:.0f} kcal")
    cols[1].metric("Tinsley (total)", f"{estimate.tinsley_total_bmr:.0f} kcal")
    if estimate.tinsley_lbm_bmr is not None:
        cols[2].metric("Tinsley (LBM)", f"{estimate.tinsley_lbm_bmr:.0f} kcal")
    else:
        cols[2].metric("Tinsley (LBM)", "n/a", help="Requires a body fat measurement")
    cols[3].metric("GET", f"{estimate.total_daily_expenditure:.0f} kcal")


def render_macro_editor(target: MacroTarget) -> dict:
    """Render computed macros with editable gram fields.

    Returns:
        Gram targets after the coach's edits ({"protein", "carbs", "fats"})
    """
    grams = target.rounded_grams()
    cols = st.columns(3)
    protein = cols[0].number_input("Protein (g)", min_value=0, value=grams["protein"], step=1,
                                   key=f"protein_{target.target_calories}")
    carbs = cols[1].number_input("Carbs (g)", min_value=0, value=grams["carbs"], step=1,
                                 key=f"carbs_{target.target_calories}")
    fats = cols[2].number_input("Fat (g)", min_value=0, value=grams["fats"], step=1,
                                key=f"fats_{target.target_calories}")

    st.caption(
        f"Computed: {target.protein.percentage:.0f}% protein | "
        f"{target.carbs.percentage:.0f}% carbs | "
        f"{target.fats.percentage:.0f}% fat"
    )

    total = macro_kcal_total(protein, carbs, fats)
    deviation = total - target.target_calories
    st.metric("Total", f"{total:.0f} kcal", delta=f"{deviation:+.0f} kcal vs target")

    return {"protein": int(protein), "carbs": int(carbs), "fats": int(fats)}
