"""Streamlit frontend for the AI Nutrition Assistant.

Computes energy expenditure and macro targets for a student and asks the
AI to author a diet with three options per meal.
"""

import json

import streamlit as st

from coach_nutrition.config import (
    ACTIVITY_DESCRIPTIONS,
    ACTIVITY_LEVELS,
    CALORIE_ADJUSTMENT_PRESETS,
    DEFAULT_ACTIVITY_LEVEL,
    FALLBACK_AGE_YEARS,
    FALLBACK_HEIGHT_CM,
    FALLBACK_WEIGHT_KG,
)
from coach_nutrition.diet_generator import (
    DietGenerationError,
    DietRequest,
    TrainingProgram,
    generate_diet,
    meal_plan_payload,
)
from coach_nutrition.intake import build_nutrition_targets
from coach_nutrition.models import BiometricInput, Goal
from pages.components.charts import create_bmr_comparison_chart, create_macro_pie_chart
from pages.components.nutrition_display import render_energy_card, render_macro_editor

st.set_page_config(
    page_title="AI Nutrition Assistant",
    page_icon="🥗",
    layout="wide",
    initial_sidebar_state="expanded"
)

if 'generated_diet' not in st.session_state:
    st.session_state.generated_diet = None

st.title("🥗 AI Nutrition Assistant")

# Sidebar: student data
with st.sidebar:
    st.markdown("## Student")
    name = st.text_input("Name", value="")
    goal = st.selectbox(
        "Goal",
        [g for g in Goal if g is not Goal.UNKNOWN],
        format_func=lambda g: g.value.replace('_', ' ').title(),
    )

    st.markdown("#### Body Measurements")
    weight_kg = st.number_input("Weight (kg)", min_value=20.0, max_value=300.0,
                                value=float(FALLBACK_WEIGHT_KG), step=0.5)
    height_cm = st.number_input("Height (cm)", min_value=100.0, max_value=250.0,
                                value=float(FALLBACK_HEIGHT_CM), step=1.0)
    age = st.number_input("Age", min_value=10, max_value=100, value=FALLBACK_AGE_YEARS)
    sex = st.selectbox("Sex", ["female", "male"])
    has_body_fat = st.checkbox("Body fat measured")
    body_fat = None
    if has_body_fat:
        body_fat = st.number_input("Body fat (%)", min_value=1.0, max_value=70.0, value=20.0, step=0.5)

    st.markdown("#### Training")
    training_title = st.text_input("Current training program", value="",
                                   help="A diet can only be generated for students with a training program")

# Activity level (NAF)
st.markdown("### Energy Calculation")
level = st.select_slider(
    "Activity level (NAF)",
    options=list(ACTIVITY_LEVELS.keys()),
    value=DEFAULT_ACTIVITY_LEVEL,
    format_func=lambda name: f"{name.title()} ({ACTIVITY_LEVELS[name]})",
)
st.caption(ACTIVITY_DESCRIPTIONS[level])

biometrics = BiometricInput(
    weight_kg=weight_kg,
    height_cm=height_cm,
    age_years=age,
    sex=sex,
    activity_factor=ACTIVITY_LEVELS[level],
    body_fat_percent=body_fat,
)

# Calorie adjustment
st.markdown("### Calorie Adjustment")
col1, col2 = st.columns([2, 1])
with col1:
    preset = st.radio(
        "Preset",
        list(CALORIE_ADJUSTMENT_PRESETS.keys()),
        index=1,
        horizontal=True,
        format_func=lambda p: f"{p.title()} ({CALORIE_ADJUSTMENT_PRESETS[p]:+d} kcal)",
    )
with col2:
    adjustment = st.number_input("Custom adjustment (kcal)", value=CALORIE_ADJUSTMENT_PRESETS[preset], step=50,
                                 key=f"adjustment_{preset}",
                                 help="Negative = deficit (weight loss). Positive = surplus (mass gain).")

targets = build_nutrition_targets(biometrics, goal, int(adjustment))

render_energy_card(targets.energy)
st.plotly_chart(create_bmr_comparison_chart(targets.energy), use_container_width=True)

st.metric("Daily Target", f"{targets.target_calories} kcal/day", delta=f"{int(adjustment):+d} kcal")

# Macros
st.markdown("### Macros")
if targets.macros.is_empty:
    st.warning("⚠️ Target calories must be positive to allocate macros.")
    edited = targets.macros.rounded_grams()
else:
    edited = render_macro_editor(targets.macros)
    st.plotly_chart(create_macro_pie_chart(targets.macros), use_container_width=True)

st.divider()

# AI generation
coach_request = st.text_area("Additional instructions for the AI", value="")
generate = st.button("✨ Generate 3 Menus with AI", use_container_width=True,
                     disabled=not training_title or targets.macros.is_empty)
if not training_title:
    st.caption("The student needs a training program before a diet.")

if generate:
    request = DietRequest.from_targets(
        name,
        targets,
        training=TrainingProgram(title=training_title),
        coach_request=coach_request,
        macro_override=edited,
    )
    with st.spinner("Generating menus..."):
        try:
            st.session_state.generated_diet = generate_diet(request)
            st.success("✅ Diet generated with 3 options per meal!")
        except DietGenerationError as e:
            st.error(f"❌ Error generating diet: {e}")

plan = st.session_state.generated_diet
if plan:
    st.markdown(f"## {plan.title}")
    st.caption(plan.goal)
    for meal in plan.meals:
        st.markdown(f"#### {meal.name} · {meal.time}")
        cols = st.columns(max(len(meal.options), 1))
        for col, option in zip(cols, meal.options):
            with col:
                st.markdown(f"**Option {option.id}**")
                for item in option.items:
                    st.write(f"- {item.food}: {item.quantity} {item.unit}")
    if plan.rationale:
        st.info(plan.rationale)
    if plan.suggested_supplements:
        st.caption("Suggested supplements: " + ", ".join(plan.suggested_supplements))

    payload = meal_plan_payload(plan, targets.target_calories, edited)
    st.download_button(
        "💾 Download meal plan",
        data=json.dumps(payload, indent=2, ensure_ascii=False),
        file_name="meal_plan.json",
        mime="application/json",
    )
