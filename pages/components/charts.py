"""Chart components using Plotly for data visualization."""

import pandas as pd
import plotly.express as px

from coach_nutrition.models import EnergyEstimate, MacroTarget


def create_macro_pie_chart(target: MacroTarget):
    """Create pie chart of macro calorie distribution.

    Args:
        target: MacroTarget with protein, carbs and fats components

    Returns:
        Plotly figure
    """
    labels = ['Protein', 'Carbs', 'Fat']
    values = [target.protein.kcal, target.carbs.kcal, target.fats.kcal]

    fig = px.pie(
        names=labels,
        values=values,
        title="Macro Calorie Distribution",
        color_discrete_sequence=['#FF6B6B', '#4ECDC4', '#FFE66D']
    )

    fig.update_traces(textposition='inside', textinfo='percent+label')

    return fig


def create_bmr_comparison_chart(estimate: EnergyEstimate):
    """Create bar chart comparing the BMR estimators against GET.

    The Tinsley lean-mass bar is omitted when there is no body-fat data.
    """
    rows = [
        {"Estimate": "Mifflin", "kcal": estimate.mifflin_bmr},
        {"Estimate": "Tinsley (total)", "kcal": estimate.tinsley_total_bmr},
    ]
    if estimate.tinsley_lbm_bmr is not None:
        rows.append({"Estimate": "Tinsley (LBM)", "kcal": estimate.tinsley_lbm_bmr})
    rows.append({"Estimate": "GET", "kcal": estimate.total_daily_expenditure})
    df = pd.DataFrame(rows)

    fig = px.bar(
        df,
        x="Estimate",
        y="kcal",
        title="Energy Estimates",
        text=df["kcal"].round(0),
        color="Estimate",
        color_discrete_sequence=['#4ECDC4', '#95E1D3', '#A8E6CF', '#FF6B6B'],
    )
    fig.update_layout(showlegend=False, yaxis_title="kcal/day")

    return fig
