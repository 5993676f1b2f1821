"""Application configuration and constants."""

import os

# Logging
LOG_LEVEL = os.getenv("COACH_NUTRITION_LOG_LEVEL", "WARNING")

# Activity level multipliers (NAF) for GET calculation
ACTIVITY_LEVELS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "intense": 1.725,
    "athlete": 1.9,
}

ACTIVITY_DESCRIPTIONS = {
    "sedentary": "Office work, little or no physical activity",
    "light": "Light exercise 1-3 days/week",
    "moderate": "Moderate exercise 3-5 days/week",
    "intense": "Hard exercise 6-7 days/week",
    "athlete": "Very hard training twice a day or heavy physical work",
}

DEFAULT_ACTIVITY_LEVEL = "moderate"

# Mifflin-St Jeor coefficients
MIFFLIN_WEIGHT_COEF = 10
MIFFLIN_HEIGHT_COEF = 6.25
MIFFLIN_AGE_COEF = 5
MIFFLIN_SEX_OFFSETS = {
    "male": 5,
    "female": -161,
}

# Tinsley coefficients (slope, intercept)
TINSLEY_TOTAL_WEIGHT = (24.8, 10)
TINSLEY_LEAN_MASS = (25.3, 284)

# Substituted when the anamnesis record is incomplete
FALLBACK_WEIGHT_KG = 70
FALLBACK_HEIGHT_CM = 170
FALLBACK_AGE_YEARS = 30
FALLBACK_SEX = "female"

# Deficit / maintenance / surplus shortcuts (kcal added to GET)
CALORIE_ADJUSTMENT_PRESETS = {
    "deficit": -500,
    "maintenance": 0,
    "surplus": 300,
}

# Macro calorie multipliers (calories per gram)
CALORIES_PER_GRAM = {
    "protein": 4,
    "carbs": 4,
    "fat": 9,
}

# Goal-based macro profiles: protein anchored in g/kg, fat as a share of
# the calories left after protein, carbs take the rest.
GOAL_MACRO_PROFILES = {
    "hypertrophy": {"protein_g_per_kg": 2.2, "fat_ratio": 0.30},
    "fat_loss": {"protein_g_per_kg": 2.0, "fat_ratio": 0.35},
    "maintenance": {"protein_g_per_kg": 1.8, "fat_ratio": 0.30},
    "performance": {"protein_g_per_kg": 1.8, "fat_ratio": 0.25},
    "rehabilitation": {"protein_g_per_kg": 1.8, "fat_ratio": 0.35},
}

DEFAULT_MACRO_PROFILE = {"protein_g_per_kg": 1.6, "fat_ratio": 0.30}

# AI diet generation
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_API_URL = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1/chat/completions")
OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", "60"))
DIET_TEMPERATURE = 0.7
OPTIONS_PER_MEAL = 3

DEFAULT_COACH_REQUEST = "Create a balanced diet with 3 variations per meal"
