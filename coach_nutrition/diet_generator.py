"""AI diet generation.

Builds the chat prompt from the computed targets, calls an OpenAI-compatible
chat-completions endpoint, and parses the JSON diet it returns. The parsed
plan can be flattened into the payload the meal-plan store expects.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Optional

import requests

from coach_nutrition.config import (
    DEFAULT_COACH_REQUEST,
    DIET_TEMPERATURE,
    OPENAI_API_KEY,
    OPENAI_API_URL,
    OPENAI_MODEL,
    OPENAI_TIMEOUT,
    OPTIONS_PER_MEAL,
)
from coach_nutrition.models import Goal, NutritionTargets

logger = logging.getLogger(__name__)


class DietGenerationError(Exception):
    """The AI service could not produce a usable diet."""


class MissingTrainingProgramError(DietGenerationError):
    """Diets are only generated for students with a training program."""


@dataclass
class TrainingProgram:
    """Summary of the student's latest training program."""
    title: str
    sessions: list = field(default_factory=list)  # raw session dicts


@dataclass
class DietRequest:
    """Inputs sent to the AI for one diet."""
    student_name: str
    goal: Goal
    weight_kg: float
    target_calories: int
    protein_g: int
    carbs_g: int
    fat_g: int
    training: Optional[TrainingProgram] = None
    coach_request: str = ""

    @staticmethod
    def from_targets(
        student_name: str,
        targets: NutritionTargets,
        training: Optional[TrainingProgram] = None,
        coach_request: str = "",
        macro_override: Optional[dict] = None,
    ) -> "DietRequest":
        """Build a request from computed targets.

        ``macro_override`` holds grams the coach edited by hand
        (``protein``/``carbs``/``fats`` keys); missing keys keep the
        computed value.
        """
        grams = targets.macros.rounded_grams()
        if macro_override:
            grams.update({k: v for k, v in macro_override.items() if k in grams})
        return DietRequest(
            student_name=student_name,
            goal=targets.goal,
            weight_kg=targets.biometrics.weight_kg,
            target_calories=targets.target_calories,
            protein_g=grams["protein"],
            carbs_g=grams["carbs"],
            fat_g=grams["fats"],
            training=training,
            coach_request=coach_request,
        )


@dataclass
class FoodItem:
    food: str
    quantity: float
    unit: str
    carbs: float = 0.0
    protein: float = 0.0
    fat: float = 0.0


@dataclass
class MealOption:
    id: int
    items: list = field(default_factory=list)  # List[FoodItem]


@dataclass
class Meal:
    name: str
    time: str
    options: list = field(default_factory=list)  # List[MealOption]


@dataclass
class DietPlan:
    """A diet as authored by the AI."""
    title: str
    goal: str
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fats: float
    meals: list = field(default_factory=list)  # List[Meal]
    rationale: str = ""
    suggested_supplements: list = field(default_factory=list)  # List[str]


RESPONSE_SCHEMA = """{
  "diet": {
    "title": "string",
    "goal": "string",
    "total_calories": number,
    "total_protein": number,
    "total_carbs": number,
    "total_fats": number,
    "meals": [
      {
        "name": "string",
        "time": "string",
        "options": [
          {
            "id": 1,
            "items": [
              {"food": "string", "quantity": number, "unit": "string", "carbs": number, "protein": number, "fat": number}
            ]
          },
          {"id": 2, "items": [...]},
          {"id": 3, "items": [...]}
        ]
      }
    ],
    "rationale": "string",
    "suggested_supplements": ["string"]
  }
}"""


def build_diet_messages(request: DietRequest) -> list:
    """Build the system and user chat messages for one diet."""
    system_prompt = f"""You are a high-level sports nutritionist specialized in performance and physique.
ROLE:
- Assist coaches in building precise meal plans.
- Provide {OPTIONS_PER_MEAL} OPTIONS (variants) for every meal (Option 1, Option 2, Option 3).
- Every option must respect the total calories and macros.
- Take the student's current training program into account for pre- and post-workout meals.

TARGETS:
- Target calories: {request.target_calories} kcal
- Protein: {request.protein_g}g
- Carbs: {request.carbs_g}g
- Fat: {request.fat_g}g

RESPONSE FORMAT (JSON):
{RESPONSE_SCHEMA}"""

    training = request.training
    user_prompt = f"""
# STUDENT DATA
- Name: {request.student_name}
- Goal: {request.goal.value.replace('_', ' ')}
- Weight: {request.weight_kg}kg
- Current training: {training.title if training else 'None defined'}
- Training details: {json.dumps(training.sessions, ensure_ascii=False) if training else 'N/A'}

# ADDITIONAL REQUEST:
"{request.coach_request.strip() or DEFAULT_COACH_REQUEST}"
"""
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


def request_diet(
    messages: list,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    api_url: str = OPENAI_API_URL,
    timeout: float = OPENAI_TIMEOUT,
) -> str:
    """Send chat messages and return the raw JSON content of the reply."""
    api_key = api_key or OPENAI_API_KEY
    if not api_key:
        raise DietGenerationError("OPENAI_API_KEY is not set")

    payload = {
        "model": model or OPENAI_MODEL,
        "messages": messages,
        "response_format": {"type": "json_object"},
        "temperature": DIET_TEMPERATURE,
    }
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key}",
    }

    logger.info("Requesting diet from %s (model=%s)", api_url, payload["model"])
    try:
        response = requests.post(api_url, headers=headers, data=json.dumps(payload), timeout=timeout)
    except requests.RequestException as e:
        logger.error("Diet request failed: %s", e)
        raise DietGenerationError(f"AI service unreachable: {e}") from e

    try:
        data = response.json()
    except ValueError:
        data = {}

    if not response.ok:
        message = _error_message(data) or f"HTTP {response.status_code}"
        logger.error("AI service returned an error: %s", message)
        raise DietGenerationError(message)

    try:
        return data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise DietGenerationError("AI response has no message content") from e


def _error_message(data) -> Optional[str]:
    """Pull the message out of an error body, which some endpoints send as a plain string."""
    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        return message if isinstance(message, str) and message else None
    if isinstance(error, str) and error:
        return error
    return None


def _objects(value, what: str) -> list:
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise DietGenerationError(f"AI response has malformed {what}")
    return value


def _food_item(item: dict) -> FoodItem:
    return FoodItem(
        food=item.get("food", ""),
        quantity=item.get("quantity", 0),
        unit=item.get("unit", ""),
        carbs=item.get("carbs", 0),
        protein=item.get("protein", 0),
        fat=item.get("fat", 0),
    )


def parse_diet(content: str) -> DietPlan:
    """Parse the AI's JSON reply into a DietPlan."""
    try:
        data = json.loads(content)
    except (TypeError, ValueError) as e:
        raise DietGenerationError(f"AI response is not valid JSON: {e}") from e

    if isinstance(data, dict) and "diet" in data:
        data = data["diet"]
    if not isinstance(data, dict) or not data.get("meals"):
        raise DietGenerationError("AI response has no meals")

    meals = []
    for meal in _objects(data["meals"], "meals"):
        options = [
            MealOption(
                id=opt.get("id", index + 1),
                items=[_food_item(i) for i in _objects(opt.get("items", []), "items")],
            )
            for index, opt in enumerate(_objects(meal.get("options", []), "options"))
        ]
        meals.append(Meal(name=meal.get("name", ""), time=meal.get("time", ""), options=options))

    return DietPlan(
        title=data.get("title", ""),
        goal=data.get("goal", ""),
        total_calories=data.get("total_calories", 0),
        total_protein=data.get("total_protein", 0),
        total_carbs=data.get("total_carbs", 0),
        total_fats=data.get("total_fats", 0),
        meals=meals,
        rationale=data.get("rationale", ""),
        suggested_supplements=list(data.get("suggested_supplements", [])),
    )


def generate_diet(request: DietRequest, api_key: Optional[str] = None, model: Optional[str] = None) -> DietPlan:
    """Generate a diet with three options per meal.

    Raises MissingTrainingProgramError when the student has no training
    program yet.
    """
    if request.training is None:
        raise MissingTrainingProgramError(
            f"{request.student_name or 'Student'} needs a training program before a diet"
        )
    messages = build_diet_messages(request)
    plan = parse_diet(request_diet(messages, api_key=api_key, model=model))
    logger.info("Generated diet %r with %d meals", plan.title, len(plan.meals))
    return plan


def meal_plan_payload(plan: DietPlan, target_calories: int, macros: dict) -> dict:
    """Flatten a diet into the meal-plan store's format.

    Each (meal, option) pair becomes one meal row. Totals come from the
    coach-approved targets, not from the AI's own totals.
    """
    meals = []
    for meal in plan.meals:
        for index, option in enumerate(meal.options):
            meals.append({
                "name": meal.name,
                "time": meal.time,
                "type": f"Option {index + 1}",
                "foods": [
                    {"name": item.food, "quantity": item.quantity, "unit": item.unit}
                    for item in option.items
                ],
            })

    return {
        "title": plan.title,
        "goal": plan.goal,
        "total_calories": target_calories,
        "total_proteins": macros["protein"],
        "total_carbs": macros["carbs"],
        "total_fats": macros["fats"],
        "meals": meals,
    }
