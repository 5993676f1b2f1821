"""Tests for AI diet generation."""

import json
import unittest
from unittest import mock

import requests

from coach_nutrition.diet_generator import (
    DietGenerationError,
    DietRequest,
    MissingTrainingProgramError,
    TrainingProgram,
    build_diet_messages,
    generate_diet,
    meal_plan_payload,
    parse_diet,
    request_diet,
)
from coach_nutrition.intake import build_nutrition_targets
from coach_nutrition.models import BiometricInput, Goal

SAMPLE_DIET = {
    "diet": {
        "title": "Lean Bulk",
        "goal": "Hypertrophy",
        "total_calories": 2759,
        "total_protein": 176,
        "total_carbs": 360,
        "total_fats": 68,
        "meals": [
            {
                "name": "Breakfast",
                "time": "07:00",
                "options": [
                    {"id": 1, "items": [
                        {"food": "Oats", "quantity": 80, "unit": "g", "carbs": 54, "protein": 10, "fat": 5},
                        {"food": "Eggs", "quantity": 3, "unit": "un", "carbs": 1, "protein": 18, "fat": 15},
                    ]},
                    {"id": 2, "items": [{"food": "Bread", "quantity": 2, "unit": "slices"}]},
                    {"id": 3, "items": [{"food": "Tapioca", "quantity": 60, "unit": "g"}]},
                ],
            },
            {
                "name": "Lunch",
                "time": "12:30",
                "options": [
                    {"id": 1, "items": [{"food": "Rice", "quantity": 150, "unit": "g"}]},
                ],
            },
        ],
        "rationale": "High carbs around training.",
        "suggested_supplements": ["Creatine"],
    }
}


def _response(status=200, body=None):
    response = mock.Mock()
    response.status_code = status
    response.ok = status < 400
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


def _completion(content):
    return {"choices": [{"message": {"content": content}}]}


class DietRequestMixin:
    def make_request(self, training=True, coach_request=""):
        biometrics = BiometricInput(weight_kg=80, height_cm=180, age_years=30, sex="male", activity_factor=1.55)
        targets = build_nutrition_targets(biometrics, "hipertrofia")
        program = TrainingProgram(title="ABC Split", sessions=[{"name": "A", "exercises": ["Squat"]}])
        return DietRequest.from_targets(
            "João", targets, training=program if training else None, coach_request=coach_request,
        )


class TestDietRequest(DietRequestMixin, unittest.TestCase):
    def test_from_targets(self):
        request = self.make_request()
        self.assertEqual(request.goal, Goal.HYPERTROPHY)
        self.assertEqual(request.target_calories, 2759)
        self.assertEqual(request.protein_g, 176)
        self.assertEqual(request.carbs_g, 360)
        self.assertEqual(request.weight_kg, 80)

    def test_macro_override(self):
        biometrics = BiometricInput(weight_kg=80, height_cm=180, age_years=30, sex="male", activity_factor=1.55)
        targets = build_nutrition_targets(biometrics, "hipertrofia")
        request = DietRequest.from_targets("João", targets, macro_override={"protein": 190, "other": 1})
        self.assertEqual(request.protein_g, 190)
        self.assertEqual(request.carbs_g, 360)


class TestBuildMessages(DietRequestMixin, unittest.TestCase):
    def test_roles(self):
        messages = build_diet_messages(self.make_request())
        self.assertEqual([m["role"] for m in messages], ["system", "user"])

    def test_targets_in_system_prompt(self):
        system = build_diet_messages(self.make_request())[0]["content"]
        self.assertIn("Target calories: 2759 kcal", system)
        self.assertIn("Protein: 176g", system)
        self.assertIn("Carbs: 360g", system)
        self.assertIn('"meals"', system)

    def test_student_and_training_in_user_prompt(self):
        user = build_diet_messages(self.make_request())[1]["content"]
        self.assertIn("Goal: hypertrophy", user)
        self.assertIn("Weight: 80kg", user)
        self.assertIn("Current training: ABC Split", user)
        self.assertIn('"Squat"', user)

    def test_default_coach_request(self):
        user = build_diet_messages(self.make_request())[1]["content"]
        self.assertIn("Create a balanced diet with 3 variations per meal", user)

    def test_custom_coach_request(self):
        user = build_diet_messages(self.make_request(coach_request="No lactose"))[1]["content"]
        self.assertIn('"No lactose"', user)

    def test_without_training(self):
        user = build_diet_messages(self.make_request(training=False))[1]["content"]
        self.assertIn("Current training: None defined", user)


class TestRequestDiet(unittest.TestCase):
    messages = [{"role": "user", "content": "hi"}]

    def test_missing_api_key(self):
        with mock.patch("coach_nutrition.diet_generator.OPENAI_API_KEY", ""):
            with self.assertRaises(DietGenerationError):
                request_diet(self.messages)

    @mock.patch("coach_nutrition.diet_generator.requests.post")
    def test_success(self, post):
        post.return_value = _response(body=_completion('{"diet": {}}'))
        content = request_diet(self.messages, api_key="sk-test", model="gpt-test")
        self.assertEqual(content, '{"diet": {}}')

        kwargs = post.call_args.kwargs
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer sk-test")
        payload = json.loads(kwargs["data"])
        self.assertEqual(payload["model"], "gpt-test")
        self.assertEqual(payload["response_format"], {"type": "json_object"})
        self.assertEqual(payload["temperature"], 0.7)

    @mock.patch("coach_nutrition.diet_generator.requests.post")
    def test_http_error_message(self, post):
        post.return_value = _response(status=429, body={"error": {"message": "Rate limit reached"}})
        with self.assertRaisesRegex(DietGenerationError, "Rate limit reached"):
            request_diet(self.messages, api_key="sk-test")

    @mock.patch("coach_nutrition.diet_generator.requests.post")
    def test_http_error_without_body(self, post):
        post.return_value = _response(status=502)
        with self.assertRaisesRegex(DietGenerationError, "HTTP 502"):
            request_diet(self.messages, api_key="sk-test")

    @mock.patch("coach_nutrition.diet_generator.requests.post")
    def test_http_error_string(self, post):
        post.return_value = _response(status=401, body={"error": "Invalid API key"})
        with self.assertRaisesRegex(DietGenerationError, "Invalid API key"):
            request_diet(self.messages, api_key="sk-test")

    @mock.patch("coach_nutrition.diet_generator.requests.post")
    def test_http_error_list_body(self, post):
        post.return_value = _response(status=500, body=["internal error"])
        with self.assertRaisesRegex(DietGenerationError, "HTTP 500"):
            request_diet(self.messages, api_key="sk-test")

    @mock.patch("coach_nutrition.diet_generator.requests.post")
    def test_list_body(self, post):
        post.return_value = _response(body=["unexpected"])
        with self.assertRaisesRegex(DietGenerationError, "no message content"):
            request_diet(self.messages, api_key="sk-test")

    @mock.patch("coach_nutrition.diet_generator.requests.post")
    def test_connection_error(self, post):
        post.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(DietGenerationError):
            request_diet(self.messages, api_key="sk-test")

    @mock.patch("coach_nutrition.diet_generator.requests.post")
    def test_missing_choices(self, post):
        post.return_value = _response(body={"choices": []})
        with self.assertRaises(DietGenerationError):
            request_diet(self.messages, api_key="sk-test")


class TestParseDiet(unittest.TestCase):
    def test_parse(self):
        plan = parse_diet(json.dumps(SAMPLE_DIET))
        self.assertEqual(plan.title, "Lean Bulk")
        self.assertEqual(len(plan.meals), 2)
        self.assertEqual(len(plan.meals[0].options), 3)
        oats = plan.meals[0].options[0].items[0]
        self.assertEqual((oats.food, oats.quantity, oats.unit, oats.carbs), ("Oats", 80, "g", 54))
        self.assertEqual(plan.meals[0].options[1].items[0].protein, 0)
        self.assertEqual(plan.suggested_supplements, ["Creatine"])

    def test_parse_unwrapped(self):
        plan = parse_diet(json.dumps(SAMPLE_DIET["diet"]))
        self.assertEqual(plan.total_protein, 176)

    def test_invalid_json(self):
        with self.assertRaises(DietGenerationError):
            parse_diet("not json")

    def test_no_meals(self):
        with self.assertRaises(DietGenerationError):
            parse_diet(json.dumps({"diet": {"title": "Empty", "meals": []}}))

    def test_meals_not_objects(self):
        with self.assertRaisesRegex(DietGenerationError, "malformed meals"):
            parse_diet(json.dumps({"meals": ["Breakfast", "Lunch"]}))

    def test_meals_string(self):
        with self.assertRaisesRegex(DietGenerationError, "malformed meals"):
            parse_diet(json.dumps({"meals": "Breakfast"}))

    def test_malformed_options(self):
        with self.assertRaisesRegex(DietGenerationError, "malformed options"):
            parse_diet(json.dumps({"meals": [{"name": "Lunch", "options": ["Rice"]}]}))

    def test_malformed_items(self):
        content = json.dumps({"meals": [{"name": "Lunch", "options": [{"id": 1, "items": "Rice"}]}]})
        with self.assertRaisesRegex(DietGenerationError, "malformed items"):
            parse_diet(content)


class TestGenerateDiet(DietRequestMixin, unittest.TestCase):
    def test_requires_training(self):
        with self.assertRaises(MissingTrainingProgramError):
            generate_diet(self.make_request(training=False), api_key="sk-test")

    @mock.patch("coach_nutrition.diet_generator.requests.post")
    def test_generate(self, post):
        post.return_value = _response(body=_completion(json.dumps(SAMPLE_DIET)))
        plan = generate_diet(self.make_request(), api_key="sk-test")
        self.assertEqual(plan.title, "Lean Bulk")
        sent = json.loads(post.call_args.kwargs["data"])["messages"]
        self.assertIn("2759 kcal", sent[0]["content"])


class TestMealPlanPayload(unittest.TestCase):
    def test_flattens_options(self):
        plan = parse_diet(json.dumps(SAMPLE_DIET))
        payload = meal_plan_payload(plan, 2800, {"protein": 180, "carbs": 350, "fats": 70})

        self.assertEqual(payload["total_calories"], 2800)
        self.assertEqual(payload["total_proteins"], 180)
        self.assertEqual(payload["total_fats"], 70)
        self.assertEqual(len(payload["meals"]), 4)
        self.assertEqual(
            [(m["name"], m["type"]) for m in payload["meals"]],
            [("Breakfast", "Option 1"), ("Breakfast", "Option 2"), ("Breakfast", "Option 3"), ("Lunch", "Option 1")],
        )
        self.assertEqual(payload["meals"][0]["foods"][1], {"name": "Eggs", "quantity": 3, "unit": "un"})


if __name__ == "__main__":
    unittest.main()
