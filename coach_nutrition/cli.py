"""Command-line interface for the nutrition engine."""

import argparse
import json
import logging
import sys
from dataclasses import asdict

from coach_nutrition.config import (
    ACTIVITY_DESCRIPTIONS,
    ACTIVITY_LEVELS,
    CALORIE_ADJUSTMENT_PRESETS,
    DEFAULT_ACTIVITY_LEVEL,
    LOG_LEVEL,
)
from coach_nutrition.diet_generator import (
    DietGenerationError,
    DietRequest,
    TrainingProgram,
    build_diet_messages,
    generate_diet,
    meal_plan_payload,
)
from coach_nutrition.energy import estimate_energy, format_energy_estimate
from coach_nutrition.intake import activity_level_name, build_nutrition_targets, resolve_activity_factor
from coach_nutrition.macro_allocator import allocate_macros, format_macro_target
from coach_nutrition.models import BiometricInput, Goal


def _biometrics_from_args(args) -> BiometricInput:
    return BiometricInput(
        weight_kg=args.weight,
        height_cm=args.height,
        age_years=args.age,
        sex=args.sex,
        activity_factor=resolve_activity_factor(args.activity),
        body_fat_percent=args.body_fat,
    )


def _adjustment_from_args(args) -> int:
    if args.preset:
        return CALORIE_ADJUSTMENT_PRESETS[args.preset]
    return args.adjustment


def _fail(message: str) -> None:
    print(f"Error: {message}")
    sys.exit(1)


def _print_energy(biometrics: BiometricInput, estimate) -> None:
    factor = biometrics.activity_factor
    print(f"Activity:            {activity_level_name(factor) or 'custom'} ({factor})")
    print(format_energy_estimate(estimate))


# --- Command handlers ---

def cmd_energy(args):
    try:
        biometrics = _biometrics_from_args(args)
    except ValueError as e:
        _fail(str(e))
    _print_energy(biometrics, estimate_energy(biometrics))


def cmd_macros(args):
    goal = Goal.from_label(args.goal)
    target = allocate_macros(args.calories, args.weight, goal)
    if target.is_empty:
        print("Calories and weight must be positive; no macros allocated.")
        return
    print(format_macro_target(target, goal))


def cmd_targets(args):
    try:
        biometrics = _biometrics_from_args(args)
    except ValueError as e:
        _fail(str(e))
    targets = build_nutrition_targets(biometrics, args.goal, _adjustment_from_args(args))
    _print_energy(biometrics, targets.energy)
    print()
    print(format_macro_target(targets.macros, targets.goal))


def cmd_activity_levels(args):
    for name, factor in ACTIVITY_LEVELS.items():
        print(f"{name:<10} {factor:<6} {ACTIVITY_DESCRIPTIONS[name]}")


def cmd_diet(args):
    try:
        biometrics = _biometrics_from_args(args)
    except ValueError as e:
        _fail(str(e))
    targets = build_nutrition_targets(biometrics, args.goal, _adjustment_from_args(args))

    training = None
    if args.training_title:
        training = TrainingProgram(title=args.training_title)

    request = DietRequest.from_targets(args.name, targets, training=training, coach_request=args.request or "")

    if args.dry_run:
        for message in build_diet_messages(request):
            print(f"--- {message['role']} ---")
            print(message["content"])
        return

    try:
        plan = generate_diet(request, model=args.model)
    except DietGenerationError as e:
        _fail(str(e))

    macros = {"protein": request.protein_g, "carbs": request.carbs_g, "fats": request.fat_g}
    print(json.dumps({
        "diet": asdict(plan),
        "meal_plan": meal_plan_payload(plan, request.target_calories, macros),
    }, indent=2, ensure_ascii=False))


# --- Argument parser ---

def _add_biometric_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--weight", type=float, required=True, help="Weight in kg")
    parser.add_argument("--height", type=float, required=True, help="Height in cm")
    parser.add_argument("--age", type=int, required=True, help="Age in years")
    parser.add_argument("--sex", choices=["male", "female"], required=True)
    parser.add_argument("--body-fat", type=float, help="Body fat percentage")
    parser.add_argument("--activity", default=DEFAULT_ACTIVITY_LEVEL,
                        help=f"Activity level name or factor ({', '.join(ACTIVITY_LEVELS)})")


def _add_adjustment_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--goal", help="Training goal (e.g. hipertrofia, emagrecimento)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--adjustment", type=int, default=0,
                       help="kcal added to GET (negative for a deficit)")
    group.add_argument("--preset", choices=list(CALORIE_ADJUSTMENT_PRESETS.keys()),
                       help="Named calorie adjustment")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coach_nutrition",
        description="Energy expenditure and macro targets for coaching students",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    energy_p = subparsers.add_parser("energy", help="Estimate BMR and GET")
    _add_biometric_args(energy_p)
    energy_p.set_defaults(func=cmd_energy)

    macros_p = subparsers.add_parser("macros", help="Split a calorie budget into macros")
    macros_p.add_argument("--calories", type=float, required=True, help="Target kcal/day")
    macros_p.add_argument("--weight", type=float, required=True, help="Weight in kg")
    macros_p.add_argument("--goal", help="Training goal")
    macros_p.set_defaults(func=cmd_macros)

    targets_p = subparsers.add_parser("targets", help="Energy estimate plus macro targets")
    _add_biometric_args(targets_p)
    _add_adjustment_args(targets_p)
    targets_p.set_defaults(func=cmd_targets)

    levels_p = subparsers.add_parser("activity-levels", help="List activity levels")
    levels_p.set_defaults(func=cmd_activity_levels)

    diet_p = subparsers.add_parser("diet", help="Generate a diet with the AI assistant")
    _add_biometric_args(diet_p)
    _add_adjustment_args(diet_p)
    diet_p.add_argument("--name", default="", help="Student name")
    diet_p.add_argument("--training-title", help="Title of the student's current training program")
    diet_p.add_argument("--request", help="Additional instructions for the AI")
    diet_p.add_argument("--model", help="Override the chat model")
    diet_p.add_argument("--dry-run", action="store_true", help="Print the prompt instead of calling the AI")
    diet_p.set_defaults(func=cmd_diet)

    return parser


def main(argv=None):
    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    args.func(args)
