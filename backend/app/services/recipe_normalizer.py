# backend/app/services/recipe_normalizer.py

import math
from typing import Any, List, Mapping

from app.core.schemas import Recipe

DEFAULT_PREP_TIME = "30 minutes"
DEFAULT_SERVINGS = 2
DEFAULT_STEPS = ["Mix all ingredients and cook"]


def _first(*values: Any) -> Any:
    """First value that is set; None, empty text, False and 0 count as unset."""
    for value in values:
        if value is None or value is False or value == "":
            continue
        if isinstance(value, (int, float)) and value == 0:
            continue
        return value
    return None


def _to_number(value: Any) -> float:
    """Loose numeric coercion; returns 0 for anything that does not parse."""
    if value is None or isinstance(value, bool):
        return float(value or 0)
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
        return number if math.isfinite(number) else 0.0
    return 0.0


def coerce_servings(*candidates: Any) -> int:
    """First candidate whose whole part is positive, else the default."""
    for candidate in candidates:
        servings = int(_to_number(candidate))
        if servings > 0:
            return servings
    return DEFAULT_SERVINGS


def format_steps(instructions: Any) -> List[str]:
    """Coerce the webhook's instructions into a list of non-blank steps."""
    if _first(instructions) is None:
        return list(DEFAULT_STEPS)
    if isinstance(instructions, list):
        steps = [step if isinstance(step, str) else str(step) for step in instructions]
        return [step for step in steps if step.strip()]
    if isinstance(instructions, str):
        return [step.strip() for step in instructions.split("\n") if step.strip()]
    return [str(instructions)]


def normalize_recipe(payload: Any, diet: str) -> Recipe:
    """Map an untyped webhook payload onto the fixed Recipe shape.

    The workflow is not consistent about field names, so each field has a
    chain of fallbacks:

    - title: ``title``, else "Custom {diet} Recipe"
    - prep_time: ``prep_time``, ``cooking_time``, else "30 minutes"
    - servings: ``servings``, ``yield``, else 2
    - steps: ``steps`` or ``instructions``, as a list or newline separated text
    """
    data: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}

    prep_time = _first(data.get("prep_time"), data.get("cooking_time"), DEFAULT_PREP_TIME)
    return Recipe(
        title=str(_first(data.get("title"), f"Custom {diet} Recipe")),
        prep_time=str(prep_time),
        servings=coerce_servings(data.get("servings"), data.get("yield")),
        steps=format_steps(_first(data.get("steps"), data.get("instructions"))),
    )
