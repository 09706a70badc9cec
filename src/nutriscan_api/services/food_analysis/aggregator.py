"""Sum per-item nutrients into meal totals."""

import math
import re
from collections.abc import Iterable

from nutriscan_api.models.nutrition import NUTRIENT_FIELDS, FoodItem, NutritionTotals

# Leading decimal number, same prefix rule as JavaScript's parseFloat
_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_nutrient(value: str | float | int | None) -> float:
    """
    Parse a nutrient value, returning 0.0 when it is not numeric.

    Locale-independent: only '.' is a decimal separator. A leading number is
    enough ("95 kcal" -> 95.0); "N/A", "" and None give 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(value)
        if match is None:
            return 0.0
        try:
            number = float(match.group(1))
        except ValueError:
            return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def aggregate(items: Iterable[FoodItem]) -> NutritionTotals:
    """Sum every nutrient field across items. Never raises on bad values."""
    totals = dict.fromkeys(NUTRIENT_FIELDS, 0.0)
    for item in items:
        for field in NUTRIENT_FIELDS:
            totals[field] += parse_nutrient(getattr(item, field, None))
    return NutritionTotals(**totals)
