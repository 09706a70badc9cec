"""Shape validated model JSON into an AnalysisResult."""

import json
import logging

from nutriscan_api.core.exceptions import SchemaError
from nutriscan_api.models.nutrition import AnalysisResult, FoodItem

logger = logging.getLogger(__name__)


def normalize(json_text: str) -> AnalysisResult:
    """
    Decode the model's JSON into food items.

    Only the presence of a ``food_items`` array is required. Each element is
    decoded leniently: missing or unusable nutrients become ``"0"`` and a
    missing or unusable name becomes ``""``.

    Raises:
        SchemaError: If the JSON is not an object with a food_items array,
            or an element of that array is not an object
    """
    try:
        data = json.loads(json_text)
    except (ValueError, RecursionError) as e:
        raise SchemaError(f"Invalid JSON structure: {e}") from e

    if not isinstance(data, dict) or "food_items" not in data:
        raise SchemaError(
            "Invalid response structure: missing or invalid food_items array"
        )

    raw_items = data["food_items"]
    if not isinstance(raw_items, list):
        raise SchemaError(
            "Invalid response structure: missing or invalid food_items array",
            details={"food_items_type": type(raw_items).__name__},
        )

    items: list[FoodItem] = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            raise SchemaError(
                f"food_items[{index}] is not an object",
                details={"index": index},
            )
        items.append(FoodItem.model_validate(raw))

    logger.debug(f"Normalized {len(items)} food items")
    return AnalysisResult(items=items)
