import uuid
import logging
from typing import Any
from pydantic import ValidationError
from recipe_ai.schemas.nutrition import NutritionRecord
from recipe_ai.utils.json_extractor import load_json

logger = logging.getLogger(__name__)


class NutritionSchemaError(Exception):
    """Model reply does not match the nutrition record shape"""
    pass


def _lower_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_lower_keys(v) for v in value]
    return value


def parse_nutrition(json_text: str) -> NutritionRecord:
    """
    Strictly deserialize a JSON object into a NutritionRecord

    Field names match case-insensitively. Wrong value types or a missing
    macro field fail the whole parse; nothing is guessed here.

    Raises:
        NutritionSchemaError: If the text is not a matching JSON object
    """
    try:
        data = load_json(json_text)
    except (ValueError, RecursionError) as e:
        raise NutritionSchemaError(f"Invalid JSON: {str(e)}")

    if not isinstance(data, dict):
        raise NutritionSchemaError(f"Expected a JSON object, got {type(data).__name__}")

    try:
        return NutritionRecord.from_dict(_lower_keys(data))
    except ValidationError as e:
        raise NutritionSchemaError(f"Schema mismatch: {e.error_count()} error(s)") from e


def is_degenerate(record: NutritionRecord) -> bool:
    """True if any macro is <= 0; such a result warrants one retry"""
    return (
        record.calories <= 0
        or record.proteins <= 0
        or record.carbohydrates <= 0
        or record.fats <= 0
    )


def generate_request_id() -> str:
    """Generate a unique request ID for tracing"""
    return f"req_{uuid.uuid4().hex[:8]}"
