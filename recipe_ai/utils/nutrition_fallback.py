# nutrition_fallback.py
import math
import re
import logging
from typing import Any, Optional, Tuple
from recipe_ai.config import config
from recipe_ai.schemas.nutrition import NutritionRecord
from recipe_ai.utils.json_extractor import load_json

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^\d.\-]")


class NutritionFallback:
    """Best-effort macro extraction from JSON that failed strict parsing"""

    REQUIRED_FIELDS = ("Calories", "Proteins", "Carbohydrates", "Fats")

    def __init__(self, max_depth: Optional[int] = None):
        self.max_depth = max_depth or config.max_search_depth

    def find_property(self, root: dict, name: str) -> Tuple[bool, Any]:
        """
        Depth-first search for a property name, case-insensitive.

        At each object the properties are visited in order and a nested
        object is searched before the next sibling. Objects nested deeper
        than max_depth are not entered.

        Returns:
            (found, value)
        """
        wanted = name.lower()
        stack = [iter(root.items())]
        while stack:
            try:
                key, value = next(stack[-1])
            except StopIteration:
                stack.pop()
                continue

            if str(key).lower() == wanted:
                return True, value

            if isinstance(value, dict) and len(stack) < self.max_depth:
                stack.append(iter(value.items()))

        return False, None

    @staticmethod
    def to_number(value: Any) -> float:
        """Coerce a JSON value to a float; anything unusable or non-finite becomes 0"""
        if isinstance(value, bool):
            return 0.0
        if isinstance(value, (int, float)):
            try:
                number = float(value)
            except OverflowError:
                return 0.0
        elif isinstance(value, str):
            cleaned = _NON_NUMERIC.sub("", value.replace(",", "."))
            try:
                number = float(cleaned)
            except ValueError:
                return 0.0
        else:
            return 0.0
        return number if math.isfinite(number) else 0.0

    def parse_llm_response(self, json_text: str) -> NutritionRecord:
        """
        Pull the four macros out of a loosely shaped JSON object

        Never raises: unparseable text or a non-object root gives the
        all-zero record, missing fields default to 0. Ingredients are
        left empty.
        """
        try:
            root = load_json(json_text)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Tolerant parse got invalid JSON: {str(e)}")
            return NutritionRecord.empty()

        if not isinstance(root, dict):
            return NutritionRecord.empty()

        values = {}
        for field in self.REQUIRED_FIELDS:
            found, raw = self.find_property(root, field)
            # negative readings are clamped, they are degenerate either way
            values[field.lower()] = max(self.to_number(raw), 0.0) if found else 0.0
            if not found:
                logger.debug(f"Field {field} not found in model reply")

        return NutritionRecord(**values)
