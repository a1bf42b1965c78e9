from __future__ import annotations

import math
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _require_number(v: Any) -> Any:
    """Only finite JSON numbers are accepted; strings and booleans are a type mismatch"""
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ValueError(f"expected a number, got {type(v).__name__}")
    try:
        finite = math.isfinite(v)
    except OverflowError:
        finite = False
    # json.loads turns out-of-range literals such as 1e400 into inf
    if not finite:
        raise ValueError("expected a finite number")
    return v


JsonNumber = Annotated[float, BeforeValidator(_require_number)]


class IngredientRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., serialization_alias="Name")
    amount: JsonNumber = Field(0.0, serialization_alias="Amount")
    unit: str = Field("", serialization_alias="Unit")
    nutrition_per_100g: Optional[NutritionRecord] = Field(
        None,
        validation_alias="nutritionper100g",
        serialization_alias="NutritionPer100g",
    )


class NutritionRecord(BaseModel):
    """Macro totals for a whole recipe.

    An all-zero record is the "unknown" sentinel: callers must read it as
    "extraction failed", never as a zero-calorie recipe.
    """
    model_config = ConfigDict(populate_by_name=True)

    calories: JsonNumber = Field(..., ge=0, serialization_alias="Calories")
    proteins: JsonNumber = Field(..., ge=0, serialization_alias="Proteins")
    carbohydrates: JsonNumber = Field(..., ge=0, serialization_alias="Carbohydrates")
    fats: JsonNumber = Field(..., ge=0, serialization_alias="Fats")
    ingredients: List[IngredientRecord] = Field(default_factory=list, serialization_alias="Ingredients")

    @classmethod
    def empty(cls) -> NutritionRecord:
        """The all-zero sentinel record"""
        return cls(calories=0.0, proteins=0.0, carbohydrates=0.0, fats=0.0)

    @property
    def is_unknown(self) -> bool:
        return self.calories == 0 and self.proteins == 0 and self.carbohydrates == 0 and self.fats == 0

    def macros(self) -> dict:
        return {
            "Calories": self.calories,
            "Proteins": self.proteins,
            "Carbohydrates": self.carbohydrates,
            "Fats": self.fats,
        }

    def to_json(self) -> dict:
        """Convert the model to a JSON-serializable dictionary"""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_dict(cls, data: dict) -> NutritionRecord:
        """Create a NutritionRecord from a dictionary keyed by lower-case field names"""
        if isinstance(data, cls):
            return data
        return cls.model_validate(data)


class RecipeAnalysis(BaseModel):
    """What the recipe report returns for one photographed ingredient list"""
    text: str
    language: str
    nutrition: NutritionRecord

    def to_json(self) -> dict:
        return {
            "text": self.text,
            "language": self.language,
            "nutrition": self.nutrition.to_json(),
        }


IngredientRecord.model_rebuild()
NutritionRecord.model_rebuild()
RecipeAnalysis.model_rebuild()
