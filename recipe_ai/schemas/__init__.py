from recipe_ai.schemas.nutrition import IngredientRecord, NutritionRecord, RecipeAnalysis

__all__ = ["IngredientRecord", "NutritionRecord", "RecipeAnalysis"]
