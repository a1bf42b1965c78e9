# recipe_report.py
import json
import logging
import os
import sys
import time
from typing import Optional
import requests
from recipe_ai.schemas.nutrition import RecipeAnalysis
from recipe_ai.usecases.nutrition_analyser import NutritionAnalyser
from recipe_ai.utils.language_detector import LanguageDetector
from recipe_ai.utils.ocr import TesseractOcr, OcrError

logger = logging.getLogger(__name__)


class ImageLoader:
    @staticmethod
    def load(source: str) -> bytes:
        """Read image bytes from a local path or an http(s) URL."""
        if source.startswith(("http://", "https://")):
            response = requests.get(source, timeout=15)
            response.raise_for_status()
            return response.content

        with open(source, "rb") as f:
            return f.read()


class RecipeReport:
    """Photographed ingredient list -> OCR text -> language -> macro estimate"""

    def __init__(self, ocr: Optional[TesseractOcr] = None,
                 language_detector: Optional[LanguageDetector] = None,
                 analyser: Optional[NutritionAnalyser] = None):
        self.ocr = ocr or TesseractOcr()
        self.language_detector = language_detector or LanguageDetector()
        self.analyser = analyser or NutritionAnalyser()

    def analyze_image(self, image_data: bytes, timeout: Optional[float] = None) -> RecipeAnalysis:
        """
        Run the whole pipeline for one image

        Raises:
            OcrError: If no text could be read; the model is not called then
        """
        text = self.ocr.extract_text(image_data)
        language = self.language_detector.detect_language(text)
        logger.info(f"Detected language '{language}' for {len(text)} characters of text")

        nutrition = self.analyser.analyze(text, language, timeout=timeout)
        return RecipeAnalysis(text=text, language=language, nutrition=nutrition)

    def close(self):
        self.analyser.close()


class ReportGenerator:
    @staticmethod
    def save_report(analysis: RecipeAnalysis, filename: str = None) -> str:
        """Save analysis report to JSON file"""
        if not filename:
            filename = f"recipe_report_{int(time.time())}.json"

        with open(filename, 'w', encoding='utf-8') as f:
            json.dump(analysis.to_json(), f, indent=2, ensure_ascii=False)
        return filename

    @staticmethod
    def print_summary(analysis: RecipeAnalysis):
        """Print human-readable summary"""
        nutrition = analysis.nutrition

        print("\n=== RECIPE NUTRITION SUMMARY ===")
        print(f"Language: {analysis.language}")

        if nutrition.is_unknown:
            print("\nNutrition could not be estimated for this recipe.")
            return

        print(f"Calories: {nutrition.calories:.0f} kcal")
        print(f"Proteins: {nutrition.proteins:.1f}g")
        print(f"Carbohydrates: {nutrition.carbohydrates:.1f}g")
        print(f"Fats: {nutrition.fats:.1f}g")

        if nutrition.ingredients:
            print("\nIngredients:")
            for ingredient in nutrition.ingredients:
                print(f"- {ingredient.name}: {ingredient.amount:g} {ingredient.unit}".rstrip())


def main(argv=None) -> int:
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
    args = sys.argv[1:] if argv is None else argv

    if len(args) != 1:
        print("Usage: recipe-report <image path or URL>")
        return 1

    try:
        image_data = ImageLoader.load(args[0])
    except (OSError, requests.RequestException) as e:
        logger.error(f"Could not read image: {str(e)}")
        print(f"Failed to read image {args[0]}. Exiting.")
        return 1

    report = RecipeReport()
    try:
        print("Analyzing recipe image...")
        analysis = report.analyze_image(image_data)
    except OcrError as e:
        print(f"\nAnalysis failed: {str(e)}")
        return 1
    finally:
        report.close()

    report_file = ReportGenerator.save_report(analysis)
    print(f"\nAnalysis complete! Report saved to {report_file}")
    ReportGenerator.print_summary(analysis)
    print(json.dumps(analysis.to_json(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
