# nutrition_analyser.py
import logging
import time
from enum import Enum
from typing import Dict, Any, Optional, Tuple
from prometheus_client import Counter
from recipe_ai.client import OllamaClient, registry
from recipe_ai.schemas.nutrition import NutritionRecord
from recipe_ai.template_manager import TemplateManager, RETRY_DIRECTIVE
from recipe_ai.usecases.base import UseCase
from recipe_ai.utils.json_extractor import extract_json_object
from recipe_ai.utils.nutrition_fallback import NutritionFallback
from recipe_ai.utils.validations import NutritionSchemaError, generate_request_id, is_degenerate, parse_nutrition

logger = logging.getLogger(__name__)

ANALYSIS_COUNTER = Counter('nutrition_analysis_total', 'Nutrition analyses by outcome', ['outcome'], registry=registry)


class AttemptState(str, Enum):
    """Attempts in the order they are made. RETRIED is terminal."""
    FIRST_ATTEMPT = "first_attempt"
    RETRIED = "retried"


class NutritionAnalyser(UseCase):
    """Ingredient text in, macro totals out, never an exception"""

    def __init__(self, client: Optional[OllamaClient] = None,
                 template_manager: Optional[TemplateManager] = None,
                 fallback_parser: Optional[NutritionFallback] = None):
        super().__init__(client=client, template_manager=template_manager)
        self.fallback_parser = fallback_parser or NutritionFallback()
        logger.debug("Initialized NutritionAnalyser")

    def format_prompt(self, data: Dict[str, Any]) -> str:
        return self.template_manager.build_prompt(data.get('ingredients', ''), data.get('language'))

    def build_prompt(self, prompt: str, state: AttemptState) -> str:
        if state is AttemptState.RETRIED:
            return prompt + RETRY_DIRECTIVE
        return prompt

    def parse_response(self, text: str, request_id: str = "-") -> NutritionRecord:
        """
        Turn a raw model reply into a NutritionRecord

        Strict schema parse first, tolerant field search when that fails.
        A reply with no JSON object gives the all-zero record.
        """
        json_text = extract_json_object(text)
        if json_text is None:
            logger.warning(f"[{request_id}] No JSON object found in model reply")
            return NutritionRecord.empty()

        logger.debug(f"[{request_id}] Extracted JSON candidate: {json_text}")
        try:
            return parse_nutrition(json_text)
        except NutritionSchemaError as e:
            logger.warning(f"[{request_id}] Strict parse failed, using tolerant parser: {str(e)}")
            return self.fallback_parser.parse_llm_response(json_text)

    def _attempt(self, prompt: str, timeout: Optional[float], request_id: str) -> NutritionRecord:
        text = self.client.complete(prompt, timeout=timeout, request_id=request_id)
        return self.parse_response(text, request_id)

    def _run_attempts(self, prompt: str, timeout: Optional[float], request_id: str) -> Tuple[NutritionRecord, str]:
        first = None
        for state in AttemptState:
            record = self._attempt(self.build_prompt(prompt, state), timeout, request_id)
            if not is_degenerate(record):
                outcome = "first_attempt" if state is AttemptState.FIRST_ATTEMPT else "retry"
                return record, outcome

            if state is AttemptState.FIRST_ATTEMPT:
                first = record
                logger.warning(f"[{request_id}] Degenerate result {record.macros()}, retrying once")
            else:
                logger.warning(f"[{request_id}] Retry also degenerate, keeping first result")

        return first, "kept_first"

    def analyze(self, ingredients: str, language: Optional[str] = None, timeout: Optional[float] = None) -> NutritionRecord:
        """
        Estimate macro totals for an ingredient list

        Args:
            ingredients: Ingredient text, OCR noise and all
            language: Language code picking the prompt template, English by default
            timeout: Per-call model timeout in seconds; an expired call counts as an empty reply

        Returns:
            The nutrition record. All zeros means the analysis failed.
        """
        start_time = time.time()
        request_id = generate_request_id()

        try:
            prompt = self.format_prompt({'ingredients': ingredients, 'language': language})
            record, outcome = self._run_attempts(prompt, timeout, request_id)
        except Exception:
            logger.exception(f"[{request_id}] Error during nutrition analysis")
            record, outcome = NutritionRecord.empty(), "fallback"

        ANALYSIS_COUNTER.labels(outcome=outcome).inc()
        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.info(f"[{request_id}] Completed ({outcome}) in {elapsed_ms}ms")
        return record

    def run(self, data: Dict[str, Any]) -> NutritionRecord:
        return self.analyze(data.get('ingredients', ''), data.get('language'), data.get('timeout'))
