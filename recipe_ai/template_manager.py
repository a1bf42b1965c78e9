import json
import logging
import os
import string
from typing import Dict, Optional, List
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

RETRY_DIRECTIVE = "\n\nIMPORTANT: If any field would be zero, estimate instead and return a non-zero value."

EN_TEMPLATE = (
    "You are a nutritionist. Compute macros for the whole recipe from the ingredient list.\n\n"
    "Rules:\n"
    "- If exact quantities are missing, use reasonable, common-kitchen estimates "
    "(e.g., 1 tbsp ~ 15 ml, 1 garlic clove ~ 3 g, 1 cup flour ~ 120 g, etc.).\n"
    "- Convert units and sum across all ingredients.\n"
    "- Always return numbers > 0 (no zeros; estimate when uncertain).\n"
    "- Return only raw JSON in exactly this schema:\n"
    '{"Calories": number, "Proteins": number, "Carbohydrates": number, "Fats": number}\n'
    "- Use dot as decimal separator. No prose.\n\n"
    "Ingredients:\n"
    "```${ingredients}```"
)

PL_TEMPLATE = (
    "Jesteś dietetykiem. Policz makroskładniki dla całego przepisu na podstawie listy składników.\n\n"
    "Zasady:\n"
    "- Jeśli brakuje dokładnych gramów/ilości, użyj rozsądnych, kuchennych estymat "
    "(np. 1 łyżka ~ 15 ml, 1 ząbek czosnku ~ 3 g, 1 szklanka mąki ~ 120 g itd.).\n"
    "- Konwertuj jednostki i sumuj po wszystkich składnikach.\n"
    "- Zwracaj zawsze liczby > 0 (bez zer; jeśli brak danych – oszacuj).\n"
    "- Zwróć tylko czysty JSON dokładnie w schemacie:\n"
    '{"Calories": number, "Proteins": number, "Carbohydrates": number, "Fats": number}\n'
    "- Użyj kropki jako separatora dziesiętnego. Żadnego dodatkowego tekstu.\n\n"
    "Składniki:\n"
    "```${ingredients}```"
)


@dataclass
class PromptTemplate:
    """Data class for storing prompt templates"""
    language: str
    description: str
    template_text: str
    is_active: bool = True

    def render(self, ingredients: str) -> str:
        return string.Template(self.template_text).safe_substitute(ingredients=ingredients)


BUILTIN_TEMPLATES = {
    "en": PromptTemplate(language="en", description="English nutrition prompt", template_text=EN_TEMPLATE),
    "pl": PromptTemplate(language="pl", description="Polish nutrition prompt", template_text=PL_TEMPLATE),
}


class TemplateManager:
    """Language code -> prompt template table"""

    def __init__(self, template_file: Optional[str] = None):
        self._templates: Dict[str, PromptTemplate] = dict(BUILTIN_TEMPLATES)
        if template_file:
            self._load_templates(template_file)

    def _load_templates(self, template_path: str) -> None:
        """Load extra templates from a JSON object keyed by language code"""
        if not os.path.exists(template_path):
            logger.warning(f"Template file {template_path} not found, using built-in templates")
            return

        with open(template_path, 'r', encoding='utf-8') as f:
            templates_data = json.load(f)

        for code, data in templates_data.items():
            data = {**data, "language": code.lower()}
            self._templates[code.lower()] = PromptTemplate(**data)

        logger.info(f"Loaded {len(templates_data)} templates from {template_path}")

    def get_template(self, language: Optional[str]) -> PromptTemplate:
        """Get the template for a language code, English when unknown or inactive"""
        template = self._templates.get((language or "").lower())
        if template and template.is_active:
            return template
        return self._templates[DEFAULT_LANGUAGE]

    def add_template(self, template: PromptTemplate) -> None:
        """Add or replace the template for a language"""
        logger.info(f"Adding template for language {template.language}")
        self._templates[template.language.lower()] = template

    def list_templates(self) -> List[PromptTemplate]:
        return [t for t in self._templates.values() if t.is_active]

    def build_prompt(self, ingredients: str, language: Optional[str]) -> str:
        """Render the nutrition prompt for the given ingredient text"""
        return self.get_template(language).render(ingredients)
