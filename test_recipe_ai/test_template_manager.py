import json
import pytest
from recipe_ai.template_manager import TemplateManager, PromptTemplate, RETRY_DIRECTIVE

INGREDIENTS = "2 eggs\n200 g flour\n1 tbsp butter"


class TestBuildPrompt:
    def test_english_prompt(self, template_manager):
        prompt = template_manager.build_prompt(INGREDIENTS, "en")

        assert prompt.startswith("You are a nutritionist.")
        assert "1 tbsp ~ 15 ml" in prompt
        assert "sum across all ingredients" in prompt
        assert '{"Calories": number, "Proteins": number, "Carbohydrates": number, "Fats": number}' in prompt
        assert "Use dot as decimal separator" in prompt
        assert "no zeros" in prompt
        assert prompt.endswith(f"Ingredients:\n```{INGREDIENTS}```")

    def test_polish_prompt(self, template_manager):
        prompt = template_manager.build_prompt("2 jajka", "pl")

        assert prompt.startswith("Jesteś dietetykiem.")
        assert '{"Calories": number, "Proteins": number, "Carbohydrates": number, "Fats": number}' in prompt
        assert "kropki" in prompt
        assert prompt.endswith("Składniki:\n```2 jajka```")

    def test_language_code_lower_cased(self, template_manager):
        assert template_manager.build_prompt("x", "PL").startswith("Jesteś dietetykiem.")

    @pytest.mark.parametrize("language", [None, "", "de", "english"])
    def test_unknown_language_uses_english(self, template_manager, language):
        assert template_manager.build_prompt("x", language).startswith("You are a nutritionist.")

    def test_ingredient_text_is_opaque(self, template_manager):
        text = "${ingredients} costs $5 {\"Calories\": 0}"
        assert template_manager.build_prompt(text, "en").endswith(f"```{text}```")

    def test_retry_directive(self):
        assert "estimate instead" in RETRY_DIRECTIVE
        assert "non-zero" in RETRY_DIRECTIVE


class TestTemplateTable:
    def test_builtin_templates(self, template_manager):
        languages = {t.language for t in template_manager.list_templates()}
        assert languages == {"en", "pl"}

    def test_add_template(self, template_manager):
        template_manager.add_template(PromptTemplate(
            language="DE",
            description="German",
            template_text="Du bist Ernährungsberater.\n```${ingredients}```",
        ))

        assert template_manager.build_prompt("2 Eier", "de") == "Du bist Ernährungsberater.\n```2 Eier```"

    def test_inactive_template_falls_back(self, template_manager):
        template_manager.add_template(PromptTemplate(
            language="pl", description="off", template_text="x", is_active=False,
        ))
        assert template_manager.build_prompt("x", "pl").startswith("You are a nutritionist.")

    def test_load_templates_from_file(self, tmp_path):
        template_file = tmp_path / "templates.json"
        template_file.write_text(json.dumps({
            "FR": {"description": "French", "template_text": "Tu es nutritionniste.\n${ingredients}"}
        }), encoding="utf-8")

        manager = TemplateManager(str(template_file))

        assert manager.build_prompt("2 oeufs", "fr") == "Tu es nutritionniste.\n2 oeufs"
        assert manager.build_prompt("x", "pl").startswith("Jesteś dietetykiem.")

    def test_missing_template_file(self, tmp_path):
        manager = TemplateManager(str(tmp_path / "missing.json"))
        assert len(manager.list_templates()) == 2

    def test_builtins_not_shared_between_managers(self):
        first = TemplateManager()
        first.add_template(PromptTemplate(language="en", description="x", template_text="changed"))
        assert TemplateManager().build_prompt("x", "en").startswith("You are a nutritionist.")
