import pytest
from recipe_ai.utils.json_extractor import extract_json_object, is_valid_json, strip_code_fence


class TestExtractJsonObject:
    @pytest.mark.parametrize("text", [None, "", "   \n\t "])
    def test_empty_input_not_found(self, text):
        assert extract_json_object(text) is None

    @pytest.mark.parametrize("text", [
        "I cannot estimate this recipe.",
        "Calories: 450, Proteins: 20",
        "only an opening { brace",
        "only a closing } brace",
    ])
    def test_no_brace_pair_not_found(self, text):
        assert extract_json_object(text) is None

    def test_plain_object_returned_verbatim(self):
        text = '{"Calories": 450, "Proteins": 20}'
        assert extract_json_object(text) == text

    def test_surrounding_whitespace_trimmed(self):
        assert extract_json_object('\n  {"Fats": 1}  \n') == '{"Fats": 1}'

    def test_code_fence_stripped(self):
        obj = '{"Calories": 450, "Proteins": 20, "Carbohydrates": 50, "Fats": 15}'
        assert extract_json_object(f"```json\n{obj}\n```") == obj

    def test_code_fence_without_language_tag(self):
        assert extract_json_object('```\n{"Fats": 15}\n```') == '{"Fats": 15}'

    def test_unclosed_code_fence_still_scanned(self):
        # generation stops at ``` so the closing fence is often missing
        assert extract_json_object('```json\n{"Fats": 15}') == '{"Fats": 15}'

    def test_object_inside_prose(self):
        text = 'Here you go:\n{"Calories": 450}\nEnjoy your meal!'
        assert extract_json_object(text) == '{"Calories": 450}'

    def test_prose_before_fenced_block(self):
        text = 'Here you go:\n```json\n{"Calories": 0, "Fats": 0}\n```'
        assert extract_json_object(text) == '{"Calories": 0, "Fats": 0}'

    def test_nested_object_returned_whole(self):
        text = 'Result: {"Totals": {"Calories": 450}, "Fats": 15} done'
        assert extract_json_object(text) == '{"Totals": {"Calories": 450}, "Fats": 15}'

    def test_first_valid_group_wins(self):
        text = 'Schema {Calories: number} then {"Calories": 1} and {"Calories": 2}'
        assert extract_json_object(text) == '{"Calories": 1}'

    def test_stray_closing_brace_before_object(self):
        text = 'oops } {"Proteins": 3}'
        assert extract_json_object(text) == '{"Proteins": 3}'

    def test_braced_but_invalid_whole_text_falls_back_to_scan(self):
        text = '{"Calories": 1} and then {"Calories": 2}'
        assert extract_json_object(text) == '{"Calories": 1}'

    def test_no_valid_group_not_found(self):
        assert extract_json_object("{Calories: 450} {Fats: ?}") is None

    def test_nan_literal_is_not_valid(self):
        assert extract_json_object('{"Calories": NaN}') is None


class TestHelpers:
    def test_is_valid_json(self):
        assert is_valid_json('{"a": [1, 2]}')
        assert not is_valid_json("{'a': 1}")
        assert not is_valid_json('{"a": Infinity}')

    def test_strip_code_fence_leaves_plain_text(self):
        assert strip_code_fence('{"a": 1}') == '{"a": 1}'

    def test_strip_code_fence_drops_trailing_prose(self):
        assert strip_code_fence('```json\n{"a": 1}\n```\nHope this helps') == '{"a": 1}'
