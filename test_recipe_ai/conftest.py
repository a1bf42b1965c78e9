import pytest
from unittest.mock import MagicMock
import json
from recipe_ai.client import OllamaClient
from recipe_ai.config import ModelConfig
from recipe_ai.template_manager import TemplateManager


def make_http_response(status_code=200, body=None, text=None):
    """Build a fake requests.Response for the generate endpoint."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response.text = text
    return response


@pytest.fixture
def test_config():
    """Returns a test configuration."""
    test_config = ModelConfig()
    test_config.endpoint = "http://ollama.test:11434/"
    test_config.model_name = "test-model"
    test_config.timeout = 5.0
    return test_config


@pytest.fixture
def mock_session():
    """Returns a mocked requests session."""
    return MagicMock()


@pytest.fixture
def ollama_client(test_config, mock_session):
    """OllamaClient wired to the mocked session."""
    return OllamaClient(custom_config=test_config, session=mock_session)


@pytest.fixture
def mock_ollama_client():
    """Returns a mocked OllamaClient instance."""
    return MagicMock(spec=OllamaClient)


@pytest.fixture
def template_manager():
    return TemplateManager()


@pytest.fixture
def valid_reply():
    return '{"Calories": 450, "Proteins": 20, "Carbohydrates": 50, "Fats": 15}'


@pytest.fixture
def zero_reply():
    return 'Here you go:\n```json\n{"Calories":0,"Proteins":0,"Carbohydrates":0,"Fats":0}\n```'
