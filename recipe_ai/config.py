# recipe_ai/config.py
import os


class ConfigError(Exception):
    """Base exception for configuration errors"""
    pass


class ModelConfig:
    def __init__(self):
        self.endpoint = os.getenv("OLLAMA_ENDPOINT", "http://localhost:11434")
        self.model_name = os.getenv("MODEL_NAME", "llama3.1")

        try:
            self.timeout = float(os.getenv("REQUEST_TIMEOUT", 120))
        except ValueError:
            raise ValueError("REQUEST_TIMEOUT must be a valid number")

        try:
            self.temperature = float(os.getenv("TEMP", 0.0))
            self.top_p = float(os.getenv("TOP_P", 1.0))
            self.repeat_penalty = float(os.getenv("REPEAT_PENALTY", 1.1))
        except ValueError:
            raise ValueError("TEMP, TOP_P and REPEAT_PENALTY must be valid floats")

        try:
            self.seed = int(os.getenv("SEED", 42))
            self.num_predict = int(os.getenv("NUM_PREDICT", 800))
            self.max_search_depth = int(os.getenv("MAX_SEARCH_DEPTH", 32))
        except ValueError:
            raise ValueError("SEED, NUM_PREDICT and MAX_SEARCH_DEPTH must be valid integers")

        # OCR collaborator
        self.tessdata_path = os.getenv("TESSDATA_PATH")
        self.ocr_languages = os.getenv("OCR_LANGUAGES", "eng+pol")

        self.templates_file = os.getenv("PROMPT_TEMPLATES_FILE")

        self._validate_config()

    def _validate_config(self):
        """Validate configuration parameters."""
        if not self.endpoint:
            raise ConfigError("OLLAMA_ENDPOINT must not be empty")

        if not self.model_name:
            raise ConfigError("MODEL_NAME must not be empty")

        if self.timeout <= 0:
            raise ConfigError("REQUEST_TIMEOUT must be greater than 0")

        if self.temperature < 0 or self.temperature > 1:
            raise ConfigError("TEMP must be between 0 and 1")

        if self.top_p < 0 or self.top_p > 1:
            raise ConfigError("TOP_P must be between 0 and 1")

        if self.repeat_penalty <= 0:
            raise ConfigError("REPEAT_PENALTY must be greater than 0")

        if self.num_predict <= 0:
            raise ConfigError("NUM_PREDICT must be greater than 0")

        if self.max_search_depth <= 0:
            raise ConfigError("MAX_SEARCH_DEPTH must be greater than 0")

    @property
    def generate_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/api/generate"

    def generation_options(self) -> dict:
        """Sampling controls sent with every generate request"""
        return {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "repeat_penalty": self.repeat_penalty,
            "seed": self.seed,
            "num_predict": self.num_predict,
            "stop": ["```"],
        }


config = ModelConfig()
