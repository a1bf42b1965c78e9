import json
import logging
import time
from typing import Dict, Any, Optional
import requests
from prometheus_client import CollectorRegistry, Counter, Histogram, Gauge
from .config import config, ModelConfig
from .utils.token_utils import estimate_tokens
from .utils.validations import generate_request_id


logger = logging.getLogger(__name__)

# Create a module-level registry
registry = CollectorRegistry()

# Register metrics on this registry
REQUEST_COUNTER = Counter('ollama_requests_total', 'Total number of requests to the Ollama generate API', ['model', 'status'], registry=registry)
RESPONSE_TIME = Histogram('ollama_response_time_seconds', 'Response time for Ollama generate calls', ['model'], registry=registry)
TOKEN_COUNTER = Counter('ollama_tokens_total', 'Approximate tokens sent and received', ['model', 'type'], registry=registry)
ACTIVE_REQUESTS = Gauge('ollama_active_requests', 'Number of in-flight generate requests', registry=registry)


class OllamaClientError(Exception):
    """Base exception for OllamaClient errors"""
    pass


class OllamaRequestError(OllamaClientError):
    """Transport failures: connection errors, timeouts"""
    pass


class OllamaResponseError(OllamaClientError):
    """Non-success status or a body without generated text"""
    pass


class OllamaClient:
    """Client for a text-generation service speaking the Ollama generate API"""

    def __init__(self, custom_config: Optional[ModelConfig] = None, session: Optional[requests.Session] = None):
        """
        Initialize the Ollama client

        Args:
            custom_config: Optional custom configuration to override defaults
            session: Optional requests session, mostly for tests
        """
        self.config = custom_config or config
        self.session = session or requests.Session()
        logger.info(f"Initialized OllamaClient with model {self.config.model_name} at {self.config.generate_url}")

    def close(self):
        """Close the underlying HTTP session"""
        logger.info(f"Closing OllamaClient connection for model {self.config.model_name}")
        self.session.close()

    def _format_request(self, prompt: str) -> Dict[str, Any]:
        return {
            "model": self.config.model_name,
            "prompt": prompt,
            "stream": False,
            "options": self.config.generation_options(),
        }

    def generate(self, prompt: str, timeout: Optional[float] = None, request_id: Optional[str] = None) -> str:
        """
        Send a prompt and return the generated text

        Args:
            prompt: The text prompt to send to the model
            timeout: Seconds to wait before aborting, defaults to the configured timeout
            request_id: Id tagged on every log line, a fresh one when not given

        Returns:
            The model's reply text

        Raises:
            OllamaRequestError: If the call could not be completed
            OllamaResponseError: If the service answered without usable text
        """
        request_id = request_id or generate_request_id()
        model = self.config.model_name
        ACTIVE_REQUESTS.inc()

        try:
            body = self._format_request(prompt)
            logger.debug(f"[{request_id}] Invoking model with prompt length: {len(prompt)}")
            TOKEN_COUNTER.labels(model=model, type="input").inc(estimate_tokens(prompt))

            start_time = time.time()
            try:
                response = self.session.post(
                    self.config.generate_url,
                    json=body,
                    timeout=timeout or self.config.timeout,
                )
            except requests.RequestException as e:
                logger.error(f"[{request_id}] Transport error: {str(e)}")
                raise OllamaRequestError(f"Request to model service failed: {str(e)}")
            RESPONSE_TIME.labels(model=model).observe(time.time() - start_time)

            content = response.text or ""
            logger.info(f"[{request_id}] Ollama status: {response.status_code}. Payload length: {len(content)}")

            if not response.ok:
                logger.warning(f"[{request_id}] Non-success status code: {response.status_code}")
                raise OllamaResponseError(f"Model service returned {response.status_code}")

            if not content.strip():
                raise OllamaResponseError("Model service returned an empty body")

            text = self._parse_response(content)
            TOKEN_COUNTER.labels(model=model, type="output").inc(estimate_tokens(text))
            REQUEST_COUNTER.labels(model=model, status="success").inc()
            return text

        except OllamaClientError:
            REQUEST_COUNTER.labels(model=model, status="error").inc()
            raise
        finally:
            ACTIVE_REQUESTS.dec()

    def _parse_response(self, content: str) -> str:
        """
        Pull the generated text out of a generate response body

        Raises:
            OllamaResponseError: If the body is not JSON or has no text field
        """
        try:
            data = json.loads(content)
        except ValueError as e:
            raise OllamaResponseError(f"Unparsable response body: {str(e)}")

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise OllamaResponseError("Response body has no 'response' text")
        return text

    def complete(self, prompt: str, timeout: Optional[float] = None, request_id: Optional[str] = None) -> str:
        """
        Gateway call used by the analysis pipeline

        Same as generate, but every client failure (including a timeout)
        comes back as an empty string instead of an exception.
        """
        request_id = request_id or generate_request_id()
        try:
            return self.generate(prompt, timeout=timeout, request_id=request_id)
        except OllamaClientError as e:
            logger.warning(f"[{request_id}] Model call failed, treating as empty reply: {str(e)}")
            return ""
