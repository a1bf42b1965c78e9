from abc import ABC, abstractmethod
from typing import Dict, Any, Optional
import logging
from ..client import OllamaClient
from ..template_manager import TemplateManager
from ..config import config

logger = logging.getLogger(__name__)


class UseCase(ABC):
    """Base class for all AI use cases"""

    def __init__(self, client: Optional[OllamaClient] = None, template_manager: Optional[TemplateManager] = None):
        """
        Initialize the use case

        Args:
            client: Optional OllamaClient instance. If not provided, a new one will be created.
            template_manager: Optional prompt table. Defaults to the built-in templates
                plus PROMPT_TEMPLATES_FILE when set.
        """
        self.client = client or OllamaClient()
        self.template_manager = template_manager or TemplateManager(config.templates_file)

    @abstractmethod
    def run(self, data: Dict[str, Any]) -> Any:
        """
        Execute the use case logic

        Args:
            data: Input data for the use case

        Returns:
            The result of the use case execution
        """
        pass

    def format_prompt(self, data: Dict[str, Any]) -> str:
        """
        Format the prompt for the specific use case

        Args:
            data: Input data to format into a prompt

        Returns:
            Formatted prompt string
        """
        raise NotImplementedError("Subclasses must implement format_prompt")

    def parse_response(self, text: str) -> Any:
        """
        Parse the model reply for the specific use case

        Args:
            text: Raw model reply

        Returns:
            Parsed result
        """
        return text

    def close(self):
        """Close and clean up resources"""
        if hasattr(self, 'client') and self.client:
            self.client.close()
