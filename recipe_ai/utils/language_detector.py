# language_detector.py
from typing import Dict


class LanguageDetector:
    """Character-based language guess for OCR'd ingredient lists"""

    SUPPORTED_LANGUAGES = {"en", "pl"}
    DEFAULT_LANGUAGE = "en"

    # Letters that only occur in one of the supported languages
    CHARACTER_LANGUAGE_MAP: Dict[str, str] = {
        "ą": "pl", "ć": "pl", "ę": "pl", "ł": "pl", "ń": "pl",
        "ó": "pl", "ś": "pl", "ź": "pl", "ż": "pl",
    }

    def detect_language(self, text: str) -> str:
        """Return the code of the first language whose marker letter appears, else English"""
        if not text or not text.strip():
            return self.DEFAULT_LANGUAGE

        for char in text.lower():
            language = self.CHARACTER_LANGUAGE_MAP.get(char)
            if language:
                return language

        return self.DEFAULT_LANGUAGE

    def is_supported(self, language_code: str) -> bool:
        return language_code.lower() in self.SUPPORTED_LANGUAGES
