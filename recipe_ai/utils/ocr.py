# ocr.py
import logging
from io import BytesIO
from typing import Optional
import pytesseract
from PIL import Image, ImageOps
from recipe_ai.config import config, ModelConfig

logger = logging.getLogger(__name__)


class OcrError(Exception):
    """Errors raised while reading text from an image"""
    pass


class ImageProcessor:
    @staticmethod
    def prepare_for_ocr(image_data: bytes, max_dim: int = 2000) -> Image.Image:
        """Decode image bytes, fix camera rotation and convert to grayscale."""
        image = Image.open(BytesIO(image_data))
        image = ImageOps.exif_transpose(image)
        image = image.convert("L")

        # Keep aspect ratio, only shrink very large photos
        width, height = image.size
        if max(width, height) > max_dim:
            scale = max_dim / max(width, height)
            image = image.resize((int(width * scale), int(height * scale)))

        return image


class TesseractOcr:
    """OCR collaborator: image bytes in, raw text out"""

    def __init__(self, custom_config: Optional[ModelConfig] = None):
        self.config = custom_config or config
        self.languages = self.config.ocr_languages
        self.tessdata_path = self.config.tessdata_path

    def _tesseract_config(self) -> str:
        if self.tessdata_path:
            return f'--tessdata-dir "{self.tessdata_path}"'
        return ""

    def extract_text(self, image_data: bytes) -> str:
        """
        Extract text from an image

        Args:
            image_data: Encoded image (PNG, JPEG, ...)

        Returns:
            Recognised text

        Raises:
            OcrError: If the bytes are empty, not an image, or tesseract fails
        """
        if not image_data:
            raise OcrError("No image data provided")

        try:
            image = ImageProcessor.prepare_for_ocr(image_data)
            text = pytesseract.image_to_string(
                image,
                lang=self.languages,
                config=self._tesseract_config(),
            )
        except (OSError, pytesseract.TesseractError) as e:
            logger.error(f"Error during OCR processing: {str(e)}")
            raise OcrError(f"OCR failed: {str(e)}") from e

        logger.info(f"OCR extracted {len(text)} characters")
        return text
