"""
OCR processing service using EasyOCR

Recognition turns uploaded image bytes into reading-order text; extraction is
delegated to the field extractor.
"""
import io
import logging
from typing import Dict, List, Optional, Tuple

import easyocr
import numpy as np
from PIL import Image, UnidentifiedImageError

from config import OCR_LANGUAGES, OCR_USE_GPU
from field_extractor import FieldExtractor

logger = logging.getLogger(__name__)


class RecognitionError(Exception):
    """The recognition engine could not read an image."""


class OCRService:
    def __init__(self, languages: Optional[List[str]] = None, gpu: bool = OCR_USE_GPU,
                 extractor: Optional[FieldExtractor] = None):
        self.languages = languages or OCR_LANGUAGES
        self.gpu = gpu
        self.extractor = extractor or FieldExtractor()
        self._reader = None

    @property
    def reader(self) -> "easyocr.Reader":
        # Model download / load takes a while; only pay for it on the first image
        if self._reader is None:
            print("🔄 Initializing EasyOCR (this may take a minute first time)...")
            self._reader = easyocr.Reader(self.languages, gpu=self.gpu, verbose=False)
            print("✅ EasyOCR initialized successfully!")
        return self._reader

    @staticmethod
    def load_image(image_bytes: bytes) -> np.ndarray:
        """Decode uploaded bytes into an RGB pixel array."""
        try:
            image = Image.open(io.BytesIO(image_bytes))
            image = image.convert("RGB")
        except (UnidentifiedImageError, OSError) as e:
            raise ValueError(f"Not a readable image: {e}") from e
        return np.array(image)

    def extract_text_from_image(self, image_bytes: bytes) -> Tuple[str, float]:
        """
        Extract text from image using EasyOCR
        Returns: (extracted_text, confidence_score)
        """
        pixels = self.load_image(image_bytes)
        try:
            result = self.reader.readtext(pixels, detail=1, paragraph=False)
        except Exception as e:
            logger.error("EasyOCR failed: %s", e)
            raise RecognitionError(str(e)) from e

        # Sort results by vertical position (top to bottom, left to right)
        result = sorted(result, key=lambda x: (x[0][0][1], x[0][0][0]))

        text_lines = []
        confidences = []
        for (bbox, text, confidence) in result:
            text_lines.append(text)
            confidences.append(confidence * 100)

        full_text = "\n".join(text_lines)
        avg_confidence = sum(confidences) / len(confidences) if confidences else 0.0
        return full_text.strip(), avg_confidence

    def process_image(self, image_bytes: bytes, document_type: str = "auto") -> Dict:
        """
        Recognize and extract one image.
        Returns: {
            'raw_text': str,
            'confidence': float,
            'extracted': ExtractedRecord,
            'flags': {flag: bool}
            'document_type': str
        }
        """
        text, confidence = self.extract_text_from_image(image_bytes)
        result = self.extractor.extract(text, document_type)
        logger.info("Recognized %d chars (confidence %.1f)", len(text), confidence)
        return {
            "raw_text": text,
            "confidence": confidence,
            "extracted": result.record,
            "flags": result.flags.as_dict(),
            "document_type": result.flags.hint,
        }
