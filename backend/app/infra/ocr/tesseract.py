from __future__ import annotations

import io
from typing import Any

from app.core.errors import BadRequestError
from app.infra.ports.ocr import OCRPort


class TesseractOCR(OCRPort):
    provider_name = "pytesseract"

    def __init__(self, *, lang: str = "eng+rus"):
        try:
            import pytesseract  # type: ignore
            from PIL import Image  # type: ignore
        except Exception as exc:  # pragma: no cover
            raise RuntimeError("pytesseract and Pillow are required for the tesseract OCR backend") from exc

        self._tesseract = pytesseract
        self._image = Image
        self.lang = lang

    def extract(self, image_bytes: bytes) -> dict[str, Any]:
        try:
            image = self._image.open(io.BytesIO(image_bytes))
            image.load()
        except Exception as exc:
            raise BadRequestError("Uploaded file is not a readable image") from exc

        text = self._tesseract.image_to_string(image.convert("RGB"), lang=self.lang)
        return {
            "text": (text or "").strip(),
            "confidence": 0.82,
        }
