from __future__ import annotations

from typing import Any

from app.infra.ports.ocr import OCRPort


class MockOCR(OCRPort):
    provider_name = "mock"

    def extract(self, image_bytes: bytes) -> dict[str, Any]:
        if not image_bytes:
            return {"text": "", "confidence": 0.0}
        return {"text": "[mock] OCR text", "confidence": 0.91}
