from __future__ import annotations

from typing import Any

from app.infra.ports.ocr import OCRPort

_LANG_HINT_MAP = {
    "eng": "en",
    "rus": "ru",
    "ukr": "uk",
    "deu": "de",
    "fra": "fr",
}


def to_vision_language_hints(ocr_lang: str) -> list[str]:
    # Tesseract style: "eng+rus" -> Vision style hints: ["en", "ru"]
    hints: list[str] = []
    for item in (ocr_lang or "").replace(",", "+").split("+"):
        key = item.strip().lower()
        if not key:
            continue
        hints.append(_LANG_HINT_MAP.get(key, key))
    return hints


class GoogleVisionOCR(OCRPort):
    provider_name = "google_vision"

    def __init__(self, *, language_hints: list[str] | None = None, timeout_seconds: int = 30):
        try:
            from google.cloud import vision  # type: ignore
        except Exception as exc:  # pragma: no cover
            raise RuntimeError("google-cloud-vision package is not installed") from exc

        self._vision = vision
        self._client = vision.ImageAnnotatorClient()
        self.language_hints = [item.strip() for item in (language_hints or []) if item and item.strip()]
        self.timeout_seconds = max(3, int(timeout_seconds))

    def extract(self, image_bytes: bytes) -> dict[str, Any]:
        image = self._vision.Image(content=image_bytes)
        kwargs: dict[str, Any] = {"image": image, "timeout": self.timeout_seconds}
        if self.language_hints:
            kwargs["image_context"] = self._vision.ImageContext(language_hints=self.language_hints)

        response = self._client.document_text_detection(**kwargs)
        if getattr(response, "error", None) and response.error.message:
            raise RuntimeError(f"Google Vision OCR error: {response.error.message}")

        annotation = response.full_text_annotation
        if not annotation:
            return {"text": "", "confidence": 0.0}

        confidences = [
            float(getattr(block, "confidence", 0.0) or 0.0)
            for page in annotation.pages
            for block in page.blocks
        ]
        return {
            "text": (annotation.text or "").strip(),
            "confidence": sum(confidences) / len(confidences) if confidences else 0.0,
        }
