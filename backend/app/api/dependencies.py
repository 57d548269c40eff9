from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from app.application.services import AnswerArchiveService, HtmlQuestionAnsweringService, ImageQuestionService
from app.core.config import get_settings
from app.infra.fetch.httpx_fetcher import HttpxDocumentFetcher
from app.infra.llm.mock import MockLLM
from app.infra.llm.openai import OpenAIChatLLM
from app.infra.ocr.google_vision import to_vision_language_hints
from app.infra.ocr.mock import MockOCR
from app.infra.ports.answers import AnswerStorePort
from app.infra.ports.fetch import DocumentFetchPort
from app.infra.ports.llm import LLMPort
from app.infra.ports.ocr import OCRPort
from app.infra.storage.json_answers import JsonFileAnswerStore

logger = logging.getLogger(__name__)

_BACKEND_ROOT = Path(__file__).resolve().parents[2]


def find_credentials_file(raw: str, *, base_dir: Path) -> Path | None:
    """Return the service-account file named by ``raw``, looked up as given and then under ``base_dir``."""
    value = raw.strip()
    if not value:
        return None
    given = Path(value).expanduser()
    for candidate in (given, base_dir / value.lstrip("/")):
        if candidate.is_file():
            return candidate.resolve()
    return None


@lru_cache(maxsize=1)
def get_answer_store() -> AnswerStorePort:
    return JsonFileAnswerStore(get_settings().answers_path)


@lru_cache(maxsize=1)
def get_fetcher() -> DocumentFetchPort:
    return HttpxDocumentFetcher(timeout_seconds=get_settings().fetch_timeout_seconds)


@lru_cache(maxsize=1)
def get_ocr() -> OCRPort:
    settings = get_settings()
    if settings.ocr_backend == "vision":
        from app.infra.ocr.google_vision import GoogleVisionOCR

        raw = os.getenv("GOOGLE_APPLICATION_CREDENTIALS", "")
        credentials = find_credentials_file(raw, base_dir=_BACKEND_ROOT)
        if credentials is None:
            raise RuntimeError(f"Vision OCR needs GOOGLE_APPLICATION_CREDENTIALS to name a file (got {raw!r})")
        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = str(credentials)
        return GoogleVisionOCR(language_hints=to_vision_language_hints(settings.ocr_lang))

    if settings.ocr_backend == "tesseract":
        from app.infra.ocr.tesseract import TesseractOCR

        return TesseractOCR(lang=settings.ocr_lang)
    return MockOCR()


@lru_cache(maxsize=1)
def get_llm() -> LLMPort:
    settings = get_settings()
    if settings.llm_backend == "openai" and settings.openai_api_key:
        return OpenAIChatLLM(
            api_key=settings.openai_api_key,
            model_name=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout_seconds=settings.llm_timeout_seconds,
        )
    if settings.llm_backend == "openai":
        logger.warning("OPENAI_KEY is not set; falling back to the mock LLM")
    return MockLLM()


async def provide_llm() -> LLMPort:
    return get_llm()


async def provide_ocr() -> OCRPort:
    return get_ocr()


async def provide_fetcher() -> DocumentFetchPort:
    return get_fetcher()


async def provide_answer_store() -> AnswerStorePort:
    return get_answer_store()


async def provide_html_service(
    llm: LLMPort = Depends(provide_llm),
    store: AnswerStorePort = Depends(provide_answer_store),
    fetcher: DocumentFetchPort = Depends(provide_fetcher),
) -> HtmlQuestionAnsweringService:
    settings = get_settings()
    return HtmlQuestionAnsweringService(
        llm=llm,
        store=store,
        fetcher=fetcher,
        max_input_chars=settings.max_input_chars,
        max_questions=settings.max_questions,
        max_question_chars=settings.max_question_chars,
        max_options=settings.max_options,
        batch_size=settings.answer_batch_size,
        batch_delay_ms=settings.answer_batch_delay_ms,
    )


async def provide_archive_service(
    store: AnswerStorePort = Depends(provide_answer_store),
) -> AnswerArchiveService:
    return AnswerArchiveService(store=store)


async def provide_image_service(
    ocr: OCRPort = Depends(provide_ocr),
    llm: LLMPort = Depends(provide_llm),
) -> ImageQuestionService:
    return ImageQuestionService(ocr=ocr, llm=llm)
