from __future__ import annotations

import logging

from app.core.errors import BadRequestError, NoFileError, NoTextDetectedError, UpstreamError
from app.domain.models import PipelineResult
from app.infra.ports.answers import AnswerStorePort
from app.infra.ports.fetch import DocumentFetchPort
from app.infra.ports.llm import LLMPort
from app.infra.ports.ocr import OCRPort
from app.workers.extraction import (
    BatchedAnswerer,
    QuestionExtractor,
    combine_sources,
    normalize_html,
    truncate_text,
)

logger = logging.getLogger(__name__)

IMAGE_SYSTEM_PROMPT = "Answer the question in the text concisely and accurately."


class HtmlQuestionAnsweringService:
    """Normalize -> extract questions -> answer in batches -> append to the store."""

    def __init__(
        self,
        *,
        llm: LLMPort,
        store: AnswerStorePort,
        fetcher: DocumentFetchPort | None = None,
        max_input_chars: int = 6000,
        max_questions: int = 50,
        max_question_chars: int = 500,
        max_options: int = 10,
        batch_size: int = 3,
        batch_delay_ms: int = 500,
    ):
        self.store = store
        self.fetcher = fetcher
        self.max_input_chars = max_input_chars
        self.extractor = QuestionExtractor(
            llm=llm,
            max_questions=max_questions,
            max_question_chars=max_question_chars,
            max_options=max_options,
        )
        self.answerer = BatchedAnswerer(llm=llm, batch_size=batch_size, batch_delay_ms=batch_delay_ms)

    def _fetch_auxiliary(self, url: str | None) -> str:
        if not url or self.fetcher is None:
            return ""
        try:
            return normalize_html(self.fetcher.fetch(url))
        except UpstreamError as exc:
            logger.warning("Auxiliary document skipped: %s", exc)
            return ""

    def prepare_text(self, *, html: str | None, iframe_url: str | None = None) -> str:
        if not (html and html.strip()) and not (iframe_url and iframe_url.strip()):
            raise BadRequestError("html required")

        primary = normalize_html(html or "")
        auxiliary = self._fetch_auxiliary((iframe_url or "").strip() or None)
        text = combine_sources(primary, auxiliary)
        if not text:
            raise BadRequestError("No content to process")
        return truncate_text(text, self.max_input_chars)

    def process(self, *, html: str | None, iframe_url: str | None = None) -> PipelineResult:
        text = self.prepare_text(html=html, iframe_url=iframe_url)
        questions = self.extractor.extract(text)
        if not questions:
            return PipelineResult(questions=[], answers=[])

        answers = self.answerer.answer_all(questions)
        self.store.append(answers)
        logger.info("Stored %d answers for %d questions", len(answers), len(questions))
        return PipelineResult(questions=questions, answers=answers)


class AnswerArchiveService:
    def __init__(self, *, store: AnswerStorePort):
        self.store = store

    def list_answers(self) -> list[dict]:
        return self.store.read_all()

    def clear(self) -> None:
        self.store.clear()
        logger.info("Answer archive cleared")


class ImageQuestionService:
    def __init__(self, *, ocr: OCRPort, llm: LLMPort, max_tokens: int = 1000):
        self.ocr = ocr
        self.llm = llm
        self.max_tokens = max_tokens

    def ask(self, payload: bytes | None) -> str:
        if not payload:
            raise NoFileError("No file uploaded")

        text = str(self.ocr.extract(payload).get("text") or "").strip()
        if not text:
            raise NoTextDetectedError("No text detected in image")

        reply = self.llm.complete(
            prompt=text,
            system_prompt=IMAGE_SYSTEM_PROMPT,
            max_tokens=self.max_tokens,
        )
        return reply.strip()
