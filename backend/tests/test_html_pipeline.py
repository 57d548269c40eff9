from __future__ import annotations

from pathlib import Path

import pytest

from app.application.services import AnswerArchiveService, HtmlQuestionAnsweringService, ImageQuestionService
from app.core.errors import (
    BadRequestError,
    NoFileError,
    NoTextDetectedError,
    ParseFailureError,
    UpstreamError,
)
from app.infra.fetch.httpx_fetcher import HttpxDocumentFetcher
from app.infra.storage.json_answers import JsonFileAnswerStore

SCENARIO_HTML = (
    "<html><body><nav>Menu</nav>"
    "<p>Вопр's 1: Столица Франции? Варианты: Париж, Берлин</p>"
    "</body></html>"
)
SCENARIO_QUESTIONS = '[{"id":1,"text":"Столица Франции?","options":["Париж","Берлин"]}]'


class ScriptedLLM:
    def __init__(self, replies: list):
        self.replies = list(replies)
        self.prompts: list[str] = []

    def complete(self, *, prompt, system_prompt=None, temperature=None, max_tokens=None, model=None):
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class StubFetcher:
    def __init__(self, body: str | None = None, error: Exception | None = None):
        self.body = body
        self.error = error
        self.urls: list[str] = []

    def fetch(self, url: str) -> str:
        self.urls.append(url)
        if self.error is not None:
            raise self.error
        return self.body or ""


class StubOCR:
    def __init__(self, text: str):
        self.text = text

    def extract(self, image_bytes: bytes) -> dict:
        return {"text": self.text, "confidence": 0.9}


def _service(tmp_path: Path, llm, fetcher=None, **kwargs) -> HtmlQuestionAnsweringService:
    return HtmlQuestionAnsweringService(
        llm=llm,
        store=JsonFileAnswerStore(tmp_path / "answers.json"),
        fetcher=fetcher,
        batch_delay_ms=0,
        **kwargs,
    )


def test_russian_scenario_end_to_end(tmp_path: Path):
    llm = ScriptedLLM([SCENARIO_QUESTIONS, "1. Париж"])
    service = _service(tmp_path, llm)

    result = service.process(html=SCENARIO_HTML)

    assert [a.to_dict() for a in result.answers] == [
        {"id": 1, "question": "Столица Франции?", "answer": "Париж"}
    ]
    assert len(result.questions) == 1
    assert "Menu" not in llm.prompts[0]
    assert "Столица Франции?" in llm.prompts[0]
    assert "Options: Париж | Берлин" in llm.prompts[1]
    assert AnswerArchiveService(store=service.store).list_answers() == [
        {"id": 1, "question": "Столица Франции?", "answer": "Париж"}
    ]


def test_missing_input_fails_before_any_backend_call(tmp_path: Path):
    llm = ScriptedLLM([])
    fetcher = StubFetcher(body="<p>never</p>")
    service = _service(tmp_path, llm, fetcher)

    with pytest.raises(BadRequestError):
        service.process(html=None, iframe_url=None)
    with pytest.raises(BadRequestError):
        service.process(html="   ", iframe_url="")

    assert llm.prompts == []
    assert fetcher.urls == []


def test_markup_without_text_is_no_content(tmp_path: Path):
    llm = ScriptedLLM([])

    with pytest.raises(BadRequestError, match="No content"):
        _service(tmp_path, llm).process(html="<nav>Menu</nav><script>x()</script>")
    assert llm.prompts == []


def test_non_json_extraction_reply_fails_without_store_write(tmp_path: Path):
    llm = ScriptedLLM(["Не могу помочь"])
    service = _service(tmp_path, llm)

    with pytest.raises(ParseFailureError) as exc_info:
        service.process(html="<p>Что такое ДНК?</p>")

    assert exc_info.value.raw == "Не могу помочь"
    assert not (tmp_path / "answers.json").exists()


def test_no_questions_found_skips_answering_and_store(tmp_path: Path):
    llm = ScriptedLLM(["[]"])
    result = _service(tmp_path, llm).process(html="<p>Just an article.</p>")

    assert result.questions == []
    assert result.answers == []
    assert len(llm.prompts) == 1
    assert not (tmp_path / "answers.json").exists()


def test_auxiliary_document_is_prepended(tmp_path: Path):
    llm = ScriptedLLM(['[{"text": "Q?"}]', "1. A"])
    fetcher = StubFetcher(body="<body><header>x</header><p>Quiz intro</p></body>")
    service = _service(tmp_path, llm, fetcher)

    service.process(html="<p>Main page</p>", iframe_url="https://example.test/quiz")

    assert fetcher.urls == ["https://example.test/quiz"]
    assert "Text: Quiz intro\n\nMain page" in llm.prompts[0]


def test_auxiliary_fetch_failure_is_ignored(tmp_path: Path):
    llm = ScriptedLLM(['[{"text": "Q?"}]', "1. A"])
    fetcher = StubFetcher(error=UpstreamError("Failed to fetch https://example.test: timed out"))
    service = _service(tmp_path, llm, fetcher)

    result = service.process(html="<p>Main page</p>", iframe_url="https://example.test")

    assert len(result.answers) == 1
    assert "Text: Main page" in llm.prompts[0]


def test_iframe_only_request_uses_fetched_text(tmp_path: Path):
    llm = ScriptedLLM(['[{"text": "Q?"}]', "1. A"])
    service = _service(tmp_path, llm, StubFetcher(body="<p>Only in frame</p>"))

    service.process(html=None, iframe_url="https://example.test/frame")

    assert "Text: Only in frame" in llm.prompts[0]


def test_iframe_only_request_with_failed_fetch_is_no_content(tmp_path: Path):
    llm = ScriptedLLM([])
    service = _service(tmp_path, llm, StubFetcher(error=UpstreamError("down")))

    with pytest.raises(BadRequestError):
        service.process(html=None, iframe_url="https://example.test/frame")


def test_text_is_truncated_before_extraction(tmp_path: Path):
    llm = ScriptedLLM(["[]"])
    service = _service(tmp_path, llm, max_input_chars=6000)

    text = service.prepare_text(html="<p>" + "a" * 7000 + "</p>")

    assert len(text) == 6000


def test_failed_answer_batch_persists_nothing(tmp_path: Path):
    questions = ",".join(f'{{"text": "Q{i}?"}}' for i in range(5))
    llm = ScriptedLLM([f"[{questions}]", "1. a\n2. b\n3. c", UpstreamError("OpenAI API error (429): slow down")])
    service = _service(tmp_path, llm)

    with pytest.raises(UpstreamError):
        service.process(html="<p>five questions</p>")

    assert not (tmp_path / "answers.json").exists()


# ── image path ─────────────────────────────────────────────────────


def test_image_question_returns_trimmed_reply():
    llm = ScriptedLLM(["  Paris  \n"])
    service = ImageQuestionService(ocr=StubOCR("Capital of France?"), llm=llm)

    assert service.ask(b"png-bytes") == "Paris"
    assert llm.prompts == ["Capital of France?"]


def test_image_without_upload_is_no_file():
    with pytest.raises(NoFileError):
        ImageQuestionService(ocr=StubOCR("x"), llm=ScriptedLLM([])).ask(None)


def test_image_without_text_is_no_text_detected():
    llm = ScriptedLLM([])

    with pytest.raises(NoTextDetectedError):
        ImageQuestionService(ocr=StubOCR("  \n "), llm=llm).ask(b"png-bytes")
    assert llm.prompts == []


@pytest.mark.parametrize("iframe_url", ["http://[::1", "http://" + "a" * 70 + ".com/quiz"])
def test_malformed_iframe_url_falls_back_to_primary_text(tmp_path: Path, iframe_url: str):
    llm = ScriptedLLM(['[{"text": "Q?"}]', "1. A"])
    service = _service(tmp_path, llm, HttpxDocumentFetcher(timeout_seconds=1))

    result = service.process(html="<p>Main page</p>", iframe_url=iframe_url)

    assert len(result.answers) == 1
    assert "Text: Main page" in llm.prompts[0]
