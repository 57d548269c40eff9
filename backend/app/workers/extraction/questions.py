"""Question extraction: one completion call, then best-effort JSON cleanup."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from app.core.errors import ParseFailureError
from app.domain.models import Question
from app.infra.ports.llm import LLMPort

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```\s*$")

EXTRACTION_SYSTEM_PROMPT = (
    "You extract questions from text. Reply ONLY with valid JSON: either an array of "
    'question objects or an object with a "questions" key holding that array. '
    "No prose, no explanations."
)

_EXTRACTION_USER_TEMPLATE = """Find every question in the text below. Return a JSON array:
[{{"id": 1, "text": "question", "options": ["A", "B"]}}]

Rules:
- Only real questions; ignore navigation, menus and other page chrome
- If a question has no answer options, omit "options"
- At most {max_questions} questions
- Question text at most {max_question_chars} characters

Text: {text}"""


def strip_code_fence(raw: str) -> str:
    text = _LEADING_FENCE.sub("", raw or "", count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def parse_question_reply(raw: str) -> list[Any]:
    """Decode the model reply into the list of raw question items.

    Raises ParseFailureError when the reply is not JSON or holds neither an
    array nor an object with a ``questions`` array.
    """
    cleaned = strip_code_fence(raw)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ParseFailureError("Failed to parse questions from model reply", raw=cleaned) from exc

    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict) and isinstance(parsed.get("questions"), list):
        return parsed["questions"]
    raise ParseFailureError("Model reply is not a list of questions", raw=cleaned)


def sanitize_questions(
    items: list[Any],
    *,
    max_questions: int = 50,
    max_question_chars: int = 500,
    max_options: int = 10,
) -> list[Question]:
    kept = [
        item
        for item in items
        if isinstance(item, dict) and isinstance(item.get("text"), str) and item["text"].strip()
    ][:max_questions]

    questions: list[Question] = []
    # Ids from the model are discarded so the result is always 1..N.
    for idx, item in enumerate(kept, start=1):
        options = item.get("options")
        questions.append(
            Question(
                id=idx,
                text=item["text"].strip()[:max_question_chars],
                options=tuple(str(opt) for opt in options[:max_options]) if isinstance(options, list) else None,
            )
        )
    return questions


class QuestionExtractor:
    def __init__(
        self,
        *,
        llm: LLMPort,
        max_questions: int = 50,
        max_question_chars: int = 500,
        max_options: int = 10,
        temperature: float = 0.1,
        max_tokens: int = 3000,
    ):
        self.llm = llm
        self.max_questions = max_questions
        self.max_question_chars = max_question_chars
        self.max_options = max_options
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_prompt(self, text: str) -> str:
        return _EXTRACTION_USER_TEMPLATE.format(
            max_questions=self.max_questions,
            max_question_chars=self.max_question_chars,
            text=text,
        )

    def extract(self, text: str) -> list[Question]:
        raw = self.llm.complete(
            prompt=self.build_prompt(text),
            system_prompt=EXTRACTION_SYSTEM_PROMPT,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        try:
            items = parse_question_reply(raw)
        except ParseFailureError:
            logger.warning("Question reply is not usable JSON (%d chars)", len(raw or ""))
            raise

        questions = sanitize_questions(
            items,
            max_questions=self.max_questions,
            max_question_chars=self.max_question_chars,
            max_options=self.max_options,
        )
        logger.info("Extracted %d questions (%d raw items)", len(questions), len(items))
        return questions
