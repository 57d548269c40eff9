"""Batched answering and the numbered-reply parser."""

from __future__ import annotations

import logging
import re
import time

from app.domain.models import Answer, Question
from app.infra.ports.llm import LLMPort

logger = logging.getLogger(__name__)

_NUMBERED_LINE = re.compile(r"^(\d+)[.):\s]+(.+)")

_BATCH_HEADER = "Answer each question briefly and correctly.\n\n"
_BATCH_FOOTER = (
    "\nReply with exactly one line per question in the form `<id>. <answer>`, "
    "using the ids above. Do not repeat or rephrase the questions and add no commentary."
)


def parse_numbered_answers(reply: str) -> list[tuple[int, str]]:
    """Split a ``"<id>. <answer>"`` reply into ``(id, answer)`` pairs.

    Lines without a leading number continue the previous answer. Text before
    the first numbered line is ignored. Ids are not validated here.
    """
    results: list[tuple[int, str]] = []
    current_id: int | None = None
    buffer = ""

    def flush() -> None:
        if current_id is not None and buffer.strip():
            results.append((current_id, buffer.strip()))

    for line in (reply or "").splitlines():
        match = _NUMBERED_LINE.match(line)
        if match:
            flush()
            current_id = int(match.group(1))
            buffer = match.group(2)
        elif current_id is not None and line.strip():
            buffer += " " + line.strip()

    flush()
    return results


def chunk_questions(questions: list[Question], size: int) -> list[list[Question]]:
    size = max(1, size)
    return [questions[i : i + size] for i in range(0, len(questions), size)]


def build_batch_prompt(batch: list[Question]) -> str:
    lines: list[str] = []
    for question in batch:
        lines.append(f"{question.id}. {question.text}")
        if question.options:
            lines.append(f"Options: {' | '.join(question.options)}")
    return _BATCH_HEADER + "\n".join(lines) + "\n" + _BATCH_FOOTER


class BatchedAnswerer:
    def __init__(
        self,
        *,
        llm: LLMPort,
        batch_size: int = 3,
        batch_delay_ms: int = 500,
        temperature: float = 0.2,
        max_tokens: int = 1000,
    ):
        self.llm = llm
        self.batch_size = max(1, batch_size)
        self.batch_delay_seconds = max(0.0, batch_delay_ms / 1000.0)
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _delay(self) -> None:
        if self.batch_delay_seconds > 0:
            time.sleep(self.batch_delay_seconds)

    def answer_batch(self, batch: list[Question]) -> list[Answer]:
        reply = self.llm.complete(
            prompt=build_batch_prompt(batch),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        by_id = {question.id: question for question in batch}

        answers: list[Answer] = []
        for answer_id, text in parse_numbered_answers(reply):
            question = by_id.get(answer_id)
            if question is None:
                logger.debug("Dropping answer for unknown id %d", answer_id)
                continue
            answers.append(Answer(id=answer_id, question=question.text, answer=text))
        return answers

    def answer_all(self, questions: list[Question]) -> list[Answer]:
        batches = chunk_questions(questions, self.batch_size)
        collected: list[Answer] = []
        for index, batch in enumerate(batches):
            if index > 0:
                self._delay()
            answers = self.answer_batch(batch)
            logger.info(
                "Batch %d/%d answered: %d of %d questions",
                index + 1,
                len(batches),
                len(answers),
                len(batch),
            )
            collected.extend(answers)
        return collected
