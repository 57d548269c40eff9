from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Question:
    id: int
    text: str
    options: tuple[str, ...] | None = None


@dataclass(frozen=True)
class Answer:
    id: int
    question: str
    answer: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "question": self.question, "answer": self.answer}


@dataclass(frozen=True)
class PipelineResult:
    questions: list[Question]
    answers: list[Answer]
