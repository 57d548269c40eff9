from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.models import Answer


class AnswerStorePort(ABC):
    @abstractmethod
    def append(self, answers: list[Answer]) -> None:
        """Persist ``answers`` after everything already stored."""

    @abstractmethod
    def read_all(self) -> list[dict]:
        """Return every stored answer record in insertion order."""

    @abstractmethod
    def clear(self) -> None:
        """Replace the stored sequence with an empty one."""
