from __future__ import annotations

from abc import ABC, abstractmethod


class DocumentFetchPort(ABC):
    @abstractmethod
    def fetch(self, url: str) -> str:
        """Return the body of the document at ``url`` as text."""
