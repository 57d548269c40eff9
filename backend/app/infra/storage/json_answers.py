from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from app.core.errors import NotFoundError, StoreWriteError
from app.domain.models import Answer
from app.infra.ports.answers import AnswerStorePort

logger = logging.getLogger(__name__)


class JsonFileAnswerStore(AnswerStorePort):
    """Answer archive kept as one pretty-printed JSON array on disk.

    The lock only serializes writers inside this process. Separate processes
    sharing the file can still lose each other's appends.
    """

    def __init__(self, path: Path):
        self.path = path
        self._lock = threading.Lock()

    def _load(self) -> list[Any]:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, list):
            raise ValueError(f"{self.path.name} does not hold a JSON array")
        return data

    def _write(self, records: list[Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StoreWriteError(f"Failed to write {self.path.name}: {exc}") from exc

    def append(self, answers: list[Answer]) -> None:
        with self._lock:
            try:
                existing = self._load()
            except (OSError, ValueError) as exc:
                # json.JSONDecodeError is a ValueError.
                logger.warning("Starting %s from empty: %s", self.path.name, exc)
                existing = []
            self._write(existing + [item.to_dict() for item in answers])

    def read_all(self) -> list[dict]:
        try:
            return self._load()
        except (OSError, ValueError) as exc:
            raise NotFoundError(f"{self.path.name} not found") from exc

    def clear(self) -> None:
        with self._lock:
            self._write([])
