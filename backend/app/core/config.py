from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_BACKEND_ROOT = Path(__file__).resolve().parents[2]


def _load_dotenv() -> None:
    if os.getenv("QHARVEST_SKIP_DOTENV") == "1":
        return

    env_path = _BACKEND_ROOT / ".env"
    if not env_path.exists():
        return

    from dotenv import load_dotenv

    load_dotenv(env_path, override=False)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_non_negative_int(value: str | None, default: int = 0) -> int:
    if value is None:
        return default
    raw = value.strip()
    if not raw:
        return default
    try:
        return max(0, int(raw))
    except ValueError:
        return default


def _parse_positive_int(value: str | None, default: int) -> int:
    return _parse_non_negative_int(value, default=default) or default


@dataclass(frozen=True)
class Settings:
    env: str
    app_name: str
    port: int
    cors_origins: list[str]
    static_dir: Path
    answers_filename: str
    llm_backend: str
    openai_api_key: str | None
    openai_model: str
    openai_base_url: str
    llm_timeout_seconds: int
    ocr_backend: str
    ocr_lang: str
    fetch_timeout_seconds: int
    answer_batch_size: int
    answer_batch_delay_ms: int
    max_input_chars: int
    max_questions: int
    max_question_chars: int
    max_options: int

    @property
    def answers_path(self) -> Path:
        return self.static_dir / self.answers_filename


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    _load_dotenv()

    env = os.getenv("QHARVEST_ENV", "development")
    cors = os.getenv("QHARVEST_CORS_ORIGINS", "*")
    static_dir = Path(os.getenv("QHARVEST_STATIC_DIR") or _BACKEND_ROOT / "static")
    llm_backend = os.getenv("QHARVEST_LLM_BACKEND", "openai").strip().lower() or "openai"
    ocr_backend = os.getenv("QHARVEST_OCR_BACKEND", "tesseract").strip().lower() or "tesseract"
    ocr_lang = os.getenv("QHARVEST_OCR_LANG", "eng+rus").strip() or "eng+rus"

    return Settings(
        env=env,
        app_name="Question Harvester API",
        port=_parse_positive_int(os.getenv("PORT"), default=3000),
        cors_origins=_split_csv(cors) or ["*"],
        static_dir=static_dir,
        answers_filename="answers.json",
        llm_backend=llm_backend,
        openai_api_key=os.getenv("OPENAI_KEY") or os.getenv("OPENAI_API_KEY") or None,
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/"),
        llm_timeout_seconds=_parse_non_negative_int(os.getenv("QHARVEST_LLM_TIMEOUT_SECONDS"), default=0),
        ocr_backend=ocr_backend,
        ocr_lang=ocr_lang,
        fetch_timeout_seconds=_parse_positive_int(os.getenv("QHARVEST_FETCH_TIMEOUT_SECONDS"), default=10),
        answer_batch_size=_parse_positive_int(os.getenv("QHARVEST_BATCH_SIZE"), default=3),
        answer_batch_delay_ms=_parse_non_negative_int(os.getenv("QHARVEST_BATCH_DELAY_MS"), default=500),
        max_input_chars=_parse_positive_int(os.getenv("QHARVEST_MAX_INPUT_CHARS"), default=6000),
        max_questions=_parse_positive_int(os.getenv("QHARVEST_MAX_QUESTIONS"), default=50),
        max_question_chars=_parse_positive_int(os.getenv("QHARVEST_MAX_QUESTION_CHARS"), default=500),
        max_options=_parse_positive_int(os.getenv("QHARVEST_MAX_OPTIONS"), default=10),
    )
