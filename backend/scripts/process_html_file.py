from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from app.api.dependencies import get_answer_store, get_fetcher, get_llm  # noqa: E402
from app.application.services import HtmlQuestionAnsweringService  # noqa: E402
from app.core.config import get_settings  # noqa: E402
from app.core.errors import HarvestError  # noqa: E402
from app.domain.models import Question  # noqa: E402
from app.infra.ports.answers import AnswerStorePort  # noqa: E402


class _DiscardingStore(AnswerStorePort):
    def append(self, answers):
        return None

    def read_all(self):
        return []

    def clear(self):
        return None


def _question_to_dict(item: Question) -> dict[str, Any]:
    data: dict[str, Any] = {"id": item.id, "text": item.text}
    if item.options is not None:
        data["options"] = list(item.options)
    return data


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Run the question harvesting pipeline on a local HTML file and print the result as JSON."
    )
    parser.add_argument("input", type=Path, help="Input HTML file path")
    parser.add_argument("--iframe-url", default=None, help="Optional auxiliary document URL")
    parser.add_argument(
        "--store",
        action="store_true",
        help="Append answers to the configured answers.json (default: dry run)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path to save the JSON report",
    )
    args = parser.parse_args()

    input_path = args.input.expanduser().resolve()
    if not input_path.exists() or not input_path.is_file():
        print(f"Input file not found: {input_path}", file=sys.stderr)
        return 2

    settings = get_settings()
    service = HtmlQuestionAnsweringService(
        llm=get_llm(),
        store=get_answer_store() if args.store else _DiscardingStore(),
        fetcher=get_fetcher(),
        max_input_chars=settings.max_input_chars,
        max_questions=settings.max_questions,
        max_question_chars=settings.max_question_chars,
        max_options=settings.max_options,
        batch_size=settings.answer_batch_size,
        batch_delay_ms=settings.answer_batch_delay_ms,
    )

    started = time.perf_counter()
    try:
        result = service.process(
            html=input_path.read_text(encoding="utf-8", errors="replace"),
            iframe_url=args.iframe_url,
        )
    except HarvestError as exc:
        print(json.dumps(exc.to_payload(), ensure_ascii=False), file=sys.stderr)
        return 1

    report = {
        "input": str(input_path),
        "llmBackend": settings.llm_backend,
        "model": settings.openai_model,
        "elapsedMs": int((time.perf_counter() - started) * 1000),
        "stored": bool(args.store),
        "questions": [_question_to_dict(q) for q in result.questions],
        "answers": [a.to_dict() for a in result.answers],
    }

    rendered = json.dumps(report, ensure_ascii=False, indent=2)
    print(rendered)

    if args.output is not None:
        output_path = args.output.expanduser().resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(rendered + "\n", encoding="utf-8")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
