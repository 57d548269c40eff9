"""Question harvesting stages: normalize, extract, answer."""

from app.workers.extraction.answers import BatchedAnswerer, parse_numbered_answers
from app.workers.extraction.normalizer import combine_sources, normalize_html, truncate_text
from app.workers.extraction.questions import QuestionExtractor, parse_question_reply, sanitize_questions

__all__ = [
    "BatchedAnswerer",
    "QuestionExtractor",
    "combine_sources",
    "normalize_html",
    "parse_numbered_answers",
    "parse_question_reply",
    "sanitize_questions",
    "truncate_text",
]
