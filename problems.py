"""Bundled bank of existing translation problems."""
import os
import json
from pathlib import Path
from typing import List, Optional

from log import get_logger
from models import ALL_FILTER

logger = get_logger("beonyeok.problems")

PROBLEMS_FILE = Path(os.environ.get("BEONYEOK_PROBLEMS_FILE", str(Path(__file__).parent / "problems.json")))

_problems: List[dict] = []


def load_problems(path: Optional[Path] = None) -> List[dict]:
    """Load (once) and return the problem bank. A broken file yields an empty bank."""
    global _problems
    if _problems and path is None:
        return _problems
    source = path or PROBLEMS_FILE
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.exception("Failed to load problem bank", extra={"component": "problems", "detail": str(source)})
        data = []
    _problems = [p for p in data if isinstance(p, dict) and p.get("id")]
    logger.info("Problem bank loaded", extra={"component": "problems", "count": len(_problems)})
    return _problems


def available_domains(problems: List[dict]) -> List[str]:
    seen = {}
    for p in problems:
        domain = p.get("분야")
        if isinstance(domain, str) and domain:
            seen.setdefault(domain, None)
    return [ALL_FILTER, *seen]


def filter_problems(problems: List[dict], difficulty: str = ALL_FILTER, domain: str = ALL_FILTER) -> List[dict]:
    filtered = problems
    if difficulty and difficulty != ALL_FILTER:
        filtered = [p for p in filtered if p.get("난이도") == difficulty]
    if domain and domain != ALL_FILTER:
        filtered = [p for p in filtered if p.get("분야") == domain]
    return filtered


def get_problem(problem_id: str) -> Optional[dict]:
    return next((p for p in load_problems() if p["id"] == problem_id), None)


def source_text(problem: dict, language_pair: str) -> str:
    """Text to translate for the pair: Korean for 한-중, Chinese for 중-한."""
    if language_pair == "중-한":
        return problem.get("중국어") or problem.get("한국어", "")
    return problem.get("한국어") or problem.get("중국어", "")


def reference_translation(problem: dict, language_pair: str = "한-중") -> str:
    """Model translation into Chinese, or the Korean original when translating 중-한."""
    if language_pair == "중-한":
        return problem.get("한국어", "")
    return problem.get("Gemini_번역") or problem.get("ChatGPT_번역") or problem.get("중국어", "")


def problem_vocab(problem: Optional[dict]) -> List[dict]:
    """The problem's 주요어휘 entries that carry a Korean word."""
    vocab = (problem or {}).get("주요어휘")
    if not isinstance(vocab, list):
        return []
    return [v for v in vocab if isinstance(v, dict) and v.get("korean")]


def find_vocab(vocab: List[dict], word: Optional[str]) -> Optional[dict]:
    return next((v for v in vocab if v["korean"] == word), None)
