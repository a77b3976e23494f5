"""Parsing of free-text model feedback into the six feedback sections.

The model is asked to answer in six numbered sections ("1. 종합 평가" ...
"6. 주요 표현/예문") made of bullet lines. Nothing guarantees it does, so
every function here is total: malformed input degrades to a single summary
section, a missing score degrades to 0, and nothing raises.
"""
import math
import re
from dataclasses import dataclass, fields
from typing import Dict, Iterable, List, Optional, Tuple

from log import get_logger
from models import BULLET, SECTION_KEYS, SECTION_HEADINGS
import cache

logger = get_logger("beonyeok.feedback_parser")

_LINE_BULLET = re.compile(r"^[ \t]*[●•*\-]", re.M)
_SECTION_MARKER = re.compile(r"^[1-6][).\-] ?", re.M)
_QUOTED = re.compile(r'"([^"]+)"')
_RATIO_SCORE = re.compile(r"([0-9]{1,3}(?:\.[0-9])?)\s*/\s*([0-9]{1,3})(?:점)?")
_POINT_SCORE = re.compile(r"([0-9]{1,3}(?:\.[0-9])?)점")
_BULLET_BREAK = re.compile(r"\n\s*(?=%s)" % BULLET)
_BULLET_PREFIX = re.compile(r"^\s*%s\s*" % BULLET)

# Share of the whole text above which a lone summary means the split failed
SUMMARY_DOMINANCE = 0.8

_LEARN_MARKERS = ("언어별 특성 고려:", "문장 분할 및 재조합 연습:")

# Sections whose quoted phrases become highlight keys
QUOTE_SECTIONS = SECTION_KEYS[:5]


@dataclass(frozen=True)
class SectionSet:
    summary: str = ""
    good: str = ""
    bad: str = ""
    recommend: str = ""
    learn: str = ""
    example: str = ""

    def get(self, key: str) -> str:
        return getattr(self, key)

    def items(self) -> List[Tuple[str, str]]:
        return [(f.name, getattr(self, f.name)) for f in fields(self)]

    def to_dict(self) -> Dict[str, str]:
        return dict(self.items())


@dataclass(frozen=True)
class ParsedFeedback:
    normalized: str
    sections: SectionSet
    phrases: Tuple[str, ...]
    score: int


def normalize_bullets(text: str) -> str:
    """Replace a line-leading ●, •, * or - (after indentation) with the canonical bullet."""
    return _LINE_BULLET.sub(BULLET, text)


def strip_section_heading(text: str, key: str) -> str:
    """Drop a repeated section heading ("**좋은 점** 항목:") from the top of a body."""
    names = "|".join(re.escape(name) for name in SECTION_HEADINGS[key])
    pattern = re.compile(r"^\s*(?:\*\*)?(?:%s)(?:\*\*)?(?: 항목)?\s*[:：]?" % names, re.I)
    return pattern.sub("", text, count=1).strip()


def split_sections(text: str) -> SectionSet:
    """Split normalized feedback into the six named sections.

    A section starts at a line beginning with 1-6 followed by ")", "." or
    "-" and runs until the next such line. Matches are assigned to the
    slots in order of appearance. When nothing is found, or the summary
    swallows more than 80% of the text, the whole text becomes the summary.
    """
    markers = list(_SECTION_MARKER.finditer(text))
    ends = [m.start() for m in markers[1:]] + [len(text)]
    bodies = {}
    for key, marker, end in zip(SECTION_KEYS, markers, ends):
        bodies[key] = strip_section_heading(text[marker.end():end], key)
    sections = SectionSet(**bodies)

    is_empty = all(not body.strip() for _, body in sections.items())
    summary_too_long = len(sections.summary) > len(text) * SUMMARY_DOMINANCE
    if is_empty or summary_too_long:
        logger.info(
            "Feedback split degenerated, showing raw text",
            extra={"component": "parser", "detail": "empty" if is_empty else "summary_dominant",
                   "count": len(markers)},
        )
        return SectionSet(summary=text)
    return sections


def extract_quoted_phrases(text: str) -> List[str]:
    return _QUOTED.findall(text)


def collect_quote_phrases(sections: SectionSet) -> List[str]:
    """Quoted phrases from sections 1-5, deduplicated in order of first appearance."""
    seen = {}
    for key in QUOTE_SECTIONS:
        for phrase in extract_quoted_phrases(sections.get(key)):
            seen.setdefault(phrase, None)
    return list(seen)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def extract_score(summary: str) -> int:
    """Recover a 0-100 style score from the summary section.

    "8.5/10점" -> 85, "92/100" -> 92, "9점" -> 90, nothing -> 0.
    No clamping: "150/100점" gives 150.
    """
    match = _RATIO_SCORE.search(summary)
    if match:
        numerator, denominator = float(match.group(1)), float(match.group(2))
        if denominator:
            return _round_half_up(numerator * 100 / denominator)
    match = _POINT_SCORE.search(summary)
    if match:
        return _round_half_up(float(match.group(1)) * 10)
    return 0


def score_from_feedback(feedback: str) -> int:
    return parse_feedback(feedback).score


def format_section_text(text: str, key: str) -> str:
    t = text
    if key == "learn":
        for marker in _LEARN_MARKERS:
            t = t.replace(marker, f"\n**{marker}**\n")
    t = re.sub(r"\s*● ", "\n\n● ", t)
    t = re.sub(r"^\n+", "", t)
    t = re.sub(r"\n{3,}", "\n\n", t)
    return t


def split_bullet_lines(text: str) -> List[Tuple[str, str]]:
    """Cut a section body before every bullet; yields ("bullet" | "paragraph", content).

    Blank pieces are dropped and non-bullet lines after a bullet stay in it.
    """
    lines = []
    for piece in _BULLET_BREAK.split(text):
        if not piece.strip():
            continue
        if piece.strip().startswith(BULLET):
            lines.append(("bullet", _BULLET_PREFIX.sub("", piece)))
        else:
            lines.append(("paragraph", piece))
    return lines


def split_quote_runs(text: str, phrases: Iterable[str], clickable: bool = True) -> List[dict]:
    """Split a line into plain text runs and double-quoted runs.

    A quoted run is clickable when its phrase is a known highlight key.
    """
    known = set(phrases)
    runs = []
    for idx, part in enumerate(_QUOTED.split(text)):
        if idx % 2 == 1:
            runs.append({"type": "quote", "text": part, "clickable": clickable and part in known})
        elif part:
            runs.append({"type": "text", "text": part})
    return runs


def parse_feedback(feedback: Optional[str]) -> ParsedFeedback:
    """Normalize, split, and derive quote phrases and score. Memoized on the raw text."""
    feedback = feedback or ""
    key = cache.text_key(feedback)
    cached = cache.parsed_get(key)
    if cached is not None:
        return cached

    normalized = normalize_bullets(feedback)
    sections = split_sections(normalized)
    parsed = ParsedFeedback(
        normalized=normalized,
        sections=sections,
        phrases=tuple(collect_quote_phrases(sections)),
        score=extract_score(sections.summary),
    )
    cache.parsed_put(key, parsed)
    return parsed
