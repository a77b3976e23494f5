"""Assembles the structured feedback view sent to the browser."""
from typing import Optional, Sequence

from models import SECTION_KEYS, SECTION_TITLES
from feedback_parser import (
    parse_feedback, format_section_text, split_bullet_lines, split_quote_runs,
)
from example_blocks import group_example_lines
from highlight import ViewState, mark_panels


def _section_lines(body: str, key: str, phrases, view: ViewState) -> list:
    lines = []
    for kind, content in split_bullet_lines(format_section_text(body, key)):
        runs = split_quote_runs(content, phrases)
        for run in runs:
            if run["type"] == "quote":
                run["highlighted"] = run["clickable"] and view.highlight.is_highlighted(run["text"])
        lines.append({"kind": kind, "runs": runs})
    return lines


def build_feedback_view(
    feedback: str,
    view: Optional[ViewState] = None,
    original_text: str = "",
    ai_translation: str = "",
    user_translation: str = "",
    vocab: Sequence[dict] = (),
) -> dict:
    """Render feedback text into sections, score, highlight keys, marked panels and hints."""
    view = view or ViewState()
    parsed = parse_feedback(feedback)

    sections = []
    for number, key in enumerate(SECTION_KEYS, start=1):
        body = parsed.sections.get(key)
        section = {"key": key, "number": number, "title": f"{number}. {SECTION_TITLES[key]}"}
        if key == "example":
            blocks = group_example_lines(format_section_text(body, key)) if body else []
            section["blocks"] = [block.to_dict() for block in blocks]
        else:
            section["lines"] = _section_lines(body, key, parsed.phrases, view)
        sections.append(section)

    feedback_highlighted = any(
        run.get("highlighted")
        for section in sections
        for line in section.get("lines", [])
        for run in line["runs"]
    )
    panels = mark_panels(view, original_text, ai_translation, user_translation)
    panels["feedback"] = {"highlighted": feedback_highlighted}

    hints = {"show": view.show_hints, "vocab": [], "selected_vocab": None}
    if view.show_hints:
        hints["vocab"] = [{**v, "active": view.highlight.is_highlighted(v.get("korean", ""))} for v in vocab]
        hints["selected_vocab"] = view.selected_vocab

    structured = any(body for key, body in parsed.sections.items() if key != "summary")
    return {
        "score": parsed.score,
        "structured": structured,
        "phrases": list(parsed.phrases),
        "active_phrase": view.active_phrase,
        "sections": sections,
        "panels": panels,
        "hints": hints,
    }
